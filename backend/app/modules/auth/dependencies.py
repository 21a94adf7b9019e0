from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional
import uuid

from app.core.config import settings
from app.core.database import get_db
from app.core.logging_config import set_user_id
from app.core.policies import Action, is_allowed
from app.core.security import decode_token
from app.models.user import User

# auto_error=False: the session token may also arrive as a cookie
security = HTTPBearer(auto_error=False)


def _extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    """Session token from the auth cookie, falling back to the Authorization header"""
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if token:
        return token
    if credentials and credentials.credentials:
        return credentials.credentials
    return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Get current authenticated user"""

    token = _extract_token(request, credentials)
    if not token:
        raise _unauthorized("Unauthorized")

    payload = decode_token(token)

    if payload.get("type") != "access":
        raise _unauthorized("Invalid token type")

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Invalid token payload")

    # Validate user_id is a valid UUID format
    try:
        uuid.UUID(str(user_id))
    except ValueError:
        raise _unauthorized("Invalid user ID format")

    result = await db.execute(
        select(User).where(User.id == user_id)
    )
    user = result.scalar_one_or_none()

    if not user:
        raise _unauthorized("User not found")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    set_user_id(str(user.id))
    return user


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Current user when a valid session is present, otherwise None"""
    if not _extract_token(request, credentials):
        return None
    try:
        return await get_current_user(request, credentials, db)
    except HTTPException:
        return None


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """Get current admin user"""
    if not is_allowed(current_user.role, Action.USER_MANAGE):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden"
        )
    return current_user
