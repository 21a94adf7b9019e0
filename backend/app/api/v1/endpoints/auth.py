from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.config import settings
from app.core.database import get_db
from app.core.logging_config import logger, set_user_id
from app.core.rate_limiter import auth_rate_limit, signup_rate_limit
from app.core.security import create_session_token
from app.models.user import User
from app.modules.auth.dependencies import get_current_user, get_optional_user
from app.schemas.auth import (
    SignupRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    UserResponse,
)
from app.services.user_service import get_user_service

router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/signup", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
@signup_rate_limit()
async def signup(
    request: Request,
    payload: SignupRequest,
    db: AsyncSession = Depends(get_db)
):
    """Register a student or lecturer account (rate limited)"""
    service = get_user_service(db)
    await service.signup(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        department=payload.department,
        student_id=payload.student_id,
    )
    return {"message": "User created successfully"}


@router.post("/login", response_model=LoginResponse)
@auth_rate_limit()
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Login user (rate limited).

    The session token is returned in the body and also set as an
    http-only cookie so browser clients never have to store it.
    """
    service = get_user_service(db)
    user = await service.authenticate(credentials.email, credentials.password)

    set_user_id(str(user.id))
    token = create_session_token(str(user.id), user.role.value)
    _set_session_cookie(response, token)

    return LoginResponse(access_token=token, user=UserResponse.from_user(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Mark the caller offline and clear the session cookie"""
    if current_user:
        await get_user_service(db).logout(str(current_user.id))
        logger.log_auth_event("logout", success=True, user_email=current_user.email)

    response.delete_cookie(settings.AUTH_COOKIE_NAME)
    return {"message": "Logout successful"}


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """Get current user info"""
    return UserResponse.from_user(current_user)
