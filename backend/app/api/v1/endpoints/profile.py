from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.auth import ProfileUpdateRequest, UserResponse
from app.services.user_service import get_user_service

router = APIRouter()


@router.get("", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    return UserResponse.from_user(current_user)


@router.patch("", response_model=UserResponse)
async def update_profile(
    payload: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update name, avatar or department. Omitted fields are left alone."""
    user = await get_user_service(db).update_profile(
        current_user,
        name=payload.name,
        avatar=payload.avatar,
        department=payload.department,
    )
    return UserResponse.from_user(user)
