from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.core.exceptions import ValidationError
from app.models.user import User, UserRole
from app.modules.auth.dependencies import get_current_user
from app.schemas.auth import (
    ChangePasswordRequest,
    MessageResponse,
    StatusUpdateRequest,
    UserResponse,
)
from app.services.user_service import get_user_service

router = APIRouter()


@router.get("")
async def list_users(
    role: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Public directory lookup. Only the lecturer listing is exposed."""
    if role != UserRole.LECTURER.value:
        raise ValidationError("Only role=lecturer is supported", field="role")
    return await get_user_service(db).list_lecturers()


@router.post("/status", response_model=UserResponse)
async def update_status(
    payload: StatusUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    user = await get_user_service(db).update_status(current_user, payload.is_online)
    return UserResponse.from_user(user)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    payload: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await get_user_service(db).change_password(
        current_user, payload.current_password, payload.new_password
    )
    return {"message": "Password changed successfully"}
