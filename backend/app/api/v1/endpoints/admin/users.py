"""
Admin User Management endpoints.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List

from app.core.database import get_db
from app.core.logging_config import logger
from app.models.user import User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.admin import (
    AdminUserCreate,
    AdminUserUpdate,
    ResetPasswordRequest,
    ResetPasswordResponse,
)
from app.schemas.auth import UserResponse
from app.services.user_service import get_user_service

router = APIRouter()


@router.get("", response_model=List[UserResponse])
async def list_users(
    role: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """List all users, newest first, optionally filtered by role or name/email"""
    users = await get_user_service(db).list_users(role=role, search=search)
    return [UserResponse.from_user(u) for u in users]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: AdminUserCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    user = await get_user_service(db).create_user(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        department=payload.department,
        student_id=payload.student_id,
    )
    logger.info(f"[Admin] {current_admin.id} created user {user.id}")
    return UserResponse.from_user(user)


@router.post("/reset-password", response_model=ResetPasswordResponse)
async def reset_password(
    payload: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Generate a temporary password. It is only ever shown in this response."""
    temp_password = await get_user_service(db).reset_password(payload.user_id)
    return ResetPasswordResponse(user_id=payload.user_id, new_password=temp_password)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    payload: AdminUserUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    user = await get_user_service(db).update_user(
        user_id, payload.model_dump(exclude_unset=True)
    )
    return UserResponse.from_user(user)


@router.delete("/{user_id}")
async def deactivate_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Deactivate an account. Admin accounts and the caller's own are protected."""
    await get_user_service(db).deactivate_user(user_id, current_admin)
    return {"message": "User deactivated successfully"}
