from pydantic import BaseModel, EmailStr
from typing import Optional


# ==================== User Management Schemas ====================

class AdminUserCreate(BaseModel):
    """Student or lecturer account created from the admin panel"""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    student_id: Optional[str] = None


class AdminUserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    role: Optional[str] = None
    department: Optional[str] = None
    student_id: Optional[str] = None
    is_active: Optional[bool] = None


class ResetPasswordRequest(BaseModel):
    user_id: Optional[str] = None


class ResetPasswordResponse(BaseModel):
    message: str = "Password reset successfully"
    user_id: str
    new_password: str
