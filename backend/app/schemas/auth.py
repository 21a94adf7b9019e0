from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime


# Request fields are optional so that missing values are reported by the
# services as a single "Missing required fields" error.

class SignupRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    student_id: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    is_online: bool


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = None
    avatar: Optional[str] = None
    department: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    role: str
    department: Optional[str] = None
    student_id: Optional[str] = None
    avatar: Optional[str] = None
    is_online: bool = False
    last_seen: Optional[datetime] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(**user.to_public_dict())


class LoginResponse(BaseModel):
    message: str = "Login successful"
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
