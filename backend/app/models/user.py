from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum, Text
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utc_now


class UserRole(str, enum.Enum):
    """User roles"""
    STUDENT = "student"
    LECTURER = "lecturer"
    ADMIN = "admin"


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    hashed_password = Column(String(255), nullable=False)

    role = Column(SQLEnum(UserRole), default=UserRole.STUDENT, nullable=False)
    department = Column(String(255), nullable=True, index=True)
    student_number = Column(String(50), unique=True, nullable=True)  # institutional student id
    avatar = Column(Text, nullable=True)

    # Presence
    is_online = Column(Boolean, default=False, nullable=False)
    last_seen = Column(DateTime, nullable=True)

    # Accounts are deactivated, never hard-deleted
    is_active = Column(Boolean, default=True, nullable=False)
    password_reset_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    @property
    def role_value(self) -> str:
        return self.role.value if isinstance(self.role, UserRole) else str(self.role)

    def to_public_dict(self) -> dict:
        """Serializable view without the password hash"""
        return {
            "id": str(self.id),
            "email": self.email,
            "name": self.name,
            "role": self.role_value,
            "department": self.department,
            "student_id": self.student_number,
            "avatar": self.avatar,
            "is_online": bool(self.is_online),
            "last_seen": self.last_seen,
            "is_active": bool(self.is_active),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def __repr__(self):
        return f"<User {self.email}>"
