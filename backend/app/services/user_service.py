"""
User Service Layer
Accounts, sessions, profiles and admin user management
"""

from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InvalidCredentialsError,
    UserNotFoundError,
    ValidationError,
    require_fields,
)
from app.core.logging_config import logger
from app.core.security import generate_temp_password, get_password_hash, verify_password
from app.core.types import utc_now
from app.models.user import User, UserRole

# Roles that can be self-registered or created from the admin panel
REGISTRABLE_ROLES = {UserRole.STUDENT.value, UserRole.LECTURER.value}


async def get_users_by_ids(db: AsyncSession, user_ids: Iterable[Optional[str]]) -> Dict[str, User]:
    """Load users for a set of ids in one query, keyed by id. Unknown ids are simply absent."""
    ids = {str(user_id) for user_id in user_ids if user_id}
    if not ids:
        return {}
    result = await db.execute(select(User).where(User.id.in_(ids)))
    return {str(user.id): user for user in result.scalars().all()}


class UserService:
    """Service for account and user management operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: str) -> User:
        result = await self.db.execute(select(User).where(User.id == str(user_id)))
        user = result.scalar_one_or_none()
        if not user:
            raise UserNotFoundError(user_id)
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email.strip().lower()))
        return result.scalar_one_or_none()

    def _check_password(self, password: str) -> None:
        if len(password) < settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long",
                field="password",
            )

    async def _ensure_unique(self, email: str, role: str, student_id: Optional[str]) -> None:
        if await self.get_by_email(email):
            raise ConflictError("User already exists with this email")

        if role == UserRole.STUDENT.value and student_id:
            result = await self.db.execute(select(User).where(User.student_number == student_id))
            if result.scalar_one_or_none():
                raise ConflictError("Student ID already exists")

    # =====================================================
    # AUTHENTICATION
    # =====================================================

    async def signup(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        role: Optional[str],
        department: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> User:
        """Self-registration for students and lecturers"""
        require_fields(name=name, email=email, password=password, role=role)
        return await self._create(name, email, password, role, department, student_id)

    async def _create(
        self,
        name: str,
        email: str,
        password: str,
        role: str,
        department: Optional[str],
        student_id: Optional[str],
    ) -> User:
        if role not in REGISTRABLE_ROLES:
            raise ValidationError("Role must be either 'student' or 'lecturer'", field="role")
        self._check_password(password)

        email = email.strip().lower()
        student_id = (student_id or "").strip() or None
        await self._ensure_unique(email, role, student_id)

        user = User(
            name=name.strip(),
            email=email,
            hashed_password=get_password_hash(password),
            role=UserRole(role),
            department=department or None,
            student_number=student_id if role == UserRole.STUDENT.value else None,
            is_online=False,
            last_seen=utc_now(),
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"[Users] Created {role} account {user.id}")
        return user

    async def authenticate(self, email: Optional[str], password: Optional[str]) -> User:
        """Verify credentials and mark the user online"""
        require_fields(email=email, password=password)

        user = await self.get_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            logger.log_auth_event("login", success=False, user_email=email, reason="invalid credentials")
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.log_auth_event("login", success=False, user_email=email, reason="account deactivated")
            raise AuthenticationError("Account is deactivated")

        user.is_online = True
        user.last_seen = utc_now()
        await self.db.commit()

        logger.log_auth_event("login", success=True, user_email=user.email)
        return user

    async def logout(self, user_id: Optional[str]) -> None:
        """Mark the user offline. Unknown users are ignored."""
        if not user_id:
            return
        result = await self.db.execute(select(User).where(User.id == str(user_id)))
        user = result.scalar_one_or_none()
        if user:
            user.is_online = False
            user.last_seen = utc_now()
            await self.db.commit()

    async def change_password(
        self, user: User, current_password: Optional[str], new_password: Optional[str]
    ) -> None:
        require_fields(current_password=current_password, new_password=new_password)
        self._check_password(new_password)

        if not verify_password(current_password, user.hashed_password):
            raise ValidationError("Current password is incorrect", field="current_password")

        user.hashed_password = get_password_hash(new_password)
        await self.db.commit()
        logger.log_auth_event("change_password", success=True, user_email=user.email)

    async def update_status(self, user: User, is_online: bool) -> User:
        user.is_online = bool(is_online)
        user.last_seen = utc_now()
        await self.db.commit()
        return user

    # =====================================================
    # PROFILE
    # =====================================================

    async def update_profile(
        self,
        user: User,
        name: Optional[str] = None,
        avatar: Optional[str] = None,
        department: Optional[str] = None,
    ) -> User:
        if name is not None:
            if not name.strip():
                raise ValidationError("Name cannot be empty", field="name")
            user.name = name.strip()
        if avatar is not None:
            user.avatar = avatar or None
        if department is not None:
            user.department = department or None

        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def list_lecturers(self) -> List[Dict[str, Any]]:
        result = await self.db.execute(
            select(User)
            .where(User.role == UserRole.LECTURER, User.is_active == True)  # noqa: E712
            .order_by(User.name)
        )
        return [{"id": str(u.id), "name": u.name} for u in result.scalars().all()]

    # =====================================================
    # ADMINISTRATION
    # =====================================================

    async def list_users(self, role: Optional[str] = None, search: Optional[str] = None) -> List[User]:
        query = select(User)
        if role:
            try:
                query = query.where(User.role == UserRole(role))
            except ValueError:
                raise ValidationError("Invalid role", field="role")
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))

        result = await self.db.execute(query.order_by(User.created_at.desc()))
        return list(result.scalars().all())

    async def create_user(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        role: Optional[str],
        department: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> User:
        require_fields(name=name, email=email, password=password, role=role)
        return await self._create(name, email, password, role, department, student_id)

    async def update_user(self, user_id: str, updates: Dict[str, Any]) -> User:
        user = await self.get_by_id(user_id)

        if "name" in updates and updates["name"] is not None:
            if not updates["name"].strip():
                raise ValidationError("Name cannot be empty", field="name")
            user.name = updates["name"].strip()

        if updates.get("email"):
            email = updates["email"].strip().lower()
            if email != user.email:
                if await self.get_by_email(email):
                    raise ConflictError("User already exists with this email")
                user.email = email

        if updates.get("role"):
            if user.role == UserRole.ADMIN or updates["role"] not in REGISTRABLE_ROLES:
                raise ValidationError("Role must be either 'student' or 'lecturer'", field="role")
            user.role = UserRole(updates["role"])

        if "department" in updates:
            user.department = updates["department"] or None

        if "student_id" in updates:
            student_id = (updates["student_id"] or "").strip() or None
            if student_id and student_id != user.student_number:
                result = await self.db.execute(select(User).where(User.student_number == student_id))
                if result.scalar_one_or_none():
                    raise ConflictError("Student ID already exists")
            user.student_number = student_id

        if "is_active" in updates and updates["is_active"] is not None:
            user.is_active = bool(updates["is_active"])

        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def deactivate_user(self, user_id: str, admin: User) -> User:
        """Admin "delete": the account stays but can no longer sign in"""
        user = await self.get_by_id(user_id)

        if user.role == UserRole.ADMIN:
            raise AuthorizationError("Cannot delete admin users")
        if str(user.id) == str(admin.id):
            raise AuthorizationError("Cannot delete your own account")

        user.is_active = False
        user.is_online = False
        await self.db.commit()

        logger.info(f"[Users] Admin {admin.id} deactivated user {user.id}")
        return user

    async def reset_password(self, user_id: Optional[str]) -> str:
        """Replace the password with a temporary one and return it"""
        require_fields(user_id=user_id)
        user = await self.get_by_id(user_id)

        temp_password = generate_temp_password()
        user.hashed_password = get_password_hash(temp_password)
        user.password_reset_at = utc_now()
        await self.db.commit()

        logger.log_auth_event("password_reset", success=True, user_email=user.email)
        return temp_password


def get_user_service(db: AsyncSession) -> UserService:
    return UserService(db)
