"""
Announcement Service Layer
Role- and department-targeted announcements with optional expiry
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AnnouncementNotFoundError,
    AuthorizationError,
    ValidationError,
    require_fields,
)
from app.core.logging_config import logger
from app.core.policies import Action, ensure_allowed
from app.core.types import to_naive_utc, utc_now
from app.models.announcement import Announcement, AnnouncementCategory
from app.models.user import User, UserRole
from app.services.user_service import get_users_by_ids

VALID_CATEGORIES = {c.value for c in AnnouncementCategory}
VALID_AUDIENCES = {r.value for r in UserRole}

UPDATABLE_FIELDS = (
    "title",
    "content",
    "category",
    "target_audience",
    "attachments",
    "is_pinned",
    "expires_at",
    "is_department_specific",
    "target_departments",
)


def _validate_category(category: str) -> str:
    category = category.strip()
    if category not in VALID_CATEGORIES:
        raise ValidationError(
            f"Category must be one of: {', '.join(sorted(VALID_CATEGORIES))}", field="category"
        )
    return category


def _validate_audience(audience: List[str]) -> List[str]:
    unknown = [role for role in audience if role not in VALID_AUDIENCES]
    if unknown:
        raise ValidationError(f"Unknown audience: {', '.join(unknown)}", field="target_audience")
    # De-duplicate, keep order
    return list(dict.fromkeys(audience))


def sort_announcements(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Pinned first, then newest first"""
    by_newest = sorted(items, key=lambda a: a["created_at"], reverse=True)
    return sorted(by_newest, key=lambda a: not a["is_pinned"])


class AnnouncementService:
    """Service for announcement operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get(self, announcement_id: str) -> Announcement:
        result = await self.db.execute(
            select(Announcement).where(Announcement.id == str(announcement_id))
        )
        announcement = result.scalar_one_or_none()
        if not announcement:
            raise AnnouncementNotFoundError(announcement_id)
        return announcement

    async def _serialize(self, announcements: List[Announcement]) -> List[Dict[str, Any]]:
        authors = await get_users_by_ids(self.db, [a.author_id for a in announcements])
        items = []
        for a in announcements:
            author = authors.get(str(a.author_id)) if a.author_id else None
            items.append({
                "id": str(a.id),
                "title": a.title,
                "content": a.content,
                "category": a.category,
                "target_audience": list(a.target_audience or []),
                "attachments": list(a.attachments or []),
                "is_pinned": bool(a.is_pinned),
                "expires_at": a.expires_at,
                "is_department_specific": bool(a.is_department_specific),
                "target_departments": list(a.target_departments or []),
                "author_id": str(a.author_id) if a.author_id else None,
                "author_name": author.name if author else "Unknown",
                "author_role": author.role_value if author else UserRole.ADMIN.value,
                "created_at": a.created_at,
                "updated_at": a.updated_at,
            })
        return items

    async def create_announcement(
        self,
        author: User,
        title: Optional[str],
        content: Optional[str],
        category: Optional[str],
        target_audience: Optional[List[str]],
        is_pinned: bool = False,
        expires_at: Optional[datetime] = None,
        is_department_specific: bool = False,
        target_departments: Optional[List[str]] = None,
        attachments: Optional[List[str]] = None,
    ) -> str:
        ensure_allowed(author.role, Action.ANNOUNCEMENT_CREATE)
        require_fields(title=title, content=content, category=category, target_audience=target_audience)

        departments = [d for d in (target_departments or []) if d]
        if author.role == UserRole.LECTURER and is_department_specific and not departments:
            departments = [author.department] if author.department else []

        announcement = Announcement(
            author_id=str(author.id),
            title=title.strip(),
            content=content.strip(),
            category=_validate_category(category),
            target_audience=_validate_audience(target_audience),
            attachments=list(attachments or []),
            is_pinned=bool(is_pinned),
            expires_at=to_naive_utc(expires_at),
            is_department_specific=bool(is_department_specific),
            target_departments=departments,
        )
        self.db.add(announcement)
        await self.db.commit()

        logger.info(f"[Announcements] {author.role_value} {author.id} posted {announcement.id}")
        return str(announcement.id)

    async def list_announcements(self, requester: User, mine: bool = False) -> List[Dict[str, Any]]:
        """
        Announcements visible to the requester, pinned first then newest.

        With ``mine`` only the requester's own posts are returned, regardless
        of audience or expiry.
        """
        if mine:
            result = await self.db.execute(
                select(Announcement).where(Announcement.author_id == str(requester.id))
            )
            return sort_announcements(await self._serialize(list(result.scalars().all())))

        now = utc_now()
        result = await self.db.execute(
            select(Announcement).where(
                or_(Announcement.expires_at.is_(None), Announcement.expires_at >= now)
            )
        )
        role = requester.role_value
        visible = [
            a for a in result.scalars().all()
            if a.is_visible_to(role, requester.department, now)
        ]
        return sort_announcements(await self._serialize(visible))

    async def _get_owned(self, announcement_id: str, requester: User, action: Action) -> Announcement:
        ensure_allowed(requester.role, action)
        announcement = await self._get(announcement_id)
        if requester.role != UserRole.ADMIN and str(announcement.author_id) != str(requester.id):
            raise AuthorizationError()
        return announcement

    async def update_announcement(
        self, announcement_id: str, requester: User, updates: Dict[str, Any]
    ) -> Dict[str, Any]:
        announcement = await self._get_owned(announcement_id, requester, Action.ANNOUNCEMENT_UPDATE)

        for field in UPDATABLE_FIELDS:
            if field not in updates:
                continue
            value = updates[field]
            if field in ("title", "content", "category"):
                if value is None or not str(value).strip():
                    raise ValidationError(f"{field.capitalize()} cannot be empty", field=field)
                value = value.strip()
            if field == "category":
                value = _validate_category(value)
            elif field == "target_audience":
                if not value:
                    raise ValidationError("Target audience cannot be empty", field=field)
                value = _validate_audience(value)
            elif field in ("attachments", "target_departments"):
                value = list(value or [])
            elif field in ("is_pinned", "is_department_specific"):
                value = bool(value)
            elif field == "expires_at":
                value = to_naive_utc(value)
            setattr(announcement, field, value)

        announcement.updated_at = utc_now()
        await self.db.commit()
        return (await self._serialize([announcement]))[0]

    async def delete_announcement(self, announcement_id: str, requester: User) -> None:
        announcement = await self._get_owned(announcement_id, requester, Action.ANNOUNCEMENT_DELETE)
        await self.db.delete(announcement)
        await self.db.commit()
        logger.info(f"[Announcements] {requester.id} deleted {announcement_id}")


def get_announcement_service(db: AsyncSession) -> AnnouncementService:
    return AnnouncementService(db)
