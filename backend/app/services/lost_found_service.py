"""
Lost & Found Service Layer
Public listings of lost and found items with comments
"""

from datetime import datetime
from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthorizationError,
    CommentNotFoundError,
    PostNotFoundError,
    UserNotFoundError,
    ValidationError,
    require_fields,
)
from app.core.logging_config import logger
from app.core.policies import Action, is_allowed
from app.core.types import to_naive_utc, utc_now
from app.models.lost_found import ItemCategory, ItemStatus, ItemType, LostFoundComment, LostFoundItem
from app.models.user import User, UserRole
from app.services.user_service import get_users_by_ids
from app.utils.pagination import paginate


def _parse(enum_cls, value: Optional[str], field: str):
    if value is None:
        return None
    try:
        return enum_cls(value.strip())
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValidationError(f"{field.capitalize()} must be one of: {allowed}", field=field)


def serialize_item(item: LostFoundItem, with_comments: bool = True) -> Dict[str, Any]:
    data = {
        "id": str(item.id),
        "author_id": str(item.author_id),
        "author_name": item.author_name,
        "author_role": item.author_role,
        "type": item.type.value,
        "title": item.title,
        "description": item.description,
        "category": item.category.value,
        "location": item.location,
        "date": item.date_lost_found,
        "image_url": item.image_url,
        "contact_info": item.contact_info,
        "status": item.status.value,
        "claimed_by": str(item.claimed_by) if item.claimed_by else None,
        "claimed_by_name": item.claimed_by_name,
        "claimed_at": item.claimed_at,
        "comment_count": len(item.comments),
        "created_at": item.created_at,
        "updated_at": item.updated_at,
    }
    if with_comments:
        data["comments"] = [
            {
                "id": str(c.id),
                "author_id": str(c.author_id),
                "author_name": c.author_name,
                "author_role": c.author_role,
                "content": c.content,
                "created_at": c.created_at,
            }
            for c in item.comments
        ]
    return data


class LostFoundService:
    """Service for lost & found listings"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get(self, item_id: str) -> LostFoundItem:
        """Live (not soft-deleted) item"""
        result = await self.db.execute(
            select(LostFoundItem).where(
                LostFoundItem.id == str(item_id),
                LostFoundItem.is_deleted == False,  # noqa: E712
            )
        )
        item = result.scalar_one_or_none()
        if not item:
            raise PostNotFoundError(item_id)
        return item

    def _check_owner(self, item: LostFoundItem, user: User) -> None:
        if str(item.author_id) != str(user.id) and user.role != UserRole.ADMIN:
            raise AuthorizationError("Permission denied")

    async def list_items(
        self,
        type: Optional[str] = None,
        status: Optional[str] = None,
        category: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Dict[str, Any]:
        """Newest first, with pagination metadata"""
        query = select(LostFoundItem).where(LostFoundItem.is_deleted == False)  # noqa: E712
        if type:
            query = query.where(LostFoundItem.type == _parse(ItemType, type, "type"))
        if status:
            query = query.where(LostFoundItem.status == _parse(ItemStatus, status, "status"))
        if category:
            query = query.where(LostFoundItem.category == _parse(ItemCategory, category, "category"))

        page_data = await paginate(
            self.db, query.order_by(LostFoundItem.created_at.desc()), page=page, limit=limit
        )
        return {
            "items": [serialize_item(item, with_comments=False) for item in page_data["items"]],
            "pagination": page_data["pagination"],
        }

    async def create_item(
        self,
        user: User,
        type: Optional[str],
        title: Optional[str],
        description: Optional[str],
        category: Optional[str],
        location: Optional[str] = None,
        date: Optional[datetime] = None,
        contact_info: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> str:
        require_fields(type=type, title=title, description=description, category=category)

        item = LostFoundItem(
            author_id=str(user.id),
            author_name=user.name,
            author_role=user.role_value,
            type=_parse(ItemType, type, "type"),
            title=title.strip(),
            description=description.strip(),
            category=_parse(ItemCategory, category, "category"),
            location=location or None,
            date_lost_found=to_naive_utc(date),
            contact_info=contact_info or None,
            image_url=image_url or None,
            status=ItemStatus.OPEN,
            is_deleted=False,
        )
        self.db.add(item)
        await self.db.commit()

        logger.info(f"[LostFound] {user.id} listed {item.type.value} item {item.id}")
        return str(item.id)

    async def get_item(self, item_id: str) -> Dict[str, Any]:
        return serialize_item(await self._get(item_id))

    async def update_item(
        self,
        item_id: str,
        user: User,
        status: Optional[str] = None,
        claimed_by: Optional[str] = None,
        claimed_by_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        item = await self._get(item_id)
        self._check_owner(item, user)

        if status:
            item.status = _parse(ItemStatus, status, "status")

        if claimed_by:
            claimants = await get_users_by_ids(self.db, [claimed_by])
            claimant = claimants.get(str(claimed_by))
            if not claimant:
                raise UserNotFoundError(claimed_by)
            item.claimed_by = str(claimant.id)
            item.claimed_by_name = claimed_by_name or claimant.name
            item.claimed_at = utc_now()

        item.updated_at = utc_now()
        await self.db.commit()
        return serialize_item(item)

    async def delete_item(self, item_id: str, user: User) -> None:
        """Soft delete; the listing disappears from every read"""
        item = await self._get(item_id)
        self._check_owner(item, user)

        item.is_deleted = True
        item.updated_at = utc_now()
        await self.db.commit()
        logger.info(f"[LostFound] {user.id} removed item {item_id}")

    # =====================================================
    # COMMENTS
    # =====================================================

    async def add_comment(self, item_id: str, user: User, content: Optional[str]) -> Dict[str, Any]:
        if not content or not content.strip():
            raise ValidationError("Comment content is required", field="content")

        item = await self._get(item_id)
        comment = LostFoundComment(
            author_id=str(user.id),
            author_name=user.name,
            author_role=user.role_value,
            content=content.strip(),
        )
        item.comments.append(comment)
        item.updated_at = utc_now()
        await self.db.commit()

        return {
            "id": str(comment.id),
            "author_id": str(comment.author_id),
            "author_name": comment.author_name,
            "author_role": comment.author_role,
            "content": comment.content,
            "created_at": comment.created_at,
        }

    async def delete_comment(self, item_id: str, comment_id: str, user: User) -> None:
        """Comment author, lecturers and admins may remove a comment"""
        item = await self._get(item_id)

        comment = next((c for c in item.comments if str(c.id) == str(comment_id)), None)
        if comment is None:
            raise CommentNotFoundError(comment_id)

        if str(comment.author_id) != str(user.id) and not is_allowed(user.role, Action.LOSTFOUND_MODERATE):
            raise AuthorizationError("Permission denied")

        item.comments.remove(comment)
        item.updated_at = utc_now()
        await self.db.commit()


def get_lost_found_service(db: AsyncSession) -> LostFoundService:
    return LostFoundService(db)
