from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.policies import Action, require_permission
from app.models.user import User
from app.schemas.announcement import AnnouncementCreate, AnnouncementCreated, AnnouncementUpdate
from app.services.announcement_service import get_announcement_service

router = APIRouter()


@router.get("")
async def list_announcements(
    mine: bool = Query(False, description="Only announcements posted by the caller, expired ones included"),
    current_user: User = Depends(require_permission(Action.ANNOUNCEMENT_READ)),
    db: AsyncSession = Depends(get_db)
):
    """Unexpired announcements targeted at the caller, pinned first then newest"""
    return await get_announcement_service(db).list_announcements(current_user, mine=mine)


@router.post("", response_model=AnnouncementCreated, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    payload: AnnouncementCreate,
    current_user: User = Depends(require_permission(Action.ANNOUNCEMENT_CREATE)),
    db: AsyncSession = Depends(get_db)
):
    announcement_id = await get_announcement_service(db).create_announcement(
        current_user,
        title=payload.title,
        content=payload.content,
        category=payload.category,
        target_audience=payload.target_audience,
        is_pinned=payload.is_pinned,
        expires_at=payload.expires_at,
        is_department_specific=payload.is_department_specific,
        target_departments=payload.target_departments,
        attachments=payload.attachments,
    )
    return AnnouncementCreated(announcement_id=announcement_id)


@router.patch("/{announcement_id}")
async def update_announcement(
    announcement_id: str,
    payload: AnnouncementUpdate,
    current_user: User = Depends(require_permission(Action.ANNOUNCEMENT_UPDATE)),
    db: AsyncSession = Depends(get_db)
):
    return await get_announcement_service(db).update_announcement(
        announcement_id, current_user, payload.model_dump(exclude_unset=True)
    )


@router.delete("/{announcement_id}")
async def delete_announcement(
    announcement_id: str,
    current_user: User = Depends(require_permission(Action.ANNOUNCEMENT_DELETE)),
    db: AsyncSession = Depends(get_db)
):
    await get_announcement_service(db).delete_announcement(announcement_id, current_user)
    return {"message": "Announcement deleted successfully"}
