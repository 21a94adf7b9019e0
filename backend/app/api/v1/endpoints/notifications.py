from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.policies import Action, require_permission
from app.models.user import User
from app.schemas.chat import MarkNotificationsRead, ReadIdsResponse
from app.services.notification_service import get_notification_service

router = APIRouter()


@router.get("")
async def notification_summary(
    current_user: User = Depends(require_permission(Action.NOTIFICATION_READ)),
    db: AsyncSession = Depends(get_db)
):
    """Counts of recent announcements, new tickets and upcoming appointments"""
    return await get_notification_service(db).summary(current_user)


@router.get("/read", response_model=ReadIdsResponse)
async def read_notification_ids(
    current_user: User = Depends(require_permission(Action.NOTIFICATION_READ)),
    db: AsyncSession = Depends(get_db)
):
    read_ids = await get_notification_service(db).read_ids(current_user)
    return ReadIdsResponse(read_ids=read_ids)


@router.post("/read")
async def mark_notifications_read(
    payload: MarkNotificationsRead,
    current_user: User = Depends(require_permission(Action.NOTIFICATION_READ)),
    db: AsyncSession = Depends(get_db)
):
    count = await get_notification_service(db).mark_read(
        current_user,
        notification_ids=payload.notification_ids,
        mark_all=payload.mark_all_as_read,
    )
    return {"message": "Notifications marked as read", "count": count}
