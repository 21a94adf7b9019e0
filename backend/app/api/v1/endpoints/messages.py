from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.core.policies import Action, require_permission
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.chat import MarkMessagesRead, MessageCreate
from app.services.chat_service import get_chat_service

router = APIRouter()


@router.get("")
async def list_messages(
    chat_id: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await get_chat_service(db).list_messages(chat_id, current_user)


@router.post("", status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: MessageCreate,
    current_user: User = Depends(require_permission(Action.MESSAGE_SEND)),
    db: AsyncSession = Depends(get_db)
):
    """Send a direct message. The chat is created on first contact."""
    return await get_chat_service(db).send_message(
        current_user, payload.receiver_id, payload.content, payload.type
    )


@router.post("/read")
async def mark_messages_read(
    payload: MarkMessagesRead,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    count = await get_chat_service(db).mark_read(payload.chat_id, current_user)
    return {"message": "Messages marked as read", "count": count}
