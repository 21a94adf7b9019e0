from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.services.chat_service import get_chat_service

router = APIRouter()


@router.get("")
async def list_conversations(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    One entry per chat the caller takes part in, most recent first.

    ``unread_count`` is only present when there are unread messages.
    """
    return await get_chat_service(db).list_conversations(current_user)
