"""
Chat Service - direct messages between two users

Every pair of users shares one chat, identified by the chat key (both ids
sorted and joined with "_"). Messages are stored against that key and the
chat row keeps the latest message for the conversation list.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthorizationError,
    UserNotFoundError,
    ValidationError,
    require_fields,
)
from app.core.logging_config import logger
from app.core.types import utc_now
from app.models.chat import Chat, Message, make_chat_key, split_chat_key
from app.models.user import User
from app.services.user_service import get_users_by_ids

NO_MESSAGES_PREVIEW = "No messages yet"
NEVER = "Never"
MESSAGE_TYPES = {"text", "image", "file"}


def format_message_time(value) -> str:
    """HH:MM of the last message, or "Never" """
    return value.strftime("%H:%M") if value else NEVER


def serialize_message(message: Message) -> Dict[str, Any]:
    return {
        "id": str(message.id),
        "chat_id": message.chat_id,
        "sender_id": str(message.sender_id),
        "receiver_id": str(message.receiver_id),
        "content": message.content,
        "type": message.type,
        "is_read": bool(message.is_read),
        "created_at": message.created_at,
    }


class ChatService:
    """Service for conversations and direct messages"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_conversations(self, user: User) -> List[Dict[str, Any]]:
        """
        Contact summaries for every chat the user takes part in, most recently
        updated first. Chats whose other participant no longer exists are skipped.
        """
        user_id = str(user.id)

        # The chat key embeds both ids, so a substring match narrows the scan
        result = await self.db.execute(
            select(Chat).where(Chat.id.contains(user_id)).order_by(Chat.updated_at.desc())
        )
        chats = [c for c in result.scalars().all() if user_id in (c.participants or [])]

        other_ids = {
            chat.id: next((p for p in chat.participants if p != user_id), None)
            for chat in chats
        }
        contacts = await get_users_by_ids(self.db, other_ids.values())

        unread_result = await self.db.execute(
            select(Message.chat_id, func.count(Message.id))
            .where(Message.receiver_id == user_id, Message.is_read == False)  # noqa: E712
            .group_by(Message.chat_id)
        )
        unread = dict(unread_result.all())

        summaries = []
        for chat in chats:
            other = contacts.get(str(other_ids[chat.id])) if other_ids[chat.id] else None
            if other is None:
                continue

            summary = {
                "id": str(other.id),
                "chat_id": chat.id,
                "name": other.name,
                "role": other.role_value,
                "is_online": bool(other.is_online),
                "last_message": chat.last_message if chat.last_message is not None else NO_MESSAGES_PREVIEW,
                "last_message_time": format_message_time(chat.last_message_time),
            }
            unread_count = unread.get(make_chat_key(user_id, other.id), 0)
            if unread_count > 0:
                summary["unread_count"] = unread_count
            summaries.append(summary)

        return summaries

    async def send_message(
        self,
        sender: User,
        receiver_id: Optional[str],
        content: Optional[str],
        type: str = "text",
    ) -> Dict[str, Any]:
        require_fields(receiver_id=receiver_id, content=content)
        type = type or "text"
        if type not in MESSAGE_TYPES:
            raise ValidationError(f"Message type must be one of: {', '.join(sorted(MESSAGE_TYPES))}", field="type")
        if str(receiver_id) == str(sender.id):
            raise ValidationError("Cannot send a message to yourself", field="receiver_id")

        receivers = await get_users_by_ids(self.db, [receiver_id])
        receiver = receivers.get(str(receiver_id))
        if not receiver:
            raise UserNotFoundError(receiver_id)

        chat_key = make_chat_key(sender.id, receiver.id)
        now = utc_now()

        message = Message(
            chat_id=chat_key,
            sender_id=str(sender.id),
            receiver_id=str(receiver.id),
            content=content,
            type=type,
            is_read=False,
            created_at=now,
        )
        self.db.add(message)

        chat = await self.db.get(Chat, chat_key)
        if chat is None:
            chat = Chat(
                id=chat_key,
                participants=sorted([str(sender.id), str(receiver.id)]),
                created_at=now,
            )
            self.db.add(chat)
        chat.last_message = content
        chat.last_message_time = now
        chat.updated_at = now

        await self.db.commit()
        logger.debug(f"[Chat] {sender.id} -> {receiver.id} in {chat_key}")
        return serialize_message(message)

    def _check_participant(self, chat_key: str, user: User) -> None:
        if str(user.id) not in split_chat_key(chat_key):
            raise AuthorizationError()

    async def list_messages(self, chat_key: Optional[str], user: User) -> List[Dict[str, Any]]:
        """Messages of one chat, oldest first"""
        require_fields(chat_id=chat_key)
        self._check_participant(chat_key, user)

        result = await self.db.execute(
            select(Message).where(Message.chat_id == chat_key).order_by(Message.created_at.asc())
        )
        return [serialize_message(m) for m in result.scalars().all()]

    async def mark_read(self, chat_key: Optional[str], user: User) -> int:
        """Flag every unread message addressed to the user in the chat; returns how many"""
        require_fields(chat_id=chat_key)
        self._check_participant(chat_key, user)

        result = await self.db.execute(
            update(Message)
            .where(
                Message.chat_id == chat_key,
                Message.receiver_id == str(user.id),
                Message.is_read == False,  # noqa: E712
            )
            .values(is_read=True)
        )
        await self.db.commit()
        return result.rowcount or 0


def get_chat_service(db: AsyncSession) -> ChatService:
    return ChatService(db)
