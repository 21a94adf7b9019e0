"""
Direct messaging models

A chat between two users is identified by its chat key: the two participant
ids sorted and joined with "_". Both participants derive the same key, so
there is exactly one chat per pair.
"""

from typing import Tuple
from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey, JSON

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utc_now


CHAT_KEY_SEPARATOR = "_"


def make_chat_key(user_a: str, user_b: str) -> str:
    """Canonical chat key for a pair of users"""
    return CHAT_KEY_SEPARATOR.join(sorted([str(user_a), str(user_b)]))


def split_chat_key(chat_key: str) -> Tuple[str, ...]:
    """Participant ids encoded in a chat key"""
    return tuple(part for part in chat_key.split(CHAT_KEY_SEPARATOR) if part)


class Chat(Base):
    """One row per user pair, keyed by the chat key"""
    __tablename__ = "chats"

    id = Column(String(80), primary_key=True)  # chat key
    participants = Column(JSON, nullable=False, default=list)
    last_message = Column(Text, nullable=True)
    last_message_time = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, nullable=False, index=True)


class Message(Base):
    __tablename__ = "messages"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    chat_id = Column(String(80), nullable=False, index=True)
    sender_id = Column(GUID, ForeignKey("users.id"), nullable=False)
    receiver_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    type = Column(String(20), default="text", nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False, index=True)
