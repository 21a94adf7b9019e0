from pydantic import BaseModel, Field
from typing import List, Optional


class MessageCreate(BaseModel):
    receiver_id: Optional[str] = None
    content: Optional[str] = None
    type: str = "text"


class MarkMessagesRead(BaseModel):
    chat_id: Optional[str] = None


class MarkNotificationsRead(BaseModel):
    notification_ids: Optional[List[str]] = None
    mark_all_as_read: bool = False


class ReadIdsResponse(BaseModel):
    read_ids: List[str] = Field(default_factory=list)
