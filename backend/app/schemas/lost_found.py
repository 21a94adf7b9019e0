from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class LostFoundCreate(BaseModel):
    type: Optional[str] = None  # lost | found
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    date: Optional[datetime] = None
    contact_info: Optional[str] = None
    image_url: Optional[str] = None


class LostFoundUpdate(BaseModel):
    status: Optional[str] = None
    claimed_by: Optional[str] = None
    claimed_by_name: Optional[str] = None


class CommentCreate(BaseModel):
    content: Optional[str] = None
