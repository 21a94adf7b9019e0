from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class AnnouncementCreate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    target_audience: Optional[List[str]] = None
    is_pinned: bool = False
    expires_at: Optional[datetime] = None  # omitted = never expires
    is_department_specific: bool = False
    target_departments: List[str] = Field(default_factory=list)
    attachments: List[str] = Field(default_factory=list)


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    target_audience: Optional[List[str]] = None
    is_pinned: Optional[bool] = None
    expires_at: Optional[datetime] = None
    is_department_specific: Optional[bool] = None
    target_departments: Optional[List[str]] = None
    attachments: Optional[List[str]] = None


class AnnouncementCreated(BaseModel):
    message: str = "Announcement added successfully"
    announcement_id: str
