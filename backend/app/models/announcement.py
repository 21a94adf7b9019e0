from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey, JSON
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utc_now


class AnnouncementCategory(str, enum.Enum):
    GENERAL = "general"
    ACADEMIC = "academic"
    EVENT = "event"
    URGENT = "urgent"


class Announcement(Base):
    """Broadcast message scoped to one or more roles, optionally time-limited"""
    __tablename__ = "announcements"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    author_id = Column(GUID, ForeignKey("users.id"), nullable=True, index=True)

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String(50), nullable=False, default=AnnouncementCategory.GENERAL.value)
    target_audience = Column(JSON, nullable=False, default=list)  # ["student", "lecturer", ...]
    attachments = Column(JSON, nullable=False, default=list)
    is_pinned = Column(Boolean, default=False, nullable=False)
    expires_at = Column(DateTime, nullable=True)  # None = never expires

    # Department targeting
    is_department_specific = Column(Boolean, default=False, nullable=False)
    target_departments = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    def is_visible_to(self, role: str, department=None, now=None) -> bool:
        """Audience, expiry and department rules for a requester"""
        now = now or utc_now()
        if role not in (self.target_audience or []):
            return False
        if self.expires_at is not None and self.expires_at < now:
            return False
        if self.is_department_specific and role != "admin":
            # An empty department list means every department
            targets = self.target_departments or []
            if targets and department not in targets:
                return False
        return True

    def __repr__(self):
        return f"<Announcement {self.title}>"
