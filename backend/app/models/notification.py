from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utc_now


class NotificationRead(Base):
    """Marks a derived notification (announcement-<id>, ticket-<id>, ...) as read by a user"""
    __tablename__ = "notification_reads"
    __table_args__ = (
        UniqueConstraint("user_id", "notification_id", name="uq_notification_read"),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    notification_id = Column(String(100), nullable=False)
    read_at = Column(DateTime, default=utc_now, nullable=False)
