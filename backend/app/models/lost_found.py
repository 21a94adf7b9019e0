from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum, Text, ForeignKey
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utc_now


class ItemType(str, enum.Enum):
    LOST = "lost"
    FOUND = "found"


class ItemCategory(str, enum.Enum):
    ELECTRONICS = "electronics"
    CLOTHING = "clothing"
    BOOKS = "books"
    ACCESSORIES = "accessories"
    OTHER = "other"


class ItemStatus(str, enum.Enum):
    OPEN = "open"
    RESOLVED = "resolved"


class LostFoundItem(Base):
    """Lost or found item listing"""
    __tablename__ = "lost_found_items"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    author_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    author_name = Column(String(255), nullable=False)
    author_role = Column(String(20), nullable=False)

    type = Column(SQLEnum(ItemType), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(SQLEnum(ItemCategory), nullable=False)
    location = Column(String(255), nullable=True)
    date_lost_found = Column(DateTime, nullable=True)
    image_url = Column(Text, nullable=True)
    contact_info = Column(String(255), nullable=True)
    status = Column(SQLEnum(ItemStatus), default=ItemStatus.OPEN, nullable=False, index=True)

    # Claim
    claimed_by = Column(GUID, ForeignKey("users.id"), nullable=True)
    claimed_by_name = Column(String(255), nullable=True)
    claimed_at = Column(DateTime, nullable=True)

    is_deleted = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    comments = relationship(
        "LostFoundComment",
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="LostFoundComment.created_at",
        lazy="selectin",
    )


class LostFoundComment(Base):
    __tablename__ = "lost_found_comments"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    item_id = Column(GUID, ForeignKey("lost_found_items.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(GUID, ForeignKey("users.id"), nullable=False)
    author_name = Column(String(255), nullable=False)
    author_role = Column(String(20), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    item = relationship("LostFoundItem", back_populates="comments")
