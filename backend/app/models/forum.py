"""
Forum models
- Department-scoped discussion posts
- Replies with accepted-answer flag
- Up/down votes stored as user id lists
"""

from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum, Text, Integer, ForeignKey, JSON
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utc_now


class ForumCategory(str, enum.Enum):
    ACADEMIC = "academic"
    TECHNICAL = "technical"
    GENERAL = "general"
    CAREER = "career"
    SOCIAL = "social"


class ForumPostStatus(str, enum.Enum):
    OPEN = "open"
    RESOLVED = "resolved"
    CLOSED = "closed"


class ForumPost(Base):
    """Discussion thread"""
    __tablename__ = "forum_posts"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    author_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    author_name = Column(String(255), nullable=False)
    author_role = Column(String(20), nullable=False)

    title = Column(String(500), nullable=False)
    content = Column(Text, nullable=False)
    department = Column(String(255), nullable=True, index=True)
    category = Column(String(50), nullable=False, default=ForumCategory.GENERAL.value)
    status = Column(SQLEnum(ForumPostStatus), default=ForumPostStatus.OPEN, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    is_pinned = Column(Boolean, default=False, nullable=False)
    is_anonymous = Column(Boolean, default=False, nullable=False)

    # Votes (user ids); reassign the list to persist a change
    upvotes = Column(JSON, nullable=False, default=list)
    downvotes = Column(JSON, nullable=False, default=list)
    views = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
    last_activity_at = Column(DateTime, default=utc_now, nullable=False, index=True)

    replies = relationship(
        "ForumReply",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="ForumReply.created_at",
        lazy="selectin",
    )

    @property
    def vote_count(self) -> int:
        return len(self.upvotes or []) - len(self.downvotes or [])

    def __repr__(self):
        return f"<ForumPost {self.title}>"


class ForumReply(Base):
    """Reply on a forum post"""
    __tablename__ = "forum_replies"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    post_id = Column(GUID, ForeignKey("forum_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    author_name = Column(String(255), nullable=False)
    author_role = Column(String(20), nullable=False)

    content = Column(Text, nullable=False)
    is_accepted_answer = Column(Boolean, default=False, nullable=False)
    upvotes = Column(JSON, nullable=False, default=list)
    downvotes = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    post = relationship("ForumPost", back_populates="replies")

    @property
    def vote_count(self) -> int:
        return len(self.upvotes or []) - len(self.downvotes or [])
