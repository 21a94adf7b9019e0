"""
Support ticket models
- Ticket raised by a student, optionally assigned to staff
- Append-only reply thread
"""

from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Text, ForeignKey
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utc_now


class TicketStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class TicketPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Ticket(Base):
    """Support ticket"""
    __tablename__ = "tickets"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    student_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    assigned_to = Column(GUID, ForeignKey("users.id"), nullable=True, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    priority = Column(String(20), nullable=False)
    status = Column(SQLEnum(TicketStatus), default=TicketStatus.OPEN, nullable=False)

    created_at = Column(DateTime, default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    replies = relationship(
        "TicketReply",
        back_populates="ticket",
        cascade="all, delete-orphan",
        order_by="TicketReply.created_at",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Ticket {self.id} {self.status}>"


class TicketReply(Base):
    """Reply appended to a ticket thread"""
    __tablename__ = "ticket_replies"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    ticket_id = Column(GUID, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(GUID, ForeignKey("users.id"), nullable=False)
    author_name = Column(String(255), nullable=False, default="Unknown")
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    ticket = relationship("Ticket", back_populates="replies")
