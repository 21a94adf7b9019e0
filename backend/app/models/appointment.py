from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum, Text, ForeignKey
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utc_now


class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


class Appointment(Base):
    """Meeting between a lecturer and a student"""
    __tablename__ = "appointments"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    lecturer_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    student_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    status = Column(SQLEnum(AppointmentStatus), default=AppointmentStatus.PENDING, nullable=False)
    meeting_link = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    def __repr__(self):
        return f"<Appointment {self.id} {self.status}>"


class TimeSlot(Base):
    """Window a lecturer has published as available for booking"""
    __tablename__ = "time_slots"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    lecturer_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
