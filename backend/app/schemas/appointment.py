from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class AppointmentCreate(BaseModel):
    lecturer_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    meeting_link: Optional[str] = None
    location: Optional[str] = None
    slot_id: Optional[str] = None  # book a published time slot


class AppointmentRespond(BaseModel):
    action: Optional[str] = None  # accept | reject | complete
    notes: Optional[str] = None


class TimeSlotCreate(BaseModel):
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
