"""
Appointment Service Layer
Student/lecturer meetings and lecturer availability slots
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AppointmentNotFoundError,
    AuthorizationError,
    InvalidIdentifierError,
    InvalidTransitionError,
    TimeSlotNotFoundError,
    UserNotFoundError,
    ValidationError,
    require_fields,
)
from app.core.logging_config import logger
from app.core.types import is_valid_uuid, to_naive_utc, utc_now
from app.models.appointment import Appointment, AppointmentStatus, TimeSlot
from app.models.user import User, UserRole
from app.services.user_service import get_users_by_ids

# Lecturer responses: action -> (allowed current statuses, new status)
RESPONSES = {
    "accept": ({AppointmentStatus.PENDING}, AppointmentStatus.ACCEPTED),
    "reject": ({AppointmentStatus.PENDING}, AppointmentStatus.REJECTED),
    "complete": ({AppointmentStatus.ACCEPTED}, AppointmentStatus.COMPLETED),
}

# Statuses a student can no longer cancel from
FINAL_STATUSES = {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}


def _check_range(start_time: datetime, end_time: datetime) -> None:
    if end_time <= start_time:
        raise ValidationError("End time must be after start time", field="end_time")


class AppointmentService:
    """Service for appointment and time slot operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get(self, appointment_id: str) -> Appointment:
        result = await self.db.execute(
            select(Appointment).where(Appointment.id == str(appointment_id))
        )
        appointment = result.scalar_one_or_none()
        if not appointment:
            raise AppointmentNotFoundError(appointment_id)
        return appointment

    async def _serialize(self, appointments: List[Appointment]) -> List[Dict[str, Any]]:
        users = await get_users_by_ids(
            self.db,
            [a.student_id for a in appointments] + [a.lecturer_id for a in appointments],
        )
        items = []
        for a in appointments:
            student = users.get(str(a.student_id))
            lecturer = users.get(str(a.lecturer_id))
            items.append({
                "id": str(a.id),
                "title": a.title,
                "description": a.description,
                "start_time": a.start_time,
                "end_time": a.end_time,
                "status": a.status.value,
                "meeting_link": a.meeting_link,
                "location": a.location,
                "notes": a.notes,
                "student_id": str(a.student_id),
                "student_name": student.name if student else "Unknown",
                "lecturer_id": str(a.lecturer_id),
                "lecturer_name": lecturer.name if lecturer else "Unknown",
                "created_at": a.created_at,
                "updated_at": a.updated_at,
            })
        return items

    # =====================================================
    # APPOINTMENTS
    # =====================================================

    async def list_appointments(self, requester: User) -> List[Dict[str, Any]]:
        """Soonest first; students and lecturers only see their own"""
        query = select(Appointment)
        if requester.role == UserRole.STUDENT:
            query = query.where(Appointment.student_id == str(requester.id))
        elif requester.role == UserRole.LECTURER:
            query = query.where(Appointment.lecturer_id == str(requester.id))

        result = await self.db.execute(query.order_by(Appointment.start_time.asc()))
        return await self._serialize(list(result.scalars().all()))

    async def book_appointment(
        self,
        student: User,
        lecturer_id: Optional[str],
        title: Optional[str],
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
        description: Optional[str] = None,
        meeting_link: Optional[str] = None,
        location: Optional[str] = None,
        slot_id: Optional[str] = None,
    ) -> str:
        """Request a meeting; it stays pending until the lecturer responds"""
        slot = None
        if slot_id:
            slot = await self._get_slot(slot_id)
            if not slot.is_available:
                raise ValidationError("This time slot has already been booked", field="slot_id")
            lecturer_id = lecturer_id or str(slot.lecturer_id)
            if str(slot.lecturer_id) != str(lecturer_id):
                raise ValidationError("Time slot belongs to another lecturer", field="slot_id")
            if (start_time and to_naive_utc(start_time) != slot.start_time) or (
                end_time and to_naive_utc(end_time) != slot.end_time
            ):
                raise ValidationError("Booked times must match the time slot", field="slot_id")
            start_time, end_time = slot.start_time, slot.end_time

        require_fields(lecturer_id=lecturer_id, title=title, start_time=start_time, end_time=end_time)
        start_time, end_time = to_naive_utc(start_time), to_naive_utc(end_time)
        _check_range(start_time, end_time)

        lecturers = await get_users_by_ids(self.db, [lecturer_id])
        lecturer = lecturers.get(str(lecturer_id))
        if not lecturer or lecturer.role != UserRole.LECTURER:
            raise UserNotFoundError(lecturer_id)

        appointment = Appointment(
            lecturer_id=str(lecturer.id),
            student_id=str(student.id),
            title=title.strip(),
            description=description or None,
            start_time=start_time,
            end_time=end_time,
            status=AppointmentStatus.PENDING,
            meeting_link=meeting_link or None,
            location=location or None,
        )
        self.db.add(appointment)
        if slot is not None:
            slot.is_available = False
        await self.db.commit()

        logger.info(f"[Appointments] {student.id} requested {appointment.id} with {lecturer.id}")
        return str(appointment.id)

    async def respond(
        self, appointment_id: str, lecturer: User, action: Optional[str], notes: Optional[str] = None
    ) -> Dict[str, Any]:
        """Accept, reject or complete an appointment assigned to the lecturer"""
        if action not in RESPONSES:
            raise ValidationError("Action must be one of: accept, reject, complete", field="action")

        appointment = await self._get(appointment_id)
        if str(appointment.lecturer_id) != str(lecturer.id):
            raise AuthorizationError()

        allowed_from, new_status = RESPONSES[action]
        if appointment.status not in allowed_from:
            raise InvalidTransitionError("Appointment", appointment.status.value, new_status.value)

        appointment.status = new_status
        if notes is not None:
            appointment.notes = notes or None
        appointment.updated_at = utc_now()
        await self.db.commit()

        return (await self._serialize([appointment]))[0]

    async def cancel(self, appointment_id: str, requester: User) -> Optional[Dict[str, Any]]:
        """
        Admins remove the appointment outright; the owning student marks it
        cancelled. Returns the updated appointment, or None when it was removed.
        """
        appointment = await self._get(appointment_id)

        if requester.role == UserRole.ADMIN:
            await self.db.delete(appointment)
            await self.db.commit()
            return None

        if requester.role != UserRole.STUDENT or str(appointment.student_id) != str(requester.id):
            raise AuthorizationError()

        if appointment.status in FINAL_STATUSES:
            raise ValidationError("Cannot cancel a completed or already cancelled appointment")

        appointment.status = AppointmentStatus.CANCELLED
        appointment.updated_at = utc_now()
        await self.db.commit()
        return (await self._serialize([appointment]))[0]

    async def delete_appointment(self, appointment_id: str) -> None:
        """Remove an appointment by id, without ownership checks"""
        if not is_valid_uuid(appointment_id):
            raise InvalidIdentifierError("Appointment", appointment_id)

        appointment = await self._get(appointment_id)
        await self.db.delete(appointment)
        await self.db.commit()
        logger.info(f"[Appointments] Deleted appointment {appointment_id}")

    async def upcoming_for_user(self, user: User, within: timedelta, limit: int) -> List[Appointment]:
        """Accepted appointments of the user starting inside the window"""
        now = utc_now()
        result = await self.db.execute(
            select(Appointment)
            .where(
                or_(Appointment.student_id == str(user.id), Appointment.lecturer_id == str(user.id)),
                Appointment.status == AppointmentStatus.ACCEPTED,
                Appointment.start_time >= now,
                Appointment.start_time <= now + within,
            )
            .order_by(Appointment.start_time.asc())
            .limit(limit)
        )
        return list(result.scalars().all())

    # =====================================================
    # TIME SLOTS
    # =====================================================

    async def _get_slot(self, slot_id: str) -> TimeSlot:
        result = await self.db.execute(select(TimeSlot).where(TimeSlot.id == str(slot_id)))
        slot = result.scalar_one_or_none()
        if not slot:
            raise TimeSlotNotFoundError(slot_id)
        return slot

    async def list_available_slots(self, lecturer_id: Optional[str] = None) -> List[Dict[str, Any]]:
        query = select(TimeSlot).where(
            TimeSlot.is_available == True,  # noqa: E712
            TimeSlot.start_time >= utc_now(),
        )
        if lecturer_id:
            query = query.where(TimeSlot.lecturer_id == str(lecturer_id))

        result = await self.db.execute(query.order_by(TimeSlot.start_time.asc()))
        slots = list(result.scalars().all())
        lecturers = await get_users_by_ids(self.db, [s.lecturer_id for s in slots])

        return [
            {
                "id": str(s.id),
                "lecturer_id": str(s.lecturer_id),
                "lecturer_name": lecturers[str(s.lecturer_id)].name if str(s.lecturer_id) in lecturers else "Unknown",
                "start_time": s.start_time,
                "end_time": s.end_time,
                "is_available": s.is_available,
                "created_at": s.created_at,
            }
            for s in slots
        ]

    async def create_slot(
        self, lecturer: User, start_time: Optional[datetime], end_time: Optional[datetime]
    ) -> str:
        require_fields(start_time=start_time, end_time=end_time)
        start_time, end_time = to_naive_utc(start_time), to_naive_utc(end_time)
        _check_range(start_time, end_time)

        slot = TimeSlot(
            lecturer_id=str(lecturer.id),
            start_time=start_time,
            end_time=end_time,
            is_available=True,
        )
        self.db.add(slot)
        await self.db.commit()
        return str(slot.id)

    async def delete_slot(self, slot_id: str, lecturer: User) -> None:
        slot = await self._get_slot(slot_id)
        if str(slot.lecturer_id) != str(lecturer.id):
            raise AuthorizationError()
        if not slot.is_available:
            raise ValidationError("Cannot delete a slot that has already been booked")

        await self.db.delete(slot)
        await self.db.commit()


def get_appointment_service(db: AsyncSession) -> AppointmentService:
    return AppointmentService(db)
