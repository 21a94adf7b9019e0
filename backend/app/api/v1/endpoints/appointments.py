from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.policies import Action, require_permission
from app.models.user import User
from app.schemas.appointment import AppointmentCreate, AppointmentRespond
from app.services.appointment_service import get_appointment_service

router = APIRouter()


@router.get("")
async def list_appointments(
    current_user: User = Depends(require_permission(Action.APPOINTMENT_READ)),
    db: AsyncSession = Depends(get_db)
):
    return await get_appointment_service(db).list_appointments(current_user)


@router.post("", status_code=status.HTTP_201_CREATED)
async def book_appointment(
    payload: AppointmentCreate,
    current_user: User = Depends(require_permission(Action.APPOINTMENT_BOOK)),
    db: AsyncSession = Depends(get_db)
):
    """
    Request a meeting with a lecturer.

    Either pass explicit start/end times or the id of a published time
    slot; booking a slot takes it off the available list.
    """
    appointment_id = await get_appointment_service(db).book_appointment(
        current_user,
        lecturer_id=payload.lecturer_id,
        title=payload.title,
        start_time=payload.start_time,
        end_time=payload.end_time,
        description=payload.description,
        meeting_link=payload.meeting_link,
        location=payload.location,
        slot_id=payload.slot_id,
    )
    return {"message": "Appointment requested successfully", "appointment_id": appointment_id}


@router.post("/{appointment_id}/respond")
async def respond_to_appointment(
    appointment_id: str,
    payload: AppointmentRespond,
    current_user: User = Depends(require_permission(Action.APPOINTMENT_RESPOND)),
    db: AsyncSession = Depends(get_db)
):
    return await get_appointment_service(db).respond(
        appointment_id, current_user, payload.action, payload.notes
    )


@router.post("/{appointment_id}/cancel")
async def cancel_appointment(
    appointment_id: str,
    current_user: User = Depends(require_permission(Action.APPOINTMENT_CANCEL)),
    db: AsyncSession = Depends(get_db)
):
    appointment = await get_appointment_service(db).cancel(appointment_id, current_user)
    if appointment is None:
        return {"message": "Appointment deleted successfully"}
    return appointment


@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: str,
    current_user: User = Depends(require_permission(Action.APPOINTMENT_DELETE)),
    db: AsyncSession = Depends(get_db)
):
    await get_appointment_service(db).delete_appointment(appointment_id)
    return {"message": "Appointment deleted successfully"}
