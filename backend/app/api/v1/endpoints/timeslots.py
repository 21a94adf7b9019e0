from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.core.policies import Action, require_permission
from app.models.user import User
from app.schemas.appointment import TimeSlotCreate
from app.services.appointment_service import get_appointment_service

router = APIRouter()


@router.get("")
async def list_available_slots(
    lecturer_id: Optional[str] = Query(None),
    current_user: User = Depends(require_permission(Action.APPOINTMENT_READ)),
    db: AsyncSession = Depends(get_db)
):
    """Future slots that have not been booked yet"""
    return await get_appointment_service(db).list_available_slots(lecturer_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_slot(
    payload: TimeSlotCreate,
    current_user: User = Depends(require_permission(Action.TIMESLOT_MANAGE)),
    db: AsyncSession = Depends(get_db)
):
    slot_id = await get_appointment_service(db).create_slot(
        current_user, payload.start_time, payload.end_time
    )
    return {"message": "Time slot created successfully", "slot_id": slot_id}


@router.delete("/{slot_id}")
async def delete_slot(
    slot_id: str,
    current_user: User = Depends(require_permission(Action.TIMESLOT_MANAGE)),
    db: AsyncSession = Depends(get_db)
):
    await get_appointment_service(db).delete_slot(slot_id, current_user)
    return {"message": "Time slot deleted successfully"}
