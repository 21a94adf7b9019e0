from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.policies import Action, require_permission
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.ticket import TicketCreate, TicketCreated, TicketReplyCreate, TicketUpdate
from app.services.ticket_service import get_ticket_service

router = APIRouter()


@router.get("")
async def list_tickets(
    current_user: User = Depends(require_permission(Action.TICKET_READ)),
    db: AsyncSession = Depends(get_db)
):
    """
    Tickets visible to the caller, newest first.

    Students see their own tickets, lecturers the ones assigned to them,
    admins everything.
    """
    return await get_ticket_service(db).list_tickets(current_user)


@router.post("", response_model=TicketCreated, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    payload: TicketCreate,
    current_user: User = Depends(require_permission(Action.TICKET_CREATE)),
    db: AsyncSession = Depends(get_db)
):
    ticket_id = await get_ticket_service(db).create_ticket(
        current_user,
        title=payload.title,
        description=payload.description,
        category=payload.category,
        priority=payload.priority,
    )
    return TicketCreated(ticket_id=ticket_id)


@router.get("/{ticket_id}")
async def get_ticket(
    ticket_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await get_ticket_service(db).get_ticket(ticket_id, current_user)


@router.patch("/{ticket_id}")
async def update_ticket(
    ticket_id: str,
    payload: TicketUpdate,
    current_user: User = Depends(require_permission(Action.TICKET_UPDATE)),
    db: AsyncSession = Depends(get_db)
):
    return await get_ticket_service(db).update_ticket(
        ticket_id, current_user, payload.model_dump(exclude_unset=True)
    )


@router.delete("/{ticket_id}")
async def delete_ticket(
    ticket_id: str,
    current_user: User = Depends(require_permission(Action.TICKET_DELETE)),
    db: AsyncSession = Depends(get_db)
):
    await get_ticket_service(db).delete_ticket(ticket_id)
    return {"message": "Ticket deleted successfully"}


@router.post("/{ticket_id}/replies")
async def add_reply(
    ticket_id: str,
    payload: TicketReplyCreate,
    current_user: User = Depends(require_permission(Action.TICKET_REPLY)),
    db: AsyncSession = Depends(get_db)
):
    """Append a reply. The ticket moves to in-progress."""
    return await get_ticket_service(db).add_reply(ticket_id, current_user, payload.message)
