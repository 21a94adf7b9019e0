"""
Ticket Service Layer
Support tickets raised by students and handled by staff
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    TicketNotFoundError,
    UserNotFoundError,
    ValidationError,
    require_fields,
)
from app.core.logging_config import logger
from app.core.policies import Action, is_allowed
from app.core.types import utc_now
from app.models.ticket import Ticket, TicketPriority, TicketReply, TicketStatus
from app.models.user import User, UserRole
from app.services.user_service import get_users_by_ids


class TicketEvent(str, Enum):
    REPLY = "reply"
    START = "start"
    RESOLVE = "resolve"
    CLOSE = "close"
    REOPEN = "reopen"


# (current status, event) -> next status. Pairs not listed are rejected.
TICKET_TRANSITIONS: Dict[Tuple[TicketStatus, TicketEvent], TicketStatus] = {
    # Any reply puts the ticket back in progress, even once resolved or closed
    **{(status, TicketEvent.REPLY): TicketStatus.IN_PROGRESS for status in TicketStatus},

    (TicketStatus.OPEN, TicketEvent.START): TicketStatus.IN_PROGRESS,

    (TicketStatus.OPEN, TicketEvent.RESOLVE): TicketStatus.RESOLVED,
    (TicketStatus.IN_PROGRESS, TicketEvent.RESOLVE): TicketStatus.RESOLVED,

    (TicketStatus.OPEN, TicketEvent.CLOSE): TicketStatus.CLOSED,
    (TicketStatus.IN_PROGRESS, TicketEvent.CLOSE): TicketStatus.CLOSED,
    (TicketStatus.RESOLVED, TicketEvent.CLOSE): TicketStatus.CLOSED,

    (TicketStatus.RESOLVED, TicketEvent.REOPEN): TicketStatus.OPEN,
    (TicketStatus.CLOSED, TicketEvent.REOPEN): TicketStatus.OPEN,
}

# Event that moves a ticket into the requested status on a manual update
_EVENT_FOR_TARGET = {
    TicketStatus.IN_PROGRESS: TicketEvent.START,
    TicketStatus.RESOLVED: TicketEvent.RESOLVE,
    TicketStatus.CLOSED: TicketEvent.CLOSE,
    TicketStatus.OPEN: TicketEvent.REOPEN,
}


def next_ticket_status(current: TicketStatus, event: TicketEvent) -> TicketStatus:
    """Look up the transition table; raises InvalidTransitionError for unknown pairs"""
    current = TicketStatus(current)
    event = TicketEvent(event)
    try:
        return TICKET_TRANSITIONS[(current, event)]
    except KeyError:
        raise InvalidTransitionError("Ticket", current.value, event.value)


def _validate_priority(priority: str) -> str:
    priority = priority.strip().lower()
    if priority not in {p.value for p in TicketPriority}:
        raise ValidationError(
            f"Priority must be one of: {', '.join(p.value for p in TicketPriority)}", field="priority"
        )
    return priority


class TicketService:
    """Service for support ticket operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get(self, ticket_id: str) -> Ticket:
        result = await self.db.execute(select(Ticket).where(Ticket.id == str(ticket_id)))
        ticket = result.scalar_one_or_none()
        if not ticket:
            raise TicketNotFoundError(ticket_id)
        return ticket

    @staticmethod
    def _check_access(ticket: Ticket, user: User) -> None:
        """Students see their own tickets, lecturers the ones assigned to them"""
        user_id = str(user.id)
        if user.role == UserRole.STUDENT and str(ticket.student_id) != user_id:
            raise AuthorizationError()
        if user.role == UserRole.LECTURER and str(ticket.assigned_to or "") != user_id:
            raise AuthorizationError()

    async def _serialize(self, tickets: List[Ticket]) -> List[Dict[str, Any]]:
        """Attach student and assignee names using a single user lookup"""
        users = await get_users_by_ids(
            self.db,
            [t.student_id for t in tickets] + [t.assigned_to for t in tickets],
        )

        items = []
        for ticket in tickets:
            student = users.get(str(ticket.student_id))
            assignee = users.get(str(ticket.assigned_to)) if ticket.assigned_to else None
            items.append({
                "id": str(ticket.id),
                "title": ticket.title,
                "description": ticket.description,
                "category": ticket.category,
                "priority": ticket.priority,
                "status": ticket.status.value,
                "student_id": str(ticket.student_id),
                "student_name": student.name if student else "Unknown",
                "assigned_to": str(ticket.assigned_to) if ticket.assigned_to else None,
                "assigned_to_name": assignee.name if assignee else None,
                "replies": [
                    {
                        "id": str(reply.id),
                        "user_id": str(reply.author_id),
                        "user_name": reply.author_name,
                        "message": reply.message,
                        "created_at": reply.created_at,
                    }
                    for reply in ticket.replies
                ],
                "created_at": ticket.created_at,
                "updated_at": ticket.updated_at,
            })
        return items

    async def create_ticket(
        self,
        requester: User,
        title: Optional[str],
        description: Optional[str],
        category: Optional[str],
        priority: Optional[str],
    ) -> str:
        """Open a new ticket owned by the requester; returns its id"""
        require_fields(title=title, description=description, category=category, priority=priority)

        ticket = Ticket(
            student_id=str(requester.id),
            title=title.strip(),
            description=description.strip(),
            category=category.strip(),
            priority=_validate_priority(priority),
            status=TicketStatus.OPEN,
        )
        self.db.add(ticket)
        await self.db.commit()

        logger.info(f"[Tickets] {requester.id} opened ticket {ticket.id}")
        return str(ticket.id)

    async def list_tickets(self, requester: User) -> List[Dict[str, Any]]:
        query = select(Ticket)
        if requester.role == UserRole.STUDENT:
            query = query.where(Ticket.student_id == str(requester.id))
        elif requester.role == UserRole.LECTURER:
            query = query.where(Ticket.assigned_to == str(requester.id))

        result = await self.db.execute(query.order_by(Ticket.created_at.desc()))
        return await self._serialize(list(result.scalars().all()))

    async def get_ticket(self, ticket_id: str, requester: User) -> Dict[str, Any]:
        ticket = await self._get(ticket_id)
        self._check_access(ticket, requester)
        return (await self._serialize([ticket]))[0]

    async def add_reply(self, ticket_id: str, requester: User, message: Optional[str]) -> Dict[str, Any]:
        """Append a reply; the ticket moves to in-progress"""
        require_fields(message=message)

        ticket = await self._get(ticket_id)
        self._check_access(ticket, requester)

        reply = TicketReply(
            author_id=str(requester.id),
            author_name=requester.name or "Unknown",
            message=message.strip(),
        )
        ticket.replies.append(reply)
        ticket.status = next_ticket_status(ticket.status, TicketEvent.REPLY)
        ticket.updated_at = utc_now()
        await self.db.commit()

        return (await self._serialize([ticket]))[0]

    async def update_ticket(self, ticket_id: str, requester: User, updates: Dict[str, Any]) -> Dict[str, Any]:
        ticket = await self._get(ticket_id)
        self._check_access(ticket, requester)

        if updates.get("status"):
            try:
                target = TicketStatus(updates["status"])
            except ValueError:
                raise ValidationError("Invalid status", field="status")
            if target != ticket.status:
                ticket.status = next_ticket_status(ticket.status, _EVENT_FOR_TARGET[target])

        for field in ("priority", "category"):
            if field in updates and updates[field] is not None:
                value = updates[field].strip()
                if not value:
                    raise ValidationError(f"{field.capitalize()} cannot be empty", field=field)
                if field == "priority":
                    value = _validate_priority(value)
                setattr(ticket, field, value)

        if "assigned_to" in updates:
            if not is_allowed(requester.role, Action.TICKET_ASSIGN):
                raise AuthorizationError()
            ticket.assigned_to = await self._resolve_assignee(updates["assigned_to"])

        ticket.updated_at = utc_now()
        await self.db.commit()
        return (await self._serialize([ticket]))[0]

    async def _resolve_assignee(self, assignee_id: Optional[str]) -> Optional[str]:
        if not assignee_id:
            return None
        result = await self.db.execute(select(User).where(User.id == str(assignee_id)))
        assignee = result.scalar_one_or_none()
        if not assignee:
            raise UserNotFoundError(assignee_id)
        if assignee.role not in (UserRole.LECTURER, UserRole.ADMIN):
            raise ValidationError("Tickets can only be assigned to staff", field="assigned_to")
        return str(assignee.id)

    async def delete_ticket(self, ticket_id: str) -> None:
        ticket = await self._get(ticket_id)
        await self.db.delete(ticket)
        await self.db.commit()
        logger.info(f"[Tickets] Deleted ticket {ticket_id}")


def get_ticket_service(db: AsyncSession) -> TicketService:
    return TicketService(db)
