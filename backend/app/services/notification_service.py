"""
Notification Service Layer

Notifications are derived on the fly from recent announcements, tickets and
upcoming appointments. Only the user's read markers are stored.
"""

from datetime import timedelta
from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.core.types import utc_now
from app.models.announcement import Announcement
from app.models.notification import NotificationRead
from app.models.ticket import Ticket
from app.models.user import User, UserRole
from app.services.appointment_service import AppointmentService

ANNOUNCEMENT_WINDOW = timedelta(days=7)
ANNOUNCEMENT_LIMIT = 5
TICKET_WINDOW = timedelta(days=3)
TICKET_LIMIT = 3
APPOINTMENT_WINDOW = timedelta(hours=24)
APPOINTMENT_LIMIT = 3

# Roles that are notified about new tickets
TICKET_WATCHERS = {UserRole.LECTURER, UserRole.ADMIN}


def notification_id(kind: str, object_id: Any) -> str:
    """Identifier of a derived notification, e.g. ``announcement-<id>``"""
    return f"{kind}-{object_id}"


class NotificationService:
    """Service for the notification summary and read markers"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _recent_announcements(self, user: User) -> List[Announcement]:
        result = await self.db.execute(
            select(Announcement)
            .where(Announcement.created_at >= utc_now() - ANNOUNCEMENT_WINDOW)
            .order_by(Announcement.created_at.desc())
        )
        role = user.role_value
        matching = [a for a in result.scalars().all() if role in (a.target_audience or [])]
        return matching[:ANNOUNCEMENT_LIMIT]

    async def _recent_tickets(self, user: User) -> List[Ticket]:
        if user.role not in TICKET_WATCHERS:
            return []
        result = await self.db.execute(
            select(Ticket)
            .where(Ticket.created_at >= utc_now() - TICKET_WINDOW)
            .order_by(Ticket.created_at.desc())
            .limit(TICKET_LIMIT)
        )
        return list(result.scalars().all())

    async def _collect(self, user: User) -> Dict[str, list]:
        appointments = await AppointmentService(self.db).upcoming_for_user(
            user, APPOINTMENT_WINDOW, APPOINTMENT_LIMIT
        )
        return {
            "announcements": await self._recent_announcements(user),
            "tickets": await self._recent_tickets(user),
            "appointments": appointments,
        }

    async def summary(self, user: User) -> Dict[str, Any]:
        """Counts per notification source plus the total"""
        items = await self._collect(user)
        counts = {kind: len(objects) for kind, objects in items.items()}
        counts["total"] = sum(counts.values())
        return counts

    async def current_ids(self, user: User) -> List[str]:
        items = await self._collect(user)
        kinds = {"announcements": "announcement", "tickets": "ticket", "appointments": "appointment"}
        return [
            notification_id(kinds[source], obj.id)
            for source, objects in items.items()
            for obj in objects
        ]

    async def read_ids(self, user: User) -> List[str]:
        result = await self.db.execute(
            select(NotificationRead.notification_id)
            .where(NotificationRead.user_id == str(user.id))
            .order_by(NotificationRead.read_at.asc())
        )
        return list(result.scalars().all())

    async def mark_read(
        self,
        user: User,
        notification_ids: Optional[Iterable[str]] = None,
        mark_all: bool = False,
    ) -> int:
        """Store read markers; marking an id twice is a no-op. Returns the number of ids handled."""
        if mark_all:
            ids = await self.current_ids(user)
        elif notification_ids is not None:
            ids = [str(i) for i in notification_ids if i]
        else:
            raise ValidationError("Provide notification_ids or mark_all_as_read")

        ids = list(dict.fromkeys(ids))
        already = set(await self.read_ids(user))
        now = utc_now()
        for nid in ids:
            if nid not in already:
                self.db.add(NotificationRead(user_id=str(user.id), notification_id=nid, read_at=now))
        await self.db.commit()
        return len(ids)


def get_notification_service(db: AsyncSession) -> NotificationService:
    return NotificationService(db)
