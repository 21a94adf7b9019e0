"""
Authorization policy
====================

Role-level permissions live in one table: ``POLICY`` maps every action to the
set of roles allowed to perform it. Routes declare the action they need with
``require_permission`` and services call ``is_allowed`` when the answer
depends on data they load. Resource ownership (e.g. "only the author may
edit") is checked by the services themselves.

Usage:
    @router.post("")
    async def create_announcement(
        current_user: User = Depends(require_permission(Action.ANNOUNCEMENT_CREATE)),
    ):
        ...
"""

from enum import Enum
from typing import Dict, FrozenSet, Union

from fastapi import Depends

from app.core.exceptions import AuthorizationError
from app.models.user import User, UserRole


class Action(str, Enum):
    # Tickets
    TICKET_CREATE = "ticket:create"
    TICKET_READ = "ticket:read"
    TICKET_REPLY = "ticket:reply"
    TICKET_UPDATE = "ticket:update"
    TICKET_ASSIGN = "ticket:assign"
    TICKET_DELETE = "ticket:delete"

    # Announcements
    ANNOUNCEMENT_READ = "announcement:read"
    ANNOUNCEMENT_CREATE = "announcement:create"
    ANNOUNCEMENT_UPDATE = "announcement:update"
    ANNOUNCEMENT_DELETE = "announcement:delete"

    # Appointments and time slots
    APPOINTMENT_READ = "appointment:read"
    APPOINTMENT_BOOK = "appointment:book"
    APPOINTMENT_RESPOND = "appointment:respond"
    APPOINTMENT_CANCEL = "appointment:cancel"
    APPOINTMENT_DELETE = "appointment:delete"
    TIMESLOT_MANAGE = "timeslot:manage"

    # Forum
    FORUM_READ = "forum:read"
    FORUM_POST = "forum:post"
    FORUM_MODERATE = "forum:moderate"

    # Lost & found
    LOSTFOUND_POST = "lostfound:post"
    LOSTFOUND_MODERATE = "lostfound:moderate"

    # Messaging and notifications
    MESSAGE_SEND = "message:send"
    NOTIFICATION_READ = "notification:read"

    # User administration
    USER_MANAGE = "user:manage"


_ALL = frozenset(UserRole)
_STAFF = frozenset({UserRole.LECTURER, UserRole.ADMIN})
_ADMIN = frozenset({UserRole.ADMIN})


POLICY: Dict[Action, FrozenSet[UserRole]] = {
    Action.TICKET_CREATE: _ALL,
    Action.TICKET_READ: _ALL,
    Action.TICKET_REPLY: _ALL,
    Action.TICKET_UPDATE: _ALL,
    Action.TICKET_ASSIGN: _STAFF,
    Action.TICKET_DELETE: _ADMIN,

    Action.ANNOUNCEMENT_READ: _ALL,
    Action.ANNOUNCEMENT_CREATE: _STAFF,
    Action.ANNOUNCEMENT_UPDATE: _STAFF,
    Action.ANNOUNCEMENT_DELETE: _STAFF,

    Action.APPOINTMENT_READ: _ALL,
    Action.APPOINTMENT_BOOK: frozenset({UserRole.STUDENT}),
    Action.APPOINTMENT_RESPOND: frozenset({UserRole.LECTURER}),
    Action.APPOINTMENT_CANCEL: frozenset({UserRole.STUDENT, UserRole.ADMIN}),
    # Any signed-in user may delete an appointment by id
    Action.APPOINTMENT_DELETE: _ALL,
    Action.TIMESLOT_MANAGE: frozenset({UserRole.LECTURER}),

    Action.FORUM_READ: _ALL,
    Action.FORUM_POST: _ALL,
    Action.FORUM_MODERATE: _ADMIN,

    Action.LOSTFOUND_POST: _ALL,
    Action.LOSTFOUND_MODERATE: _STAFF,

    Action.MESSAGE_SEND: _ALL,
    Action.NOTIFICATION_READ: _ALL,

    Action.USER_MANAGE: _ADMIN,
}


def _as_role(role: Union[UserRole, str, None]) -> Union[UserRole, None]:
    if isinstance(role, UserRole):
        return role
    try:
        return UserRole(role)
    except ValueError:
        return None


def is_allowed(role: Union[UserRole, str, None], action: Action) -> bool:
    """True when ``role`` may perform ``action``. Unknown roles and actions are denied."""
    resolved = _as_role(role)
    if resolved is None:
        return False
    return resolved in POLICY.get(action, frozenset())


def ensure_allowed(role: Union[UserRole, str, None], action: Action) -> None:
    """Raise AuthorizationError unless ``role`` may perform ``action``"""
    if not is_allowed(role, action):
        raise AuthorizationError()


def require_permission(action: Action):
    """
    FastAPI dependency factory: resolves the current user and checks the
    policy table for ``action``.
    """
    # Local import: app.modules.auth.dependencies imports this module
    from app.modules.auth.dependencies import get_current_user

    async def checker(current_user: User = Depends(get_current_user)) -> User:
        ensure_allowed(current_user.role, action)
        return current_user

    return checker
