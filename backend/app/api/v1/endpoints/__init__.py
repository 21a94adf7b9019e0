# API endpoints
from . import (
    auth,
    users,
    profile,
    tickets,
    announcements,
    appointments,
    timeslots,
    forum,
    lostfound,
    chats,
    messages,
    notifications,
    health,
)

__all__ = [
    "auth",
    "users",
    "profile",
    "tickets",
    "announcements",
    "appointments",
    "timeslots",
    "forum",
    "lostfound",
    "chats",
    "messages",
    "notifications",
    "health",
]
