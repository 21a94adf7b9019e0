from fastapi import APIRouter
from app.api.v1.endpoints import (
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
from app.api.v1.endpoints.admin import admin_router

api_router = APIRouter()

# Liveness at /health, readiness at /health/ready
api_router.include_router(health.router)

# Authentication & accounts
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(profile.router, prefix="/profile", tags=["Profile"])
api_router.include_router(admin_router)

# Support & campus news
api_router.include_router(tickets.router, prefix="/tickets", tags=["Tickets"])
api_router.include_router(announcements.router, prefix="/announcements", tags=["Announcements"])

# Scheduling
api_router.include_router(appointments.router, prefix="/appointments", tags=["Appointments"])
api_router.include_router(timeslots.router, prefix="/timeslots", tags=["Time Slots"])

# Community
api_router.include_router(forum.router, prefix="/forum", tags=["Forum"])
api_router.include_router(lostfound.router, prefix="/lostfound", tags=["Lost & Found"])

# Messaging & notifications
api_router.include_router(chats.router, prefix="/chats", tags=["Chats"])
api_router.include_router(messages.router, prefix="/messages", tags=["Messages"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
