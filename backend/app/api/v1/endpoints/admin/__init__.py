"""
Admin API endpoints for the UniConnect admin panel.
All endpoints require the admin role.
"""
from fastapi import APIRouter

from app.api.v1.endpoints.admin import users

admin_router = APIRouter(prefix="/admin", tags=["Admin"])

admin_router.include_router(users.router, prefix="/users", tags=["Admin Users"])
