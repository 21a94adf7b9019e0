# Pydantic schemas
from app.schemas.auth import (
    SignupRequest,
    LoginRequest,
    ChangePasswordRequest,
    StatusUpdateRequest,
    ProfileUpdateRequest,
    UserResponse,
    LoginResponse,
    MessageResponse,
)
from app.schemas.admin import (
    AdminUserCreate,
    AdminUserUpdate,
    ResetPasswordRequest,
    ResetPasswordResponse,
)
from app.schemas.ticket import TicketCreate, TicketUpdate, TicketReplyCreate, TicketCreated
from app.schemas.announcement import AnnouncementCreate, AnnouncementUpdate, AnnouncementCreated
from app.schemas.appointment import AppointmentCreate, AppointmentRespond, TimeSlotCreate
from app.schemas.forum import ForumPostCreate, ForumPostUpdate, ForumReplyCreate, ForumVote, AcceptAnswer
from app.schemas.lost_found import LostFoundCreate, LostFoundUpdate, CommentCreate
from app.schemas.chat import MessageCreate, MarkMessagesRead, MarkNotificationsRead, ReadIdsResponse

__all__ = [
    # Auth & users
    "SignupRequest",
    "LoginRequest",
    "ChangePasswordRequest",
    "StatusUpdateRequest",
    "ProfileUpdateRequest",
    "UserResponse",
    "LoginResponse",
    "MessageResponse",
    # Admin
    "AdminUserCreate",
    "AdminUserUpdate",
    "ResetPasswordRequest",
    "ResetPasswordResponse",
    # Tickets
    "TicketCreate",
    "TicketUpdate",
    "TicketReplyCreate",
    "TicketCreated",
    # Announcements
    "AnnouncementCreate",
    "AnnouncementUpdate",
    "AnnouncementCreated",
    # Appointments
    "AppointmentCreate",
    "AppointmentRespond",
    "TimeSlotCreate",
    # Forum
    "ForumPostCreate",
    "ForumPostUpdate",
    "ForumReplyCreate",
    "ForumVote",
    "AcceptAnswer",
    # Lost & found
    "LostFoundCreate",
    "LostFoundUpdate",
    "CommentCreate",
    # Messaging & notifications
    "MessageCreate",
    "MarkMessagesRead",
    "MarkNotificationsRead",
    "ReadIdsResponse",
]
