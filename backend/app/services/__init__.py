from app.services.user_service import UserService, get_users_by_ids
from app.services.ticket_service import TicketService
from app.services.announcement_service import AnnouncementService
from app.services.appointment_service import AppointmentService
from app.services.forum_service import ForumService, compute_forum_stats
from app.services.lost_found_service import LostFoundService
from app.services.chat_service import ChatService
from app.services.notification_service import NotificationService

__all__ = [
    # Accounts
    "UserService",
    "get_users_by_ids",
    # Portal services
    "TicketService",
    "AnnouncementService",
    "AppointmentService",
    "ForumService",
    "compute_forum_stats",
    "LostFoundService",
    "ChatService",
    "NotificationService",
]
