# Re-export all models for convenient imports
from app.models.user import User, UserRole
from app.models.ticket import Ticket, TicketReply, TicketStatus, TicketPriority
from app.models.announcement import Announcement, AnnouncementCategory
from app.models.appointment import Appointment, AppointmentStatus, TimeSlot
from app.models.forum import ForumPost, ForumReply, ForumCategory, ForumPostStatus
from app.models.lost_found import LostFoundItem, LostFoundComment, ItemType, ItemCategory, ItemStatus
from app.models.chat import Chat, Message, make_chat_key, split_chat_key
from app.models.notification import NotificationRead

__all__ = [
    # User
    "User",
    "UserRole",
    # Tickets
    "Ticket",
    "TicketReply",
    "TicketStatus",
    "TicketPriority",
    # Announcements
    "Announcement",
    "AnnouncementCategory",
    # Appointments
    "Appointment",
    "AppointmentStatus",
    "TimeSlot",
    # Forum
    "ForumPost",
    "ForumReply",
    "ForumCategory",
    "ForumPostStatus",
    # Lost & found
    "LostFoundItem",
    "LostFoundComment",
    "ItemType",
    "ItemCategory",
    "ItemStatus",
    # Messaging
    "Chat",
    "Message",
    "make_chat_key",
    "split_chat_key",
    # Notifications
    "NotificationRead",
]
