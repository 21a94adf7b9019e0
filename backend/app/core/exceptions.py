"""
Custom Exceptions for UniConnect Portal
=======================================

Services raise these instead of HTTPException so the same rules apply no
matter which router calls them. The handlers registered in ``app.main``
turn them into JSON responses with the matching status code.

Usage:
    from app.core.exceptions import TicketNotFoundError, ValidationError

    if not ticket:
        raise TicketNotFoundError(ticket_id)
"""

from typing import Optional, Any, Dict


class PortalError(Exception):
    """Base exception for all portal errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "detail": self.message,
            "code": self.code,
        }
        if self.details:
            data["details"] = self.details
        return data


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(PortalError):
    """User authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class InvalidCredentialsError(AuthenticationError):
    """Email/password pair did not match"""

    def __init__(self):
        super().__init__("Invalid email or password")
        self.code = "INVALID_CREDENTIALS"


class AuthorizationError(PortalError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, code="FORBIDDEN")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(PortalError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": str(resource_id)}
        )


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class TicketNotFoundError(ResourceNotFoundError):
    def __init__(self, ticket_id: str):
        super().__init__("Ticket", ticket_id)


class AnnouncementNotFoundError(ResourceNotFoundError):
    def __init__(self, announcement_id: str):
        super().__init__("Announcement", announcement_id)


class AppointmentNotFoundError(ResourceNotFoundError):
    def __init__(self, appointment_id: str):
        super().__init__("Appointment", appointment_id)


class TimeSlotNotFoundError(ResourceNotFoundError):
    def __init__(self, slot_id: str):
        super().__init__("Slot", slot_id)


class PostNotFoundError(ResourceNotFoundError):
    """Forum post or lost & found listing not found"""

    def __init__(self, post_id: str):
        super().__init__("Post", post_id)


class CommentNotFoundError(ResourceNotFoundError):
    def __init__(self, comment_id: str):
        super().__init__("Comment", comment_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(PortalError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class MissingFieldsError(ValidationError):
    """One or more required fields are missing or blank"""

    def __init__(self, fields):
        fields = list(fields)
        super().__init__("Missing required fields: " + ", ".join(fields))
        self.code = "MISSING_FIELDS"
        self.details = {"fields": fields}


class InvalidIdentifierError(ValidationError):
    """Identifier is not a well-formed UUID"""

    def __init__(self, resource_type: str, value: Any):
        super().__init__(f"Invalid {resource_type.lower()} id", field="id")
        self.code = "INVALID_ID"
        self.details["value"] = str(value)


class InvalidTransitionError(ValidationError):
    """Status change not permitted from the current state"""

    def __init__(self, resource_type: str, current: str, target: str):
        super().__init__(f"Cannot move {resource_type.lower()} from '{current}' to '{target}'")
        self.code = "INVALID_TRANSITION"
        self.details = {"current": current, "target": target}


# ============================================
# Conflict Errors (409-type)
# ============================================

class ConflictError(PortalError):
    """Resource already exists"""

    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


# ============================================
# Helpers
# ============================================

def require_fields(**fields: Any) -> None:
    """Raise MissingFieldsError listing every field that is None or blank"""
    missing = [
        name for name, value in fields.items()
        if value is None or (isinstance(value, str) and not value.strip())
        or (isinstance(value, (list, tuple, set)) and len(value) == 0)
    ]
    if missing:
        raise MissingFieldsError(missing)
