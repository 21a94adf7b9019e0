"""Custom SQLAlchemy types and helpers shared by the models"""
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import TypeDecorator, String
import uuid


def generate_uuid():
    """Generate a UUID string"""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Naive UTC timestamp, the format every DateTime column stores"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are assumed to be UTC already"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def is_valid_uuid(value) -> bool:
    """Check that an identifier coming from a URL or body is a UUID"""
    if not value:
        return False
    try:
        uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return False
    return True


class GUID(TypeDecorator):
    """Platform-independent GUID type that stores UUIDs as VARCHAR(36)"""
    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return str(value)
        return value
