"""
UniConnect Portal - Centralized Logging Configuration

Production writes one JSON object per line; every other environment gets
readable text lines tagged with the request and user ids of the call
being served.
"""

import logging
import sys
import json
import traceback
import uuid
from datetime import datetime, timezone
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional
from contextvars import ContextVar

from app.core.config import settings

LOGGER_NAME = "uniconnect"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024

# Set by the request middleware and the auth dependency
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')

# LogRecord attributes that are not "extra" fields
_RESERVED_RECORD_KEYS = set(vars(logging.makeLogRecord({}))) | {'message', 'request_id', 'user_id'}


def get_request_id() -> str:
    return request_id_var.get() or ''


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_user_id() -> str:
    return user_id_var.get() or ''


def set_user_id(user_id: str) -> None:
    user_id_var.set(user_id)


def generate_request_id() -> str:
    """Short random id used to correlate the log lines of one request"""
    return uuid.uuid4().hex[:8]


class JSONFormatter(logging.Formatter):
    """One JSON document per record, extras included, for log shippers"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }

        if get_request_id():
            log_data["request_id"] = get_request_id()
        if get_user_id():
            log_data["user_id"] = get_user_id()

        if record.exc_info and record.exc_info[0]:
            exc_type, exc_value, _ = record.exc_info
            log_data["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS and not key.startswith('_'):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ContextualFormatter(logging.Formatter):
    """Plain-text formatter; fills %(request_id)s and %(user_id)s"""

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = get_request_id() or '-'
        record.user_id = get_user_id() or '-'
        return super().format(record)


class PortalLogger(logging.Logger):
    """Logger with helpers for the portal's recurring events"""

    def log_request(self, method: str, path: str, status_code: int,
                    duration_ms: float, **kwargs) -> None:
        """Completed HTTP request; 4xx log as warnings and 5xx as errors"""
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        self.log(
            level,
            f"HTTP {method} {path} - {status_code} ({duration_ms:.2f}ms)",
            extra={
                "event_type": "http_request",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": duration_ms,
                **kwargs
            }
        )

    def log_auth_event(self, event: str, success: bool, user_email: Optional[str] = None,
                       reason: Optional[str] = None, **kwargs) -> None:
        """Sign-in, sign-out and password events; failures log as warnings"""
        message = f"Auth {event}: {'success' if success else 'failed'}"
        if user_email:
            message += f" - {user_email}"
        if reason:
            message += f" - {reason}"

        self.log(
            logging.INFO if success else logging.WARNING,
            message,
            extra={
                "event_type": "auth",
                "auth_event": event,
                "auth_success": success,
                "user_email": user_email,
                "failure_reason": reason,
                **kwargs
            }
        )

    def log_error_with_context(self, error: Exception, context: Optional[str] = None,
                               **kwargs) -> None:
        """Unexpected exception with traceback"""
        self.error(
            f"Error in {context}: {type(error).__name__}: {error}",
            exc_info=(type(error), error, error.__traceback__),
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_context": context,
                **kwargs
            }
        )


def _file_handler(formatter: logging.Formatter, backup_count: int) -> RotatingFileHandler:
    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=backup_count)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> PortalLogger:
    """Configure the portal logger for the current environment"""
    logging.setLoggerClass(PortalLogger)

    logger = logging.getLogger(LOGGER_NAME)
    logger.__class__ = PortalLogger  # in case it existed before setLoggerClass
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    logger.propagate = False
    logger.handlers.clear()

    json_logging = settings.is_production
    if json_logging:
        console_formatter = file_formatter = JSONFormatter()
        backup_count = 10
    else:
        console_formatter = ContextualFormatter("%(levelname)-8s | [%(request_id)s] %(message)s")
        file_formatter = ContextualFormatter(
            "%(asctime)s | %(levelname)-8s | [%(request_id)s] [%(user_id)s] | "
            "%(funcName)s:%(lineno)d | %(message)s"
        )
        backup_count = 5

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    if settings.LOG_FILE:
        logger.addHandler(_file_handler(file_formatter, backup_count))

    for noisy in ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.debug(
        "Logging initialized",
        extra={"environment": settings.ENVIRONMENT, "json_logging": json_logging}
    )
    return logger


logger: PortalLogger = setup_logging()


__all__ = [
    'logger',
    'setup_logging',
    'get_request_id',
    'set_request_id',
    'get_user_id',
    'set_user_id',
    'generate_request_id',
    'PortalLogger',
    'JSONFormatter',
    'ContextualFormatter',
]
