from pydantic_settings import BaseSettings
from typing import List, Any
from pathlib import Path
import json


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "UniConnect Portal"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    SECRET_KEY: str
    API_VERSION: str = "v1"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # ==========================================
    # Database
    # ==========================================
    DATABASE_URL: str
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # 30 minutes
    DB_ECHO: bool = False

    # ==========================================
    # Authentication
    # ==========================================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080  # 7 days, same lifetime as the session cookie
    BCRYPT_ROUNDS: int = 12  # 4 for dev (fast), 12 for prod (secure)
    AUTH_COOKIE_NAME: str = "token"
    AUTH_COOKIE_SECURE: bool = False
    MIN_PASSWORD_LENGTH: int = 6

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://127.0.0.1:3000"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # Rate Limiting
    # ==========================================
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"  # e.g. redis://localhost:6379/2
    RATE_LIMIT_LOGIN: str = "5/minute"
    RATE_LIMIT_SIGNUP: str = "3/minute"

    # ==========================================
    # Requests
    # ==========================================
    MAX_REQUEST_SIZE_MB: int = 10

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.LOG_FILE:
            Path(self.LOG_FILE).parent.mkdir(exist_ok=True, parents=True)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


# Create settings instance
settings = Settings()
