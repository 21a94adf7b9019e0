from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import bcrypt
from fastapi import HTTPException, status
import secrets
import string

from app.core.config import settings


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password"""
    if not plain_password or not hashed_password:
        return False
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS in .env)"""
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token.

    ``data`` carries the session claims: ``sub`` (user id) and ``role``.
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "type": "access"})
    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return encoded_jwt


def create_session_token(user_id: str, role: str) -> str:
    """Access token for a logged-in user"""
    return create_access_token({"sub": str(user_id), "role": role})


def decode_token(token: str) -> Dict[str, Any]:
    """Decode JWT token"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


def generate_temp_password(length: int = 8) -> str:
    """
    Generate a temporary password for admin resets.

    Always contains at least one upper-case letter, one lower-case letter
    and one digit.
    """
    if length < 3:
        raise ValueError("Temporary passwords need at least 3 characters")

    alphabet = string.ascii_letters + string.digits
    chars = [
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.digits),
    ]
    chars.extend(secrets.choice(alphabet) for _ in range(length - 3))

    # Shuffle so the guaranteed classes are not always at the front
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)
