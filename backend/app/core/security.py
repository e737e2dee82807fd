"""
Password hashing and signed token helpers
"""
import jwt
import uuid
import bcrypt
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from app.core.config import settings


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password using bcrypt"""
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash"""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def utcnow() -> datetime:
    """Naive UTC now, matching the DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def token_lifetime() -> timedelta:
    return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def create_access_token(user_id: int, is_admin: bool, name: str) -> Tuple[str, datetime]:
    """
    Generate a signed token for a user.

    Returns:
        The encoded token and its absolute expiry (naive UTC, as stored
        on the session row)
    """
    issued_at = datetime.now(timezone.utc)
    expires_at = issued_at + token_lifetime()
    payload = {
        "sub": str(user_id),
        "is_admin": is_admin,
        "name": name,
        "iat": issued_at,
        "exp": expires_at,
        # Unique per login so two logins in the same second get distinct tokens
        "jti": uuid.uuid4().hex,
    }
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return token, expires_at.replace(tzinfo=None)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Validate signature and expiry, returning the claims or None"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.InvalidTokenError:
        return None
