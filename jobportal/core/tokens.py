"""
Token helpers for email verification, password reset and temporary passwords.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

# No 0/O, 1/l/I to keep mailed passwords readable
TEMP_PASSWORD_CHARSET = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz23456789"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_secure_token(length: int = 32) -> str:
    """Random hex token built from `length` random bytes."""
    return secrets.token_hex(length)


def generate_temporary_password(length: int = 10) -> str:
    return "".join(secrets.choice(TEMP_PASSWORD_CHARSET) for _ in range(length))


def generate_token_expiry(minutes: int = 30) -> datetime:
    return utcnow() + timedelta(minutes=minutes)


def is_token_expired(expiry: Optional[datetime]) -> bool:
    """A missing expiry counts as expired."""
    if not expiry:
        return True
    # MongoDB hands back naive datetimes in UTC
    if expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=timezone.utc)
    return utcnow() > expiry
