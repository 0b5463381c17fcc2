"""One-time passcodes for e-mail and phone verification."""

from __future__ import annotations

import hmac
import secrets
from datetime import datetime, timedelta, timezone

__all__ = ["OTP_LIFETIME", "generate_token", "token_expires_at", "is_token_expired", "is_token_valid"]

OTP_LIFETIME = timedelta(minutes=5)


def generate_token() -> str:
    """Return a random six-digit passcode."""
    return str(secrets.randbelow(900_000) + 100_000)


def token_expires_at() -> datetime:
    """Return the moment, in UTC, at which a passcode issued now stops being valid."""
    return datetime.now(timezone.utc) + OTP_LIFETIME


def is_token_expired(expires_at: datetime) -> bool:
    """Tell whether the current time is past ``expires_at``."""
    now = datetime.now(expires_at.tzinfo and timezone.utc)
    if expires_at.tzinfo is None:
        now = datetime.now()
    return now > expires_at


def is_token_valid(requested: str | None, expected: str) -> bool:
    """Compare a submitted passcode with the stored one; a missing passcode never matches."""
    if requested is None:
        return False
    return hmac.compare_digest(requested.encode(), expected.encode())