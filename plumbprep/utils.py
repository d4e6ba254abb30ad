"""Small helpers shared across services."""

import secrets
import string
from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on round trip)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_duration(seconds: int) -> str:
    """Format seconds as ``H:MM:SS`` when an hour or longer, else ``M:SS``."""
    seconds = max(0, int(seconds))
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def month_key(value: datetime) -> str:
    """Month bucket used for monthly commissions, e.g. ``2024-03``."""
    return f"{value.year:04d}-{value.month:02d}"


def generate_referral_code(username: str | None, length: int = 6) -> str:
    """Referral code made of the username prefix and a random suffix."""
    alphabet = string.ascii_uppercase + string.digits
    suffix = "".join(secrets.choice(alphabet) for _ in range(length))
    prefix = "".join(ch for ch in (username or "") if ch.isalnum())[:8].upper()
    return f"{prefix}{suffix}" if prefix else suffix


LIKE_ESCAPE = "\\"


def contains_pattern(text: str) -> str:
    """Lowercased ``%text%`` LIKE pattern with wildcards in ``text`` escaped."""
    escaped = (
        text.lower()
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
