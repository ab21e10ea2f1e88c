import secrets
from datetime import UTC, datetime


def utc_now() -> datetime:
    """Naive UTC timestamp, the form every DateTime column is stored in."""
    return datetime.now(UTC).replace(tzinfo=None)


def generate_session_id() -> str:
    return f"sess_{secrets.token_urlsafe(24)}"
