"""Common utility functions following DRY and KISS principles."""
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    """Lower-case and trim an email address."""
    return email.strip().lower()


def is_valid_uuid(uuid_string: Any) -> bool:
    """Check if string is valid UUID."""
    if not isinstance(uuid_string, str):
        return False
    try:
        UUID(uuid_string)
        return True
    except ValueError:
        return False


def parse_int(value: Optional[Any], default: int) -> int:
    """Parse an integer query value, falling back to ``default`` on bad input."""
    if value is None:
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default
