import uuid
from datetime import UTC, datetime


def generate_token() -> str:
    """Magic-link token: a random UUIDv4 (122 bits of entropy)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(UTC).replace(tzinfo=None)
