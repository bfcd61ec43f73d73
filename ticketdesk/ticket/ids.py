# ticketdesk/ticket/ids.py
import hashlib
import uuid
from datetime import datetime, timezone
from enum import Enum

# sortable, second resolution, always UTC
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class IdStrategy(str, Enum):
    CONTENT = "content"
    RANDOM = "random"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(created_at: datetime) -> str:
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def content_id(user: str, title: str, created_at: datetime) -> str:
    """SHA-1 of timestamp + user + title, hex encoded.

    Same user and title within the same second give the same ID.
    """
    raw = format_timestamp(created_at) + user + title
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()


def random_id() -> str:
    return str(uuid.uuid4())


class IdGenerator:
    def __init__(self, strategy: IdStrategy = IdStrategy.RANDOM):
        self.strategy = IdStrategy(strategy)

    @property
    def deterministic(self) -> bool:
        return self.strategy is IdStrategy.CONTENT

    def generate(self, user: str, title: str, created_at: datetime) -> str:
        if self.strategy is IdStrategy.CONTENT:
            return content_id(user, title, created_at)
        return random_id()


__all__ = [
    "TIMESTAMP_FORMAT",
    "IdStrategy",
    "IdGenerator",
    "content_id",
    "random_id",
    "format_timestamp",
    "utcnow",
]
