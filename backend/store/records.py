# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Plain, immutable records handed out by the store layer.

ORM instances never leave ``store``; callers get these frozen dataclasses,
which stay valid after the database session that produced them is closed.
"""

import enum
from dataclasses import dataclass
from datetime import datetime, timezone

from models.entry import Entry
from models.user import User


class DBResult(enum.Enum):
    SUCCESS = "success"
    EXCEEDS_LIMIT = "exceeds_limit"
    NO_USER = "no_user"
    ALREADY_EXISTS = "already_exists"


def as_utc(value: datetime) -> datetime:
    """Attach / convert to UTC.  SQLite hands back naive datetimes."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def fit(blob: bytes, length: int) -> bytes:
    """Zero-pad or truncate *blob* to exactly *length* bytes."""
    return bytes(blob[:length]).ljust(length, b"\x00")


@dataclass(frozen=True)
class UserRecord:
    id: int
    username: str
    password_hash: bytes
    password_salt: bytes
    allowance: int

    @classmethod
    def from_row(cls, row: User) -> "UserRecord":
        return cls(
            id=row.id,
            username=row.username,
            password_hash=bytes(row.password_hash),
            password_salt=bytes(row.password_salt),
            allowance=row.allowance,
        )


@dataclass(frozen=True)
class EntryRecord:
    id: int
    owner_id: int
    salt: bytes
    name: bytes
    content: bytes
    last_change: datetime

    @classmethod
    def from_row(cls, row: Entry) -> "EntryRecord":
        return cls(
            id=row.id,
            owner_id=row.owner_id,
            salt=bytes(row.salt),
            name=bytes(row.name),
            content=bytes(row.content),
            last_change=as_utc(row.last_change),
        )


@dataclass(frozen=True)
class EntryChange:
    """One line of the sync manifest."""

    id: int
    last_change: datetime
