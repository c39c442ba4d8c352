# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the entry endpoints."""

import base64
import binascii
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from store.records import EntryChange, EntryRecord


def b64encode(blob: bytes) -> str:
    """Base64 without padding, the format clients send and expect."""
    return base64.b64encode(blob).decode("ascii").rstrip("=")


def b64decode(text: str) -> bytes:
    """Accept padded or unpadded base64."""
    padded = text + "=" * (-len(text) % 4)
    return base64.b64decode(padded, validate=True)


def epoch(value: datetime) -> int:
    return int(value.timestamp())


# -- Requests --------------------------------------------------------------
# Blobs arrive base64-encoded and already encrypted by the client.  The
# store pads / truncates them to their fixed widths.


class IncomingEntry(BaseModel):
    salt: bytes
    name: bytes
    content: bytes
    id: Optional[int] = None

    @field_validator("salt", "name", "content", mode="before")
    @classmethod
    def _decode(cls, value):
        if not isinstance(value, str):
            raise ValueError("must be a base64 string")
        try:
            return b64decode(value)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("invalid base64") from exc


# -- Responses -------------------------------------------------------------


class EntryResponse(BaseModel):
    id: int
    salt: str
    name: str
    content: str
    lastchange: int

    @classmethod
    def from_record(cls, record: EntryRecord) -> "EntryResponse":
        return cls(
            id=record.id,
            salt=b64encode(record.salt),
            name=b64encode(record.name),
            content=b64encode(record.content),
            lastchange=epoch(record.last_change),
        )


class EntryChangeResponse(BaseModel):
    id: int
    lastchange: int

    @classmethod
    def from_change(cls, change: EntryChange) -> "EntryChangeResponse":
        return cls(id=change.id, lastchange=epoch(change.last_change))
