# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Entry ORM model."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, LargeBinary

from database import Base

ENTRY_SALT_LENGTH = 32
ENTRY_NAME_LENGTH = 128
ENTRY_CONTENT_LENGTH = 1024


class Entry(Base):
    __tablename__ = "entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Cascade delete: removing a user removes all their entries.
    owner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Client-encrypted, fixed-size blobs.  Never inspected server-side.
    salt = Column(LargeBinary(ENTRY_SALT_LENGTH), nullable=False)
    name = Column(LargeBinary(ENTRY_NAME_LENGTH), nullable=False)
    content = Column(LargeBinary(ENTRY_CONTENT_LENGTH), nullable=False)
    # Written by the store on insert and on every update; drives sync.
    # Whole seconds, the granularity of the epoch timestamps clients sync on.
    last_change = Column(
        DateTime(timezone=True),
        nullable=False,
    )

    __table_args__ = (Index("idx_entries_owner_last_change", "owner_id", "last_change"),)
