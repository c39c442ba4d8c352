# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Change feed – the incremental-sync view over an owner's entries.

Entries are encrypted client-side, so the server cannot diff content.  The
only thing it can offer is ordering by ``last_change``:

1. the client fetches the cheap manifest (``get_entry_changes``),
2. works out the newest timestamp it already holds,
3. pulls full records changed after that point (``get_entries_after``).
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func

from database import Database
from models.entry import Entry
from store.entries import EntryStore
from store.records import EntryChange, EntryRecord, as_utc


class ChangeFeed:
    def __init__(self, db: Database, entries: EntryStore):
        self._db = db
        self._entries = entries

    def get_entry_changes(self, owner_id: int) -> List[EntryChange]:
        with self._db.transaction() as db:
            rows = (
                db.query(Entry.id, Entry.last_change)
                .filter(Entry.owner_id == owner_id)
                .order_by(Entry.id.asc())
                .all()
            )
            return [EntryChange(id=row.id, last_change=as_utc(row.last_change)) for row in rows]

    def get_entries_after(self, owner_id: int, timestamp: datetime) -> List[EntryRecord]:
        return self._entries.get_entries_after(owner_id, timestamp)

    def latest_change(self, owner_id: int) -> Optional[datetime]:
        """Newest ``last_change`` among the owner's entries, if any."""
        with self._db.transaction() as db:
            latest = db.query(func.max(Entry.last_change)).filter(Entry.owner_id == owner_id).scalar()
        if latest is None:
            return None
        # func.max loses the column type on some dialects
        if isinstance(latest, str):
            latest = datetime.fromisoformat(latest)
        return as_utc(latest)
