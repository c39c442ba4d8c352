# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Entry repository – per-owner CRUD over opaque, fixed-size records.

Tenant isolation
----------------
Every query filters on ``owner_id``.  An id belonging to someone else is
indistinguishable from an id that does not exist.

Quota
-----
``create_entry`` locks the owner's row (``SELECT … FOR UPDATE``) before
counting, and inserts inside the same transaction.  Two concurrent creates
for one owner are serialized on that lock, so the allowance can never be
overshot.  SQLite ignores FOR UPDATE; there every transaction opens with
BEGIN IMMEDIATE instead (see ``database.py``), which has the same effect.

Timestamps
----------
``last_change`` is always written by the store from its clock; clients
cannot set it.  It is kept to whole seconds, the resolution of the epoch
timestamps clients sync with, and updates never move it backwards.
"""

from datetime import datetime, timezone
from typing import Callable, List, Optional

from sqlalchemy import case, func, insert
from sqlalchemy.exc import IntegrityError

from core.logger import logger
from database import Database
from models.entry import ENTRY_CONTENT_LENGTH, ENTRY_NAME_LENGTH, ENTRY_SALT_LENGTH, Entry
from models.user import User
from store.records import DBResult, EntryRecord, as_utc, fit


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EntryStore:
    def __init__(self, db: Database, clock: Callable[[], datetime] = _utcnow):
        self._db = db
        self._clock = clock

    def _now(self) -> datetime:
        return self._clock().replace(microsecond=0)

    # -- Reads ---------------------------------------------------------------

    def get_entry_count(self, owner_id: int) -> int:
        with self._db.transaction() as db:
            return db.query(func.count(Entry.id)).filter(Entry.owner_id == owner_id).scalar()

    def get_entry(self, owner_id: int, entry_id: int) -> Optional[EntryRecord]:
        with self._db.transaction() as db:
            row = (
                db.query(Entry)
                .filter(Entry.owner_id == owner_id, Entry.id == entry_id)
                .first()
            )
            return EntryRecord.from_row(row) if row else None

    def get_entries_after(self, owner_id: int, timestamp: datetime) -> List[EntryRecord]:
        """Entries changed strictly after *timestamp*, oldest change first."""
        after = as_utc(timestamp)
        with self._db.transaction() as db:
            rows = (
                db.query(Entry)
                .filter(Entry.owner_id == owner_id, Entry.last_change > after)
                .order_by(Entry.last_change.asc(), Entry.id.asc())
                .all()
            )
            return [EntryRecord.from_row(row) for row in rows]

    # -- Writes --------------------------------------------------------------

    def create_entry(self, owner_id: int, salt: bytes, name: bytes, content: bytes) -> DBResult:
        try:
            with self._db.transaction() as db:
                allowance = (
                    db.query(User.allowance)
                    .filter(User.id == owner_id)
                    .with_for_update()
                    .scalar()
                )
                if allowance is None:
                    return DBResult.NO_USER

                count = db.query(func.count(Entry.id)).filter(Entry.owner_id == owner_id).scalar()
                if count + 1 >= allowance:
                    logger.info("Entry quota reached for user %d (%d/%d)", owner_id, count, allowance)
                    return DBResult.EXCEEDS_LIMIT

                result = db.execute(
                    insert(Entry.__table__).values(
                        owner_id=owner_id,
                        salt=fit(salt, ENTRY_SALT_LENGTH),
                        name=fit(name, ENTRY_NAME_LENGTH),
                        content=fit(content, ENTRY_CONTENT_LENGTH),
                        last_change=self._now(),
                    )
                )
                if result.rowcount != 1:
                    return DBResult.ALREADY_EXISTS
                return DBResult.SUCCESS
        except IntegrityError as exc:
            logger.warning("Entry insert for user %d hit a constraint: %s", owner_id, exc.orig)
            return DBResult.ALREADY_EXISTS

    def update_entry(
        self,
        owner_id: int,
        entry_id: Optional[int],
        salt: bytes,
        name: bytes,
        content: bytes,
    ) -> bool:
        """
        Replace salt, name and content of one entry.  Returns ``False`` when
        *entry_id* is missing or no row matches ``(owner_id, entry_id)``.
        """
        if entry_id is None:
            return False

        now = self._now()
        with self._db.transaction() as db:
            updated = (
                db.query(Entry)
                .filter(Entry.owner_id == owner_id, Entry.id == entry_id)
                .update(
                    {
                        Entry.salt: fit(salt, ENTRY_SALT_LENGTH),
                        Entry.name: fit(name, ENTRY_NAME_LENGTH),
                        Entry.content: fit(content, ENTRY_CONTENT_LENGTH),
                        # non-decreasing even if the clock steps backwards
                        Entry.last_change: case(
                            (Entry.last_change > now, Entry.last_change),
                            else_=now,
                        ),
                    },
                    synchronize_session=False,
                )
            )
            return updated == 1

    def delete_entry(self, owner_id: int, entry_id: int) -> bool:
        with self._db.transaction() as db:
            removed = (
                db.query(Entry)
                .filter(Entry.owner_id == owner_id, Entry.id == entry_id)
                .delete(synchronize_session=False)
            )
            return removed == 1
