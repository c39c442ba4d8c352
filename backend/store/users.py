# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""User repository – account rows and the owner-cascade delete."""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from core.logger import logger
from database import Database
from models.entry import Entry
from models.user import DEFAULT_ALLOWANCE, User
from store.records import UserRecord


class UserStore:
    def __init__(self, db: Database):
        self._db = db

    def get(self, uid: int) -> Optional[UserRecord]:
        with self._db.transaction() as db:
            row = db.query(User).filter(User.id == uid).first()
            return UserRecord.from_row(row) if row else None

    def get_by_username(self, username: str) -> Optional[UserRecord]:
        with self._db.transaction() as db:
            row = db.query(User).filter(User.username == username).first()
            return UserRecord.from_row(row) if row else None

    def exists(self, uid: int) -> bool:
        with self._db.transaction() as db:
            return db.query(User.id).filter(User.id == uid).first() is not None

    def create(
        self,
        username: str,
        password_hash: bytes,
        password_salt: bytes,
        allowance: int = DEFAULT_ALLOWANCE,
    ) -> Optional[int]:
        """
        Insert a user and return its id, or ``None`` if the username is
        already taken.  Any other integrity failure is re-raised.
        """
        try:
            with self._db.transaction() as db:
                user = User(
                    username=username,
                    password_hash=password_hash,
                    password_salt=password_salt,
                    allowance=allowance,
                )
                db.add(user)
                db.flush()  # get user.id before commit
                return user.id
        except IntegrityError:
            # Lost a race against a concurrent registration of the same name
            if self.get_by_username(username) is not None:
                logger.info("Registration rejected: username already taken")
                return None
            raise

    def delete(self, uid: int) -> bool:
        """
        Remove the user and every entry they own in one transaction.
        Entries are deleted explicitly so the cascade does not depend on
        the engine enforcing ON DELETE CASCADE (SQLite does not by default).
        """
        with self._db.transaction() as db:
            db.query(Entry).filter(Entry.owner_id == uid).delete(synchronize_session=False)
            removed = db.query(User).filter(User.id == uid).delete(synchronize_session=False)
            return removed == 1
