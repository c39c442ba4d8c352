# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
SQLAlchemy declarative base and the :class:`Database` handle that owns the
engine / connection pool.

The pool is created by ``connect()`` (application startup) and released by
``dispose()`` (shutdown).  Nothing touches the database at import time.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


def _begin_immediate(engine: Engine) -> None:
    """
    SQLite has no row locks and pysqlite defers BEGIN until the first write,
    so two read-then-insert transactions can interleave.  Take over BEGIN and
    grab the write lock when the transaction starts.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    def __init__(self, url: str, **engine_kwargs):
        self.url = url
        # pool_pre_ping keeps idle connections alive across MySQL's wait_timeout
        engine_kwargs.setdefault("pool_pre_ping", True)
        self._engine_kwargs = engine_kwargs
        self._engine: Optional[Engine] = None
        self._sessionmaker: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not connected")
        return self._engine

    def connect(self) -> "Database":
        if self._engine is None:
            self._engine = create_engine(self.url, **self._engine_kwargs)
            if self._engine.dialect.name == "sqlite":
                _begin_immediate(self._engine)
            self._sessionmaker = sessionmaker(
                autocommit=False, autoflush=False, expire_on_commit=False, bind=self._engine
            )
        return self

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._sessionmaker = None

    def create_all(self) -> None:
        """Create missing tables.  Production schemas are managed by Alembic."""
        # Imported for their side effect of registering tables on Base.metadata
        import models.entry  # noqa: F401
        import models.user  # noqa: F401

        Base.metadata.create_all(self.engine)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Yield a session wrapped in one transaction.  Commits on normal exit,
        rolls back and re-raises on any exception.
        """
        if self._sessionmaker is None:
            raise RuntimeError("Database is not connected")

        db = self._sessionmaker()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
