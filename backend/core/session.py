# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Sliding-window session manager.

A session is nothing more than ``(uid, expiration)``.  There is no session
table: validity is computed from the token itself plus a check that the
owning user still exists.  Signing the token for transport is the job of
``core.security``; this module never sees the wire format.

Lifecycle
---------
* ``issue``    – after a successful credential check.
* ``validate`` – on every request.  Returns ``None`` when the owner is gone
  or ``now >= expiration``; otherwise a copy whose expiration has been slid
  forward to ``now + ttl``.
* ``clear``    – explicit logout.  Nothing is stored server-side, so the
  caller simply drops the token.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from core.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Session:
    uid: int
    expiration: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expiration


class SessionManager:
    def __init__(
        self,
        user_exists: Callable[[int], bool],
        ttl: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._user_exists = user_exists
        self.ttl = ttl or timedelta(minutes=settings.session_ttl_minutes)
        self._clock = clock

    def issue(self, uid: int) -> Session:
        return Session(uid=uid, expiration=self._clock() + self.ttl)

    def validate(self, session: Optional[Session]) -> Optional[Session]:
        if session is None:
            return None

        now = self._clock()
        if session.is_expired(now) or not self._user_exists(session.uid):
            return None

        return replace(session, expiration=now + self.ttl)

    def clear(self, session: Optional[Session]) -> None:
        # Stateless tokens: discarding is the transport layer's business.
        return None
