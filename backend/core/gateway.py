# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Auth gateway – turns credentials into sessions and manages accounts.

Security notes
--------------
* ``authenticate`` returns ``None`` for both "no such user" and "wrong
  password".  An unknown username still pays for one Argon2 digest so the
  two cases also take the same time.
* Stored and computed hashes are compared with ``hmac.compare_digest``.
"""

import hmac
from typing import Optional

from core.config import settings
from core.digest import SALT_LENGTH, DigestEngine, DigestType
from core.logger import logger
from core.session import Session, SessionManager
from models.user import USERNAME_MAX_LENGTH
from store.records import UserRecord
from store.users import UserStore

# Burned on unknown usernames to keep the failure paths equally expensive
_DUMMY_SALT = bytes(SALT_LENGTH)


class AuthGateway:
    def __init__(
        self,
        users: UserStore,
        digests: DigestEngine,
        sessions: SessionManager,
        default_allowance: Optional[int] = None,
    ):
        self.users = users
        self.digests = digests
        self.sessions = sessions
        if default_allowance is None:
            default_allowance = settings.default_allowance
        self.default_allowance = default_allowance

    def _password_digest(self, password: str, salt: bytes) -> bytes:
        return self.digests.digest(password.encode("utf-8"), salt, DigestType.PASSWORD)

    def check_credentials(self, username: str, password: str) -> Optional[UserRecord]:
        user = self.users.get_by_username(username)
        if user is None:
            self._password_digest(password, _DUMMY_SALT)
            return None

        computed = self._password_digest(password, user.password_salt)
        if not hmac.compare_digest(computed, user.password_hash):
            return None
        return user

    def authenticate(self, username: str, password: str) -> Optional[Session]:
        user = self.check_credentials(username, password)
        if user is None:
            logger.info("Login failed")
            return None
        return self.sessions.issue(user.id)

    def create_account(self, username: str, password: str) -> bool:
        if len(username.encode("utf-8")) > USERNAME_MAX_LENGTH:
            return False
        if self.users.get_by_username(username) is not None:
            return False

        salt = self.digests.generate_salt()
        digest = self._password_digest(password, salt)

        uid = self.users.create(username, digest, salt, allowance=self.default_allowance)
        if uid is None:
            return False
        logger.info("Account %d created", uid)
        return True

    def delete_account(self, uid: int) -> bool:
        deleted = self.users.delete(uid)
        if deleted:
            logger.info("Account %d deleted", uid)
        return deleted

    def get_user(self, uid: int) -> Optional[UserRecord]:
        return self.users.get(uid)

    def user_exists(self, uid: int) -> bool:
        return self.users.exists(uid)
