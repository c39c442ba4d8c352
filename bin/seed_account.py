# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Bootstrap script – creates a first account.

Run once after the initial migration:
    python bin/seed_account.py

Reads FIRST_ACCOUNT_USERNAME and FIRST_ACCOUNT_PASSWORD from etc/app.conf
(or the environment).  After the row is inserted those values are no longer
used by the application.
"""

import os
import sys

# ---------------------------------------------------------------------------
# Path setup so backend modules are importable
# ---------------------------------------------------------------------------
# bin/seed_account.py  →  ../  →  project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from core.config import settings  # noqa: E402
from core.digest import DigestEngine  # noqa: E402
from core.gateway import AuthGateway  # noqa: E402
from core.logger import logger  # noqa: E402
from core.session import SessionManager  # noqa: E402
from database import Database  # noqa: E402
from store.users import UserStore  # noqa: E402


def seed():
    if not settings.first_account_username or not settings.first_account_password:
        logger.warning("FIRST_ACCOUNT_USERNAME or FIRST_ACCOUNT_PASSWORD not set – nothing to do")
        return

    db = Database(settings.database_url).connect()
    try:
        users = UserStore(db)
        gateway = AuthGateway(users, DigestEngine.from_settings(), SessionManager(users.exists))
        if gateway.create_account(settings.first_account_username, settings.first_account_password):
            logger.info("Account '%s' created", settings.first_account_username)
        else:
            logger.info("Account '%s' already exists – skipping", settings.first_account_username)
    finally:
        db.dispose()


if __name__ == "__main__":
    seed()
