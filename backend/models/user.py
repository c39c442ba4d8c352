# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""User ORM model."""

from sqlalchemy import Column, Integer, LargeBinary, String

from database import Base

USERNAME_MAX_LENGTH = 320
DEFAULT_ALLOWANCE = 4096


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(USERNAME_MAX_LENGTH), unique=True, nullable=False, index=True)
    # Raw Argon2id output; the salt is stored separately, not embedded.
    password_hash = Column(LargeBinary, nullable=False)
    password_salt = Column(LargeBinary(32), nullable=False)
    # Upper bound on the number of entries this user may own
    allowance = Column(Integer, nullable=False, default=DEFAULT_ALLOWANCE, server_default=str(DEFAULT_ALLOWANCE))
