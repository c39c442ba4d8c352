# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Credential digest engine – Argon2id with domain separation.

Every digest is computed over ``(data, salt)`` with the name of a
:class:`DigestType` passed to Argon2 as *associated data*.  A password hash
and a generic data hash of the same bytes and salt therefore never collide.

The high-level ``argon2.PasswordHasher`` API does not expose associated
data, so the raw ``argon2_ctx`` call from ``argon2.low_level`` is used.
"""

import enum
import secrets

from argon2.exceptions import HashingError
from argon2.low_level import ARGON2_VERSION, Type, core, error_to_str, ffi, lib

from core.config import settings

SALT_LENGTH = 32


class DigestType(enum.Enum):
    PASSWORD = "PASSWORD"
    DATA = "DATA"

    @property
    def associated_data(self) -> bytes:
        return self.name.encode("utf-8")


def _buffer(data: bytes):
    # cffi refuses zero-length arrays, so always allocate at least one byte
    buf = ffi.new("uint8_t[]", max(len(data), 1))
    ffi.memmove(buf, data, len(data))
    return buf


class DigestEngine:
    """Argon2id hasher bound to one set of cost parameters."""

    def __init__(
        self,
        time_cost: int = 10,
        memory_cost: int = 65536,
        parallelism: int = 4,
        hash_len: int = 192,
    ):
        if time_cost < 1 or parallelism < 1 or hash_len < 4:
            raise ValueError("Unsupported Argon2 parameters")
        if memory_cost < 8 * parallelism:
            raise ValueError("Argon2 memory cost must be at least 8 KiB per lane")
        self.time_cost = time_cost
        self.memory_cost = memory_cost
        self.parallelism = parallelism
        self.hash_len = hash_len

    @classmethod
    def from_settings(cls) -> "DigestEngine":
        return cls(
            time_cost=settings.argon2_time_cost,
            memory_cost=settings.argon2_memory_cost,
            parallelism=settings.argon2_parallelism,
            hash_len=settings.argon2_hash_len,
        )

    @staticmethod
    def generate_salt() -> bytes:
        return secrets.token_bytes(SALT_LENGTH)

    def digest(self, data: bytes, salt: bytes, digest_type: DigestType) -> bytes:
        """
        Return the raw Argon2id hash of *data* under *salt*.

        Raises ``ValueError`` for a salt that is not exactly 32 bytes and
        ``HashingError`` if libargon2 rejects the parameters.  Both are
        programming errors; callers are not expected to recover.
        """
        if len(salt) != SALT_LENGTH:
            raise ValueError(f"Salt must be exactly {SALT_LENGTH} bytes")

        ad = digest_type.associated_data

        # The cffi buffers must stay referenced until core() returns
        c_out = ffi.new("uint8_t[]", self.hash_len)
        c_pwd = _buffer(data)
        c_salt = _buffer(salt)
        c_ad = _buffer(ad)

        ctx = ffi.new(
            "argon2_context *",
            dict(
                version=ARGON2_VERSION,
                out=c_out,
                outlen=self.hash_len,
                pwd=c_pwd,
                pwdlen=len(data),
                salt=c_salt,
                saltlen=len(salt),
                secret=ffi.NULL,
                secretlen=0,
                ad=c_ad,
                adlen=len(ad),
                t_cost=self.time_cost,
                m_cost=self.memory_cost,
                lanes=self.parallelism,
                threads=self.parallelism,
                allocate_cbk=ffi.NULL,
                free_cbk=ffi.NULL,
                flags=lib.ARGON2_DEFAULT_FLAGS,
            ),
        )

        rv = core(ctx, Type.ID.value)
        if rv != 0:
            raise HashingError(error_to_str(rv))

        return bytes(ffi.buffer(ctx.out, ctx.outlen))
