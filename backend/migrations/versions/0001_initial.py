"""Initial schema – users and entries

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18

Creates both tables with the foreign-key cascade from entries to users and
the (owner_id, last_change) index the sync feed scans.
"""

from alembic import op
import sqlalchemy as sa

# Alembic revision identifiers
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # -- users ----------------------------------------------------------
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(320), nullable=False),
        # raw Argon2id output
        sa.Column("password_hash", sa.LargeBinary(), nullable=False),
        sa.Column("password_salt", sa.LargeBinary(32), nullable=False),
        sa.Column("allowance", sa.Integer(), nullable=False, server_default="4096"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    # -- entries --------------------------------------------------------
    op.create_table(
        "entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "owner_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        # client-encrypted, fixed width – never plaintext
        sa.Column("salt", sa.LargeBinary(32), nullable=False),
        sa.Column("name", sa.LargeBinary(128), nullable=False),
        sa.Column("content", sa.LargeBinary(1024), nullable=False),
        sa.Column(
            "last_change",
            sa.DateTime(timezone=True),
            nullable=False,
        ),
    )

    op.create_index("ix_entries_owner_id", "entries", ["owner_id"])
    op.create_index("idx_entries_owner_last_change", "entries", ["owner_id", "last_change"])


def downgrade() -> None:
    op.drop_index("idx_entries_owner_last_change", table_name="entries")
    op.drop_index("ix_entries_owner_id", table_name="entries")
    op.drop_table("entries")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
