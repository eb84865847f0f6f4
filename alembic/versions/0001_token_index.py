"""token records, owner/issuer indexes, history, audit log

Revision ID: 0001_token_index
Revises:
Create Date: 2026-10-18
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_token_index"
down_revision = None
branch_labels = None
depends_on = None

JSON = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade():
    op.create_table(
        "token_records",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),

        sa.Column("token_key", sa.String(length=1024), nullable=False, unique=True),
        sa.Column("issuer_id", sa.String(length=256), nullable=False),
        sa.Column("token_id", sa.String(length=256), nullable=False),

        sa.Column("owner_id", sa.String(length=256), nullable=False),
        sa.Column("metadata_json", JSON, nullable=True),
        sa.Column("approved_account_ids_json", JSON, nullable=True),

        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),

        sa.UniqueConstraint("issuer_id", "token_id", name="uq_token_issuer_token"),
    )
    op.create_index("ix_token_owner", "token_records", ["owner_id"])

    op.create_table(
        "owner_index_entries",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("owner_id", sa.String(length=256), nullable=False),
        sa.Column("token_key", sa.String(length=1024), nullable=False),
        sa.UniqueConstraint("owner_id", "token_key", name="uq_owner_index_member"),
    )
    op.create_index("ix_owner_index_bucket", "owner_index_entries", ["owner_id", "id"])
    op.create_index("ix_owner_index_key", "owner_index_entries", ["token_key"])

    op.create_table(
        "issuer_index_entries",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("issuer_id", sa.String(length=256), nullable=False),
        sa.Column("token_key", sa.String(length=1024), nullable=False),
        sa.UniqueConstraint("issuer_id", "token_key", name="uq_issuer_index_member"),
    )
    op.create_index("ix_issuer_index_bucket", "issuer_index_entries", ["issuer_id", "id"])
    op.create_index("ix_issuer_index_key", "issuer_index_entries", ["token_key"])

    op.create_table(
        "token_history",
        sa.Column("token_key", sa.String(length=1024), primary_key=True),
        sa.Column("previous_owner_id", sa.String(length=256), nullable=False),
        sa.Column("changed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "audit_log_records",
        sa.Column("id", sa.Uuid, primary_key=True, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),

        sa.Column("request_id", sa.String(length=128), nullable=False),
        sa.Column("route", sa.String(length=256), nullable=False),
        sa.Column("method", sa.String(length=16), nullable=False),

        sa.Column("actor_participant_id", sa.String(length=128), nullable=False),
        sa.Column("actor_role", sa.String(length=64), nullable=False),

        sa.Column("issuer_id", sa.String(length=256), nullable=False),

        sa.Column("action", sa.String(length=96), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, server_default=sa.text("'ok'")),

        sa.Column("payload_hash", sa.String(length=128), nullable=False),
        sa.Column("payload_summary_json", JSON, nullable=False),

        sa.Column("ref_id", sa.String(length=1024), nullable=True),
    )
    op.create_index("ix_audit_log_records_request_id", "audit_log_records", ["request_id"])
    op.create_index("ix_audit_issuer", "audit_log_records", ["issuer_id"])
    op.create_index("ix_audit_action", "audit_log_records", ["action"])
    op.create_index("ix_audit_created", "audit_log_records", ["created_at"])


def downgrade():
    op.drop_table("audit_log_records")
    op.drop_table("token_history")
    op.drop_table("issuer_index_entries")
    op.drop_table("owner_index_entries")
    op.drop_index("ix_token_owner", table_name="token_records")
    op.drop_table("token_records")
