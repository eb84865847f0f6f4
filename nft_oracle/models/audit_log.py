from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import String, DateTime, Index, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column

from nft_oracle.core.config import IDENTIFIER_MAX_LENGTH
from nft_oracle.db.base import Base, JSONType


class AuditLogRecord(Base):
    """
    Audit trail of accepted feed writes.
    - Append-only (never UPDATE)
    - Stores request-id, actor, issuer, action, payload hash, and safe payload summary.
    """
    __tablename__ = "audit_log_records"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Correlation
    request_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    route: Mapped[str] = mapped_column(String(256), nullable=False)
    method: Mapped[str] = mapped_column(String(16), nullable=False)

    # Actor / auth context
    actor_participant_id: Mapped[str] = mapped_column(String(128), nullable=False)
    actor_role: Mapped[str] = mapped_column(String(64), nullable=False)

    issuer_id: Mapped[str] = mapped_column(String(IDENTIFIER_MAX_LENGTH), nullable=False)

    # What happened
    action: Mapped[str] = mapped_column(String(96), nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False, server_default=text("'ok'"))

    # Payload traceability (hash + safe summary)
    payload_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    payload_summary_json: Mapped[Dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)

    ref_id: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    __table_args__ = (
        Index("ix_audit_issuer", "issuer_id"),
        Index("ix_audit_action", "action"),
        Index("ix_audit_created", "created_at"),
    )
