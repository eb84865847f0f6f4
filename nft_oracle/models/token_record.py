# nft_oracle/models/token_record.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import String, DateTime, Integer, UniqueConstraint, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from nft_oracle.core.config import IDENTIFIER_MAX_LENGTH
from nft_oracle.db.base import Base, JSONType


class TokenRecord(Base):
    """
    Primary store: one row per composite token key.

    - `id` is assigned on first ingestion and never changes, so ordering by it
      yields insertion order even after the record is replaced in place.
    - Rows are never deleted.
    """

    __tablename__ = "token_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    token_key: Mapped[str] = mapped_column(String(1024), nullable=False, unique=True)
    issuer_id: Mapped[str] = mapped_column(String(IDENTIFIER_MAX_LENGTH), nullable=False)
    token_id: Mapped[str] = mapped_column(String(IDENTIFIER_MAX_LENGTH), nullable=False)

    owner_id: Mapped[str] = mapped_column(String(IDENTIFIER_MAX_LENGTH), nullable=False)
    metadata_json: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONType, nullable=True)
    approved_account_ids_json: Mapped[Optional[Dict[str, int]]] = mapped_column(JSONType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("issuer_id", "token_id", name="uq_token_issuer_token"),
        Index("ix_token_owner", "owner_id"),
    )
