# nft_oracle/models/index_entries.py
from __future__ import annotations

from sqlalchemy import String, Integer, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column

from nft_oracle.core.config import IDENTIFIER_MAX_LENGTH
from nft_oracle.db.base import Base


class OwnerIndexEntry(Base):
    """
    Owner bucket membership: token_key is currently owned by owner_id.
    A bucket is the set of rows sharing owner_id, ordered by id.
    """

    __tablename__ = "owner_index_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String(IDENTIFIER_MAX_LENGTH), nullable=False)
    token_key: Mapped[str] = mapped_column(String(1024), nullable=False)

    __table_args__ = (
        UniqueConstraint("owner_id", "token_key", name="uq_owner_index_member"),
        Index("ix_owner_index_bucket", "owner_id", "id"),
        Index("ix_owner_index_key", "token_key"),
    )


class IssuerIndexEntry(Base):
    """
    Issuer bucket membership: token_key was issued by issuer_id.
    """

    __tablename__ = "issuer_index_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    issuer_id: Mapped[str] = mapped_column(String(IDENTIFIER_MAX_LENGTH), nullable=False)
    token_key: Mapped[str] = mapped_column(String(1024), nullable=False)

    __table_args__ = (
        UniqueConstraint("issuer_id", "token_key", name="uq_issuer_index_member"),
        Index("ix_issuer_index_bucket", "issuer_id", "id"),
        Index("ix_issuer_index_key", "token_key"),
    )
