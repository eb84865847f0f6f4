from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from nft_oracle.core.config import IDENTIFIER_MAX_LENGTH
from nft_oracle.db.base import Base


class TokenHistory(Base):
    """
    Single most recent previous owner per token key.
    Present only for keys that changed owner at least once; overwritten on every change.
    """

    __tablename__ = "token_history"

    token_key: Mapped[str] = mapped_column(String(1024), primary_key=True)
    previous_owner_id: Mapped[str] = mapped_column(String(IDENTIFIER_MAX_LENGTH), nullable=False)

    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )
