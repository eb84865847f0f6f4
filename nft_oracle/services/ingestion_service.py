# nft_oracle/services/ingestion_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from nft_oracle.core.config import get_settings
from nft_oracle.core.keys import encode_token_key
from nft_oracle.models.enums import IngestOutcome
from nft_oracle.models.token_record import TokenRecord
from nft_oracle.schemas.tokens import TokenInput
from nft_oracle.services.index_service import IndexService
from nft_oracle.services.ownership_resolver import OwnershipResolver

logger = logging.getLogger(__name__)

UNCHANGED_OWNER_POLICIES = ("skip", "refresh")


@dataclass
class IngestResult:
    issuer_id: str
    received: int = 0
    inserted: int = 0
    transferred: int = 0
    unchanged: int = 0
    refreshed: int = 0

    def count(self, outcome: IngestOutcome) -> None:
        setattr(self, outcome.value, getattr(self, outcome.value) + 1)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "issuer_id": self.issuer_id,
            "received": self.received,
            "inserted": self.inserted,
            "transferred": self.transferred,
            "unchanged": self.unchanged,
            "refreshed": self.refreshed,
        }


@dataclass(frozen=True)
class OwnerUpdate:
    found: bool
    changed: bool


class IngestionService:
    """
    Writes ownership facts into the primary store and keeps the owner index,
    issuer index and history in step with it.

    Each call runs in the caller's session and commits once at the end; if
    anything raises, nothing from the call is committed.
    """

    def __init__(
        self,
        *,
        unchanged_owner_policy: Optional[str] = None,
        index: IndexService | None = None,
        resolver: OwnershipResolver | None = None,
    ):
        policy = unchanged_owner_policy or get_settings().unchanged_owner_policy
        if policy not in UNCHANGED_OWNER_POLICIES:
            raise ValueError(f"Unknown unchanged_owner_policy: {policy}")
        self.unchanged_owner_policy = policy
        self.index = index or IndexService()
        self.resolver = resolver or OwnershipResolver(self.index)

    # ─────────────────────────────────────────────
    # INTERNAL HELPERS
    # ─────────────────────────────────────────────

    def _get_record(self, db: Session, token_key: str) -> Optional[TokenRecord]:
        return db.execute(
            select(TokenRecord).where(TokenRecord.token_key == token_key)
        ).scalar_one_or_none()

    def _apply(self, db: Session, *, issuer_id: str, token_key: str, rec: TokenInput) -> IngestOutcome:
        existing = self._get_record(db, token_key)

        if existing is None:
            db.add(
                TokenRecord(
                    token_key=token_key,
                    issuer_id=issuer_id,
                    token_id=rec.token_id,
                    owner_id=rec.owner_id,
                    metadata_json=rec.metadata,
                    approved_account_ids_json=rec.approved_account_ids,
                )
            )
            self.index.attach_issuer(db, issuer_id=issuer_id, token_key=token_key)
            self.index.attach_owner(db, owner_id=rec.owner_id, token_key=token_key)
            return IngestOutcome.inserted

        changed = self.resolver.resolve_owner_change(
            db,
            token_key=token_key,
            previous_record=existing,
            new_owner_id=rec.owner_id,
        )

        if not changed:
            if self.unchanged_owner_policy == "refresh":
                existing.metadata_json = rec.metadata
                existing.approved_account_ids_json = rec.approved_account_ids
                return IngestOutcome.refreshed
            return IngestOutcome.unchanged

        existing.owner_id = rec.owner_id
        existing.metadata_json = rec.metadata
        existing.approved_account_ids_json = rec.approved_account_ids
        self.index.attach_owner(db, owner_id=rec.owner_id, token_key=token_key)
        self.index.attach_issuer(db, issuer_id=issuer_id, token_key=token_key)
        return IngestOutcome.transferred

    # ─────────────────────────────────────────────
    # PUBLIC API
    # ─────────────────────────────────────────────

    def ingest(
        self,
        db: Session,
        *,
        issuer_id: str,
        records: Sequence[TokenInput],
        commit: bool = True,
    ) -> IngestResult:
        """
        Apply a batch of ownership facts for one issuer, in input order.

        - Empty batch: no-op.
        - All keys are built before anything is written, so a malformed
          identifier rejects the whole call (MalformedKeyError).
        - Same owner as stored: handled by the unchanged-owner policy
          ("skip" drops the record, "refresh" rewrites metadata/approvals only).
        - commit=False leaves the changes flushed but uncommitted, so the caller
          can add rows of its own and commit the call as one transaction.
        """
        result = IngestResult(issuer_id=issuer_id, received=len(records))
        if not records:
            return result

        keyed = [(encode_token_key(issuer_id, r.token_id), r) for r in records]

        for token_key, rec in keyed:
            outcome = self._apply(db, issuer_id=issuer_id, token_key=token_key, rec=rec)
            # later records in the same batch must observe this one
            db.flush()
            result.count(outcome)

        if commit:
            db.commit()

        logger.info(
            "[ingest] issuer=%s received=%d inserted=%d transferred=%d unchanged=%d refreshed=%d",
            issuer_id,
            result.received,
            result.inserted,
            result.transferred,
            result.unchanged,
            result.refreshed,
        )
        return result

    def set_owner(
        self,
        db: Session,
        *,
        issuer_id: str,
        token_id: str,
        owner_id: str,
        commit: bool = True,
    ) -> OwnerUpdate:
        """
        Single-record owner update. Unknown tokens are ignored; metadata and
        approvals are kept as stored.
        """
        token_key = encode_token_key(issuer_id, token_id)
        existing = self._get_record(db, token_key)
        if existing is None:
            logger.info("[set_owner] unknown token issuer=%s token=%s, ignored", issuer_id, token_id)
            return OwnerUpdate(found=False, changed=False)

        changed = self.resolver.resolve_owner_change(
            db,
            token_key=token_key,
            previous_record=existing,
            new_owner_id=owner_id,
        )
        if not changed:
            return OwnerUpdate(found=True, changed=False)

        existing.owner_id = owner_id
        self.index.attach_owner(db, owner_id=owner_id, token_key=token_key)
        db.flush()
        if commit:
            db.commit()

        logger.info("[set_owner] issuer=%s token=%s new_owner=%s", issuer_id, token_id, owner_id)
        return OwnerUpdate(found=True, changed=True)
