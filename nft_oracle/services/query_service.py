# nft_oracle/services/query_service.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from nft_oracle.core.keys import MalformedKeyError, encode_token_key
from nft_oracle.models.token_history import TokenHistory
from nft_oracle.models.token_record import TokenRecord
from nft_oracle.schemas.tokens import TokenView
from nft_oracle.services.index_service import IndexService

logger = logging.getLogger(__name__)


def paginate_bounds(from_index: Optional[int], limit: Optional[int]) -> Tuple[int, Optional[int]]:
    """
    Normalise pagination arguments.
    from_index defaults to 0; limit None means "no limit".
    """
    start = 0 if from_index is None else int(from_index)
    if start < 0:
        raise ValueError("from_index must be >= 0.")
    if limit is not None:
        limit = int(limit)
        if limit < 0:
            raise ValueError("limit must be >= 0.")
    return start, limit


def to_view(rec: TokenRecord) -> TokenView:
    return TokenView(
        issuer_id=rec.issuer_id,
        token_id=rec.token_id,
        owner_id=rec.owner_id,
        metadata=rec.metadata_json,
        approved_account_ids=rec.approved_account_ids_json,
    )


class QueryService:
    """
    Read-only views over the primary store and the secondary indexes.

    Pagination is offset-based over live tables, not a snapshot: writes
    between two page requests can shift elements across page boundaries.
    """

    def __init__(self, index: IndexService | None = None):
        self.index = index or IndexService()

    # ─────────────────────────────────────────────
    # INTERNAL HELPERS
    # ─────────────────────────────────────────────

    def _resolve_keys(self, db: Session, keys: List[str]) -> List[TokenView]:
        if not keys:
            return []
        rows = db.execute(
            select(TokenRecord).where(TokenRecord.token_key.in_(keys))
        ).scalars().all()
        by_key: Dict[str, TokenRecord] = {r.token_key: r for r in rows}

        out: List[TokenView] = []
        for k in keys:
            rec = by_key.get(k)
            if rec is None:
                logger.warning("[query] index key %s has no primary record, skipped", k)
                continue
            out.append(to_view(rec))
        return out

    # ─────────────────────────────────────────────
    # LISTINGS
    # ─────────────────────────────────────────────

    def list_all_tokens(
        self,
        db: Session,
        *,
        from_index: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[TokenView]:
        start, lim = paginate_bounds(from_index, limit)
        stmt = select(TokenRecord).order_by(TokenRecord.id.asc()).offset(start)
        if lim is not None:
            stmt = stmt.limit(lim)
        return [to_view(r) for r in db.execute(stmt).scalars().all()]

    def list_tokens_by_issuer(
        self,
        db: Session,
        *,
        issuer_id: str,
        from_index: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[TokenView]:
        start, lim = paginate_bounds(from_index, limit)
        keys = self.index.issuer_keys(db, issuer_id=issuer_id, from_index=start, limit=lim)
        return self._resolve_keys(db, keys)

    def list_tokens_by_owner(
        self,
        db: Session,
        *,
        owner_id: str,
        from_index: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[TokenView]:
        start, lim = paginate_bounds(from_index, limit)
        keys = self.index.owner_keys(db, owner_id=owner_id, from_index=start, limit=lim)
        return self._resolve_keys(db, keys)

    # ─────────────────────────────────────────────
    # POINT LOOKUPS
    # ─────────────────────────────────────────────

    def previous_owner(self, db: Session, *, issuer_id: str, token_id: str) -> Optional[str]:
        """
        Owner immediately before the current one, or None if the token never
        changed owner (or was never ingested).
        """
        try:
            token_key = encode_token_key(issuer_id, token_id)
        except MalformedKeyError:
            return None
        hist = db.get(TokenHistory, token_key)
        return hist.previous_owner_id if hist else None

    def get_token(self, db: Session, *, issuer_id: str, token_id: str) -> Optional[TokenView]:
        try:
            token_key = encode_token_key(issuer_id, token_id)
        except MalformedKeyError:
            return None
        rec = db.execute(
            select(TokenRecord).where(TokenRecord.token_key == token_key)
        ).scalar_one_or_none()
        return to_view(rec) if rec else None

    # ─────────────────────────────────────────────
    # SUPPLY
    # ─────────────────────────────────────────────

    def total_supply(self, db: Session) -> int:
        return int(db.execute(select(func.count()).select_from(TokenRecord)).scalar_one())

    def supply_for_issuer(self, db: Session, *, issuer_id: str) -> int:
        return self.index.issuer_count(db, issuer_id=issuer_id)

    def supply_for_owner(self, db: Session, *, owner_id: str) -> int:
        return self.index.owner_count(db, owner_id=owner_id)
