# nft_oracle/services/index_service.py
from __future__ import annotations

from typing import List, Optional, Type, Union

from sqlalchemy import select, delete, func
from sqlalchemy.orm import Session

from nft_oracle.models.index_entries import OwnerIndexEntry, IssuerIndexEntry

IndexModel = Union[Type[OwnerIndexEntry], Type[IssuerIndexEntry]]


class IndexService:
    """
    Bookkeeping for the two secondary indexes (owner buckets, issuer buckets).

    Buckets are implicit: a bucket exists while it has at least one member row,
    so detaching the last key prunes it.
    """

    # ─────────────────────────────────────────────
    # INTERNAL HELPERS
    # ─────────────────────────────────────────────

    @staticmethod
    def _bucket_col(model: IndexModel):
        return model.owner_id if model is OwnerIndexEntry else model.issuer_id

    def _contains(self, db: Session, model: IndexModel, bucket_id: str, token_key: str) -> bool:
        return (
            db.execute(
                select(model.id).where(
                    self._bucket_col(model) == bucket_id,
                    model.token_key == token_key,
                )
            ).first()
            is not None
        )

    def _attach(self, db: Session, model: IndexModel, bucket_id: str, token_key: str) -> bool:
        if self._contains(db, model, bucket_id, token_key):
            return False
        if model is OwnerIndexEntry:
            db.add(OwnerIndexEntry(owner_id=bucket_id, token_key=token_key))
        else:
            db.add(IssuerIndexEntry(issuer_id=bucket_id, token_key=token_key))
        return True

    def _page_keys(
        self,
        db: Session,
        model: IndexModel,
        bucket_id: str,
        *,
        from_index: int,
        limit: Optional[int],
    ) -> List[str]:
        stmt = (
            select(model.token_key)
            .where(self._bucket_col(model) == bucket_id)
            .order_by(model.id.asc())
            .offset(from_index)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(db.execute(stmt).scalars().all())

    def _count(self, db: Session, model: IndexModel, bucket_id: str) -> int:
        return int(
            db.execute(
                select(func.count()).select_from(model).where(self._bucket_col(model) == bucket_id)
            ).scalar_one()
        )

    # ─────────────────────────────────────────────
    # OWNER INDEX
    # ─────────────────────────────────────────────

    def attach_owner(self, db: Session, *, owner_id: str, token_key: str) -> bool:
        """Add token_key to the owner's bucket. Returns False if it was already there."""
        return self._attach(db, OwnerIndexEntry, owner_id, token_key)

    def detach_owner(self, db: Session, *, owner_id: str, token_key: str) -> bool:
        res = db.execute(
            delete(OwnerIndexEntry).where(
                OwnerIndexEntry.owner_id == owner_id,
                OwnerIndexEntry.token_key == token_key,
            )
        )
        return bool(res.rowcount)

    def owner_keys(
        self,
        db: Session,
        *,
        owner_id: str,
        from_index: int = 0,
        limit: Optional[int] = None,
    ) -> List[str]:
        return self._page_keys(db, OwnerIndexEntry, owner_id, from_index=from_index, limit=limit)

    def owner_count(self, db: Session, *, owner_id: str) -> int:
        return self._count(db, OwnerIndexEntry, owner_id)

    # ─────────────────────────────────────────────
    # ISSUER INDEX
    # ─────────────────────────────────────────────

    def attach_issuer(self, db: Session, *, issuer_id: str, token_key: str) -> bool:
        return self._attach(db, IssuerIndexEntry, issuer_id, token_key)

    def issuer_keys(
        self,
        db: Session,
        *,
        issuer_id: str,
        from_index: int = 0,
        limit: Optional[int] = None,
    ) -> List[str]:
        return self._page_keys(db, IssuerIndexEntry, issuer_id, from_index=from_index, limit=limit)

    def issuer_count(self, db: Session, *, issuer_id: str) -> int:
        return self._count(db, IssuerIndexEntry, issuer_id)
