# nft_oracle/services/index_audit_service.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from nft_oracle.core.keys import MalformedKeyError, decode_token_key
from nft_oracle.models.index_entries import IssuerIndexEntry, OwnerIndexEntry
from nft_oracle.models.token_history import TokenHistory
from nft_oracle.models.token_record import TokenRecord


@dataclass
class IndexReport:
    token_count: int = 0
    missing_issuer_entries: List[str] = field(default_factory=list)
    missing_owner_entries: List[str] = field(default_factory=list)
    foreign_owner_entries: List[str] = field(default_factory=list)
    dangling_index_keys: List[str] = field(default_factory=list)
    orphan_history_keys: List[str] = field(default_factory=list)
    mismatched_keys: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not (
            self.missing_issuer_entries
            or self.missing_owner_entries
            or self.foreign_owner_entries
            or self.dangling_index_keys
            or self.orphan_history_keys
            or self.mismatched_keys
        )


class IndexAuditService:
    """
    Cross-checks the primary store against both secondary indexes and history.
    Used by auditors; reads only.
    """

    @staticmethod
    def _key_matches(rec: TokenRecord) -> bool:
        """token_key must decode back to the row's own issuer_id/token_id."""
        try:
            return decode_token_key(rec.token_key) == (rec.issuer_id, rec.token_id)
        except MalformedKeyError:
            return False

    def verify(self, db: Session) -> IndexReport:
        records: Dict[str, TokenRecord] = {
            r.token_key: r for r in db.execute(select(TokenRecord)).scalars().all()
        }
        report = IndexReport(token_count=len(records))

        issuer_pairs: Set[Tuple[str, str]] = {
            (issuer_id, key)
            for issuer_id, key in db.execute(select(IssuerIndexEntry.issuer_id, IssuerIndexEntry.token_key))
        }
        owner_rows: List[Tuple[str, str]] = [
            (owner_id, key)
            for owner_id, key in db.execute(
                select(OwnerIndexEntry.owner_id, OwnerIndexEntry.token_key).order_by(OwnerIndexEntry.id)
            )
        ]
        owner_pairs = set(owner_rows)

        for key, rec in records.items():
            if not self._key_matches(rec):
                report.mismatched_keys.append(key)
            if (rec.issuer_id, key) not in issuer_pairs:
                report.missing_issuer_entries.append(key)
            if (rec.owner_id, key) not in owner_pairs:
                report.missing_owner_entries.append(key)

        for owner_id, key in owner_rows:
            rec = records.get(key)
            if rec is not None and rec.owner_id != owner_id:
                report.foreign_owner_entries.append(key)

        indexed_keys = {k for _, k in issuer_pairs} | {k for _, k in owner_pairs}
        report.dangling_index_keys = sorted(k for k in indexed_keys if k not in records)

        history_keys = db.execute(select(TokenHistory.token_key)).scalars().all()
        report.orphan_history_keys = sorted(k for k in history_keys if k not in records)

        return report
