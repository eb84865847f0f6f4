# nft_oracle/services/ownership_resolver.py
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from nft_oracle.models.token_history import TokenHistory
from nft_oracle.models.token_record import TokenRecord
from nft_oracle.services.index_service import IndexService

logger = logging.getLogger(__name__)


class OwnershipResolver:
    """
    Shared owner-change step used by batch ingestion and single-record updates.

    On a change it records the outgoing owner in history and detaches the key
    from the outgoing owner's bucket. Attaching the key to the new owner's
    bucket and persisting the updated record stay with the caller.
    """

    def __init__(self, index: IndexService | None = None):
        self.index = index or IndexService()

    def resolve_owner_change(
        self,
        db: Session,
        *,
        token_key: str,
        previous_record: TokenRecord,
        new_owner_id: str,
    ) -> bool:
        previous_owner = previous_record.owner_id
        if previous_owner == new_owner_id:
            return False

        hist = db.get(TokenHistory, token_key)
        if hist is None:
            db.add(TokenHistory(token_key=token_key, previous_owner_id=previous_owner))
        else:
            hist.previous_owner_id = previous_owner

        self.index.detach_owner(db, owner_id=previous_owner, token_key=token_key)

        logger.debug(
            "[resolver] key=%s owner %s -> %s", token_key, previous_owner, new_owner_id
        )
        return True
