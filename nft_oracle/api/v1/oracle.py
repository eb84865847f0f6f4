from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from nft_oracle.core.auth_deps import require_principal_action
from nft_oracle.db.session import get_db
from nft_oracle.policies.rbac import ACTION_VERIFY_INDEXES, Principal
from nft_oracle.schemas.tokens import IndexReportResponse
from nft_oracle.services.index_audit_service import IndexAuditService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/oracle")


@router.get("/verify", response_model=IndexReportResponse)
def verify_indexes(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_principal_action(ACTION_VERIFY_INDEXES)),
):
    """
    Auditor-grade consistency check of primary store vs. indexes and history.
    """
    report = IndexAuditService().verify(db)
    logger.info(
        "[oracle/verify] principal=%s tokens=%d ok=%s",
        principal.participant_id,
        report.token_count,
        report.ok,
    )
    return {
        "ok": report.ok,
        "token_count": report.token_count,
        "missing_issuer_entries": report.missing_issuer_entries,
        "missing_owner_entries": report.missing_owner_entries,
        "foreign_owner_entries": report.foreign_owner_entries,
        "dangling_index_keys": report.dangling_index_keys,
        "orphan_history_keys": report.orphan_history_keys,
        "mismatched_keys": report.mismatched_keys,
    }
