# nft_oracle/api/v1/feed.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from nft_oracle.core.auth_deps import require_principal_action
from nft_oracle.db.session import get_db
from nft_oracle.policies.rbac import ACTION_INGEST, ACTION_SET_OWNER, Principal
from nft_oracle.schemas.tokens import IngestRequest, IngestResponse, SetOwnerRequest, SetOwnerResponse
from nft_oracle.services.audit_service import AuditAction, audit_event
from nft_oracle.services.ingestion_service import IngestionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/feed")


@router.post("/ingest", response_model=IngestResponse)
def ingest_tokens(
    body: IngestRequest,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_principal_action(ACTION_INGEST)),
):
    """
    Push a batch of current ownership facts for one issuer.
    """
    logger.info(
        "[feed/ingest] principal=%s issuer=%s tokens=%d",
        principal.participant_id,
        body.issuer_id,
        len(body.tokens),
    )

    try:
        result = IngestionService().ingest(
            db, issuer_id=body.issuer_id, records=body.tokens, commit=False
        )
    except ValueError as exc:
        db.rollback()
        logger.warning("[feed/ingest] rejected issuer=%s: %s", body.issuer_id, exc)
        raise HTTPException(status_code=400, detail=str(exc))

    summary = result.as_dict()
    if result.received:
        audit_event(
            db,
            request=request,
            principal=principal,
            issuer_id=body.issuer_id,
            action=AuditAction.TOKENS_INGESTED,
            payload_summary={
                **summary,
                "token_ids": [t.token_id for t in body.tokens],
            },
            commit=False,
        )
        # token changes and their audit row land together or not at all
        db.commit()
    return summary


@router.post("/owner", response_model=SetOwnerResponse)
def set_owner(
    body: SetOwnerRequest,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_principal_action(ACTION_SET_OWNER)),
):
    try:
        update = IngestionService().set_owner(
            db,
            issuer_id=body.issuer_id,
            token_id=body.token_id,
            owner_id=body.owner_id,
            commit=False,
        )
    except ValueError as exc:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(exc))

    if update.changed:
        audit_event(
            db,
            request=request,
            principal=principal,
            issuer_id=body.issuer_id,
            action=AuditAction.OWNER_SET,
            payload_summary={"token_id": body.token_id, "owner_id": body.owner_id},
            ref_id=body.token_id,
            commit=False,
        )
        db.commit()

    return {
        "issuer_id": body.issuer_id,
        "token_id": body.token_id,
        "owner_id": body.owner_id,
        "found": update.found,
        "changed": update.changed,
    }
