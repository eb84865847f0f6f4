# nft_oracle/api/v1/tokens.py
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from nft_oracle.db.session import get_db
from nft_oracle.schemas.tokens import PreviousOwnerResponse, SupplyResponse, TokenView
from nft_oracle.services.query_service import QueryService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/tokens", response_model=List[TokenView])
def list_all_tokens(
    from_index: int = Query(0, ge=0, description="number of elements to skip"),
    limit: Optional[int] = Query(None, ge=0, description="max elements to return; omit for no limit"),
    db: Session = Depends(get_db),
):
    return QueryService().list_all_tokens(db, from_index=from_index, limit=limit)


@router.get("/tokens/supply", response_model=SupplyResponse)
def total_supply(db: Session = Depends(get_db)):
    return {"scope": "all", "scope_id": None, "total": QueryService().total_supply(db)}


@router.get("/tokens/previous-owner", response_model=PreviousOwnerResponse)
def previous_owner(
    issuer_id: str = Query(..., min_length=1),
    token_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    prev = QueryService().previous_owner(db, issuer_id=issuer_id, token_id=token_id)
    return {"issuer_id": issuer_id, "token_id": token_id, "previous_owner_id": prev}


@router.get("/tokens/lookup", response_model=TokenView)
def get_token(
    issuer_id: str = Query(..., min_length=1),
    token_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    view = QueryService().get_token(db, issuer_id=issuer_id, token_id=token_id)
    if view is None:
        raise HTTPException(status_code=404, detail="Token not found.")
    return view


@router.get("/issuers/{issuer_id}/tokens", response_model=List[TokenView])
def list_tokens_by_issuer(
    issuer_id: str,
    from_index: int = Query(0, ge=0, description="number of elements to skip"),
    limit: Optional[int] = Query(None, ge=0, description="max elements to return; omit for no limit"),
    db: Session = Depends(get_db),
):
    rows = QueryService().list_tokens_by_issuer(
        db, issuer_id=issuer_id, from_index=from_index, limit=limit
    )
    logger.debug("[tokens] issuer=%s from=%s limit=%s -> %d", issuer_id, from_index, limit, len(rows))
    return rows


@router.get("/issuers/{issuer_id}/supply", response_model=SupplyResponse)
def supply_for_issuer(issuer_id: str, db: Session = Depends(get_db)):
    total = QueryService().supply_for_issuer(db, issuer_id=issuer_id)
    return {"scope": "issuer", "scope_id": issuer_id, "total": total}


@router.get("/owners/{owner_id}/tokens", response_model=List[TokenView])
def list_tokens_by_owner(
    owner_id: str,
    from_index: int = Query(0, ge=0, description="number of elements to skip"),
    limit: Optional[int] = Query(None, ge=0, description="max elements to return; omit for no limit"),
    db: Session = Depends(get_db),
):
    rows = QueryService().list_tokens_by_owner(
        db, owner_id=owner_id, from_index=from_index, limit=limit
    )
    logger.debug("[tokens] owner=%s from=%s limit=%s -> %d", owner_id, from_index, limit, len(rows))
    return rows


@router.get("/owners/{owner_id}/supply", response_model=SupplyResponse)
def supply_for_owner(owner_id: str, db: Session = Depends(get_db)):
    total = QueryService().supply_for_owner(db, owner_id=owner_id)
    return {"scope": "owner", "scope_id": owner_id, "total": total}
