from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, constr

from nft_oracle.core.config import IDENTIFIER_MAX_LENGTH

AccountId = constr(min_length=1, max_length=IDENTIFIER_MAX_LENGTH)
TokenId = constr(min_length=1, max_length=IDENTIFIER_MAX_LENGTH)


class TokenInput(BaseModel):
    """
    One ownership fact as pushed by a feed.
    """
    token_id: TokenId
    owner_id: AccountId
    metadata: Optional[Dict[str, Any]] = Field(default=None, description="opaque token metadata")
    approved_account_ids: Optional[Dict[str, int]] = Field(
        default=None, description="account id -> approval/expiration marker"
    )


class IngestRequest(BaseModel):
    issuer_id: AccountId
    tokens: List[TokenInput] = Field(default_factory=list)


class IngestResponse(BaseModel):
    issuer_id: str
    received: int
    inserted: int
    transferred: int
    unchanged: int
    refreshed: int


class SetOwnerRequest(BaseModel):
    issuer_id: AccountId
    token_id: TokenId
    owner_id: AccountId


class SetOwnerResponse(BaseModel):
    issuer_id: str
    token_id: str
    owner_id: str
    found: bool
    changed: bool


class TokenView(BaseModel):
    issuer_id: str
    token_id: str
    owner_id: str
    metadata: Optional[Dict[str, Any]] = None
    approved_account_ids: Optional[Dict[str, int]] = None


class PreviousOwnerResponse(BaseModel):
    issuer_id: str
    token_id: str
    previous_owner_id: Optional[str] = None


class SupplyResponse(BaseModel):
    scope: str
    scope_id: Optional[str] = None
    total: int


class IndexReportResponse(BaseModel):
    ok: bool
    token_count: int
    missing_issuer_entries: List[str] = Field(default_factory=list)
    missing_owner_entries: List[str] = Field(default_factory=list)
    foreign_owner_entries: List[str] = Field(default_factory=list)
    dangling_index_keys: List[str] = Field(default_factory=list)
    orphan_history_keys: List[str] = Field(default_factory=list)
    mismatched_keys: List[str] = Field(default_factory=list)
