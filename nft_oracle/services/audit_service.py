from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy.orm import Session
from starlette.requests import Request

from nft_oracle.core.hashing import payload_hash
from nft_oracle.models.audit_log import AuditLogRecord
from nft_oracle.policies.rbac import Principal


class AuditAction:
    TOKENS_INGESTED = "TOKENS_INGESTED"
    OWNER_SET = "OWNER_SET"


def audit_event(
    db: Session,
    *,
    request: Request,
    principal: Principal,
    issuer_id: str,
    action: str,
    payload_summary: Dict[str, Any],
    status: str = "ok",
    ref_id: Optional[str] = None,
    commit: bool = True,
) -> AuditLogRecord:
    """
    Append-only audit record insert.

    payload_summary holds counts and identifiers only; token metadata is not copied.
    With commit=False the row joins the caller's open transaction.
    """
    rid = getattr(request.state, "request_id", None) or "missing"

    row = AuditLogRecord(
        request_id=rid,
        route=str(request.url.path),
        method=request.method,
        actor_participant_id=principal.participant_id,
        actor_role=principal.role.value,
        issuer_id=issuer_id,
        action=action,
        status=status,
        payload_hash=payload_hash(payload_summary),
        payload_summary_json=payload_summary,
        ref_id=ref_id,
    )
    db.add(row)
    if commit:
        db.commit()
        db.refresh(row)
    else:
        db.flush()
    return row
