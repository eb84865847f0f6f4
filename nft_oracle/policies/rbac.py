# nft_oracle/policies/rbac.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Set

from nft_oracle.models.enums import PrincipalRole


@dataclass(frozen=True)
class Principal:
    participant_id: str
    role: PrincipalRole
    display_name: str


# --- Core action constants ---
ACTION_INGEST = "INGEST"
ACTION_SET_OWNER = "SET_OWNER"
ACTION_VERIFY_INDEXES = "VERIFY_INDEXES"


def allowed_actions(role: PrincipalRole) -> Set[str]:
    """
    Pure RBAC: which actions a role may attempt.
    Reads are public and need no role.
    """

    if role == PrincipalRole.FEED:
        return {ACTION_INGEST, ACTION_SET_OWNER, ACTION_VERIFY_INDEXES}

    if role == PrincipalRole.AUDITOR:
        return {ACTION_VERIFY_INDEXES}

    return set()


def require_action(principal: Principal, action: str) -> None:
    if action not in allowed_actions(principal.role):
        raise PermissionError(
            f"Role {principal.role.value} not permitted for action {action}."
        )
