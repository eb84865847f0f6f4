# nft_oracle/core/auth_deps.py
from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from nft_oracle.core.security import decode_token
from nft_oracle.models.enums import PrincipalRole
from nft_oracle.policies.rbac import Principal, require_action

bearer = HTTPBearer(auto_error=True)


def get_current_principal(
    request: Request,
    creds: HTTPAuthorizationCredentials = Depends(bearer),
) -> Principal:
    """
    Canonical authentication dependency.

    Guarantees:
    - JWT is valid
    - role and participant_id are present
    - role is a valid PrincipalRole
    """

    try:
        payload = decode_token(creds.credentials)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid or expired token.")

    role = payload.get("role")
    participant_id = payload.get("participant_id")
    display_name = payload.get("display_name") or "Unknown"

    if not role or not participant_id:
        raise HTTPException(status_code=401, detail="Token missing required claims.")

    try:
        role_enum = PrincipalRole(role)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid role in token.")

    principal = Principal(
        participant_id=str(participant_id),
        role=role_enum,
        display_name=str(display_name),
    )

    request.state.principal = principal

    return principal


def require_principal_action(action: str):
    """Dependency factory: authenticated principal allowed to perform `action`."""

    def _dep(principal: Principal = Depends(get_current_principal)) -> Principal:
        try:
            require_action(principal, action)
        except PermissionError as exc:
            raise HTTPException(status_code=403, detail=str(exc))
        return principal

    return _dep
