# nft_oracle/core/keys.py
from __future__ import annotations

from typing import Optional, Tuple

from nft_oracle.core.config import get_settings


class MalformedKeyError(ValueError):
    """Raised when an (issuer, token) pair cannot be turned into a token key."""


def _check_component(name: str, value: str, max_len: int) -> None:
    if not isinstance(value, str) or not value:
        raise MalformedKeyError(f"{name} must be a non-empty string.")
    if len(value) > max_len:
        raise MalformedKeyError(f"{name} exceeds {max_len} characters.")


def encode_token_key(
    issuer_id: str,
    token_id: str,
    *,
    max_len: Optional[int] = None,
) -> str:
    """
    Composite token key:
      "<len(issuer_id)>:<issuer_id><token_id>"

    The issuer length prefix makes the encoding injective, so separators
    inside either component can never produce a collision.
    """
    limit = max_len if max_len is not None else get_settings().max_identifier_length
    _check_component("issuer_id", issuer_id, limit)
    _check_component("token_id", token_id, limit)
    return f"{len(issuer_id)}:{issuer_id}{token_id}"


def decode_token_key(key: str) -> Tuple[str, str]:
    head, sep, rest = key.partition(":")
    if not sep or not (head.isascii() and head.isdigit()):
        raise MalformedKeyError(f"Not a token key: {key!r}")
    n = int(head)
    if n <= 0 or n >= len(rest):
        raise MalformedKeyError(f"Not a token key: {key!r}")
    return rest[:n], rest[n:]
