from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# width of identifier columns; the key length setting may only lower it
IDENTIFIER_MAX_LENGTH = 256


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # ─────────── APP ───────────
    app_name: str = "NFT Ownership Oracle"
    environment: str = "dev"
    log_level: str = "INFO"

    # ─────────── API ───────────
    api_prefix: str = "/api/v1"
    request_id_header: str = "X-Request-Id"

    # ─────────── DATABASE ───────────
    database_url: str

    # ─────────── JWT / AUTH ───────────
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_access_token_minutes: int = 1440  # 24 hours

    # ─────────── INDEXING ───────────
    max_identifier_length: int = Field(IDENTIFIER_MAX_LENGTH, ge=1, le=IDENTIFIER_MAX_LENGTH)
    # "skip": re-ingesting a token with the same owner leaves the stored record untouched.
    # "refresh": metadata/approvals are overwritten, indexes and history are not.
    unchanged_owner_policy: Literal["skip", "refresh"] = "skip"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
