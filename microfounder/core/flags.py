"""
Central feature flags. One file controls every external dependency.

Set via environment variables (prefix FF_) or .env file.
When a flag is OFF, the matching store serves from its in-process
fallback container. Nothing crashes.
"""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeatureFlags(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Auth ─────────────────────────────────────────────────────────
    use_auth: bool = Field(default=True, alias="FF_USE_AUTH")
    # ON  → JWT validated against the provider JWKS. Needs AUTH_DOMAIN, AUTH_AUDIENCE.
    # OFF → Dev user injected (user_id="dev-user"). No token needed.

    # ── Relational store ─────────────────────────────────────────────
    use_database: bool = Field(default=True, alias="FF_USE_DATABASE")
    # ON  → Tables live in DATABASE_URL (PostgreSQL or SQLite).
    # OFF → Rows kept in process memory. Lost on restart.

    # ── Memory store ─────────────────────────────────────────────────
    use_redis: bool = Field(default=True, alias="FF_USE_REDIS")
    # ON  → Agent memory in Redis. Needs REDIS_URL.
    # OFF → Agent memory kept in process memory.

    # ── Object storage ───────────────────────────────────────────────
    use_s3: bool = Field(default=True, alias="FF_USE_S3")
    # ON  → Assets and PRDs go to S3. Needs AWS creds + S3_BUCKET_NAME.
    # OFF → Objects kept in process memory.


@lru_cache
def get_flags() -> FeatureFlags:
    return FeatureFlags()
