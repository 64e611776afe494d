"""Service configuration loaded from PAGEVAULT_* environment variables."""

from __future__ import annotations

import secrets
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from pagevault.vault.models.enums import StateStoreKind


class VaultSettings(BaseSettings):
    """Page vault settings.

    All fields are read from environment variables with the ``PAGEVAULT_``
    prefix.  For example, ``PAGEVAULT_LOG_LEVEL=DEBUG`` maps to ``log_level``.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAGEVAULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"
    log_json: bool = False
    """Emit one JSON object per log line instead of the coloured console format."""

    # -- Event journal ---------------------------------------------------------
    database_url: str | None = None
    """PostgreSQL connection string (psycopg).  Enables the event journal."""

    redis_url: str | None = None
    """Redis connection string.  Enables the event stream."""

    events_stream: str = "pagevault:events"
    events_stream_maxlen: int | None = 100_000

    # -- Snapshot storage ------------------------------------------------------
    data_root: str = "./data"
    data_prefix: str | None = None
    """Optional namespace inserted into snapshot paths: ``{data_root}/{data_prefix}/vaults/...``."""

    state_store: StateStoreKind = StateStoreKind.LOCAL

    # S3 (only when state_store = "s3")
    s3_endpoint: str | None = None
    s3_bucket: str | None = None
    s3_region: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: SecretStr | None = None
    s3_path_style: bool = False
    """Use path-style addressing (required by MinIO and some S3-compatible services)."""

    # -- Vault -----------------------------------------------------------------
    vault_id: str = "default"

    genesis_writer: str | None = None
    """Privileged writer set when the vault is first created.  Defaults to ``operator_account``."""

    genesis_logic_version: str = "v2.0.0"
    """Logic build the vault points at when first created."""

    # -- Auth ------------------------------------------------------------------
    auth_token: str | None = None
    """Bearer token identifying ``operator_account``.  Auto-generated at startup if empty."""

    operator_account: str = "0x" + "1" * 40

    accounts: dict[str, str] = Field(default_factory=dict)
    """Extra bearer tokens, as JSON ``{"token": "account"}``."""

    # -- Server ----------------------------------------------------------------
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8000

    # -- Helpers ---------------------------------------------------------------

    def resolve_auth_token(self) -> str:
        """Return the configured token or generate a random one."""
        if self.auth_token:
            return self.auth_token
        return secrets.token_urlsafe(32)

    def resolve_genesis_writer(self) -> str:
        return self.genesis_writer or self.operator_account

    def token_accounts(self, operator_token: str) -> dict[str, str]:
        """Map every accepted bearer token to the account it authenticates."""
        return {**self.accounts, operator_token: self.operator_account}


@lru_cache(maxsize=1)
def get_settings() -> VaultSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``get_settings.cache_clear()`` in tests to force a
    re-read after overriding env vars.
    """
    return VaultSettings()
