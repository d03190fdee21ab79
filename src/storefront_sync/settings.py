"""Pydantic-settings configuration for Storefront Sync."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SyncConfig(BaseModel):
    """Product integration sync loop."""

    batch_size: int = Field(
        default=50,
        ge=1,
        description="Maximum number of due integrations processed per trigger.",
    )
    currency: str = "ZAR"
    listing_condition: str = "new"


class MarketplaceConfig(BaseModel):
    """Marketplace adapter registration."""

    enable_mock: bool = Field(
        default=False,
        description="Register the mock marketplace adapter (dev / demo only).",
    )
    takealot_api_url: str = "https://api.takealot.com"
    facebook_graph_url: str = "https://graph.facebook.com/v19.0"
    request_timeout_seconds: float = 30.0


class SyncSettings(BaseSettings):
    """Central configuration for the service.

    All values can be overridden via environment variables prefixed
    with ``STOREFRONT_``.  Nested models use ``__`` as a delimiter,
    e.g. ``STOREFRONT_SYNC__BATCH_SIZE``.
    """

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_nested_delimiter="__",
    )

    # -- Core -----------------------------------------------------------------

    host: str = "0.0.0.0"
    port: int = 9100
    debug: bool = False
    api_key: str = Field(
        default="",
        description="Admin bearer key. Empty string disables admin auth (dev only).",
    )
    cron_secret: str = Field(
        default="",
        description="Shared secret for the sync trigger. Empty rejects every trigger.",
    )
    secret_key: str = Field(
        default="",
        description="Fernet passphrase for provider credentials at rest.",
    )
    database_url: str = "sqlite+aiosqlite:///./storefront.db"

    # -- CORS -----------------------------------------------------------------

    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
    )

    # -- Rate limiting --------------------------------------------------------

    rate_limit_per_minute: int = 120
    rate_limit_burst: int = 20

    # -- Feature sub-configs --------------------------------------------------

    sync: SyncConfig = Field(default_factory=SyncConfig)
    marketplaces: MarketplaceConfig = Field(
        default_factory=MarketplaceConfig,
    )
