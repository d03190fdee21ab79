"""Tests for storefront_sync.settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from storefront_sync.settings import MarketplaceConfig, SyncConfig, SyncSettings


class TestSyncConfig:
    def test_defaults(self) -> None:
        cfg = SyncConfig()
        assert cfg.batch_size == 50
        assert cfg.currency == "ZAR"
        assert cfg.listing_condition == "new"

    def test_batch_size_positive(self) -> None:
        with pytest.raises(ValidationError):
            SyncConfig(batch_size=0)


class TestMarketplaceConfig:
    def test_mock_off_by_default(self) -> None:
        assert MarketplaceConfig().enable_mock is False


class TestSyncSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("STOREFRONT_API_KEY", "STOREFRONT_CRON_SECRET", "STOREFRONT_PORT"):
            monkeypatch.delenv(name, raising=False)
        settings = SyncSettings()
        assert settings.port == 9100
        assert settings.api_key == ""
        assert settings.cron_secret == ""
        assert settings.sync.batch_size == 50

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STOREFRONT_CRON_SECRET", "from-env")
        monkeypatch.setenv("STOREFRONT_SYNC__BATCH_SIZE", "10")
        monkeypatch.setenv("STOREFRONT_MARKETPLACES__ENABLE_MOCK", "true")
        settings = SyncSettings()
        assert settings.cron_secret == "from-env"
        assert settings.sync.batch_size == 10
        assert settings.marketplaces.enable_mock is True
