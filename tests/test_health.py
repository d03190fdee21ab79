"""Tests for storefront_sync.integrations.health."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import pytest

from storefront_sync.db.models import ProductIntegrationRecord
from storefront_sync.integrations.health import HealthAggregator, HealthStatus, classify_health

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=UTC)


def _row(**kwargs: Any) -> ProductIntegrationRecord:
    values: dict[str, Any] = {
        "is_enabled": True,
        "is_active": True,
        "sync_schedule": "hourly",
        "last_synced_at": NOW - timedelta(minutes=30),
        "error_message": None,
    }
    values.update(kwargs)
    return ProductIntegrationRecord(**values)


# ======================================================================
# classify_health
# ======================================================================


class TestClassifyHealth:
    def test_healthy(self) -> None:
        assert classify_health(_row(), NOW) == HealthStatus.HEALTHY

    def test_error_wins(self) -> None:
        row = _row(error_message="boom", is_enabled=False, last_synced_at=None)
        assert classify_health(row, NOW) == HealthStatus.ERROR

    @pytest.mark.parametrize(
        "overrides",
        [{"is_enabled": False}, {"is_active": False}, {"last_synced_at": None}],
    )
    def test_warning_states(self, overrides: dict[str, Any]) -> None:
        assert classify_health(_row(**overrides), NOW) == HealthStatus.WARNING

    @pytest.mark.parametrize(
        ("schedule", "age", "expected"),
        [
            ("hourly", timedelta(hours=2), HealthStatus.HEALTHY),
            ("hourly", timedelta(hours=2, minutes=1), HealthStatus.WARNING),
            ("daily", timedelta(hours=47), HealthStatus.HEALTHY),
            ("daily", timedelta(hours=49), HealthStatus.WARNING),
            ("weekly", timedelta(days=13), HealthStatus.HEALTHY),
            ("weekly", timedelta(days=15), HealthStatus.WARNING),
            ("manual", timedelta(hours=47), HealthStatus.HEALTHY),
            ("realtime", timedelta(hours=49), HealthStatus.WARNING),
            (None, timedelta(hours=47), HealthStatus.HEALTHY),
            (None, timedelta(hours=49), HealthStatus.WARNING),
        ],
    )
    def test_staleness(self, schedule: str | None, age: timedelta, expected: HealthStatus) -> None:
        row = _row(sync_schedule=schedule, last_synced_at=NOW - age)
        assert classify_health(row, NOW) == expected

    def test_naive_timestamp(self) -> None:
        row = _row(last_synced_at=(NOW - timedelta(minutes=5)).replace(tzinfo=None))
        assert classify_health(row, NOW) == HealthStatus.HEALTHY


# ======================================================================
# HealthAggregator
# ======================================================================


class TestHealthAggregator:
    async def test_empty(self, session: AsyncSession) -> None:
        report = await HealthAggregator(session).summarize(now=NOW)
        assert report.integrations == []
        assert report.stats["total"] == 0
        assert report.stats["byStatus"] == {"healthy": 0, "warning": 0, "error": 0}

    async def test_stats(
        self,
        session: AsyncSession,
        make_product: Any,
        make_integration: Any,
    ) -> None:
        product = await make_product(name="Skillet")
        await make_integration(product.id, last_synced_at=NOW - timedelta(minutes=10))
        await make_integration(product.id, error_message="boom", last_synced_at=NOW - timedelta(hours=30))
        await make_integration(product.id, is_enabled=False, is_active=False)
        await make_integration(
            product.id,
            integration_type="supplier",
            integration_id=1,
            integration_name="Acme",
            sync_schedule="daily",
            last_synced_at=NOW - timedelta(hours=1),
        )

        report = await HealthAggregator(session).summarize(now=NOW)

        assert report.stats == {
            "total": 4,
            "enabled": 3,
            "active": 3,
            "withErrors": 1,
            "lastSyncWithin24h": 2,
            "neverSynced": 1,
            "byType": {"supplier": 1, "marketplace": 3},
            "byStatus": {"healthy": 2, "warning": 1, "error": 1},
        }
        first = report.integrations[0]
        assert first["productName"] == "Skillet"
        assert first["health"] == "healthy"
        assert first["lastSyncedAt"] == (NOW - timedelta(minutes=10)).isoformat()

    async def test_filter_does_not_change_stats(
        self,
        session: AsyncSession,
        make_product: Any,
        make_integration: Any,
    ) -> None:
        product = await make_product()
        await make_integration(product.id, last_synced_at=NOW)
        await make_integration(product.id, error_message="boom")

        report = await HealthAggregator(session).summarize(HealthStatus.ERROR, now=NOW)

        assert report.stats["total"] == 2
        assert [i["health"] for i in report.integrations] == ["error"]
