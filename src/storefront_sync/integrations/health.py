"""Read-only health classification of product integrations."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from storefront_sync.db.engine import as_utc
from storefront_sync.db.models import ProductIntegrationRecord
from storefront_sync.integrations.scheduling import expected_interval_hours

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

UNSCHEDULED_STALE_HOURS = 48


class HealthStatus(StrEnum):
    HEALTHY = "healthy"
    WARNING = "warning"
    ERROR = "error"


def classify_health(integration: ProductIntegrationRecord, now: datetime) -> HealthStatus:
    """Derive the health bucket of one integration.

    Any recorded error wins. Otherwise disabled, inactive, never synced
    and stale rows warn. A row is stale once it has gone more than twice
    its schedule's interval without a sync, or 48 hours when it has no
    schedule.
    """
    if integration.error_message:
        return HealthStatus.ERROR
    if not integration.is_enabled or not integration.is_active:
        return HealthStatus.WARNING

    last_synced = as_utc(integration.last_synced_at)
    if last_synced is None:
        return HealthStatus.WARNING

    hours_since = (now - last_synced).total_seconds() / 3600
    if integration.sync_schedule:
        limit = expected_interval_hours(integration.sync_schedule) * 2
    else:
        limit = UNSCHEDULED_STALE_HOURS
    if hours_since > limit:
        return HealthStatus.WARNING
    return HealthStatus.HEALTHY


def _item(integration: ProductIntegrationRecord, health: HealthStatus) -> dict[str, Any]:
    last_synced = as_utc(integration.last_synced_at)
    next_sync = as_utc(integration.next_sync_at)
    return {
        "id": integration.id,
        "productName": integration.product.name,
        "integrationType": integration.integration_type,
        "integrationName": integration.integration_name,
        "isEnabled": integration.is_enabled,
        "isActive": integration.is_active,
        "lastSyncedAt": last_synced.isoformat() if last_synced else None,
        "nextSyncAt": next_sync.isoformat() if next_sync else None,
        "errorMessage": integration.error_message,
        "syncSchedule": integration.sync_schedule,
        "health": health.value,
    }


@dataclass
class HealthReport:
    stats: dict[str, Any]
    integrations: list[dict[str, Any]]


class HealthAggregator:
    """Summarises every integration; statistics ignore the health filter."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def summarize(
        self,
        health_filter: HealthStatus | None = None,
        *,
        now: datetime | None = None,
    ) -> HealthReport:
        now = now or datetime.now(UTC)
        stmt = (
            select(ProductIntegrationRecord)
            .options(selectinload(ProductIntegrationRecord.product))
            .order_by(ProductIntegrationRecord.id)
        )
        rows = (await self._session.execute(stmt)).scalars().all()

        classified = [(row, classify_health(row, now)) for row in rows]
        by_status = Counter(health for _, health in classified)
        by_type = Counter(row.integration_type for row in rows)
        day_ago = now - timedelta(hours=24)

        synced = [as_utc(r.last_synced_at) for r in rows]
        stats = {
            "total": len(rows),
            "enabled": sum(1 for r in rows if r.is_enabled),
            "active": sum(1 for r in rows if r.is_enabled and r.is_active),
            "withErrors": sum(1 for r in rows if r.error_message),
            "lastSyncWithin24h": sum(1 for s in synced if s is not None and s >= day_ago),
            "neverSynced": sum(1 for s in synced if s is None),
            "byType": {
                "supplier": by_type["supplier"],
                "marketplace": by_type["marketplace"],
            },
            "byStatus": {status.value: by_status[status] for status in HealthStatus},
        }
        items = [
            _item(row, health)
            for row, health in classified
            if health_filter is None or health == health_filter
        ]
        return HealthReport(stats=stats, integrations=items)
