"""Product integration admin operations and bulk actions."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from storefront_sync.db.engine import as_utc
from storefront_sync.db.models import ProductIntegrationRecord, ProductRecord
from storefront_sync.exceptions import NotFoundError, RequestValidationFailed
from storefront_sync.integrations.scheduling import SyncSchedule, next_sync_time

if TYPE_CHECKING:
    from decimal import Decimal

    from sqlalchemy.ext.asyncio import AsyncSession

    from storefront_sync.integrations.schemas import IntegrationUpsertRequest

logger = logging.getLogger(__name__)

MAX_INTEGRATION_ID = 2**63 - 1


class BulkAction(StrEnum):
    ENABLE = "enable"
    DISABLE = "disable"
    SYNC = "sync"


class StatusFilter(StrEnum):
    ENABLED = "enabled"
    DISABLED = "disabled"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Input coercion
# ---------------------------------------------------------------------------


def parse_bulk_action(action: Any) -> BulkAction:
    try:
        return BulkAction(action)
    except (TypeError, ValueError):
        msg = "Invalid action type"
        raise RequestValidationFailed(msg) from None


def coerce_integration_ids(raw: Any) -> list[int]:
    """Accept a non-empty list of positive 64-bit ints or numeric strings; booleans are rejected."""
    if not isinstance(raw, list) or not raw:
        msg = "No integration IDs provided"
        raise RequestValidationFailed(msg)

    ids: list[int] = []
    for value in raw:
        msg = f"Invalid integration ID: {value!r}"
        if isinstance(value, bool) or not isinstance(value, int | str):
            raise RequestValidationFailed(msg)
        try:
            integration_id = int(value)
        except ValueError:
            raise RequestValidationFailed(msg) from None
        if not 0 < integration_id <= MAX_INTEGRATION_ID:
            raise RequestValidationFailed(msg)
        ids.append(integration_id)
    return ids


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


def _number(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def _iso(value: datetime | None) -> str | None:
    value = as_utc(value)
    return value.isoformat() if value else None


def integration_detail(row: ProductIntegrationRecord) -> dict[str, Any]:
    return {
        "id": row.id,
        "productId": row.product_id,
        "integrationType": row.integration_type,
        "integrationId": row.integration_id,
        "integrationName": row.integration_name,
        "isEnabled": row.is_enabled,
        "isActive": row.is_active,
        "priceOverride": _number(row.price_override),
        "marginPercentage": _number(row.margin_percentage),
        "minPrice": _number(row.min_price),
        "maxPrice": _number(row.max_price),
        "quantityOverride": row.quantity_override,
        "minQuantity": row.min_quantity,
        "maxQuantity": row.max_quantity,
        "reserveQuantity": row.reserve_quantity,
        "leadTimeDays": row.lead_time_days,
        "syncSchedule": row.sync_schedule,
        "autoSync": row.auto_sync,
        "syncOnPriceChange": row.sync_on_price_change,
        "syncOnStockChange": row.sync_on_stock_change,
        "customConfig": row.custom_config,
        "errorMessage": row.error_message,
        "lastSyncedAt": _iso(row.last_synced_at),
        "nextSyncAt": _iso(row.next_sync_at),
    }


def integration_summary(row: ProductIntegrationRecord) -> dict[str, Any]:
    return {
        "id": row.id,
        "productId": row.product_id,
        "productName": row.product.name,
        "integrationType": row.integration_type,
        "integrationName": row.integration_name,
        "isEnabled": row.is_enabled,
        "isActive": row.is_active,
        "lastSyncedAt": _iso(row.last_synced_at),
        "errorMessage": row.error_message,
    }


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class IntegrationService:
    """Reads and writes ``product_integrations`` on behalf of the admin API."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_product(self, product_id: int) -> list[ProductIntegrationRecord]:
        stmt = (
            select(ProductIntegrationRecord)
            .where(ProductIntegrationRecord.product_id == product_id)
            .order_by(
                ProductIntegrationRecord.integration_type,
                ProductIntegrationRecord.integration_name,
            )
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def upsert_for_product(
        self,
        product_id: int,
        payload: IntegrationUpsertRequest,
        *,
        now: datetime | None = None,
    ) -> ProductIntegrationRecord:
        """Create or replace the integration keyed by product, type and target id.

        The row is enabled and activated together. ``next_sync_at`` is only
        scheduled for enabled rows on a non-manual schedule.
        """
        if await self._session.get(ProductRecord, product_id) is None:
            msg = f"Product {product_id} not found"
            raise NotFoundError(msg)

        now = now or datetime.now(UTC)
        enabled = bool(payload.is_enabled)
        schedule = payload.sync_schedule.value if payload.sync_schedule else None
        next_sync_at = (
            next_sync_time(schedule, now)
            if enabled and schedule and schedule != SyncSchedule.MANUAL
            else None
        )

        stmt = select(ProductIntegrationRecord).where(
            ProductIntegrationRecord.product_id == product_id,
            ProductIntegrationRecord.integration_type == payload.integration_type,
            ProductIntegrationRecord.integration_id == payload.integration_id,
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            row = ProductIntegrationRecord(
                product_id=product_id,
                integration_type=payload.integration_type,
                integration_id=payload.integration_id,
                created_at=now,
            )
            self._session.add(row)
        else:
            row.error_message = None
            row.updated_at = now

        row.integration_name = payload.integration_name
        row.is_enabled = enabled
        row.is_active = enabled
        row.price_override = payload.price_override
        row.margin_percentage = payload.margin_percentage
        row.min_price = payload.min_price
        row.max_price = payload.max_price
        row.quantity_override = payload.quantity_override
        row.min_quantity = payload.min_quantity
        row.max_quantity = payload.max_quantity
        row.reserve_quantity = payload.reserve_quantity
        row.lead_time_days = payload.lead_time_days
        row.sync_schedule = schedule
        row.next_sync_at = next_sync_at
        row.auto_sync = payload.auto_sync
        row.sync_on_price_change = payload.sync_on_price_change
        row.sync_on_stock_change = payload.sync_on_stock_change
        row.custom_config = payload.custom_config or None

        await self._session.commit()
        await self._session.refresh(row)
        logger.info(
            "Saved %s integration %s for product %s",
            row.integration_type,
            row.integration_name,
            product_id,
        )
        return row

    async def list_integrations(
        self,
        integration_type: str | None = None,
        status: StatusFilter | None = None,
    ) -> list[ProductIntegrationRecord]:
        """All integrations, ordered by product name then type."""
        stmt = (
            select(ProductIntegrationRecord)
            .join(ProductRecord, ProductIntegrationRecord.product_id == ProductRecord.id)
            .options(selectinload(ProductIntegrationRecord.product))
            .order_by(ProductRecord.name, ProductIntegrationRecord.integration_type)
        )
        if integration_type:
            stmt = stmt.where(ProductIntegrationRecord.integration_type == integration_type)
        if status == StatusFilter.ENABLED:
            stmt = stmt.where(ProductIntegrationRecord.is_enabled.is_(True))
        elif status == StatusFilter.DISABLED:
            stmt = stmt.where(ProductIntegrationRecord.is_enabled.is_(False))
        elif status == StatusFilter.ERROR:
            stmt = stmt.where(ProductIntegrationRecord.error_message.is_not(None))
        return list((await self._session.execute(stmt)).scalars().all())

    async def perform_bulk_action(
        self,
        action: BulkAction,
        integration_ids: list[int],
        *,
        now: datetime | None = None,
    ) -> int:
        """Apply *action* to the given ids and return the number of rows matched.

        ``disable`` counts every matching id whatever its current state;
        ``sync`` only touches rows that are enabled.
        """
        stmt = update(ProductIntegrationRecord).where(ProductIntegrationRecord.id.in_(integration_ids))
        if action == BulkAction.ENABLE:
            stmt = stmt.values(is_enabled=True)
        elif action == BulkAction.DISABLE:
            stmt = stmt.values(is_enabled=False, is_active=False)
        else:
            stmt = stmt.where(ProductIntegrationRecord.is_enabled.is_(True)).values(
                next_sync_at=now or datetime.now(UTC),
                error_message=None,
            )

        result = await self._session.execute(stmt.execution_options(synchronize_session=False))
        await self._session.commit()
        affected = int(result.rowcount or 0)  # type: ignore[attr-defined]
        logger.info("Bulk %s affected %d integration(s)", action.value, affected)
        return affected
