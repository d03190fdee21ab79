"""Batch sync of due product integrations.

One :meth:`SyncRunner.run` call selects up to ``batch_size`` due rows and
processes them one after another in id order. Every row is written in its
own session and transaction, so one failure never undoes or blocks the
bookkeeping of another.

A failed row keeps its ``next_sync_at`` and is therefore picked up again
by the next run. Two overlapping runs can select the same rows; the
later write wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from storefront_sync.adapters.base import MarketplaceListing
from storefront_sync.db.models import (
    ProductIntegrationRecord,
    ProductRecord,
    SupplierRecord,
)
from storefront_sync.exceptions import AdapterError, NotFoundError, SyncBatchError
from storefront_sync.integrations.pricing import effective_price, effective_quantity
from storefront_sync.integrations.scheduling import SyncSchedule, next_sync_time

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from storefront_sync.adapters.registry import AdapterRegistry
    from storefront_sync.providers.store import ProviderConfigStore

logger = logging.getLogger(__name__)

MARKETPLACE = "marketplace"
SUPPLIER = "supplier"


@dataclass
class SyncResult:
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "processed": self.processed,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "errors": list(self.errors),
        }


def build_listing(
    integration: ProductIntegrationRecord,
    *,
    currency: str = "ZAR",
    condition: str = "new",
) -> MarketplaceListing:
    product = integration.product
    return MarketplaceListing(
        external_id=str(product.id),
        seller_sku=product.sku,
        title=product.name,
        description=product.description or "",
        price=effective_price(integration, product),
        currency=currency,
        quantity=effective_quantity(integration, product),
        category=product.category.name if product.category else None,
        images=[product.image_url] if product.image_url else [],
        condition=condition,
    )


class SyncRunner:
    """Runs one sync pass over due integrations.

    Parameters
    ----------
    session_factory:
        Source of sessions for the selection query and per-row writes.
    registry:
        Adapter lookup for marketplaces and suppliers.
    provider_store_factory:
        Builds a :class:`ProviderConfigStore` on a session; marketplace
        adapters are configured from the stored ``marketplace`` configs.
    batch_size:
        Maximum rows per run.
    currency, condition:
        Fixed listing attributes sent to marketplaces.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        registry: AdapterRegistry,
        provider_store_factory: Callable[[AsyncSession], ProviderConfigStore],
        *,
        batch_size: int = 50,
        currency: str = "ZAR",
        condition: str = "new",
    ) -> None:
        self._session_factory = session_factory
        self._registry = registry
        self._store_factory = provider_store_factory
        self._batch_size = batch_size
        self._currency = currency
        self._condition = condition

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def run(self, now: datetime | None = None) -> SyncResult:
        """Sync every due integration once and report the outcome.

        Raises :class:`SyncBatchError` only when the due rows cannot be read.
        """
        now = now or datetime.now(UTC)
        due = await self._select_due(now)
        logger.info("Sync run started: %d due integration(s)", len(due))

        result = SyncResult()
        for integration in due:
            result.processed += 1
            try:
                await self._sync_one(integration, now)
            except Exception as exc:
                message = str(exc) or type(exc).__name__
                logger.warning(
                    "Sync failed for integration %s (%s %s): %s",
                    integration.id,
                    integration.integration_type,
                    integration.integration_name,
                    message,
                )
                await self._record_failure(integration.id, message)
                result.failed += 1
                result.errors.append(f"{integration.integration_name}: {message}")
            else:
                result.succeeded += 1

        logger.info(
            "Sync run finished: processed=%d succeeded=%d failed=%d",
            result.processed,
            result.succeeded,
            result.failed,
        )
        return result

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    async def _select_due(self, now: datetime) -> list[ProductIntegrationRecord]:
        stmt = (
            select(ProductIntegrationRecord)
            .where(
                ProductIntegrationRecord.is_enabled.is_(True),
                ProductIntegrationRecord.is_active.is_(True),
                or_(
                    ProductIntegrationRecord.next_sync_at <= now,
                    and_(
                        ProductIntegrationRecord.sync_schedule == SyncSchedule.REALTIME.value,
                        ProductIntegrationRecord.last_synced_at.is_(None),
                    ),
                ),
            )
            .options(
                selectinload(ProductIntegrationRecord.product).selectinload(ProductRecord.category),
                selectinload(ProductIntegrationRecord.product).selectinload(ProductRecord.supplier),
            )
            .order_by(ProductIntegrationRecord.id)
            .limit(self._batch_size)
        )
        try:
            async with self._session_factory() as session:
                return list((await session.execute(stmt)).scalars().all())
        except SQLAlchemyError as exc:
            logger.exception("Could not load due integrations")
            raise SyncBatchError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Per-integration processing
    # ------------------------------------------------------------------

    async def _sync_one(self, integration: ProductIntegrationRecord, now: datetime) -> None:
        async with self._session_factory() as session:
            if integration.integration_type == MARKETPLACE:
                await self._sync_marketplace(session, integration)
            elif integration.integration_type == SUPPLIER:
                await self._sync_supplier(session, integration, now)

            await session.execute(
                update(ProductIntegrationRecord)
                .where(ProductIntegrationRecord.id == integration.id)
                .values(
                    last_synced_at=now,
                    next_sync_at=next_sync_time(integration.sync_schedule, now),
                    error_message=None,
                )
            )
            await session.commit()

    async def _sync_marketplace(self, session: AsyncSession, integration: ProductIntegrationRecord) -> None:
        name = integration.integration_name
        stored = await self._store_factory(session).get(MARKETPLACE, name)
        adapter = self._registry.marketplace(name, stored)
        if adapter is None or not adapter.is_configured():
            msg = f"Marketplace provider {name} not configured"
            raise AdapterError(msg)

        listing = build_listing(integration, currency=self._currency, condition=self._condition)
        outcome = await adapter.create_or_update_listing(listing)
        if not outcome.success:
            raise AdapterError(outcome.error or f"{adapter.display_name} rejected the listing")
        logger.debug("Listed product %s on %s as %s", listing.external_id, name, outcome.seller_sku)

    async def _sync_supplier(
        self,
        session: AsyncSession,
        integration: ProductIntegrationRecord,
        now: datetime,
    ) -> None:
        supplier = await session.get(SupplierRecord, integration.integration_id)
        if supplier is None:
            msg = f"Supplier {integration.integration_id} not found"
            raise NotFoundError(msg)

        provider_type = supplier.provider_type or "manual"
        adapter = self._registry.supplier(provider_type, supplier.provider_config)
        if adapter is None or not adapter.is_configured():
            msg = f"Supplier provider {provider_type} not configured"
            raise AdapterError(msg)

        product = integration.product
        remote = await adapter.get_product(product.supplier_sku or product.sku)
        if remote is None:
            return
        await session.execute(
            update(ProductRecord)
            .where(ProductRecord.id == product.id)
            .values(supplier_price=remote.price, last_synced_at=now)
        )

    async def _record_failure(self, integration_id: int, message: str) -> None:
        try:
            async with self._session_factory() as session:
                await session.execute(
                    update(ProductIntegrationRecord)
                    .where(ProductIntegrationRecord.id == integration_id)
                    .values(error_message=message)
                )
                await session.commit()
        except SQLAlchemyError:
            logger.exception("Could not record failure for integration %s", integration_id)
