"""Shared test fixtures for storefront_sync."""

from __future__ import annotations

import itertools
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from httpx import ASGITransport, AsyncClient

from storefront_sync.app import create_app, init_state
from storefront_sync.config.crypto import SecretManager
from storefront_sync.db.engine import (
    create_async_engine,
    create_session_factory,
    create_tables,
)
from storefront_sync.db.models import (
    CategoryRecord,
    ProductIntegrationRecord,
    ProductRecord,
    SupplierRecord,
)
from storefront_sync.settings import MarketplaceConfig, SyncSettings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=UTC)


@pytest.fixture
def settings() -> SyncSettings:
    """In-memory database, admin auth off, mock marketplace on."""
    return SyncSettings(
        database_url="sqlite+aiosqlite://",
        api_key="",
        cron_secret="cron-secret",
        secret_key="test-passphrase",
        rate_limit_per_minute=6000,
        rate_limit_burst=1000,
        marketplaces=MarketplaceConfig(enable_mock=True),
    )


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine("sqlite+aiosqlite://")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def secrets() -> SecretManager:
    return SecretManager("test-passphrase")


@pytest.fixture
def app(settings: SyncSettings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
async def client(app: FastAPI, engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with state wired as the lifespan would."""
    init_state(app, engine)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ======================================================================
# Row factories
# ======================================================================


@pytest.fixture
def make_product(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[ProductRecord]]:
    counter = itertools.count(1)

    async def _make(*, category: str | None = "Cookware", **overrides: Any) -> ProductRecord:
        n = next(counter)
        async with session_factory() as session:
            category_row = None
            if category is not None:
                category_row = CategoryRecord(name=category, slug=f"{category.lower()}-{n}")
                session.add(category_row)
                await session.flush()
            values: dict[str, Any] = {
                "name": f"Product {n}",
                "sku": f"SKU-{n:04d}",
                "description": "A sturdy product",
                "price": Decimal("100.00"),
                "stock_status": "IN_STOCK",
                "image_url": f"https://cdn.test/{n}.jpg",
                "category_id": category_row.id if category_row else None,
                **overrides,
            }
            product = ProductRecord(**values)
            session.add(product)
            await session.commit()
            return product

    return _make


@pytest.fixture
def make_supplier(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[SupplierRecord]]:
    counter = itertools.count(1)

    async def _make(**overrides: Any) -> SupplierRecord:
        n = next(counter)
        values: dict[str, Any] = {"name": f"Supplier {n}", "code": f"SUP{n}", **overrides}
        async with session_factory() as session:
            supplier = SupplierRecord(**values)
            session.add(supplier)
            await session.commit()
            return supplier

    return _make


@pytest.fixture
def make_integration(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[ProductIntegrationRecord]]:
    """Enabled, active, hourly mock-marketplace row that is already due."""

    async def _make(product_id: int, **overrides: Any) -> ProductIntegrationRecord:
        values: dict[str, Any] = {
            "product_id": product_id,
            "integration_type": "marketplace",
            "integration_id": 4,
            "integration_name": "mock",
            "is_enabled": True,
            "is_active": True,
            "reserve_quantity": 0,
            "sync_schedule": "hourly",
            "next_sync_at": NOW - timedelta(hours=1),
            **overrides,
        }
        async with session_factory() as session:
            row = ProductIntegrationRecord(**values)
            session.add(row)
            await session.commit()
            return row

    return _make


@pytest.fixture
def reload_integration(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[int], Awaitable[ProductIntegrationRecord]]:
    async def _reload(integration_id: int) -> ProductIntegrationRecord:
        async with session_factory() as session:
            row = await session.get(ProductIntegrationRecord, integration_id)
            assert row is not None
            return row

    return _reload


# ======================================================================
# CLI
# ======================================================================


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def patch_run_async() -> Any:
    """Patch the CLI's ``run_async`` to return a canned value.

    Usage::

        with patch_run_async({"processed": 0, ...}) as m:
            result = runner.invoke(cli, ["trigger", "--cron-secret", "s"])
    """

    @contextmanager
    def _patch(return_value: Any = None, side_effect: Any = None):  # type: ignore[no-untyped-def]
        def _close_and_apply(coro: Any) -> Any:
            coro.close()
            if side_effect is not None:
                raise side_effect
            return return_value

        with patch("storefront_sync.cli.main.run_async", side_effect=_close_and_apply) as m:
            yield m

    return _patch
