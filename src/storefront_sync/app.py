"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

import storefront_sync
from storefront_sync.adapters.registry import AdapterRegistry
from storefront_sync.config.crypto import SecretManager
from storefront_sync.db.engine import (
    create_async_engine,
    create_session_factory,
    create_tables,
)
from storefront_sync.health.router import router as health_router
from storefront_sync.integrations.cron import router as cron_router
from storefront_sync.integrations.router import router as integrations_router
from storefront_sync.integrations.sync import SyncRunner
from storefront_sync.middleware.auth import AdminAuthMiddleware
from storefront_sync.middleware.correlation import CorrelationIdMiddleware
from storefront_sync.middleware.errors import (
    CatchAllErrorMiddleware,
    register_error_handlers,
)
from storefront_sync.middleware.logging import setup_logging
from storefront_sync.middleware.rate_limit import RateLimitMiddleware
from storefront_sync.providers.router import router as providers_router
from storefront_sync.providers.store import ProviderConfigStore
from storefront_sync.settings import SyncSettings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    import httpx
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


def init_state(
    app: FastAPI,
    engine: AsyncEngine,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Attach the engine and everything built on it to ``app.state``."""
    settings: SyncSettings = app.state.settings
    session_factory = create_session_factory(engine)
    secret_manager = SecretManager(settings.secret_key)
    registry = AdapterRegistry(settings.marketplaces, transport=transport)

    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.secret_manager = secret_manager
    app.state.adapter_registry = registry
    app.state.sync_runner = SyncRunner(
        session_factory,
        registry,
        lambda session: ProviderConfigStore(session, secret_manager),
        batch_size=settings.sync.batch_size,
        currency=settings.sync.currency,
        condition=settings.sync.listing_condition,
    )


def _redacted(database_url: str) -> str:
    if "@" not in database_url:
        return database_url
    credentials, host = database_url.split("@", 1)
    return credentials.rsplit(":", 1)[0] + ":***@" + host


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: SyncSettings = app.state.settings

    engine = create_async_engine(settings.database_url)
    await create_tables(engine)
    init_state(app, engine)
    logger.info("Storefront sync started (database=%s)", _redacted(settings.database_url))

    yield

    await engine.dispose()
    logger.info("Storefront sync shut down")


def create_app(settings: SyncSettings | None = None) -> FastAPI:
    """Build and return the configured FastAPI application."""
    if settings is None:
        settings = SyncSettings()

    setup_logging(logging.DEBUG if settings.debug else logging.INFO)

    app = FastAPI(
        title="Storefront Sync",
        version=storefront_sync.__version__,
        lifespan=_lifespan,
    )
    app.state.settings = settings

    # Outer -> inner: Correlation, CatchAll, CORS, Auth, RateLimit.
    # Starlette wraps in reverse order of registration.
    app.add_middleware(
        RateLimitMiddleware,
        per_minute=settings.rate_limit_per_minute,
        burst=settings.rate_limit_burst,
    )
    app.add_middleware(AdminAuthMiddleware, api_key=settings.api_key)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CatchAllErrorMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(cron_router)
    app.include_router(providers_router)
    app.include_router(integrations_router)

    return app
