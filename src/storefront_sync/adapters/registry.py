"""Static name -> adapter mapping built once at startup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeAlias

from storefront_sync.adapters.base import AdapterContext
from storefront_sync.adapters.marketplaces import (
    FacebookCatalogAdapter,
    GoogleShoppingAdapter,
    MockMarketplaceAdapter,
    TakealotAdapter,
)
from storefront_sync.adapters.suppliers import ApiSupplierAdapter, ManualSupplierAdapter

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from storefront_sync.adapters.base import MarketplaceAdapter, SupplierAdapter
    from storefront_sync.providers.store import ProviderConfig
    from storefront_sync.settings import MarketplaceConfig

logger = logging.getLogger(__name__)

MarketplaceFactory: TypeAlias = "Callable[[AdapterContext], MarketplaceAdapter]"
SupplierFactory: TypeAlias = "Callable[[AdapterContext], SupplierAdapter]"


class AdapterRegistry:
    """Resolves adapters by provider name.

    Parameters
    ----------
    config:
        Marketplace endpoints and the mock switch.
    transport:
        Optional ``httpx`` transport handed to every adapter (tests use
        ``httpx.MockTransport``).
    """

    def __init__(
        self,
        config: MarketplaceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = config.request_timeout_seconds
        self._transport = transport
        self._marketplaces: dict[str, MarketplaceFactory] = {
            TakealotAdapter.name: lambda ctx: TakealotAdapter(ctx, config.takealot_api_url),
            GoogleShoppingAdapter.name: GoogleShoppingAdapter,
            FacebookCatalogAdapter.name: lambda ctx: FacebookCatalogAdapter(ctx, config.facebook_graph_url),
        }
        if config.enable_mock:
            mock = MockMarketplaceAdapter()
            self._marketplaces[MockMarketplaceAdapter.name] = lambda _ctx: mock
        self._suppliers: dict[str, SupplierFactory] = {
            ManualSupplierAdapter.name: lambda _ctx: ManualSupplierAdapter(),
            ApiSupplierAdapter.name: ApiSupplierAdapter,
        }

    def register_marketplace(self, name: str, factory: MarketplaceFactory) -> None:
        self._marketplaces[name] = factory

    def register_supplier(self, name: str, factory: SupplierFactory) -> None:
        self._suppliers[name] = factory

    @property
    def marketplace_names(self) -> list[str]:
        return list(self._marketplaces)

    def _context(self, config: dict[str, Any] | None, credentials: dict[str, Any] | None) -> AdapterContext:
        return AdapterContext(
            config=dict(config or {}),
            credentials=dict(credentials or {}),
            timeout=self._timeout,
            transport=self._transport,
        )

    def marketplace(self, name: str, stored: ProviderConfig | None = None) -> MarketplaceAdapter | None:
        """Build the adapter for marketplace *name* from its stored configuration."""
        factory = self._marketplaces.get(name)
        if factory is None:
            logger.debug("No marketplace adapter registered for %r", name)
            return None
        if stored is None:
            return factory(self._context(None, None))
        return factory(self._context(stored.config_data, stored.credentials))

    def supplier(self, provider_type: str, provider_config: dict[str, Any] | None = None) -> SupplierAdapter | None:
        factory = self._suppliers.get(provider_type)
        if factory is None:
            logger.debug("No supplier adapter registered for %r", provider_type)
            return None
        return factory(self._context(provider_config, None))
