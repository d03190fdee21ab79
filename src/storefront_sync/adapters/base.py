"""Adapter interfaces for marketplaces (outbound) and suppliers (inbound).

Adapters wrap one external API each. They receive the decrypted
configuration for a single call in an :class:`AdapterContext` and do not
touch the database.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from datetime import datetime
    from decimal import Decimal

    import httpx


@dataclass(frozen=True)
class AdapterContext:
    """Stored ``configData`` and ``credentials`` for one provider."""

    config: dict[str, Any] = field(default_factory=dict)
    credentials: dict[str, Any] = field(default_factory=dict)
    timeout: float = 30.0
    transport: httpx.AsyncBaseTransport | None = None

    def value(self, key: str, default: str = "") -> str:
        """Look *key* up in credentials first, then config."""
        raw = self.credentials.get(key) or self.config.get(key)
        return str(raw) if raw else default


@dataclass(frozen=True)
class MarketplaceListing:
    """What a marketplace is told about one product."""

    external_id: str
    seller_sku: str
    title: str
    description: str
    price: Decimal
    currency: str
    quantity: int
    category: str | None = None
    images: list[str] = field(default_factory=list)
    condition: str = "new"


@dataclass(frozen=True)
class ListingResult:
    success: bool
    seller_sku: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class InventoryUpdate:
    seller_sku: str
    quantity: int


@dataclass(frozen=True)
class SupplierProduct:
    """A supplier's view of one product."""

    supplier_sku: str
    name: str
    price: Decimal
    currency: str = "ZAR"
    quantity: int = 0
    description: str | None = None
    category: str | None = None
    images: list[str] = field(default_factory=list)
    lead_time_days: int | None = None
    updated_at: datetime | None = None


class MarketplaceAdapter(ABC):
    """Outbound listing sync for one marketplace."""

    name: str
    display_name: str

    def __init__(self, ctx: AdapterContext) -> None:
        self.ctx = ctx

    @abstractmethod
    def is_configured(self) -> bool:
        """True when every value the API calls need is present."""

    @abstractmethod
    async def create_or_update_listing(self, listing: MarketplaceListing) -> ListingResult:
        """Publish *listing*, creating it on first sync."""

    @abstractmethod
    async def delete_listing(self, seller_sku: str) -> ListingResult: ...

    @abstractmethod
    async def update_inventory(self, updates: list[InventoryUpdate]) -> list[ListingResult]: ...


class SupplierAdapter(ABC):
    """Inbound price and stock lookups against one supplier."""

    name: str
    display_name: str

    @abstractmethod
    def is_configured(self) -> bool: ...

    @abstractmethod
    async def get_product(self, supplier_sku: str) -> SupplierProduct | None:
        """Return the supplier record for *supplier_sku*, or ``None`` if unknown."""

    @abstractmethod
    async def fetch_products(
        self,
        *,
        category: str | None = None,
        updated_since: datetime | None = None,
    ) -> list[SupplierProduct]: ...
