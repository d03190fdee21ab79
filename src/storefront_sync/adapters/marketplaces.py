"""Marketplace adapters.

Takealot and Facebook are called over HTTP with ``httpx``. Google
Shopping is feed based, so listing calls only acknowledge the product.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from storefront_sync.adapters.base import (
    AdapterContext,
    InventoryUpdate,
    ListingResult,
    MarketplaceAdapter,
    MarketplaceListing,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


async def _call(
    label: str,
    request: Callable[[httpx.AsyncClient], Awaitable[httpx.Response]],
    ctx: AdapterContext,
) -> httpx.Response | ListingResult:
    """Run *request* with a short-lived client; transport failures become a failed result."""
    try:
        async with httpx.AsyncClient(timeout=ctx.timeout, transport=ctx.transport) as client:
            return await request(client)
    except httpx.HTTPError as exc:
        logger.warning("%s request failed: %s", label, exc)
        return ListingResult(success=False, error=f"{label} request failed: {exc}")


# ---------------------------------------------------------------------------
# Takealot
# ---------------------------------------------------------------------------


class TakealotAdapter(MarketplaceAdapter):
    """Takealot seller API (``apiKey`` + ``sellerId``)."""

    name = "takealot"
    display_name = "Takealot"

    def __init__(self, ctx: AdapterContext, base_url: str = "https://api.takealot.com") -> None:
        super().__init__(ctx)
        self.base_url = ctx.value("apiUrl", base_url).rstrip("/")

    def is_configured(self) -> bool:
        return bool(self.ctx.value("apiKey") and self.ctx.value("sellerId"))

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.ctx.value('apiKey')}",
            "X-Seller-ID": self.ctx.value("sellerId"),
        }

    async def create_or_update_listing(self, listing: MarketplaceListing) -> ListingResult:
        if not self.is_configured():
            return ListingResult(success=False, error="Takealot is not configured")

        payload: dict[str, Any] = {
            "seller_sku": listing.seller_sku or listing.external_id,
            "title": listing.title,
            "description": listing.description,
            "price": float(listing.price),
            "quantity": listing.quantity,
            "category_id": listing.category or "",
            "images": listing.images,
            "condition": listing.condition,
        }
        response = await _call(
            "Takealot",
            lambda c: c.post(f"{self.base_url}/v1/products", json=payload, headers=self._headers()),
            self.ctx,
        )
        if isinstance(response, ListingResult):
            return response
        if response.is_error:
            return ListingResult(
                success=False,
                error=f"Takealot API error: {response.reason_phrase} - {response.text}",
            )
        data = response.json() if response.content else {}
        return ListingResult(success=True, seller_sku=data.get("seller_sku") or payload["seller_sku"])

    async def delete_listing(self, seller_sku: str) -> ListingResult:
        if not self.is_configured():
            return ListingResult(success=False, error="Takealot is not configured")
        response = await _call(
            "Takealot",
            lambda c: c.delete(f"{self.base_url}/v1/products/{seller_sku}", headers=self._headers()),
            self.ctx,
        )
        if isinstance(response, ListingResult):
            return response
        if response.is_error:
            return ListingResult(success=False, error="Failed to delete product")
        return ListingResult(success=True, seller_sku=seller_sku)

    async def update_inventory(self, updates: list[InventoryUpdate]) -> list[ListingResult]:
        results: list[ListingResult] = []
        for update in updates:
            response = await _call(
                "Takealot",
                lambda c, u=update: c.put(
                    f"{self.base_url}/v1/inventory/{u.seller_sku}",
                    json={"quantity": u.quantity},
                    headers=self._headers(),
                ),
                self.ctx,
            )
            if isinstance(response, ListingResult):
                results.append(response)
            elif response.is_error:
                results.append(ListingResult(success=False, seller_sku=update.seller_sku, error="Inventory update failed"))
            else:
                results.append(ListingResult(success=True, seller_sku=update.seller_sku))
        return results


# ---------------------------------------------------------------------------
# Google Shopping
# ---------------------------------------------------------------------------


class GoogleShoppingAdapter(MarketplaceAdapter):
    """Google Merchant Center; products reach Google through the product feed."""

    name = "google-shopping"
    display_name = "Google Shopping"

    def is_configured(self) -> bool:
        return bool(self.ctx.value("merchantId"))

    async def create_or_update_listing(self, listing: MarketplaceListing) -> ListingResult:
        if not self.is_configured():
            return ListingResult(success=False, error="Google Shopping is not configured")
        return ListingResult(success=True, seller_sku=listing.external_id)

    async def delete_listing(self, seller_sku: str) -> ListingResult:
        return ListingResult(success=True, seller_sku=seller_sku)

    async def update_inventory(self, updates: list[InventoryUpdate]) -> list[ListingResult]:
        return [ListingResult(success=True, seller_sku=u.seller_sku) for u in updates]


# ---------------------------------------------------------------------------
# Facebook / Instagram catalog
# ---------------------------------------------------------------------------


class FacebookCatalogAdapter(MarketplaceAdapter):
    """Meta commerce catalog via the Graph API (``catalogId`` + ``accessToken``)."""

    name = "facebook"
    display_name = "Facebook/Instagram Shops"

    def __init__(self, ctx: AdapterContext, graph_url: str = "https://graph.facebook.com/v19.0") -> None:
        super().__init__(ctx)
        self.graph_url = graph_url.rstrip("/")

    def is_configured(self) -> bool:
        return bool(self.ctx.value("catalogId") and self.ctx.value("accessToken"))

    async def create_or_update_listing(self, listing: MarketplaceListing) -> ListingResult:
        if not self.is_configured():
            return ListingResult(success=False, error="Facebook is not configured")

        payload = {
            "access_token": self.ctx.value("accessToken"),
            "retailer_id": listing.external_id,
            "name": listing.title,
            "description": listing.description,
            "image_url": listing.images[0] if listing.images else None,
            "availability": "in stock" if listing.quantity > 0 else "out of stock",
            "condition": listing.condition,
            "price": f"{listing.currency} {listing.price:.2f}",
            "category": listing.category or "",
        }
        response = await _call(
            "Facebook",
            lambda c: c.post(f"{self.graph_url}/{self.ctx.value('catalogId')}/products", json=payload),
            self.ctx,
        )
        if isinstance(response, ListingResult):
            return response
        if response.is_error:
            try:
                message = response.json().get("error", {}).get("message")
            except ValueError:
                message = None
            return ListingResult(success=False, error=message or "Failed to create product")
        return ListingResult(success=True, seller_sku=response.json().get("id") or listing.external_id)

    async def delete_listing(self, seller_sku: str) -> ListingResult:
        if not self.is_configured():
            return ListingResult(success=False, error="Facebook is not configured")
        response = await _call(
            "Facebook",
            lambda c: c.request(
                "DELETE",
                f"{self.graph_url}/{seller_sku}",
                json={"access_token": self.ctx.value("accessToken")},
            ),
            self.ctx,
        )
        if isinstance(response, ListingResult):
            return response
        if response.is_error:
            return ListingResult(success=False, error="Failed to delete product")
        return ListingResult(success=True, seller_sku=seller_sku)

    async def update_inventory(self, updates: list[InventoryUpdate]) -> list[ListingResult]:
        # Availability travels with the product update.
        return [ListingResult(success=True, seller_sku=u.seller_sku) for u in updates]


# ---------------------------------------------------------------------------
# Mock
# ---------------------------------------------------------------------------


class MockMarketplaceAdapter(MarketplaceAdapter):
    """In-memory marketplace for demos and local development."""

    name = "mock"
    display_name = "Mock Marketplace"

    def __init__(self, ctx: AdapterContext | None = None) -> None:
        super().__init__(ctx or AdapterContext())
        self.listings: dict[str, MarketplaceListing] = {}

    def is_configured(self) -> bool:
        return True

    async def create_or_update_listing(self, listing: MarketplaceListing) -> ListingResult:
        self.listings[listing.seller_sku] = listing
        logger.debug("Mock listing stored for %s", listing.seller_sku)
        return ListingResult(success=True, seller_sku=listing.seller_sku)

    async def delete_listing(self, seller_sku: str) -> ListingResult:
        self.listings.pop(seller_sku, None)
        return ListingResult(success=True, seller_sku=seller_sku)

    async def update_inventory(self, updates: list[InventoryUpdate]) -> list[ListingResult]:
        return [ListingResult(success=True, seller_sku=u.seller_sku) for u in updates]
