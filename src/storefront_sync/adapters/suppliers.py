"""Supplier adapters."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from storefront_sync.adapters.base import AdapterContext, SupplierAdapter, SupplierProduct
from storefront_sync.exceptions import AdapterError

logger = logging.getLogger(__name__)


class ManualSupplierAdapter(SupplierAdapter):
    """Suppliers whose prices are keyed in by hand; nothing to fetch."""

    name = "manual"
    display_name = "Manual Entry"

    def is_configured(self) -> bool:
        return True

    async def get_product(self, supplier_sku: str) -> SupplierProduct | None:
        return None

    async def fetch_products(
        self,
        *,
        category: str | None = None,
        updated_since: datetime | None = None,
    ) -> list[SupplierProduct]:
        return []


def _parse_product(data: dict[str, Any]) -> SupplierProduct:
    try:
        price = Decimal(str(data.get("price", 0)))
    except InvalidOperation as exc:
        msg = f"Supplier returned an invalid price: {data.get('price')!r}"
        raise AdapterError(msg) from exc

    updated_raw = data.get("updated_at")
    return SupplierProduct(
        supplier_sku=str(data.get("sku") or data.get("supplier_sku") or ""),
        name=str(data.get("name") or data.get("title") or ""),
        price=price,
        currency=data.get("currency") or "ZAR",
        quantity=int(data.get("quantity") or data.get("stock") or 0),
        description=data.get("description"),
        category=data.get("category"),
        images=list(data.get("images") or []),
        lead_time_days=data.get("lead_time_days"),
        updated_at=datetime.fromisoformat(updated_raw) if updated_raw else None,
    )


class ApiSupplierAdapter(SupplierAdapter):
    """Supplier exposing a REST catalog at ``apiUrl`` behind a bearer ``apiKey``."""

    name = "api"
    display_name = "API Integration"

    def __init__(self, ctx: AdapterContext) -> None:
        self.ctx = ctx
        self.api_url = ctx.value("apiUrl").rstrip("/")
        self.api_key = ctx.value("apiKey")

    def is_configured(self) -> bool:
        return bool(self.api_url and self.api_key)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.api_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.ctx.timeout,
            transport=self.ctx.transport,
        )

    async def get_product(self, supplier_sku: str) -> SupplierProduct | None:
        """Fetch one product; a non-2xx answer means the supplier does not carry it."""
        if not self.is_configured():
            return None
        try:
            async with self._client() as client:
                response = await client.get(f"/products/{supplier_sku}")
        except httpx.HTTPError as exc:
            msg = f"Supplier API request failed: {exc}"
            raise AdapterError(msg) from exc

        if response.is_error:
            logger.info("Supplier API has no product %s (HTTP %d)", supplier_sku, response.status_code)
            return None
        return _parse_product(response.json())

    async def fetch_products(
        self,
        *,
        category: str | None = None,
        updated_since: datetime | None = None,
    ) -> list[SupplierProduct]:
        if not self.is_configured():
            return []
        params: dict[str, str] = {}
        if category:
            params["category"] = category
        if updated_since:
            params["updated_since"] = updated_since.isoformat()
        try:
            async with self._client() as client:
                response = await client.get("/products", params=params)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            msg = f"Supplier API request failed: {exc}"
            raise AdapterError(msg) from exc
        return [_parse_product(p) for p in response.json().get("products", [])]
