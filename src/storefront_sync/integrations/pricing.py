"""Price and quantity a marketplace is told about."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from storefront_sync.db.models import ProductIntegrationRecord, ProductRecord

_CENTS = Decimal("0.01")

# Coarse availability per stock status until real inventory counts exist.
STOCK_STATUS_QUANTITY: dict[str, int] = {
    "OUT_OF_STOCK": 0,
    "LOW_STOCK": 10,
}
DEFAULT_STOCK_QUANTITY = 100


def effective_price(integration: ProductIntegrationRecord, product: ProductRecord) -> Decimal:
    """Override if set, else product price plus margin, else product price."""
    if integration.price_override is not None:
        price = Decimal(integration.price_override)
    elif integration.margin_percentage is not None:
        price = Decimal(product.price) * (1 + Decimal(integration.margin_percentage) / 100)
    else:
        price = Decimal(product.price)
    return price.quantize(_CENTS, rounding=ROUND_HALF_UP)


def stock_status_quantity(stock_status: str | None) -> int:
    return STOCK_STATUS_QUANTITY.get(stock_status or "", DEFAULT_STOCK_QUANTITY)


def effective_quantity(integration: ProductIntegrationRecord, product: ProductRecord) -> int:
    """Available units minus the reserve, never below zero."""
    if integration.quantity_override is not None:
        available = integration.quantity_override
    else:
        available = stock_status_quantity(product.stock_status)
    return max(0, available - (integration.reserve_quantity or 0))
