"""Request bodies for the integration admin API."""

from __future__ import annotations

from decimal import Decimal  # noqa: TC003 - Pydantic needs this at runtime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from storefront_sync.integrations.scheduling import SyncSchedule  # noqa: TC001


class IntegrationUpsertRequest(BaseModel):
    """Create or replace one product integration.

    Keyed on ``(product, integrationType, integrationId)``; every rule not
    supplied is reset to its default on update.
    """

    model_config = ConfigDict(populate_by_name=True)

    integration_type: Literal["supplier", "marketplace"] = Field(alias="integrationType")
    integration_id: int = Field(alias="integrationId")
    integration_name: str = Field(alias="integrationName", min_length=1)
    is_enabled: bool | None = Field(default=None, alias="isEnabled")

    price_override: Decimal | None = Field(default=None, alias="priceOverride")
    margin_percentage: Decimal | None = Field(default=None, alias="marginPercentage")
    min_price: Decimal | None = Field(default=None, alias="minPrice")
    max_price: Decimal | None = Field(default=None, alias="maxPrice")

    quantity_override: int | None = Field(default=None, alias="quantityOverride")
    min_quantity: int | None = Field(default=None, alias="minQuantity")
    max_quantity: int | None = Field(default=None, alias="maxQuantity")
    reserve_quantity: int = Field(default=0, alias="reserveQuantity")
    lead_time_days: int | None = Field(default=None, alias="leadTimeDays")

    sync_schedule: SyncSchedule | None = Field(default=None, alias="syncSchedule")
    auto_sync: bool = Field(default=True, alias="autoSync")
    sync_on_price_change: bool = Field(default=True, alias="syncOnPriceChange")
    sync_on_stock_change: bool = Field(default=True, alias="syncOnStockChange")
    custom_config: dict[str, Any] | None = Field(default=None, alias="customConfig")
