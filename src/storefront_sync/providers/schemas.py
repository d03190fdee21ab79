"""Request bodies for the provider admin API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ProviderTypeName = Literal["shipping", "payment", "email", "accounting", "marketplace"]


class UpdateProviderRequest(BaseModel):
    """Partial update; omitted maps are left as stored."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    config_data: dict[str, Any] | None = Field(default=None, alias="configData")
    credentials: dict[str, Any] | None = None
    feature_flags: dict[str, bool] | None = Field(default=None, alias="featureFlags")
    is_enabled: bool | None = Field(default=None, alias="isEnabled")


class CreateProviderRequest(UpdateProviderRequest):
    """Full write of a provider configuration."""

    provider_type: ProviderTypeName = Field(alias="providerType")
    provider_name: str = Field(alias="providerName", min_length=1)
