"""Required-field checks run before a provider is enabled."""

from __future__ import annotations

from typing import Any

from storefront_sync.providers.catalog import MOCK_PROVIDER, get_provider_definition


def validate_provider_config(
    provider_type: str,
    provider_name: str,
    config_data: dict[str, Any] | None,
    credentials: dict[str, Any] | None = None,
) -> list[str]:
    """Return the required fields that are missing, in catalog order.

    A field counts as present when it is truthy in either *config_data* or
    *credentials*. The ``mock`` provider and providers absent from the
    catalog require nothing.
    """
    if provider_name == MOCK_PROVIDER:
        return []
    definition = get_provider_definition(provider_type, provider_name)
    if definition is None:
        return []

    config_data = config_data or {}
    credentials = credentials or {}
    return [
        name
        for name in definition.required_fields
        if not config_data.get(name) and not credentials.get(name)
    ]


def missing_fields_message(missing: list[str]) -> str:
    return f"Please configure the following fields before enabling: {', '.join(missing)}"
