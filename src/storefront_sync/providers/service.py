"""Provider configuration business logic behind the admin API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from storefront_sync.exceptions import ConfigValidationError, NotFoundError
from storefront_sync.providers.catalog import (
    MOCK_PROVIDER,
    PROVIDER_TYPES,
    check_provider_type,
    definitions_for,
)
from storefront_sync.providers.store import UNSET
from storefront_sync.providers.validation import (
    missing_fields_message,
    validate_provider_config,
)

if TYPE_CHECKING:
    from storefront_sync.providers.schemas import (
        CreateProviderRequest,
        UpdateProviderRequest,
    )
    from storefront_sync.providers.store import ProviderConfig, ProviderConfigStore

logger = logging.getLogger(__name__)


def deep_merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Return *base* updated with *update*; nested maps are merged key by key."""
    merged = dict(base)
    for key, value in update.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _require_complete(provider_type: str, provider_name: str, config: dict[str, Any], credentials: dict[str, Any]) -> None:
    missing = validate_provider_config(provider_type, provider_name, config, credentials)
    if missing:
        logger.info(
            "Refusing to enable %s/%s; missing %s",
            provider_type,
            provider_name,
            ", ".join(missing),
        )
        raise ConfigValidationError(missing_fields_message(missing), missing_fields=missing)


def _envelope(config: ProviderConfig) -> dict[str, Any]:
    return {
        "success": True,
        "config": config.to_public(),
        "hasCredentials": config.has_credentials,
    }


class ProviderService:
    """Provider catalog merged with stored configuration.

    Parameters
    ----------
    store:
        Persistence for configuration rows.
    include_mock_marketplace:
        List the mock marketplace in the overview.
    """

    def __init__(self, store: ProviderConfigStore, *, include_mock_marketplace: bool = False) -> None:
        self._store = store
        self._include_mock_marketplace = include_mock_marketplace

    async def list_providers(self) -> dict[str, list[dict[str, Any]]]:
        """Every catalog provider per type with its stored state.

        Marketplace entries carry a 1-based ``id``; product integrations
        reference marketplaces by that index.
        """
        providers: dict[str, list[dict[str, Any]]] = {}
        for provider_type in PROVIDER_TYPES:
            stored = {c.provider_name: c for c in await self._store.list_by_type(provider_type)}
            include_mock = provider_type != "marketplace" or self._include_mock_marketplace
            entries: list[dict[str, Any]] = []
            for index, definition in enumerate(definitions_for(provider_type, include_mock=include_mock)):
                config = stored.get(definition.name)
                entry: dict[str, Any] = {
                    "name": definition.name,
                    "displayName": definition.display_name,
                    "isConfigured": definition.name == MOCK_PROVIDER
                    or (
                        config is not None
                        and not validate_provider_config(
                            provider_type,
                            definition.name,
                            config.config_data,
                            config.credentials,
                        )
                    ),
                    "isEnabled": config.is_enabled if config else False,
                    "isActive": config.is_active if config else False,
                    "config": {
                        "id": config.id,
                        "featureFlags": config.feature_flags,
                        "lastSyncedAt": config.last_synced_at,
                        "errorMessage": config.error_message,
                    }
                    if config
                    else None,
                }
                if provider_type == "marketplace":
                    entry = {"id": index + 1, **entry}
                entries.append(entry)
            providers[provider_type] = entries
        return providers

    async def get_config(self, provider_type: str, provider_name: str) -> dict[str, Any]:
        check_provider_type(provider_type)
        config = await self._store.get(provider_type, provider_name)
        if config is None:
            msg = "Provider configuration not found"
            raise NotFoundError(msg)
        return _envelope(config)

    async def update_config(
        self,
        provider_type: str,
        provider_name: str,
        body: UpdateProviderRequest,
    ) -> dict[str, Any]:
        """Deep-merge *body* into the stored config, validating before enable."""
        check_provider_type(provider_type)
        existing = await self._store.get(provider_type, provider_name)
        config_data = deep_merge(existing.config_data if existing else {}, body.config_data or {})
        credentials = deep_merge(existing.credentials if existing else {}, body.credentials or {})

        if body.is_enabled and provider_name != MOCK_PROVIDER:
            _require_complete(provider_type, provider_name, config_data, credentials)

        config = await self._store.upsert(
            provider_type,
            provider_name,
            config_data=config_data,
            credentials=credentials,
            feature_flags=body.feature_flags if body.feature_flags is not None else UNSET,
            is_enabled=body.is_enabled if body.is_enabled is not None else UNSET,
            is_active=bool(body.is_enabled) and provider_name != MOCK_PROVIDER,
            error_message=None,
        )
        return _envelope(config)

    async def create_config(self, body: CreateProviderRequest) -> dict[str, Any]:
        """Write a config from scratch; maps are replaced, not merged."""
        config_data = body.config_data or {}
        credentials = body.credentials or {}
        if body.is_enabled and body.provider_name != MOCK_PROVIDER:
            _require_complete(body.provider_type, body.provider_name, config_data, credentials)

        config = await self._store.upsert(
            body.provider_type,
            body.provider_name,
            config_data=config_data,
            credentials=credentials,
            feature_flags=body.feature_flags if body.feature_flags is not None else UNSET,
            is_enabled=bool(body.is_enabled),
            is_active=bool(body.is_enabled) and body.provider_name != MOCK_PROVIDER,
            error_message=None,
        )
        return _envelope(config)

    async def delete_config(self, provider_type: str, provider_name: str) -> dict[str, Any]:
        check_provider_type(provider_type)
        await self._store.delete(provider_type, provider_name)
        return {"success": True, "message": "Provider configuration deleted"}
