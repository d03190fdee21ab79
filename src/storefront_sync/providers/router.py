"""Provider configuration admin endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request

from storefront_sync.providers.schemas import CreateProviderRequest, UpdateProviderRequest
from storefront_sync.providers.service import ProviderService
from storefront_sync.providers.store import ProviderConfigStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

router = APIRouter(prefix="/providers", tags=["providers"])


async def _get_service(request: Request) -> AsyncGenerator[ProviderService, None]:
    state = request.app.state
    async with state.session_factory() as session:
        yield ProviderService(
            ProviderConfigStore(session, state.secret_manager),
            include_mock_marketplace=state.settings.marketplaces.enable_mock,
        )


Svc = Annotated[ProviderService, Depends(_get_service)]


@router.get("")
async def list_providers(svc: Svc) -> dict[str, Any]:
    """All catalog providers grouped by type, merged with stored state."""
    return {"providers": await svc.list_providers()}


@router.post("")
async def create_provider(body: CreateProviderRequest, svc: Svc) -> dict[str, Any]:
    return await svc.create_config(body)


@router.get("/{provider_type}/{provider_name}")
async def get_provider(provider_type: str, provider_name: str, svc: Svc) -> dict[str, Any]:
    try:
        return await svc.get_config(provider_type, provider_name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.put("/{provider_type}/{provider_name}")
async def update_provider(
    provider_type: str,
    provider_name: str,
    body: UpdateProviderRequest,
    svc: Svc,
) -> dict[str, Any]:
    try:
        return await svc.update_config(provider_type, provider_name, body)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.delete("/{provider_type}/{provider_name}")
async def delete_provider(provider_type: str, provider_name: str, svc: Svc) -> dict[str, Any]:
    try:
        return await svc.delete_config(provider_type, provider_name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
