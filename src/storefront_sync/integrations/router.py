"""Integration admin endpoints: listing, health, bulk actions, per-product rules."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, Literal

from fastapi import APIRouter, Body, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002 - FastAPI resolves it at runtime

from storefront_sync.integrations.health import HealthAggregator, HealthStatus
from storefront_sync.integrations.schemas import IntegrationUpsertRequest
from storefront_sync.integrations.service import (
    IntegrationService,
    StatusFilter,
    coerce_integration_ids,
    integration_detail,
    integration_summary,
    parse_bulk_action,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

router = APIRouter(tags=["integrations"])


async def _get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.session_factory() as session:
        yield session


Session = Annotated[AsyncSession, Depends(_get_session)]


# ---------------------------------------------------------------------------
# Cross-product views
# ---------------------------------------------------------------------------


@router.get("/integrations")
async def list_integrations(
    session: Session,
    integration_type: Annotated[Literal["supplier", "marketplace"] | None, Query(alias="type")] = None,
    status: StatusFilter | None = None,
) -> dict[str, Any]:
    rows = await IntegrationService(session).list_integrations(integration_type, status)
    items = [integration_summary(r) for r in rows]
    return {"success": True, "integrations": items, "count": len(items)}


@router.post("/integrations/bulk")
async def bulk_action(session: Session, body: Annotated[dict[str, Any], Body()]) -> dict[str, Any]:
    """Enable, disable or force-sync a set of integrations.

    The body is validated before any write: ``type`` must be one of the
    three actions and ``integrationIds`` a non-empty list of ids.
    """
    action = parse_bulk_action(body.get("type"))
    ids = coerce_integration_ids(body.get("integrationIds"))
    affected = await IntegrationService(session).perform_bulk_action(action, ids)
    return {"success": True, "action": action.value, "affected": affected}


@router.get("/integrations/health")
async def integration_health(session: Session, health: HealthStatus | None = None) -> dict[str, Any]:
    report = await HealthAggregator(session).summarize(health)
    return {"success": True, "stats": report.stats, "integrations": report.integrations}


# ---------------------------------------------------------------------------
# Per-product rules
# ---------------------------------------------------------------------------


@router.get("/products/{product_id}/integrations")
async def product_integrations(product_id: int, session: Session) -> dict[str, Any]:
    rows = await IntegrationService(session).list_for_product(product_id)
    return {"integrations": [integration_detail(r) for r in rows]}


@router.post("/products/{product_id}/integrations")
async def save_product_integration(
    product_id: int,
    payload: IntegrationUpsertRequest,
    session: Session,
) -> dict[str, Any]:
    row = await IntegrationService(session).upsert_for_product(product_id, payload)
    return {"success": True, "integration": integration_detail(row)}
