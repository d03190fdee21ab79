"""Scheduler-facing sync trigger."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from storefront_sync.exceptions import SyncBatchError
from storefront_sync.middleware.auth import SYNC_TRIGGER_PATH, require_cron_secret

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sync"])


@router.post(SYNC_TRIGGER_PATH, dependencies=[Depends(require_cron_secret)], response_model=None)
async def trigger_sync(request: Request) -> dict[str, Any] | JSONResponse:
    """Run one sync pass over due integrations.

    Individual failures are reported in the body with status 200; only a
    failure to read the batch answers 500.
    """
    now = datetime.now(UTC)
    try:
        result = await request.app.state.sync_runner.run(now)
    except SyncBatchError as exc:
        return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})
    return {"success": True, **result.to_dict(), "timestamp": now.isoformat()}
