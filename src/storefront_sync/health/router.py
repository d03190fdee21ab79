"""Liveness and readiness probes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

import storefront_sync

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def liveness() -> dict[str, str]:
    return {"status": "healthy", "version": storefront_sync.__version__}


@router.get("/health/ready")
async def readiness(request: Request) -> JSONResponse:
    """Ready once the database answers ``SELECT 1``."""
    try:
        async with request.app.state.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.warning("Readiness check failed: database unreachable", exc_info=True)
        return JSONResponse(status_code=503, content={"status": "not_ready", "database": "disconnected"})
    return JSONResponse(status_code=200, content={"status": "ready", "database": "connected"})
