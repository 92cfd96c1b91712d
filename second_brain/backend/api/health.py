"""
Health Check Endpoints.

Provides liveness and readiness checks.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (graph store and search index reachable)
"""

import asyncio
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from sqlalchemy import text

from second_brain.backend.core.logging import get_logger
from second_brain.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)

READY_TIMEOUT_SECONDS = 5.0


async def check_database() -> dict[str, Any]:
    """
    Check graph store connectivity.

    Returns:
        Dict with status, latency, and optional error message
    """
    from second_brain.backend.core.database import get_session_factory

    try:
        start = utc_now()
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
        latency_ms = int((utc_now() - start).total_seconds() * 1000)
        return {"status": "healthy", "latency_ms": latency_ms}
    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}


async def check_search(request: Request) -> dict[str, Any]:
    """
    Check search index connectivity.

    The index is a secondary store, so an unreachable index reports
    "degraded" rather than failing readiness.
    """
    search_sync = getattr(request.app.state, "search_sync", None)
    if search_sync is None or not search_sync.enabled:
        return {"status": "not_configured"}

    try:
        start = utc_now()
        ok = await search_sync.client.health()
        latency_ms = int((utc_now() - start).total_seconds() * 1000)
        if not ok:
            return {"status": "degraded", "error": "index reported not ok"}
        return {"status": "healthy", "latency_ms": latency_ms}
    except Exception as e:
        logger.warning("Search health check failed", extra={"error": str(e)})
        return {"status": "degraded", "error": str(e)}


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running. No dependency checks.
    """
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness_check(request: Request) -> dict[str, Any]:
    """
    Readiness check.

    Checks dependencies in parallel using TaskGroup.
    Returns 503 if the graph store is unhealthy.
    """
    db_result: dict[str, Any] = {"status": "error", "error": "check did not run"}
    search_result: dict[str, Any] = {"status": "error", "error": "check did not run"}

    try:
        async with asyncio.timeout(READY_TIMEOUT_SECONDS):
            async with asyncio.TaskGroup() as tg:
                db_task = tg.create_task(check_database())
                search_task = tg.create_task(check_search(request))
            db_result = db_task.result()
            search_result = search_task.result()
    except* Exception as eg:
        for exc in eg.exceptions:
            logger.warning("Health check task failed", extra={"error": str(exc)})

    checks = {
        "database": db_result,
        "search": search_result,
    }

    if db_result.get("status") != "healthy":
        logger.warning("Readiness check failed", extra={"checks": checks})
        raise HTTPException(
            status_code=503,
            detail={"status": "unhealthy", "checks": checks},
        )

    return {
        "status": "healthy",
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }
