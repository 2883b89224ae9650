"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Depends

from src.api.dependencies import get_current_workspace, get_llm
from src.application.dto.responses import HealthResponse, ProviderHealthResponse
from src.config import get_settings
from src.core.entities import Workspace

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


async def _database_status() -> ProviderHealthResponse:
    from src.infrastructure.storage.sqlite import get_pool

    try:
        pool = await get_pool()
        return ProviderHealthResponse(
            name="sqlite", available=True, latency_ms=await pool.ping()
        )
    except Exception as e:
        return ProviderHealthResponse(name="sqlite", available=False, error=str(e))


async def _llm_status() -> ProviderHealthResponse:
    try:
        llm = get_llm()
        start = time.time()
        health_result = await llm.check_health()
        return ProviderHealthResponse(
            name=health_result.provider,
            available=health_result.available,
            latency_ms=(time.time() - start) * 1000,
            error=health_result.error,
        )
    except Exception as e:
        return ProviderHealthResponse(name="llm", available=False, error=str(e))


@router.get("", response_model=HealthResponse)
async def health_check(
    workspace: Workspace = Depends(get_current_workspace),
) -> HealthResponse:
    """
    Liveness, storage and LLM status.

    The LLM being down only degrades the service; insights fall back to a
    fixed message. So does a stored collection that cannot be read: only
    its own routes fail.
    """
    database = await _database_status()
    llm = await _llm_status()

    if not database.available:
        status_str = "unhealthy"
    elif not llm.available or workspace.load_errors:
        status_str = "degraded"
    else:
        status_str = "healthy"

    return HealthResponse(
        status=status_str,
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
        authenticated=workspace.is_authenticated,
        unreadable_collections=sorted(workspace.load_errors),
        llm=llm,
        database=database,
    )
