"""Unit-of-measure endpoints."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_units, require_collections
from src.application.dto.requests import UnitRequest
from src.application.dto.responses import UnitListResponse
from src.core.entities import Workspace
from src.core.services import UnitManager

router = APIRouter(prefix="/api/units", tags=["units"])


@router.get("", response_model=UnitListResponse)
async def list_units(
    workspace: Workspace = Depends(require_collections("units")),
    manager: UnitManager = Depends(get_units),
) -> UnitListResponse:
    return UnitListResponse(units=manager.list_units(workspace))


@router.post("", response_model=UnitListResponse, status_code=status.HTTP_201_CREATED)
async def add_unit(
    request: UnitRequest,
    workspace: Workspace = Depends(require_collections("units")),
    manager: UnitManager = Depends(get_units),
) -> UnitListResponse:
    """Add a unit; adding one that exists is a no-op."""
    return UnitListResponse(units=await manager.add_unit(workspace, request.unit))
