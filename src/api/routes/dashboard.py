"""Dashboard endpoints: sales figures and the AI sales summary."""

from fastapi import APIRouter, Depends

from src.api.dependencies import (
    get_sales_insights_use_case,
    get_sales_stats_use_case,
    require_collections,
)
from src.application.dto.responses import SalesInsightsResponse, SalesStatsResponse
from src.application.use_cases import GenerateSalesInsightsUseCase, GetSalesStatsUseCase
from src.core.entities import Workspace

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=SalesStatsResponse)
async def sales_stats(
    workspace: Workspace = Depends(require_collections("invoices")),
    use_case: GetSalesStatsUseCase = Depends(get_sales_stats_use_case),
) -> SalesStatsResponse:
    """Total revenue, invoice counts and revenue per day."""
    return use_case.execute(workspace)


@router.post("/insights", response_model=SalesInsightsResponse)
async def sales_insights(
    workspace: Workspace = Depends(require_collections("invoices")),
    use_case: GenerateSalesInsightsUseCase = Depends(get_sales_insights_use_case),
) -> SalesInsightsResponse:
    """
    Ask the LLM for a short summary of sales.

    Always answers 200: without invoices, or when the provider fails, the
    text is a fixed notice instead of a summary.
    """
    return await use_case.execute(workspace)
