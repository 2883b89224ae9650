"""Dashboard use cases: sales figures and the AI sales summary."""

from src.application.dto.responses import SalesInsightsResponse, SalesStatsResponse
from src.config import get_logger
from src.core.entities import Workspace
from src.core.services import SalesInsightService, compute_sales_stats

logger = get_logger(__name__)


class GetSalesStatsUseCase:
    """Revenue, invoice counts and daily revenue for the workspace."""

    def execute(self, workspace: Workspace) -> SalesStatsResponse:
        stats = compute_sales_stats(workspace.invoices)
        return SalesStatsResponse.model_validate(stats)


class GenerateSalesInsightsUseCase:
    """Ask the insight service to summarize the workspace's invoices."""

    def __init__(self, insight_service: SalesInsightService):
        self._insights = insight_service

    async def execute(self, workspace: Workspace) -> SalesInsightsResponse:
        invoices = list(workspace.invoices)
        text = await self._insights.summarize_sales(invoices)

        logger.info("sales_insights_requested", invoice_count=len(invoices))
        return SalesInsightsResponse(insights=text, invoice_count=len(invoices))
