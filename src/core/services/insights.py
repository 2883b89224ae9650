"""
Sales insight service.

Asks a text-generation provider for a short executive summary of the
invoices, and computes the dashboard figures locally. Provider failures
never propagate: the caller always gets text back.
"""

from __future__ import annotations

import json
from collections import defaultdict
from datetime import date, timezone
from typing import Any

from src.config import get_logger
from src.core.entities.invoice import Invoice, InvoiceStatus
from src.core.entities.report import RevenuePoint, SalesStats
from src.core.interfaces.llm import ILLMProvider

logger = get_logger(__name__)

NO_DATA_MESSAGE = "No sales data available yet. Create some invoices to get AI insights!"
FALLBACK_MESSAGE = "Unable to generate insights at this time. Please try again later."
EMPTY_RESPONSE_MESSAGE = "No insights generated."
BUSY_MESSAGE = "Insights are already being generated. Please wait."

SYSTEM_INSTRUCTION = "You are a helpful financial analyst for a small business."

PROMPT_TEMPLATE = """Analyze the following sales invoice data and provide a brief, actionable executive summary (max 3 bullet points) highlighting trends, top performers, or anomalies.
Format the output as Markdown.

Data: {data}"""


def project_invoices(invoices: list[Invoice]) -> list[dict[str, Any]]:
    """Reduce invoices to the fields the provider sees."""
    return [
        {
            "date": inv.date.isoformat(),
            "total": inv.total,
            "customer": inv.customer_name,
            "itemCount": len(inv.items),
        }
        for inv in invoices
    ]


def build_prompt(invoices: list[Invoice]) -> str:
    return PROMPT_TEMPLATE.format(data=json.dumps(project_invoices(invoices)))


def compute_sales_stats(invoices: list[Invoice]) -> SalesStats:
    """Revenue, counts by status and revenue per UTC day, oldest day first."""
    by_day: dict[date, float] = defaultdict(float)
    for inv in invoices:
        by_day[inv.date.astimezone(timezone.utc).date()] += inv.total

    return SalesStats(
        total_revenue=sum(inv.total for inv in invoices),
        invoice_count=len(invoices),
        paid_count=sum(1 for inv in invoices if inv.status is InvoiceStatus.PAID),
        pending_count=sum(1 for inv in invoices if inv.status is InvoiceStatus.PENDING),
        daily_revenue=[
            RevenuePoint(day=day, amount=amount) for day, amount in sorted(by_day.items())
        ],
    )


class SalesInsightService:
    """
    Summarize sales through an LLM provider.

    Only one summary is generated at a time; a request made while another
    is in flight gets BUSY_MESSAGE instead of a second provider call.
    """

    def __init__(
        self,
        llm: ILLMProvider | None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
    ) -> None:
        self._llm = llm
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._pending = False

    @property
    def is_pending(self) -> bool:
        return self._pending

    async def summarize_sales(self, invoices: list[Invoice]) -> str:
        if not invoices:
            return NO_DATA_MESSAGE
        if self._pending:
            logger.info("sales_insights_busy")
            return BUSY_MESSAGE
        if self._llm is None:
            logger.warning("sales_insights_no_provider")
            return FALLBACK_MESSAGE

        self._pending = True
        try:
            response = await self._llm.generate(
                build_prompt(invoices),
                system_prompt=SYSTEM_INSTRUCTION,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except Exception:
            logger.warning("sales_insights_failed", exc_info=True)
            return FALLBACK_MESSAGE
        finally:
            self._pending = False

        text = response.text.strip()
        logger.info(
            "sales_insights_generated",
            invoice_count=len(invoices),
            model=response.model,
            chars=len(text),
        )
        return text or EMPTY_RESPONSE_MESSAGE
