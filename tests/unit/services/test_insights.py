"""Tests for SalesInsightService and sales figures."""

import asyncio
import json
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from src.core.entities import Invoice, InvoiceStatus
from src.core.exceptions import LLMUnavailableError
from src.core.interfaces import ILLMProvider, LLMResponse
from src.core.services import SalesInsightService, compute_sales_stats
from src.core.services.insights import (
    BUSY_MESSAGE,
    EMPTY_RESPONSE_MESSAGE,
    FALLBACK_MESSAGE,
    NO_DATA_MESSAGE,
    SYSTEM_INSTRUCTION,
    build_prompt,
    project_invoices,
)


@pytest.fixture
def mock_llm() -> AsyncMock:
    llm = AsyncMock(spec=ILLMProvider)
    llm.generate.return_value = LLMResponse(text="- Sales are up\n", model="test-model")
    return llm


class TestPrompt:
    def test_projection_fields(self, sample_invoice: Invoice):
        [row] = project_invoices([sample_invoice])
        assert row == {
            "date": sample_invoice.date.isoformat(),
            "total": 300.0,
            "customer": "Jane Doe",
            "itemCount": 1,
        }

    def test_prompt_embeds_json(self, sample_invoice: Invoice):
        prompt = build_prompt([sample_invoice])
        assert "executive summary" in prompt
        data = json.loads(prompt.split("Data: ", 1)[1])
        assert data[0]["customer"] == "Jane Doe"


class TestSummarizeSales:
    async def test_no_invoices_skips_provider(self, mock_llm: AsyncMock):
        service = SalesInsightService(mock_llm)
        assert await service.summarize_sales([]) == NO_DATA_MESSAGE
        mock_llm.generate.assert_not_called()

    async def test_returns_trimmed_text(self, mock_llm: AsyncMock, sample_invoice: Invoice):
        service = SalesInsightService(mock_llm, temperature=0.2, max_tokens=256)

        assert await service.summarize_sales([sample_invoice]) == "- Sales are up"

        kwargs = mock_llm.generate.call_args.kwargs
        assert kwargs["system_prompt"] == SYSTEM_INSTRUCTION
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 256
        assert "Jane Doe" in mock_llm.generate.call_args.args[0]

    async def test_provider_error_falls_back(self, mock_llm: AsyncMock, sample_invoice: Invoice):
        mock_llm.generate.side_effect = LLMUnavailableError("ollama", "down")
        service = SalesInsightService(mock_llm)

        assert await service.summarize_sales([sample_invoice]) == FALLBACK_MESSAGE
        assert service.is_pending is False

    async def test_unexpected_error_falls_back(
        self, mock_llm: AsyncMock, sample_invoice: Invoice
    ):
        mock_llm.generate.side_effect = RuntimeError("boom")
        service = SalesInsightService(mock_llm)
        assert await service.summarize_sales([sample_invoice]) == FALLBACK_MESSAGE

    async def test_blank_response(self, mock_llm: AsyncMock, sample_invoice: Invoice):
        mock_llm.generate.return_value = LLMResponse(text="   ", model="m")
        service = SalesInsightService(mock_llm)
        assert await service.summarize_sales([sample_invoice]) == EMPTY_RESPONSE_MESSAGE

    async def test_without_provider(self, sample_invoice: Invoice):
        service = SalesInsightService(None)
        assert await service.summarize_sales([sample_invoice]) == FALLBACK_MESSAGE

    async def test_concurrent_request_is_busy(self, mock_llm: AsyncMock, sample_invoice: Invoice):
        release = asyncio.Event()

        async def slow_generate(*args, **kwargs):
            await release.wait()
            return LLMResponse(text="done", model="m")

        mock_llm.generate.side_effect = slow_generate
        service = SalesInsightService(mock_llm)

        first = asyncio.create_task(service.summarize_sales([sample_invoice]))
        await asyncio.sleep(0)
        assert service.is_pending is True

        assert await service.summarize_sales([sample_invoice]) == BUSY_MESSAGE

        release.set()
        assert await first == "done"
        assert service.is_pending is False
        assert mock_llm.generate.call_count == 1


class TestComputeSalesStats:
    def test_empty(self):
        stats = compute_sales_stats([])
        assert stats.total_revenue == 0
        assert stats.invoice_count == 0
        assert stats.daily_revenue == []

    def test_figures(self, sample_invoice: Invoice):
        day = datetime(2026, 3, 1, 9, tzinfo=timezone.utc)
        invoices = [
            sample_invoice.model_copy(update={"id": "a", "date": day + timedelta(days=1)}),
            sample_invoice.model_copy(
                update={"id": "b", "date": day, "status": InvoiceStatus.PAID}
            ),
            sample_invoice.model_copy(update={"id": "c", "date": day + timedelta(hours=3)}),
        ]

        stats = compute_sales_stats(invoices)

        assert stats.total_revenue == 900
        assert stats.invoice_count == 3
        assert stats.paid_count == 1
        assert stats.pending_count == 2
        assert [(p.day, p.amount) for p in stats.daily_revenue] == [
            (date(2026, 3, 1), 600),
            (date(2026, 3, 2), 300),
        ]

    def test_days_are_utc(self, sample_invoice: Invoice):
        # 23:30 at UTC-05:00 is the next day in UTC
        late = datetime(2026, 3, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        stats = compute_sales_stats([sample_invoice.model_copy(update={"date": late})])
        assert stats.daily_revenue[0].day == date(2026, 3, 2)
