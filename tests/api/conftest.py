"""Fixtures for API tests.

The application runs without its lifespan: services are wired to an
in-memory store, so no database or LLM server is needed.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

import src.application.services as services
from src.api.dependencies import get_sales_insights_use_case
from src.api.main import app
from src.application.use_cases import GenerateSalesInsightsUseCase
from src.config.settings import PdfSettings
from src.core.interfaces import ILLMProvider, LLMResponse
from src.core.services import (
    CollectionGateway,
    IdentityService,
    InvoiceExportService,
    SalesInsightService,
)
from src.infrastructure.pdf import Fpdf2InvoiceRenderer
from src.infrastructure.storage import InMemoryKeyValueStore


@pytest.fixture
def api_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def api_gateway(api_store: InMemoryKeyValueStore) -> CollectionGateway:
    return CollectionGateway(api_store)


@pytest.fixture
def export_dir(tmp_path: Path) -> Path:
    return tmp_path / "exports"


@pytest.fixture
def mock_llm() -> AsyncMock:
    llm = AsyncMock(spec=ILLMProvider)
    llm.generate.return_value = LLMResponse(
        text="- Jane Doe is the top customer", model="test-model"
    )
    return llm


@pytest.fixture(autouse=True)
def wired_services(
    monkeypatch: pytest.MonkeyPatch,
    api_gateway: CollectionGateway,
    export_dir: Path,
    mock_llm: AsyncMock,
):
    """Point the service singletons at in-memory fakes for each test."""
    services.reset_services()
    monkeypatch.setattr(services, "_gateway", api_gateway)
    monkeypatch.setattr(
        services,
        "_identity_service",
        IdentityService(api_gateway, hash_iterations=1000),
    )
    monkeypatch.setattr(
        services,
        "_export_service",
        InvoiceExportService(
            Fpdf2InvoiceRenderer(PdfSettings(), currency_symbol="Rs."),
            output_dir=export_dir,
        ),
    )
    insight_service = SalesInsightService(mock_llm)
    app.dependency_overrides[get_sales_insights_use_case] = lambda: (
        GenerateSalesInsightsUseCase(insight_service)
    )

    yield

    app.dependency_overrides.clear()
    services.reset_services()


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def logged_in(client: AsyncClient) -> dict:
    """Register owner@shop.com and return the user payload."""
    response = await client.post(
        "/api/auth/register",
        json={"email": "owner@shop.com", "password": "secret", "shop_name": "Acme Supplies"},
    )
    assert response.status_code == 201
    return response.json()
