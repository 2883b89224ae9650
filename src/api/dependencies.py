"""
Dependency injection container for FastAPI.

Provides service instances and the active workspace to route handlers.
"""

from collections.abc import Callable

from fastapi import Depends

from src.application.services import (
    get_customer_manager,
    get_export_service,
    get_gateway,
    get_identity_service,
    get_insight_service,
    get_invoice_manager,
    get_product_manager,
    get_unit_manager,
    get_workspace,
)
from src.application.use_cases import (
    ExportInvoicePdfUseCase,
    GenerateSalesInsightsUseCase,
    GetSalesStatsUseCase,
    LoginUseCase,
    LogoutUseCase,
    RegisterUseCase,
    RestoreSessionUseCase,
    SaveInvoiceUseCase,
)
from src.config import get_settings
from src.core.entities import Workspace
from src.core.exceptions import NotAuthenticatedError
from src.core.interfaces import ILLMProvider
from src.core.services import (
    CustomerManager,
    InvoiceManager,
    ProductManager,
    UnitManager,
)
from src.infrastructure.llm import get_llm_provider


# Workspace dependencies
def get_current_workspace() -> Workspace:
    """Get the process-wide workspace."""
    return get_workspace()


def require_session(
    workspace: Workspace = Depends(get_current_workspace),
) -> Workspace:
    """Get the workspace, refusing when nobody is logged in."""
    if not workspace.is_authenticated:
        raise NotAuthenticatedError()
    return workspace


def require_collections(*collections: str) -> Callable[..., Workspace]:
    """
    Session dependency that also refuses when one of collections could not
    be read from storage; the other collections keep working.
    """

    def dependency(workspace: Workspace = Depends(require_session)) -> Workspace:
        workspace.ensure_readable(*collections)
        return workspace

    return dependency


# Manager dependencies
async def get_products() -> ProductManager:
    return await get_product_manager()


async def get_customers() -> CustomerManager:
    return await get_customer_manager()


async def get_invoices() -> InvoiceManager:
    return await get_invoice_manager()


async def get_units() -> UnitManager:
    return await get_unit_manager()


# Use case dependencies
async def get_restore_session_use_case() -> RestoreSessionUseCase:
    return RestoreSessionUseCase(await get_identity_service(), await get_gateway())


async def get_register_use_case() -> RegisterUseCase:
    return RegisterUseCase(await get_identity_service(), await get_gateway())


async def get_login_use_case() -> LoginUseCase:
    return LoginUseCase(await get_identity_service(), await get_gateway())


async def get_logout_use_case() -> LogoutUseCase:
    return LogoutUseCase(await get_identity_service(), await get_gateway())


async def get_save_invoice_use_case() -> SaveInvoiceUseCase:
    return SaveInvoiceUseCase(
        await get_invoice_manager(),
        get_settings().billing,
        exporter=get_export_service(),
    )


async def get_export_invoice_pdf_use_case() -> ExportInvoicePdfUseCase:
    return ExportInvoicePdfUseCase(
        await get_invoice_manager(),
        get_export_service(),
        default_shop_name=get_settings().billing.default_shop_name,
    )


def get_sales_stats_use_case() -> GetSalesStatsUseCase:
    return GetSalesStatsUseCase()


def get_sales_insights_use_case() -> GenerateSalesInsightsUseCase:
    return GenerateSalesInsightsUseCase(get_insight_service())


# LLM dependency
def get_llm() -> ILLMProvider:
    """Get LLM provider."""
    return get_llm_provider()
