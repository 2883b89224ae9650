"""
Service factory functions for dependency injection.

This module wires infrastructure implementations to core services.
Use cases and API dependencies import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from src.config import get_logger, get_settings
from src.core.entities import Workspace
from src.core.services import (
    CollectionGateway,
    CustomerManager,
    IdentityService,
    InvoiceExportService,
    InvoiceManager,
    ProductManager,
    SalesInsightService,
    UnitManager,
)

if TYPE_CHECKING:
    from src.core.interfaces import IInvoiceRenderer, IKeyValueStore, ILLMProvider

logger = get_logger(__name__)

# Singleton service instances
_gateway: CollectionGateway | None = None
_identity_service: IdentityService | None = None
_export_service: InvoiceExportService | None = None
_insight_service: SalesInsightService | None = None
_workspace: Workspace | None = None


async def get_gateway(store: "IKeyValueStore | None" = None) -> CollectionGateway:
    """
    Get or create the persistence gateway.

    Args:
        store: Optional key-value store override (not cached)
    """
    global _gateway

    settings = get_settings()
    if store is not None:
        return CollectionGateway(store, key_prefix=settings.storage.key_prefix)

    if _gateway is None:
        from src.infrastructure.storage.sqlite import get_kv_store

        _gateway = CollectionGateway(
            await get_kv_store(), key_prefix=settings.storage.key_prefix
        )
    return _gateway


async def get_identity_service() -> IdentityService:
    global _identity_service

    if _identity_service is None:
        settings = get_settings()
        _identity_service = IdentityService(
            await get_gateway(),
            hash_iterations=settings.auth.hash_iterations,
            salt_bytes=settings.auth.salt_bytes,
        )
    return _identity_service


async def get_product_manager() -> ProductManager:
    return ProductManager(await get_gateway())


async def get_customer_manager() -> CustomerManager:
    return CustomerManager(await get_gateway())


async def get_invoice_manager() -> InvoiceManager:
    return InvoiceManager(await get_gateway())


async def get_unit_manager() -> UnitManager:
    return UnitManager(await get_gateway())


def get_export_service(renderer: "IInvoiceRenderer | None" = None) -> InvoiceExportService:
    """
    Get or create the invoice export service.

    Args:
        renderer: Optional renderer override (not cached)
    """
    global _export_service

    if _export_service is not None and renderer is None:
        return _export_service

    from src.infrastructure.pdf import Fpdf2InvoiceRenderer

    settings = get_settings()
    service = InvoiceExportService(
        renderer or Fpdf2InvoiceRenderer(settings.pdf, settings.billing.currency_symbol),
        output_dir=settings.pdf.output_dir,
    )

    if renderer is None:
        _export_service = service
    return service


def get_insight_service(llm_provider: "ILLMProvider | None" = None) -> SalesInsightService:
    """
    Get or create the sales insight service.

    The provider is optional; without one every request gets the
    fallback message.
    """
    global _insight_service

    if _insight_service is not None and llm_provider is None:
        return _insight_service

    from src.infrastructure.llm import get_llm_provider

    llm = llm_provider
    if llm is None:
        try:
            llm = get_llm_provider()
        except Exception as e:
            logger.warning("llm_provider_unavailable", error=str(e))
            llm = None

    settings = get_settings()
    service = SalesInsightService(
        llm,
        temperature=settings.llm.temperature,
        max_tokens=settings.llm.max_tokens,
    )

    if llm_provider is None:
        _insight_service = service
    return service


def get_workspace() -> Workspace:
    """The process-wide workspace of the active session."""
    global _workspace

    if _workspace is None:
        _workspace = Workspace()
    return _workspace


def reset_services() -> None:
    """Reset all service singletons (for testing)."""
    global _gateway, _identity_service, _export_service, _insight_service, _workspace

    _gateway = None
    _identity_service = None
    _export_service = None
    _insight_service = None
    _workspace = None
