"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

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
    reset_services,
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

__all__ = [
    # Use Cases
    "RestoreSessionUseCase",
    "RegisterUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "SaveInvoiceUseCase",
    "ExportInvoicePdfUseCase",
    "GetSalesStatsUseCase",
    "GenerateSalesInsightsUseCase",
    # Service factories
    "get_gateway",
    "get_identity_service",
    "get_product_manager",
    "get_customer_manager",
    "get_invoice_manager",
    "get_unit_manager",
    "get_export_service",
    "get_insight_service",
    "get_workspace",
    "reset_services",
]
