"""Application use cases."""

from src.application.use_cases.export_invoice_pdf import ExportInvoicePdfUseCase
from src.application.use_cases.manage_session import (
    LoginUseCase,
    LogoutUseCase,
    RegisterUseCase,
    RestoreSessionUseCase,
    load_workspace,
)
from src.application.use_cases.sales_dashboard import (
    GenerateSalesInsightsUseCase,
    GetSalesStatsUseCase,
)
from src.application.use_cases.save_invoice import SaveInvoiceUseCase

__all__ = [
    "load_workspace",
    "RestoreSessionUseCase",
    "RegisterUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "SaveInvoiceUseCase",
    "ExportInvoicePdfUseCase",
    "GetSalesStatsUseCase",
    "GenerateSalesInsightsUseCase",
]
