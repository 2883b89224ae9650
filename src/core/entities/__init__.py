"""Core domain entities."""

from src.core.entities.base import StoredRecord, new_record_id
from src.core.entities.catalog import Customer, Product
from src.core.entities.invoice import (
    Invoice,
    InvoiceItem,
    InvoiceLabels,
    InvoiceStatus,
)
from src.core.entities.report import RevenuePoint, SalesStats
from src.core.entities.user import User
from src.core.entities.workspace import PUBLIC_SCOPE, Workspace

__all__ = [
    # Base
    "StoredRecord",
    "new_record_id",
    # Catalog entities
    "Product",
    "Customer",
    # Invoice entities
    "Invoice",
    "InvoiceItem",
    "InvoiceLabels",
    "InvoiceStatus",
    # Reporting
    "RevenuePoint",
    "SalesStats",
    # Identity
    "User",
    # Application state
    "Workspace",
    "PUBLIC_SCOPE",
]
