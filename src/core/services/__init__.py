"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/interfaces/*
- src/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from src.core.services.collections import (
    CollectionManager,
    CustomerManager,
    InvoiceManager,
    ProductManager,
    UnitManager,
)
from src.core.services.composer import ComposerSaveResult, ComposerState, InvoiceComposer
from src.core.services.export import ExportResult, InvoiceExportService, export_filename
from src.core.services.identity import IdentityService
from src.core.services.insights import SalesInsightService, compute_sales_stats
from src.core.services.persistence import (
    DEFAULT_UNITS,
    Collection,
    CollectionGateway,
)

__all__ = [
    # Persistence
    "Collection",
    "CollectionGateway",
    "DEFAULT_UNITS",
    # Identity
    "IdentityService",
    # Collections
    "CollectionManager",
    "ProductManager",
    "CustomerManager",
    "InvoiceManager",
    "UnitManager",
    # Composer
    "InvoiceComposer",
    "ComposerState",
    "ComposerSaveResult",
    # Export
    "InvoiceExportService",
    "ExportResult",
    "export_filename",
    # Insights
    "SalesInsightService",
    "compute_sales_stats",
]
