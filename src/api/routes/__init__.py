"""API route modules."""

from src.api.routes.auth import router as auth_router
from src.api.routes.customers import router as customers_router
from src.api.routes.dashboard import router as dashboard_router
from src.api.routes.health import router as health_router
from src.api.routes.invoices import router as invoices_router
from src.api.routes.products import router as products_router
from src.api.routes.units import router as units_router

__all__ = [
    "health_router",
    "auth_router",
    "products_router",
    "customers_router",
    "units_router",
    "invoices_router",
    "dashboard_router",
]
