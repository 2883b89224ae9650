"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from src.application.dto.requests import (
    CustomerRequest,
    InvoiceItemRequest,
    InvoiceStatusRequest,
    LoginRequest,
    ProductRequest,
    RegisterRequest,
    SaveInvoiceRequest,
    UnitRequest,
)
from src.application.dto.responses import (
    CustomerListResponse,
    CustomerResponse,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceItemResponse,
    InvoiceListResponse,
    InvoiceResponse,
    ProductListResponse,
    ProductResponse,
    ProviderHealthResponse,
    RevenuePointResponse,
    SalesInsightsResponse,
    SalesStatsResponse,
    SaveInvoiceResponse,
    SessionStateResponse,
    UnitListResponse,
    UserResponse,
)

__all__ = [
    # Requests
    "RegisterRequest",
    "LoginRequest",
    "ProductRequest",
    "CustomerRequest",
    "UnitRequest",
    "InvoiceItemRequest",
    "SaveInvoiceRequest",
    "InvoiceStatusRequest",
    # Responses
    "UserResponse",
    "SessionStateResponse",
    "ProductResponse",
    "ProductListResponse",
    "CustomerResponse",
    "CustomerListResponse",
    "UnitListResponse",
    "DeleteResponse",
    "InvoiceItemResponse",
    "InvoiceResponse",
    "InvoiceListResponse",
    "SaveInvoiceResponse",
    "RevenuePointResponse",
    "SalesStatsResponse",
    "SalesInsightsResponse",
    "ProviderHealthResponse",
    "HealthResponse",
    "ErrorResponse",
]
