"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from src.core.entities import InvoiceStatus

# --- Identity ---


class UserResponse(BaseModel):
    """Public view of a user. Never carries credentials."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    shop_name: str


class SessionStateResponse(BaseModel):
    """Who is logged in, if anyone."""

    authenticated: bool
    user: UserResponse | None = None


# --- Catalog ---


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    price: float
    unit: str
    category: str | None = None
    description: str | None = None


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    total: int


class CustomerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: str | None = None
    address: str | None = None


class CustomerListResponse(BaseModel):
    customers: list[CustomerResponse]
    total: int


class UnitListResponse(BaseModel):
    units: list[str]


class DeleteResponse(BaseModel):
    """Result of a delete. Deletes succeed even when nothing matched."""

    id: str
    deleted: bool


# --- Invoices ---


class InvoiceItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    product_id: str
    product_name: str
    unit: str
    price: float
    quantity: float
    total: float = Field(..., description="quantity * price")


class InvoiceResponse(BaseModel):
    """Invoice with snapshot customer fields and computed totals."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    invoice_number: str
    date: datetime
    customer_id: str
    customer_name: str
    customer_address: str | None = None
    customer_phone: str | None = None
    items: list[InvoiceItemResponse]
    subtotal: float
    tax_rate: float
    tax_amount: float
    total: float
    status: InvoiceStatus


class InvoiceListResponse(BaseModel):
    invoices: list[InvoiceResponse]
    total: int


class SaveInvoiceResponse(BaseModel):
    """Result of saving an invoice, with the export outcome if one was asked for."""

    invoice: InvoiceResponse
    created: bool
    pdf_file: str | None = Field(default=None, description="Path of the exported PDF")
    export_error: str | None = None


# --- Dashboard ---


class RevenuePointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day: date
    amount: float


class SalesStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_revenue: float
    invoice_count: int
    paid_count: int
    pending_count: int
    daily_revenue: list[RevenuePointResponse]


class SalesInsightsResponse(BaseModel):
    insights: str = Field(..., description="Markdown summary or a fixed notice")
    invoice_count: int


# --- Health / errors ---


class ProviderHealthResponse(BaseModel):
    """Provider health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    authenticated: bool = False
    unreadable_collections: list[str] = Field(default_factory=list)
    llm: ProviderHealthResponse | None = None
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INVOICE_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
