"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from pydantic import BaseModel, Field

from src.core.entities import Customer, InvoiceStatus, Product

# --- Identity ---


class RegisterRequest(BaseModel):
    """Request to create an account and start a session."""

    email: str = Field(..., min_length=1, examples=["owner@shop.com"])
    password: str = Field(..., min_length=1)
    shop_name: str = Field(..., min_length=1, examples=["Acme Supplies"])


class LoginRequest(BaseModel):
    """Request to start a session."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


# --- Catalog ---


class ProductRequest(BaseModel):
    """Product fields for create and update."""

    name: str = Field(..., min_length=1, examples=["Logo Design"])
    price: float = Field(..., ge=0, examples=[150])
    unit: str = Field(default="pcs", examples=["pcs", "hrs", "service"])
    category: str | None = Field(default="General", examples=["Design"])
    description: str | None = None

    def to_entity(self, product_id: str | None = None) -> Product:
        data = self.model_dump()
        if product_id is not None:
            data["id"] = product_id
        return Product(**data)


class CustomerRequest(BaseModel):
    """Customer fields for create and update."""

    name: str = Field(..., min_length=1, examples=["Acme Corp"])
    email: str = Field(..., min_length=1, examples=["billing@acme.com"])
    phone: str | None = None
    address: str | None = None

    def to_entity(self, customer_id: str | None = None) -> Customer:
        data = self.model_dump()
        if customer_id is not None:
            data["id"] = customer_id
        return Customer(**data)


class UnitRequest(BaseModel):
    """Request to add a unit of measure."""

    unit: str = Field(..., min_length=1, examples=["m2"])


# --- Invoices ---


class InvoiceItemRequest(BaseModel):
    """One line of an invoice being composed.

    Lines carrying the id of an existing line of the edited invoice update
    that line; other lines are added. Omitted price means the product's
    catalog price.
    """

    id: str | None = Field(default=None, description="Existing line id (edits only)")
    product_id: str = Field(..., min_length=1)
    quantity: float = Field(default=1.0, ge=0)
    price: float | None = Field(default=None, ge=0)


class SaveInvoiceRequest(BaseModel):
    """Request to save a new invoice or an edit."""

    customer_id: str = Field(..., min_length=1)
    items: list[InvoiceItemRequest] = Field(default_factory=list)
    generate_pdf: bool = Field(
        default=False,
        description="Also export the saved invoice as a PDF file",
    )


class InvoiceStatusRequest(BaseModel):
    """Request to set an invoice's status."""

    status: InvoiceStatus
