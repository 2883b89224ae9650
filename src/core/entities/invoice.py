"""
Invoice domain entities with Pydantic v2 validation.

Derived amounts are recomputed by model validators, so a constructed
item or invoice always satisfies:

    item.total        == item.quantity * item.price
    invoice.subtotal  == sum(item.total for item in invoice.items)
    invoice.tax_amount == invoice.subtotal * invoice.tax_rate
    invoice.total     == invoice.subtotal + invoice.tax_amount
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from src.core.entities.base import StoredRecord
from src.core.entities.catalog import Product


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InvoiceStatus(str, Enum):
    """Payment status of an invoice."""

    PAID = "paid"
    PENDING = "pending"
    DRAFT = "draft"  # only ever set explicitly; saves never produce it

    def toggled(self) -> "InvoiceStatus":
        """Flip between paid and pending; anything unpaid becomes paid."""
        if self is InvoiceStatus.PAID:
            return InvoiceStatus.PENDING
        return InvoiceStatus.PAID


class InvoiceItem(StoredRecord):
    """
    A line on an invoice.

    Product fields are a snapshot taken when the line was last pointed at
    a product; later catalog edits or deletions do not touch them.
    """

    product_id: str
    product_name: str
    unit: str = "pcs"
    price: float = Field(ge=0)
    quantity: float = Field(default=1.0, ge=0)
    total: float = 0.0

    @field_validator("product_id", mode="before")
    @classmethod
    def coerce_product_id(cls, v: Any) -> str:
        return str(v)

    @model_validator(mode="after")
    def compute_total(self) -> "InvoiceItem":
        self.total = self.quantity * self.price
        return self

    @classmethod
    def from_product(cls, product: Product, quantity: float = 1.0) -> "InvoiceItem":
        """Start a new line for *product*."""
        return cls(
            product_id=product.id,
            product_name=product.name,
            unit=product.unit,
            price=product.price,
            quantity=quantity,
        )

    def with_product(self, product: Product) -> "InvoiceItem":
        """Re-point the line at *product*, copying its name, unit and price."""
        return self._replace(
            product_id=product.id,
            product_name=product.name,
            unit=product.unit,
            price=product.price,
        )

    def with_quantity(self, quantity: float) -> "InvoiceItem":
        return self._replace(quantity=quantity)

    def with_price(self, price: float) -> "InvoiceItem":
        return self._replace(price=price)

    def _replace(self, **changes: Any) -> "InvoiceItem":
        # model_copy skips validation, rebuild so total is recomputed
        return type(self).model_validate({**self.model_dump(), **changes})


class Invoice(StoredRecord):
    """
    An invoice with customer snapshot fields and computed totals.

    invoice_number and date are fixed at creation and carried over
    unchanged when an invoice is edited.
    """

    invoice_number: str
    date: datetime = Field(default_factory=utcnow)

    customer_id: str
    customer_name: str
    customer_address: str | None = None
    customer_phone: str | None = None

    items: list[InvoiceItem] = Field(default_factory=list)

    subtotal: float = 0.0
    tax_rate: float = Field(default=0.0, ge=0)
    tax_amount: float = 0.0
    total: float = 0.0

    status: InvoiceStatus = InvoiceStatus.PENDING

    @field_validator("customer_id", mode="before")
    @classmethod
    def coerce_customer_id(cls, v: Any) -> str:
        return str(v)

    @field_validator("date")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC so invoices stay comparable."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def compute_totals(self) -> "Invoice":
        self.subtotal = sum(item.total for item in self.items)
        self.tax_amount = self.subtotal * self.tax_rate
        self.total = self.subtotal + self.tax_amount
        return self

    def with_status(self, status: InvoiceStatus) -> "Invoice":
        return self.model_copy(update={"status": status})


class InvoiceLabels(BaseModel):
    """Captions used when rendering an invoice document."""

    title: str
    invoice_num: str
    date: str
    bill_to: str
    item: str
    quantity: str
    price: str
    total: str
    subtotal: str
    tax: str
    grand_total: str

    @classmethod
    def english(cls) -> "InvoiceLabels":
        """Fixed label set for exported documents, whatever the UI language."""
        return cls(
            title="INVOICE",
            invoice_num="Invoice #",
            date="Date",
            bill_to="Bill To",
            item="Item",
            quantity="Qty",
            price="Price",
            total="Total",
            subtotal="Subtotal",
            tax="Tax",
            grand_total="Grand Total",
        )
