"""Product catalog and customer entities."""

from pydantic import Field

from src.core.entities.base import StoredRecord


class Product(StoredRecord):
    """A sellable product or service in the catalog."""

    name: str
    price: float = Field(ge=0)
    unit: str = "pcs"
    category: str | None = "General"
    description: str | None = None


class Customer(StoredRecord):
    """A customer that invoices are billed to. Emails are not unique."""

    name: str
    email: str
    phone: str | None = None
    address: str | None = None
