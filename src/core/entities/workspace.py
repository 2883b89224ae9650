"""
Application state for one session.

The workspace is passed explicitly to the collection managers and the
invoice composer; nothing reads collections from ambient storage.
"""

from pydantic import BaseModel, Field

from src.core.entities.catalog import Customer, Product
from src.core.entities.invoice import Invoice
from src.core.entities.user import User
from src.core.exceptions import StorageReadError

PUBLIC_SCOPE = "public"


class Workspace(BaseModel):
    """Active user plus the in-memory copies of their collections."""

    user: User | None = None
    products: list[Product] = Field(default_factory=list)
    customers: list[Customer] = Field(default_factory=list)
    invoices: list[Invoice] = Field(default_factory=list)
    units: list[str] = Field(default_factory=list)
    # collection name -> {"key", "reason"} of stored data that failed to decode
    load_errors: dict[str, dict[str, str]] = Field(default_factory=dict)

    @property
    def scope(self) -> str:
        """Storage partition of the active user, or the public partition."""
        return self.user.id if self.user else PUBLIC_SCOPE

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def shop_name(self, default: str) -> str:
        if self.user and self.user.shop_name:
            return self.user.shop_name
        return default

    def find_product(self, product_id: str) -> Product | None:
        return next((p for p in self.products if p.id == str(product_id)), None)

    def find_customer(self, customer_id: str) -> Customer | None:
        return next((c for c in self.customers if c.id == str(customer_id)), None)

    def find_invoice(self, invoice_id: str) -> Invoice | None:
        return next((i for i in self.invoices if i.id == str(invoice_id)), None)

    def ensure_readable(self, *collections: str) -> None:
        """
        Refuse to serve collections whose stored data could not be read.

        Raises:
            StorageReadError: For the first listed collection that failed to load.
        """
        for name in collections:
            error = self.load_errors.get(name)
            if error is not None:
                raise StorageReadError(error["key"], error["reason"])

    def clear(self) -> None:
        """Drop the user and every loaded collection."""
        self.user = None
        self.products = []
        self.customers = []
        self.invoices = []
        self.units = []
        self.load_errors = {}
