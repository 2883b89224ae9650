"""
Invoice composer.

Holds one invoice draft at a time and turns it into a saved invoice.

    EMPTY --select_customer/add_item--> BUILDING --save--> EMPTY
    start_edit --> BUILDING --save--> SAVED

start_edit(invoice) begins a BUILDING draft seeded from the invoice.

Any change to the draft after a save starts a new draft. Totals are
computed on read from the current lines, with the configured tax rate.
"""

import random
from dataclasses import dataclass
from enum import Enum

from src.config import get_logger
from src.core.entities import Invoice, InvoiceItem, InvoiceLabels, Workspace
from src.core.exceptions import ExportError, RecordNotFoundError, ValidationError
from src.core.services.collections import InvoiceManager
from src.core.services.export import ExportResult, InvoiceExportService

logger = get_logger(__name__)

_NUMBER_ATTEMPTS = 50


class ComposerState(str, Enum):
    EMPTY = "empty"
    BUILDING = "building"
    SAVED = "saved"


@dataclass
class ComposerSaveResult:
    """Outcome of saving a draft."""

    invoice: Invoice
    created: bool
    export: ExportResult | None = None
    export_error: str | None = None


class InvoiceComposer:
    """Build, edit and save invoices against a workspace."""

    def __init__(
        self,
        workspace: Workspace,
        invoice_manager: InvoiceManager,
        exporter: InvoiceExportService | None = None,
        tax_rate: float = 0.0,
        invoice_prefix: str = "INV-",
        default_shop_name: str = "NovaBill",
        rng: random.Random | None = None,
    ):
        if tax_rate < 0:
            raise ValidationError("tax_rate", "must not be negative", tax_rate)

        self._workspace = workspace
        self._invoices = invoice_manager
        self._exporter = exporter
        self._tax_rate = tax_rate
        self._invoice_prefix = invoice_prefix
        self._default_shop_name = default_shop_name
        self._rng = rng or random.Random()

        self._customer_id: str | None = None
        self._items: list[InvoiceItem] = []
        self._editing: Invoice | None = None
        self._saved = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> ComposerState:
        if self._saved:
            return ComposerState.SAVED
        if self._customer_id or self._items or self._editing:
            return ComposerState.BUILDING
        return ComposerState.EMPTY

    @property
    def editing(self) -> Invoice | None:
        """The invoice being edited, or None when composing a new one."""
        return self._editing

    @property
    def customer_id(self) -> str | None:
        return self._customer_id

    @property
    def items(self) -> list[InvoiceItem]:
        return list(self._items)

    @property
    def tax_rate(self) -> float:
        return self._tax_rate

    @property
    def subtotal(self) -> float:
        return sum(item.total for item in self._items)

    @property
    def tax_amount(self) -> float:
        return self.subtotal * self._tax_rate

    @property
    def total(self) -> float:
        return self.subtotal + self.tax_amount

    # ------------------------------------------------------------------
    # Draft lifecycle
    # ------------------------------------------------------------------

    def start_new(self) -> None:
        """Discard the draft and leave editing mode."""
        self._customer_id = None
        self._items = []
        self._editing = None
        self._saved = False

    def start_edit(self, invoice: Invoice) -> None:
        """Begin a draft seeded with the invoice's customer and lines."""
        self._customer_id = invoice.customer_id
        self._items = [item.model_copy() for item in invoice.items]
        self._editing = invoice
        self._saved = False
        logger.debug("invoice_edit_started", invoice_id=invoice.id)

    def _touch(self) -> None:
        # a change after a save opens a fresh draft
        self._saved = False

    # ------------------------------------------------------------------
    # Draft edits
    # ------------------------------------------------------------------

    def select_customer(self, customer_id: str) -> None:
        self._touch()
        self._customer_id = str(customer_id)

    def add_item(self) -> InvoiceItem | None:
        """
        Append a line for the first catalog product, quantity 1.

        Returns:
            The new line, or None when the catalog is empty.
        """
        if not self._workspace.products:
            return None

        self._touch()
        item = InvoiceItem.from_product(self._workspace.products[0])
        self._items.append(item)
        return item

    def set_product(self, item_id: str, product_id: str) -> InvoiceItem:
        """
        Point a line at another catalog product.

        The line takes the product's name, unit and price. An unknown
        product leaves the line as it is.
        """
        index = self._index_of(item_id)
        product = self._workspace.find_product(product_id)
        if product is None:
            logger.debug("product_not_in_catalog", product_id=str(product_id))
            return self._items[index]
        return self._replace_item(index, self._items[index].with_product(product))

    def set_quantity(self, item_id: str, quantity: float) -> InvoiceItem:
        if quantity < 0:
            raise ValidationError("quantity", "must not be negative", quantity)
        index = self._index_of(item_id)
        return self._replace_item(index, self._items[index].with_quantity(quantity))

    def set_price(self, item_id: str, price: float) -> InvoiceItem:
        if price < 0:
            raise ValidationError("price", "must not be negative", price)
        index = self._index_of(item_id)
        return self._replace_item(index, self._items[index].with_price(price))

    def remove_item(self, item_id: str) -> None:
        index = self._index_of(item_id)
        self._touch()
        del self._items[index]

    def reorder_items(self, item_ids: list[str]) -> None:
        """Lay the lines out in the order of item_ids, which must name each line once."""
        item_ids = [str(i) for i in item_ids]
        if sorted(item_ids) != sorted(item.id for item in self._items):
            raise ValidationError("items", "order must list every line exactly once")
        by_id = {item.id: item for item in self._items}
        self._touch()
        self._items = [by_id[item_id] for item_id in item_ids]

    def _index_of(self, item_id: str) -> int:
        item_id = str(item_id)
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise RecordNotFoundError("items", item_id)

    def _replace_item(self, index: int, item: InvoiceItem) -> InvoiceItem:
        self._touch()
        self._items[index] = item
        return item

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def build_invoice(self) -> Invoice:
        """
        Turn the draft into an invoice without saving it.

        Raises:
            ValidationError: If no customer is selected, the customer is not
                in the workspace, or the draft has no lines.
        """
        if not self._customer_id:
            raise ValidationError("customer_id", "a customer must be selected")
        customer = self._workspace.find_customer(self._customer_id)
        if customer is None:
            raise ValidationError(
                "customer_id", "customer is not in the workspace", self._customer_id
            )
        if not self._items:
            raise ValidationError("items", "an invoice needs at least one item")

        fields = {
            "customer_id": customer.id,
            "customer_name": customer.name,
            "customer_address": customer.address,
            "customer_phone": customer.phone,
            "items": list(self._items),
            "tax_rate": self._tax_rate,
        }

        if self._editing is None:
            return Invoice(invoice_number=self._next_invoice_number(), **fields)

        return Invoice(
            id=self._editing.id,
            invoice_number=self._editing.invoice_number,
            date=self._editing.date,
            status=self._editing.status,
            **fields,
        )

    def _next_invoice_number(self) -> str:
        taken = {i.invoice_number for i in self._workspace.invoices}
        number = ""
        for _ in range(_NUMBER_ATTEMPTS):
            number = f"{self._invoice_prefix}{self._rng.randint(1000, 9999)}"
            if number not in taken:
                return number
        # four digits exhausted; a duplicate number is tolerated
        logger.warning("invoice_number_collision", invoice_number=number)
        return number

    async def save(self, generate_pdf: bool = False) -> ComposerSaveResult:
        """
        Save the draft as a new invoice or as the edit of an existing one.

        On success the draft is cleared and editing mode ends. When a PDF is
        requested it is exported after the invoice is stored; an export
        failure is reported on the result and does not undo the save.

        Raises:
            ValidationError: If the draft is incomplete. Nothing is stored.
            RecordNotFoundError: If the edited invoice no longer exists.
        """
        invoice = self.build_invoice()
        created = self._editing is None

        if created:
            await self._invoices.add(self._workspace, invoice)
        else:
            await self._invoices.update(self._workspace, invoice)

        self.start_new()
        # a created invoice leaves an empty composer; an edit ends as SAVED
        self._saved = not created

        logger.info(
            "invoice_saved",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            created=created,
            total=invoice.total,
        )

        result = ComposerSaveResult(invoice=invoice, created=created)
        if generate_pdf:
            if self._exporter is None:
                logger.warning("invoice_export_unavailable", invoice_id=invoice.id)
                result.export_error = "No exporter configured"
                return result
            try:
                result.export = self._exporter.export(
                    invoice,
                    InvoiceLabels.english(),
                    self._workspace.shop_name(self._default_shop_name),
                )
            except ExportError as e:
                logger.warning("invoice_export_failed", invoice_id=invoice.id, error=e.message)
                result.export_error = e.message
        return result
