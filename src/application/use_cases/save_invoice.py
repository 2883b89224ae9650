"""
Save Invoice Use Case.

Drives the invoice composer from a request: picks the customer, lays out
the lines against the current catalog and saves, creating a new invoice
or editing an existing one.
"""

from src.application.dto.requests import InvoiceItemRequest, SaveInvoiceRequest
from src.application.dto.responses import InvoiceResponse, SaveInvoiceResponse
from src.config import get_logger
from src.config.settings import BillingSettings
from src.core.entities import Workspace
from src.core.exceptions import ValidationError
from src.core.services import (
    ComposerSaveResult,
    InvoiceComposer,
    InvoiceExportService,
    InvoiceManager,
)

logger = get_logger(__name__)


class SaveInvoiceUseCase:
    """
    Compose and save an invoice.

    Flow:
    1. Start a draft (fresh, or seeded from the invoice being edited)
    2. Select the customer
    3. Update, add and remove lines to match the request, in its order
    4. Save, optionally exporting a PDF
    """

    def __init__(
        self,
        invoice_manager: InvoiceManager,
        billing: BillingSettings,
        exporter: InvoiceExportService | None = None,
    ):
        self._invoices = invoice_manager
        self._billing = billing
        self._exporter = exporter

    def _composer(self, workspace: Workspace) -> InvoiceComposer:
        return InvoiceComposer(
            workspace,
            self._invoices,
            exporter=self._exporter,
            tax_rate=self._billing.tax_rate,
            invoice_prefix=self._billing.invoice_prefix,
            default_shop_name=self._billing.default_shop_name,
        )

    async def execute(
        self,
        workspace: Workspace,
        request: SaveInvoiceRequest,
        invoice_id: str | None = None,
    ) -> ComposerSaveResult:
        """
        Raises:
            RecordNotFoundError: If invoice_id names no invoice.
            ValidationError: If the customer or a product is unknown, a
                line id repeats, or there are no lines.
        """
        composer = self._composer(workspace)
        if invoice_id is not None:
            composer.start_edit(self._invoices.get(workspace, invoice_id))

        composer.select_customer(request.customer_id)

        line_ids = [line.id for line in request.items if line.id]
        duplicates = sorted({i for i in line_ids if line_ids.count(i) > 1})
        if duplicates:
            raise ValidationError("items", "duplicate line id", ", ".join(duplicates))

        kept = set(line_ids)
        for item in composer.items:
            if item.id not in kept:
                composer.remove_item(item.id)

        existing = {item.id for item in composer.items}
        order = [
            self._apply_line(workspace, composer, line, existing)
            for line in request.items
        ]
        composer.reorder_items(order)

        logger.info(
            "save_invoice_started",
            invoice_id=invoice_id,
            customer_id=request.customer_id,
            items=len(request.items),
        )
        return await composer.save(generate_pdf=request.generate_pdf)

    @staticmethod
    def _apply_line(
        workspace: Workspace,
        composer: InvoiceComposer,
        line: InvoiceItemRequest,
        existing: set[str],
    ) -> str:
        """Bring one line of the draft in line with the request; returns its id."""
        product = workspace.find_product(line.product_id)

        if line.id in existing:
            item_id = line.id
            current = next(i for i in composer.items if i.id == item_id)
            if current.product_id != line.product_id:
                if product is None:
                    raise ValidationError("product_id", "unknown product", line.product_id)
                composer.set_product(item_id, product.id)
        else:
            if product is None:
                raise ValidationError("product_id", "unknown product", line.product_id)
            added = composer.add_item()
            if added is None:
                raise ValidationError("items", "the product catalog is empty")
            item_id = added.id
            composer.set_product(item_id, product.id)

        composer.set_quantity(item_id, line.quantity)
        if line.price is not None:
            composer.set_price(item_id, line.price)
        return item_id

    @staticmethod
    def to_response(result: ComposerSaveResult) -> SaveInvoiceResponse:
        return SaveInvoiceResponse(
            invoice=InvoiceResponse.model_validate(result.invoice),
            created=result.created,
            pdf_file=(
                str(result.export.file_path)
                if result.export and result.export.file_path
                else None
            ),
            export_error=result.export_error,
        )
