"""
Export Invoice PDF Use Case.

Renders a stored invoice with the fixed English labels and the shop's
name, and writes invoice_<number>.pdf to the export directory.
"""

from src.config import get_logger
from src.core.entities import InvoiceLabels, Workspace
from src.core.services import ExportResult, InvoiceExportService, InvoiceManager

logger = get_logger(__name__)


class ExportInvoicePdfUseCase:
    """
    Use case for invoice PDF export.

    Flow:
    1. Look the invoice up in the workspace
    2. Render it via the export service
    3. Return PDF bytes and metadata
    """

    def __init__(
        self,
        invoice_manager: InvoiceManager,
        exporter: InvoiceExportService,
        default_shop_name: str = "NovaBill",
    ):
        self._invoices = invoice_manager
        self._exporter = exporter
        self._default_shop_name = default_shop_name

    def execute(self, workspace: Workspace, invoice_id: str) -> ExportResult:
        """
        Raises:
            RecordNotFoundError: If no invoice has this id.
            ExportError: If rendering or writing fails.
        """
        invoice = self._invoices.get(workspace, invoice_id)
        logger.info("export_invoice_pdf_started", invoice_id=invoice.id)

        result = self._exporter.export(
            invoice,
            InvoiceLabels.english(),
            workspace.shop_name(self._default_shop_name),
        )

        logger.info(
            "export_invoice_pdf_complete",
            invoice_id=invoice.id,
            file_size=result.file_size,
        )
        return result
