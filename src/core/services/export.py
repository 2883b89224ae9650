"""
Invoice export service.

Pure service that turns an invoice into a document file. The actual
rendering is delegated to an injected IInvoiceRenderer.
"""

import re
from dataclasses import dataclass
from pathlib import Path

from src.config import get_logger
from src.core.entities.invoice import Invoice, InvoiceLabels
from src.core.exceptions import ExportError
from src.core.interfaces.pdf import IInvoiceRenderer

logger = get_logger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def export_filename(invoice_number: str) -> str:
    """File name for an exported invoice: invoice_<number>.pdf."""
    return f"invoice_{_UNSAFE_FILENAME_CHARS.sub('_', invoice_number)}.pdf"


@dataclass
class ExportResult:
    """Result of an invoice export."""

    pdf_bytes: bytes
    filename: str
    file_path: Path | None
    file_size: int


class InvoiceExportService:
    """Render invoices and optionally write them to the export directory."""

    def __init__(self, renderer: IInvoiceRenderer, output_dir: Path | None = None):
        self._renderer = renderer
        self._output_dir = output_dir

    def render(
        self, invoice: Invoice, labels: InvoiceLabels, shop_name: str
    ) -> ExportResult:
        """
        Render an invoice without writing it anywhere.

        Raises:
            ExportError: If the renderer fails.
        """
        logger.info("rendering_invoice", invoice_number=invoice.invoice_number)
        try:
            pdf_bytes = self._renderer.render(invoice, labels, shop_name)
        except ExportError:
            raise
        except Exception as e:
            logger.error(
                "invoice_render_failed",
                invoice_number=invoice.invoice_number,
                error=str(e),
            )
            raise ExportError(invoice.invoice_number, str(e)) from e

        return ExportResult(
            pdf_bytes=pdf_bytes,
            filename=export_filename(invoice.invoice_number),
            file_path=None,
            file_size=len(pdf_bytes),
        )

    def export(
        self, invoice: Invoice, labels: InvoiceLabels, shop_name: str
    ) -> ExportResult:
        """
        Render an invoice and save it as invoice_<number>.pdf.

        Without an output directory the document is rendered but not written.

        Raises:
            ExportError: If rendering or writing fails.
        """
        result = self.render(invoice, labels, shop_name)
        if self._output_dir is None:
            return result

        path = self._output_dir / result.filename
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(result.pdf_bytes)
        except OSError as e:
            logger.error("invoice_write_failed", path=str(path), error=str(e))
            raise ExportError(invoice.invoice_number, str(e)) from e

        result.file_path = path
        logger.info(
            "invoice_exported",
            invoice_number=invoice.invoice_number,
            path=str(path),
            size_bytes=result.file_size,
        )
        return result
