"""PDF generation infrastructure."""

from src.infrastructure.pdf.invoice_renderer import Fpdf2InvoiceRenderer

__all__ = [
    "Fpdf2InvoiceRenderer",
]
