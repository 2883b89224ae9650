"""
Invoice PDF renderer using fpdf2.

Lays out the shop name and invoice title, the bill-to block, a grid of
line items with an accent-coloured header row, and the totals. Missing
optional customer details are skipped rather than printed blank.
"""

from fpdf import FPDF
from fpdf.enums import MethodReturnValue, XPos, YPos

from src.config.settings import PdfSettings, get_settings
from src.core.entities.invoice import Invoice, InvoiceLabels
from src.core.interfaces.pdf import IInvoiceRenderer


def _latin1(text: str) -> str:
    """Core PDF fonts are Latin-1 only; replace anything else with '?'."""
    return text.encode("latin-1", errors="replace").decode("latin-1")


class _InvoicePdf(FPDF):
    """FPDF subclass that prints the thank-you line on every page."""

    def __init__(self, footer_text: str) -> None:
        super().__init__()
        self._footer_text = footer_text

    def footer(self) -> None:
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 5, _latin1(self._footer_text), align="L")
        self.set_x(-40)
        self.cell(0, 5, f"Page {self.page_no()} of {{nb}}", align="R")
        self.set_text_color(0, 0, 0)


class Fpdf2InvoiceRenderer(IInvoiceRenderer):
    """Renders invoice PDFs using fpdf2."""

    COL_WIDTHS = (86, 32, 32, 32)

    def __init__(
        self,
        pdf_settings: PdfSettings | None = None,
        currency_symbol: str | None = None,
    ) -> None:
        settings = get_settings()
        self._settings = pdf_settings or settings.pdf
        self._currency = (
            currency_symbol if currency_symbol is not None else settings.billing.currency_symbol
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, invoice: Invoice, labels: InvoiceLabels, shop_name: str) -> bytes:
        pdf = _InvoicePdf(self._settings.footer_text)
        pdf.set_auto_page_break(auto=True, margin=20)
        pdf.add_page()

        self._render_header(pdf, invoice, labels, shop_name)
        self._render_bill_to(pdf, invoice, labels)
        self._render_items_table(pdf, invoice, labels)
        self._render_totals(pdf, invoice, labels)

        return bytes(pdf.output())

    def _money(self, amount: float) -> str:
        return _latin1(f"{self._currency} {amount:,.2f}")

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _render_header(
        self, pdf: FPDF, invoice: Invoice, labels: InvoiceLabels, shop_name: str
    ) -> None:
        """Shop name on the left, title and invoice details on the right."""
        pdf.set_xy(14, 12)
        pdf.set_font("Helvetica", "B", 22)
        pdf.set_text_color(*self._settings.accent_color)
        pdf.cell(110, 12, _latin1(shop_name))

        pdf.set_xy(130, 12)
        pdf.set_font("Helvetica", "B", 20)
        pdf.set_text_color(0, 0, 0)
        pdf.cell(0, 12, _latin1(labels.title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        pdf.set_font("Helvetica", "", 10)
        pdf.set_text_color(100, 100, 100)
        pdf.set_x(130)
        pdf.cell(
            0, 5, _latin1(f"{labels.invoice_num} {invoice.invoice_number}"),
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.set_x(130)
        pdf.cell(
            0, 5, _latin1(f"{labels.date}: {invoice.date:%Y-%m-%d}"),
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.set_text_color(0, 0, 0)
        pdf.ln(6)

    @staticmethod
    def _render_bill_to(pdf: FPDF, invoice: Invoice, labels: InvoiceLabels) -> None:
        pdf.set_x(14)
        pdf.set_font("Helvetica", "B", 12)
        pdf.cell(0, 7, _latin1(labels.bill_to), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        pdf.set_font("Helvetica", "", 10)
        pdf.set_text_color(80, 80, 80)
        lines = [invoice.customer_name]
        if invoice.customer_address:
            lines.append(invoice.customer_address)
        if invoice.customer_phone:
            lines.append(f"Ph: {invoice.customer_phone}")
        for line in lines:
            pdf.set_x(14)
            pdf.cell(0, 5, _latin1(line), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_text_color(0, 0, 0)
        pdf.ln(8)

    def _render_items_table(
        self, pdf: FPDF, invoice: Invoice, labels: InvoiceLabels
    ) -> None:
        headers = (labels.item, labels.quantity, labels.price, labels.total)

        pdf.set_x(14)
        pdf.set_font("Helvetica", "B", 10)
        pdf.set_fill_color(*self._settings.accent_color)
        pdf.set_text_color(255, 255, 255)
        for width, header in zip(self.COL_WIDTHS, headers):
            pdf.cell(width, 8, _latin1(header), border=1, fill=True, align="C")
        pdf.ln()
        pdf.set_text_color(0, 0, 0)

        pdf.set_font("Helvetica", "", 9)
        for idx, item in enumerate(invoice.items, 1):
            fill = idx % 2 == 0
            if fill:
                pdf.set_fill_color(243, 244, 246)

            # long product names wrap inside their column; the row grows to fit
            name = _latin1(item.product_name)
            lines = pdf.multi_cell(
                self.COL_WIDTHS[0], 5, name, dry_run=True, output=MethodReturnValue.LINES
            )
            row_h = max(7, 5 * len(lines) + 2)
            if pdf.will_page_break(row_h):
                pdf.add_page()

            y = pdf.get_y()
            pdf.rect(14, y, self.COL_WIDTHS[0], row_h, style="DF" if fill else "D")
            pdf.set_xy(14, y + 1)
            pdf.multi_cell(self.COL_WIDTHS[0], 5, name)

            pdf.set_xy(14 + self.COL_WIDTHS[0], y)
            pdf.cell(
                self.COL_WIDTHS[1], row_h, _latin1(f"{item.quantity:g} {item.unit or ''}".strip()),
                border=1, align="R", fill=fill,
            )
            pdf.cell(
                self.COL_WIDTHS[2], row_h, self._money(item.price),
                border=1, align="R", fill=fill,
            )
            pdf.cell(
                self.COL_WIDTHS[3], row_h, self._money(item.total),
                border=1, align="R", fill=fill,
            )
            pdf.set_xy(14, y + row_h)

        pdf.ln(6)

    def _render_totals(self, pdf: FPDF, invoice: Invoice, labels: InvoiceLabels) -> None:
        pdf.set_font("Helvetica", "", 10)
        for caption, amount in (
            (labels.subtotal, invoice.subtotal),
            (labels.tax, invoice.tax_amount),
        ):
            pdf.set_x(110)
            pdf.cell(45, 6, _latin1(f"{caption}:"), align="R")
            pdf.cell(0, 6, self._money(amount), align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        pdf.ln(2)
        pdf.set_x(110)
        pdf.set_font("Helvetica", "B", 12)
        pdf.set_text_color(*self._settings.accent_color)
        pdf.cell(45, 8, _latin1(f"{labels.grand_total}:"), align="R")
        pdf.cell(0, 8, self._money(invoice.total), align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_text_color(0, 0, 0)
