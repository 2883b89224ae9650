"""Abstract interface for invoice document rendering."""

from abc import ABC, abstractmethod

from src.core.entities.invoice import Invoice, InvoiceLabels


class IInvoiceRenderer(ABC):
    """Interface for invoice document rendering implementations."""

    @abstractmethod
    def render(self, invoice: Invoice, labels: InvoiceLabels, shop_name: str) -> bytes:
        """Render an invoice into document bytes. Must not mutate the invoice."""
        ...
