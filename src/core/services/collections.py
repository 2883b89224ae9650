"""
Collection managers.

Each manager mutates one workspace collection and immediately persists
the whole collection under the workspace's scope. The new collection is
written first and only then swapped into the workspace, so a failed write
leaves the in-memory copy matching what is stored.
"""

from typing import Generic, TypeVar

from src.config import get_logger
from src.core.entities import Customer, Invoice, InvoiceStatus, Product, Workspace
from src.core.entities.base import StoredRecord
from src.core.exceptions import RecordNotFoundError, ValidationError
from src.core.services.persistence import CollectionGateway

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=StoredRecord)


class CollectionManager(Generic[RecordT]):
    """Add, update and delete for one id-carrying collection."""

    collection_name: str = ""

    def __init__(self, gateway: CollectionGateway) -> None:
        self._gateway = gateway

    def _items(self, workspace: Workspace) -> list[RecordT]:
        raise NotImplementedError

    def _assign(self, workspace: Workspace, items: list[RecordT]) -> None:
        raise NotImplementedError

    async def _store(self, scope: str, items: list[RecordT]) -> None:
        raise NotImplementedError

    async def _commit(self, workspace: Workspace, items: list[RecordT]) -> None:
        await self._store(workspace.scope, items)
        self._assign(workspace, items)

    def list_records(self, workspace: Workspace) -> list[RecordT]:
        return list(self._items(workspace))

    def get(self, workspace: Workspace, record_id: str) -> RecordT:
        """
        Raises:
            RecordNotFoundError: If no record has this id.
        """
        record_id = str(record_id)
        for record in self._items(workspace):
            if record.id == record_id:
                return record
        raise RecordNotFoundError(self.collection_name, record_id)

    async def add(self, workspace: Workspace, record: RecordT) -> RecordT:
        """Prepend a record so the newest appears first."""
        await self._commit(workspace, [record, *self._items(workspace)])
        logger.info(
            "record_added",
            collection=self.collection_name,
            record_id=record.id,
            scope=workspace.scope,
        )
        return record

    async def update(self, workspace: Workspace, record: RecordT) -> RecordT:
        """
        Replace the record with the same id, keeping its position.

        Raises:
            RecordNotFoundError: If no record has this id.
        """
        items = self._items(workspace)
        if not any(r.id == record.id for r in items):
            raise RecordNotFoundError(self.collection_name, record.id)

        await self._commit(
            workspace, [record if r.id == record.id else r for r in items]
        )
        logger.info(
            "record_updated",
            collection=self.collection_name,
            record_id=record.id,
            scope=workspace.scope,
        )
        return record

    async def delete(self, workspace: Workspace, record_id: str) -> bool:
        """
        Remove the record with this id.

        Deleting does not cascade: invoices keep their customer and product
        snapshots.

        Returns:
            True if a record was removed. The collection is persisted either way.
        """
        record_id = str(record_id)
        items = self._items(workspace)
        remaining = [r for r in items if r.id != record_id]
        await self._commit(workspace, remaining)

        removed = len(remaining) != len(items)
        logger.info(
            "record_deleted",
            collection=self.collection_name,
            record_id=record_id,
            removed=removed,
            scope=workspace.scope,
        )
        return removed


class ProductManager(CollectionManager[Product]):
    collection_name = "products"

    def _items(self, workspace: Workspace) -> list[Product]:
        return workspace.products

    def _assign(self, workspace: Workspace, items: list[Product]) -> None:
        workspace.products = items

    async def _store(self, scope: str, items: list[Product]) -> None:
        await self._gateway.store_products(scope, items)

    def search(self, workspace: Workspace, term: str) -> list[Product]:
        """Case-insensitive substring match on name or category."""
        needle = term.strip().lower()
        if not needle:
            return self.list_records(workspace)
        return [
            p
            for p in workspace.products
            if needle in p.name.lower() or needle in (p.category or "").lower()
        ]


class CustomerManager(CollectionManager[Customer]):
    collection_name = "customers"

    def _items(self, workspace: Workspace) -> list[Customer]:
        return workspace.customers

    def _assign(self, workspace: Workspace, items: list[Customer]) -> None:
        workspace.customers = items

    async def _store(self, scope: str, items: list[Customer]) -> None:
        await self._gateway.store_customers(scope, items)


class InvoiceManager(CollectionManager[Invoice]):
    collection_name = "invoices"

    def _items(self, workspace: Workspace) -> list[Invoice]:
        return workspace.invoices

    def _assign(self, workspace: Workspace, items: list[Invoice]) -> None:
        workspace.invoices = items

    async def _store(self, scope: str, items: list[Invoice]) -> None:
        await self._gateway.store_invoices(scope, items)

    async def set_status(
        self, workspace: Workspace, invoice_id: str, status: InvoiceStatus
    ) -> Invoice:
        invoice = self.get(workspace, invoice_id)
        return await self.update(workspace, invoice.with_status(status))

    async def toggle_status(self, workspace: Workspace, invoice_id: str) -> Invoice:
        """Flip paid to pending and anything else to paid."""
        invoice = self.get(workspace, invoice_id)
        return await self.update(workspace, invoice.with_status(invoice.status.toggled()))

    def sorted_by_date(self, workspace: Workspace) -> list[Invoice]:
        """Newest first."""
        return sorted(workspace.invoices, key=lambda i: i.date, reverse=True)


class UnitManager:
    """Manage the unit-of-measure list for a workspace."""

    def __init__(self, gateway: CollectionGateway) -> None:
        self._gateway = gateway

    def list_units(self, workspace: Workspace) -> list[str]:
        return list(workspace.units)

    async def add_unit(self, workspace: Workspace, unit: str) -> list[str]:
        """
        Append a unit if it is not already present.

        Raises:
            ValidationError: If the unit is blank.
        """
        unit = unit.strip()
        if not unit:
            raise ValidationError("unit", "is required")
        if unit in workspace.units:
            return self.list_units(workspace)

        units = [*workspace.units, unit]
        await self._gateway.store_units(workspace.scope, units)
        workspace.units = units
        logger.info("unit_added", unit=unit, scope=workspace.scope)
        return self.list_units(workspace)
