"""Pytest configuration and fixtures."""

import random
from datetime import datetime, timezone

import pytest

from src.core.entities import Customer, Invoice, InvoiceItem, Product, User, Workspace
from src.core.services import (
    CollectionGateway,
    CustomerManager,
    InvoiceManager,
    ProductManager,
    UnitManager,
)
from src.core.services.persistence import DEFAULT_UNITS
from src.infrastructure.storage import InMemoryKeyValueStore


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    """Empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def gateway(kv_store: InMemoryKeyValueStore) -> CollectionGateway:
    return CollectionGateway(kv_store)


@pytest.fixture
def sample_user() -> User:
    return User(id="user_abc", email="a@b.com", shop_name="Acme")


@pytest.fixture
def sample_products() -> list[Product]:
    return [
        Product(id="1", name="Web Design Basic", price=500, unit="service", category="Service"),
        Product(id="2", name="SEO Audit", price=250, unit="service", category="Consulting"),
        Product(id="3", name="Logo Design", price=150, unit="pcs", category="Design"),
    ]


@pytest.fixture
def sample_customers() -> list[Customer]:
    return [
        Customer(
            id="1",
            name="Acme Corp",
            email="billing@acme.com",
            phone="555-0123",
            address="123 Innovation Dr",
        ),
        Customer(
            id="2",
            name="Jane Doe",
            email="jane@example.com",
            phone="555-0199",
            address="456 Resident St",
        ),
    ]


@pytest.fixture
def sample_invoice(sample_products: list[Product]) -> Invoice:
    """Pending invoice for Jane Doe: 2 x Logo Design."""
    return Invoice(
        id="inv-1",
        invoice_number="INV-1234",
        date=datetime(2026, 3, 14, 10, 30, tzinfo=timezone.utc),
        customer_id="2",
        customer_name="Jane Doe",
        customer_address="456 Resident St",
        customer_phone="555-0199",
        items=[InvoiceItem.from_product(sample_products[2], quantity=2)],
    )


@pytest.fixture
def workspace(
    sample_user: User,
    sample_products: list[Product],
    sample_customers: list[Customer],
) -> Workspace:
    """Logged-in workspace with the starter catalog and no invoices."""
    return Workspace(
        user=sample_user,
        products=list(sample_products),
        customers=list(sample_customers),
        invoices=[],
        units=list(DEFAULT_UNITS),
    )


@pytest.fixture
def product_manager(gateway: CollectionGateway) -> ProductManager:
    return ProductManager(gateway)


@pytest.fixture
def customer_manager(gateway: CollectionGateway) -> CustomerManager:
    return CustomerManager(gateway)


@pytest.fixture
def invoice_manager(gateway: CollectionGateway) -> InvoiceManager:
    return InvoiceManager(gateway)


@pytest.fixture
def unit_manager(gateway: CollectionGateway) -> UnitManager:
    return UnitManager(gateway)


@pytest.fixture
def rng() -> random.Random:
    """Seeded RNG so invoice numbers are reproducible."""
    return random.Random(42)
