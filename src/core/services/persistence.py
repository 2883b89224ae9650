"""
Persistence gateway.

Maps a logical collection name plus the active user's scope to one
JSON document in the key-value store. Collections are always read and
written whole: there is no partial update, no query and no index.

Key layout (prefix defaults to "novabill"):

    <prefix>_<scope>_products | _customers | _invoices | _units
    <prefix>_users_db            all registered users (global)
    <prefix>_current_session     the active user, without credentials
"""

import json
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.config import get_logger
from src.core.entities import Customer, Invoice, Product, User
from src.core.exceptions import StorageReadError
from src.core.interfaces.storage import IKeyValueStore

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class Collection(str, Enum):
    """Named per-scope collections."""

    PRODUCTS = "products"
    CUSTOMERS = "customers"
    INVOICES = "invoices"
    UNITS = "units"


DEFAULT_UNITS: list[str] = ["pcs", "hrs", "kg", "lb", "box", "service"]

SEED_PRODUCTS: list[dict[str, Any]] = [
    {
        "id": "1",
        "name": "Web Design Basic",
        "price": 500,
        "unit": "service",
        "category": "Service",
        "description": "5 page static site",
    },
    {
        "id": "2",
        "name": "SEO Audit",
        "price": 250,
        "unit": "service",
        "category": "Consulting",
        "description": "Comprehensive site audit",
    },
    {
        "id": "3",
        "name": "Logo Design",
        "price": 150,
        "unit": "pcs",
        "category": "Design",
        "description": "Vector logo with 3 revisions",
    },
]

SEED_CUSTOMERS: list[dict[str, Any]] = [
    {
        "id": "1",
        "name": "Acme Corp",
        "email": "billing@acme.com",
        "phone": "555-0123",
        "address": "123 Innovation Dr",
    },
    {
        "id": "2",
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "555-0199",
        "address": "456 Resident St",
    },
]

# Collections whose records carry an id that must come back as a string
_ID_COLLECTIONS = frozenset({Collection.PRODUCTS, Collection.CUSTOMERS, Collection.INVOICES})

_COLLECTION_NAMES = frozenset(c.value for c in Collection)

_SEEDS: dict[Collection, list[dict[str, Any]]] = {
    Collection.PRODUCTS: SEED_PRODUCTS,
    Collection.CUSTOMERS: SEED_CUSTOMERS,
}


class CollectionGateway:
    """Whole-collection get/save over an IKeyValueStore."""

    def __init__(self, store: IKeyValueStore, key_prefix: str = "novabill") -> None:
        self._store = store
        self._prefix = key_prefix

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def key_for(self, collection: Collection, scope: str) -> str:
        return f"{self._prefix}_{scope}_{collection.value}"

    @property
    def users_key(self) -> str:
        return f"{self._prefix}_users_db"

    @property
    def session_key(self) -> str:
        return f"{self._prefix}_current_session"

    # ------------------------------------------------------------------
    # Raw collections
    # ------------------------------------------------------------------

    async def get(self, collection: Collection, scope: str) -> list[Any]:
        """
        Read a whole collection.

        Missing collections read as empty, except units which read as the
        default unit list. Records of id-carrying collections come back
        with their id as a string.

        Raises:
            StorageReadError: If the stored document cannot be decoded.
        """
        key = self.key_for(collection, scope)
        raw = await self._store.get(key)
        if raw is None:
            return list(DEFAULT_UNITS) if collection is Collection.UNITS else []

        records = self._decode(key, raw, list)
        if collection in _ID_COLLECTIONS:
            records = [self._normalize_id(key, r) for r in records]
        return records

    async def save(self, collection: Collection, scope: str, records: list[Any]) -> None:
        """Replace a whole collection."""
        key = self.key_for(collection, scope)
        await self._store.set(key, json.dumps(records))
        logger.info(
            "collection_saved",
            collection=collection.value,
            scope=scope,
            count=len(records),
        )

    async def seed(self, scope: str) -> list[Collection]:
        """
        Store the starter products and customers for scope.

        A collection is seeded only when nothing at all is stored for it;
        an explicitly emptied collection stays empty.

        Returns:
            The collections that were seeded.
        """
        seeded = []
        for collection, records in _SEEDS.items():
            key = self.key_for(collection, scope)
            if await self._store.get(key) is None:
                await self._store.set(key, json.dumps(records))
                seeded.append(collection)

        if seeded:
            logger.info(
                "collections_seeded",
                scope=scope,
                collections=[c.value for c in seeded],
            )
        return seeded

    async def scopes(self) -> list[str]:
        """Scopes that have at least one collection stored."""
        head = f"{self._prefix}_"
        found = set()
        for key in await self._store.keys(head):
            scope, _, collection = key[len(head):].rpartition("_")
            if scope and collection in _COLLECTION_NAMES:
                found.add(scope)
        return sorted(found)

    # ------------------------------------------------------------------
    # Typed collections
    # ------------------------------------------------------------------

    async def load_products(self, scope: str) -> list[Product]:
        return await self._load_models(Collection.PRODUCTS, scope, Product)

    async def load_customers(self, scope: str) -> list[Customer]:
        return await self._load_models(Collection.CUSTOMERS, scope, Customer)

    async def load_invoices(self, scope: str) -> list[Invoice]:
        return await self._load_models(Collection.INVOICES, scope, Invoice)

    async def load_units(self, scope: str) -> list[str]:
        return [str(u) for u in await self.get(Collection.UNITS, scope)]

    async def store_products(self, scope: str, products: list[Product]) -> None:
        await self.save(Collection.PRODUCTS, scope, [p.to_storage() for p in products])

    async def store_customers(self, scope: str, customers: list[Customer]) -> None:
        await self.save(Collection.CUSTOMERS, scope, [c.to_storage() for c in customers])

    async def store_invoices(self, scope: str, invoices: list[Invoice]) -> None:
        await self.save(Collection.INVOICES, scope, [i.to_storage() for i in invoices])

    async def store_units(self, scope: str, units: list[str]) -> None:
        await self.save(Collection.UNITS, scope, list(units))

    # ------------------------------------------------------------------
    # Users and session
    # ------------------------------------------------------------------

    async def get_users(self) -> list[User]:
        raw = await self._store.get(self.users_key)
        if raw is None:
            return []
        records = self._decode(self.users_key, raw, list)
        return [self._to_model(self.users_key, User, r) for r in records]

    async def save_users(self, users: list[User]) -> None:
        await self._store.set(
            self.users_key, json.dumps([u.to_storage() for u in users])
        )
        logger.info("users_saved", count=len(users))

    async def get_session(self) -> User | None:
        raw = await self._store.get(self.session_key)
        if raw is None:
            return None
        record = self._decode(self.session_key, raw, dict)
        return self._to_model(self.session_key, User, record).public()

    async def save_session(self, user: User) -> None:
        await self._store.set(self.session_key, json.dumps(user.public().to_storage()))

    async def clear_session(self) -> None:
        await self._store.delete(self.session_key)

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    async def _load_models(
        self, collection: Collection, scope: str, model: type[ModelT]
    ) -> list[ModelT]:
        key = self.key_for(collection, scope)
        return [self._to_model(key, model, r) for r in await self.get(collection, scope)]

    @staticmethod
    def _decode(key: str, raw: str, expected: type) -> Any:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("stored_data_corrupt", key=key, error=str(e))
            raise StorageReadError(key, str(e)) from e

        if not isinstance(data, expected):
            raise StorageReadError(
                key, f"expected a JSON {expected.__name__}, found {type(data).__name__}"
            )
        return data

    @staticmethod
    def _normalize_id(key: str, record: Any) -> Any:
        if not isinstance(record, dict):
            raise StorageReadError(key, f"record is not an object: {record!r}"[:120])
        if "id" in record:
            return {**record, "id": str(record["id"])}
        return record

    @staticmethod
    def _to_model(key: str, model: type[ModelT], record: Any) -> ModelT:
        try:
            return model.model_validate(record)
        except PydanticValidationError as e:
            raise StorageReadError(key, f"invalid {model.__name__} record: {e}") from e
