"""Shared base for records persisted as JSON collections."""

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def new_record_id() -> str:
    """Generate an opaque unique record id."""
    return uuid4().hex


class StoredRecord(BaseModel):
    """
    Base for every record kept in a stored collection.

    Stored JSON uses camelCase keys; attributes are snake_case and both
    spellings are accepted on input. Ids are always strings, whatever
    type a previous storage round-trip left behind.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=new_record_id)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        return str(v)

    def to_storage(self) -> dict[str, Any]:
        """Serialize for the key-value store."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
