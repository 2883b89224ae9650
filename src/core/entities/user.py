"""User account entity."""

from pydantic import Field

from src.core.entities.base import StoredRecord, new_record_id


def new_user_id() -> str:
    return f"user_{new_record_id()}"


class User(StoredRecord):
    """
    A registered shop owner.

    The email is the login key and is compared as an exact string.
    password_hash is only ever set on the stored user table; anything
    handed out of the identity service is public().
    """

    id: str = Field(default_factory=new_user_id)
    email: str
    shop_name: str
    password_hash: str | None = None

    def public(self) -> "User":
        """Copy of the user without credentials."""
        return self.model_copy(update={"password_hash": None})
