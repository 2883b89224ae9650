"""
Identity service.

Registers and authenticates users against the stored user table and
keeps the single active session record. Passwords are stored as salted
PBKDF2 hashes; nothing returned from here carries credentials.
"""

from src.config import get_logger
from src.core.entities.user import User
from src.core.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    ValidationError,
)
from src.core.security import hash_password, verify_password
from src.core.services.persistence import CollectionGateway

logger = get_logger(__name__)


class IdentityService:
    """Register, log in, log out and restore the active session."""

    def __init__(
        self,
        gateway: CollectionGateway,
        hash_iterations: int = 260000,
        salt_bytes: int = 16,
    ) -> None:
        self._gateway = gateway
        self._hash_iterations = hash_iterations
        self._salt_bytes = salt_bytes

    async def register(self, email: str, password: str, shop_name: str) -> User:
        """
        Create a user and make it the active session.

        Raises:
            ValidationError: If a field is blank.
            DuplicateEmailError: If the email is already registered
                (exact string match).
        """
        _require("email", email)
        _require("password", password)
        _require("shop_name", shop_name)

        users = await self._gateway.get_users()
        if any(u.email == email for u in users):
            logger.info("registration_rejected", reason="duplicate_email")
            raise DuplicateEmailError()

        user = User(
            email=email,
            shop_name=shop_name,
            password_hash=hash_password(
                password,
                iterations=self._hash_iterations,
                salt_bytes=self._salt_bytes,
            ),
        )
        await self._gateway.save_users([*users, user])
        await self._gateway.save_session(user)

        logger.info("user_registered", user_id=user.id)
        return user.public()

    async def login(self, email: str, password: str) -> User:
        """
        Authenticate and make the user the active session.

        Raises:
            InvalidCredentialsError: If no user matches both email and
                password. The error does not say which one failed.
        """
        users = await self._gateway.get_users()
        user = next(
            (
                u
                for u in users
                if u.email == email and verify_password(password, u.password_hash)
            ),
            None,
        )
        if user is None:
            logger.info("login_failed")
            raise InvalidCredentialsError()

        await self._gateway.save_session(user)
        logger.info("user_logged_in", user_id=user.id)
        return user.public()

    async def logout(self) -> None:
        await self._gateway.clear_session()
        logger.info("user_logged_out")

    async def get_current_user(self) -> User | None:
        """Return the active session's user, if any."""
        return await self._gateway.get_session()


def _require(field: str, value: str) -> None:
    if not value or not value.strip():
        raise ValidationError(field, "is required")
