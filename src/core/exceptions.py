"""
Domain exceptions for the NovaBill application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class NovaBillError(Exception):
    """Base exception for all NovaBill errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(NovaBillError):
    """Base exception for storage operations."""

    pass


class StorageReadError(StorageError):
    """Stored collection could not be decoded."""

    def __init__(self, key: str, reason: str):
        super().__init__(
            f"Stored data for '{key}' is unreadable: {reason}",
            code="STORAGE_READ_ERROR",
            details={"key": key, "reason": reason},
        )


class RecordNotFoundError(StorageError):
    """Record with the given id is not in its collection."""

    def __init__(self, collection: str, record_id: str):
        super().__init__(
            f"{collection.rstrip('s').capitalize()} not found: {record_id}",
            code=f"{collection.rstrip('s').upper()}_NOT_FOUND",
            details={"collection": collection, "id": record_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Authentication Exceptions
class AuthenticationError(NovaBillError):
    """Base exception for identity operations."""

    pass


class DuplicateEmailError(AuthenticationError):
    """A user with this email is already registered."""

    def __init__(self) -> None:
        super().__init__("Email already exists", code="DUPLICATE_EMAIL")


class InvalidCredentialsError(AuthenticationError):
    """No user matches the given email and password."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials", code="INVALID_CREDENTIALS")


class NotAuthenticatedError(AuthenticationError):
    """Operation requires an active session."""

    def __init__(self) -> None:
        super().__init__("No active session", code="NOT_AUTHENTICATED")


# LLM Exceptions
class LLMError(NovaBillError):
    """Base exception for LLM operations."""

    pass


class LLMUnavailableError(LLMError):
    """LLM provider is not available."""

    def __init__(self, provider: str, reason: str | None = None):
        super().__init__(
            f"LLM provider unavailable: {provider}" + (f" - {reason}" if reason else ""),
            code="LLM_UNAVAILABLE",
            details={"provider": provider, "reason": reason},
        )


class LLMTimeoutError(LLMError):
    """LLM request timed out."""

    def __init__(self, timeout: int, operation: str = "generation"):
        super().__init__(
            f"LLM {operation} timed out after {timeout} seconds",
            code="LLM_TIMEOUT",
            details={"timeout": timeout, "operation": operation},
        )


class LLMResponseError(LLMError):
    """LLM returned invalid or empty response."""

    def __init__(self, reason: str, response: str | None = None):
        super().__init__(
            f"Invalid LLM response: {reason}",
            code="LLM_RESPONSE_ERROR",
            details={"reason": reason, "response_preview": (response or "")[:200]},
        )


class ModelNotFoundError(LLMError):
    """Requested model not found."""

    def __init__(self, model: str, provider: str):
        super().__init__(
            f"Model '{model}' not found on {provider}",
            code="MODEL_NOT_FOUND",
            details={"model": model, "provider": provider},
        )


class CircuitBreakerOpenError(LLMError):
    """Circuit breaker is open due to repeated failures."""

    def __init__(self, provider: str, cooldown_remaining: int):
        super().__init__(
            f"Circuit breaker open for {provider}, retry in {cooldown_remaining}s",
            code="CIRCUIT_BREAKER_OPEN",
            details={"provider": provider, "cooldown_remaining": cooldown_remaining},
        )


# Validation Exceptions
class ValidationError(NovaBillError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class ExportError(NovaBillError):
    """Invoice document could not be produced."""

    def __init__(self, invoice_number: str, reason: str):
        super().__init__(
            f"Export of invoice {invoice_number} failed: {reason}",
            code="EXPORT_FAILED",
            details={"invoice_number": invoice_number, "reason": reason},
        )


class ConfigurationError(NovaBillError):
    """Configuration error."""

    pass
