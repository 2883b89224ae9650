"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.llm import (
    HealthStatus,
    ILLMProvider,
    LLMProvider,
    LLMResponse,
)
from src.core.interfaces.pdf import IInvoiceRenderer
from src.core.interfaces.storage import IKeyValueStore

__all__ = [
    # LLM interfaces
    "ILLMProvider",
    "LLMProvider",
    "LLMResponse",
    "HealthStatus",
    # Rendering
    "IInvoiceRenderer",
    # Storage
    "IKeyValueStore",
]
