"""Infrastructure layer implementations."""

from src.infrastructure import llm, pdf, storage

__all__ = ["storage", "llm", "pdf"]
