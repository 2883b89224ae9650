"""
LLM provider factory.

Creates appropriate provider based on configuration.
"""

from src.config import get_logger, get_settings
from src.core.exceptions import ConfigurationError
from src.core.interfaces import ILLMProvider

logger = get_logger(__name__)


def get_llm_provider(provider_type: str | None = None) -> ILLMProvider:
    """
    Get an LLM provider instance.

    Args:
        provider_type: "ollama" or "gemini" (default from settings)
    """
    provider_type = provider_type or get_settings().llm.provider

    if provider_type == "ollama":
        from src.infrastructure.llm.ollama import get_ollama_provider

        return get_ollama_provider()

    if provider_type == "gemini":
        from src.infrastructure.llm.gemini import get_gemini_provider

        return get_gemini_provider()

    logger.error("unknown_llm_provider", provider=provider_type)
    raise ConfigurationError(f"Unknown LLM provider: {provider_type}")
