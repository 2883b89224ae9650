"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """Text-generation provider configuration (sales insights)."""

    model_config = SettingsConfigDict(env_prefix="LLM_")

    provider: Literal["ollama", "gemini"] = "gemini"
    # Ollama
    model_name: str = "llama3.1:8b"
    host: str = "http://localhost:11434"
    # Gemini
    gemini_host: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.5-flash"
    api_key: str | None = None
    timeout: int = 60
    max_tokens: int = 1024
    temperature: float = 0.7

    # Circuit breaker settings
    failure_threshold: int = 3
    cooldown_seconds: int = 60

    # Retry settings
    max_retries: int = 3
    retry_delay: float = 1.0
    retry_multiplier: float = 2.0

    warmup_on_start: bool = False


class StorageSettings(BaseSettings):
    """Key-value storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "novabill.db"
    key_prefix: str = "novabill"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class BillingSettings(BaseSettings):
    """Invoice computation settings."""

    model_config = SettingsConfigDict(env_prefix="BILLING_")

    # applied to every saved invoice
    tax_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    currency_symbol: str = "Rs."
    invoice_prefix: str = "INV-"
    default_shop_name: str = "NovaBill"


class AuthSettings(BaseSettings):
    """Password hashing configuration."""

    model_config = SettingsConfigDict(env_prefix="AUTH_")

    hash_iterations: int = 260000
    salt_bytes: int = 16


class PdfSettings(BaseSettings):
    """Invoice PDF export configuration."""

    model_config = SettingsConfigDict(env_prefix="PDF_")

    output_dir: Path = Path("data/exports")
    footer_text: str = "Thank you for your business!"
    accent_color: tuple[int, int, int] = (79, 70, 229)


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "NovaBill"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    llm: LLMSettings = Field(default_factory=LLMSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    billing: BillingSettings = Field(default_factory=BillingSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    pdf: PdfSettings = Field(default_factory=PdfSettings)
    api: APISettings = Field(default_factory=APISettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
