"""Tests for the settings sections."""

import pytest

from src.config.settings import LLMSettings


class TestLLMSettings:
    def test_defaults_to_gemini(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("LLM_PROVIDER", raising=False)
        settings = LLMSettings()
        assert settings.provider == "gemini"
        assert settings.gemini_model == "gemini-2.5-flash"

    def test_local_provider_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("LLM_PROVIDER", "ollama")
        monkeypatch.setenv("LLM_MODEL_NAME", "llama3.1:8b")
        settings = LLMSettings()
        assert settings.provider == "ollama"
        assert settings.model_name == "llama3.1:8b"
