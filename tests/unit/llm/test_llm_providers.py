"""Tests for the Ollama and Gemini providers and their resilience layer."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from src.config.settings import LLMSettings
from src.core.exceptions import (
    CircuitBreakerOpenError,
    ConfigurationError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    ModelNotFoundError,
)
from src.infrastructure.llm import (
    CircuitBreakerState,
    GeminiProvider,
    OllamaProvider,
    get_llm_provider,
)

HTTPX_CLIENT = "src.infrastructure.llm.base.httpx.AsyncClient"


@pytest.fixture
def llm_settings() -> LLMSettings:
    return LLMSettings(
        provider="ollama",
        model_name="llama3.1:8b",
        host="http://ollama.test:11434",
        gemini_host="https://gemini.test/v1beta",
        gemini_model="gemini-2.5-flash",
        api_key="test-key",
        max_retries=3,
        retry_delay=0,
        failure_threshold=2,
        cooldown_seconds=60,
    )


def _response(status_code: int = 200, json_data: dict | None = None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data or {}
    response.text = text
    return response


def _client(**methods) -> AsyncMock:
    client = AsyncMock()
    for name, value in methods.items():
        setattr(client, name, value)
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


class TestCircuitBreakerState:
    def test_opens_at_threshold(self):
        breaker = CircuitBreakerState(failure_threshold=2)
        breaker.record_failure()
        assert breaker.is_open is False
        breaker.record_failure()
        assert breaker.is_open is True

    def test_check_raises_while_cooling_down(self):
        breaker = CircuitBreakerState(provider="ollama", failure_threshold=1)
        breaker.record_failure()
        with pytest.raises(CircuitBreakerOpenError) as exc_info:
            breaker.check()
        assert exc_info.value.details["provider"] == "ollama"

    def test_half_open_after_cooldown(self):
        breaker = CircuitBreakerState(failure_threshold=1, cooldown_seconds=0)
        breaker.record_failure()
        breaker.check()
        assert breaker.cooldown_remaining == 0

    def test_success_closes(self):
        breaker = CircuitBreakerState(failure_threshold=1)
        breaker.record_failure()
        breaker.record_success()
        assert breaker.is_open is False
        assert breaker.failures == 0


class TestOllamaGenerate:
    async def test_generate_success(self, llm_settings: LLMSettings):
        client = _client(
            post=AsyncMock(
                return_value=_response(
                    json_data={
                        "response": "- Revenue is growing",
                        "done": True,
                        "done_reason": "stop",
                        "prompt_eval_count": 12,
                        "eval_count": 5,
                    }
                )
            )
        )
        provider = OllamaProvider(llm_settings)

        with patch(HTTPX_CLIENT, return_value=client):
            result = await provider.generate("prompt", system_prompt="system", temperature=0.3)

        assert result.text == "- Revenue is growing"
        assert result.total_tokens == 17
        url = client.post.call_args.args[0]
        payload = client.post.call_args.kwargs["json"]
        assert url == "http://ollama.test:11434/api/generate"
        assert payload["model"] == "llama3.1:8b"
        assert payload["system"] == "system"
        assert payload["stream"] is False
        assert payload["options"]["temperature"] == 0.3
        assert payload["options"]["num_predict"] == llm_settings.max_tokens

    async def test_retries_connection_errors(self, llm_settings: LLMSettings):
        client = _client(
            post=AsyncMock(
                side_effect=[
                    httpx.ConnectError("refused"),
                    _response(json_data={"response": "ok"}),
                ]
            )
        )
        provider = OllamaProvider(llm_settings)

        with patch(HTTPX_CLIENT, return_value=client):
            result = await provider.generate("prompt")

        assert result.text == "ok"
        assert client.post.call_count == 2
        assert provider.circuit_breaker.failures == 0

    async def test_unreachable_opens_circuit(self, llm_settings: LLMSettings):
        client = _client(post=AsyncMock(side_effect=httpx.ConnectError("refused")))
        provider = OllamaProvider(llm_settings)

        with patch(HTTPX_CLIENT, return_value=client):
            for _ in range(2):
                with pytest.raises(LLMUnavailableError):
                    await provider.generate("prompt")
            with pytest.raises(CircuitBreakerOpenError):
                await provider.generate("prompt")

        assert client.post.call_count == 2 * llm_settings.max_retries
        assert provider.is_available() is False

    async def test_timeout(self, llm_settings: LLMSettings):
        client = _client(post=AsyncMock(side_effect=httpx.ReadTimeout("slow")))
        provider = OllamaProvider(llm_settings)

        with patch(HTTPX_CLIENT, return_value=client):
            with pytest.raises(LLMTimeoutError):
                await provider.generate("prompt")

    async def test_missing_model(self, llm_settings: LLMSettings):
        client = _client(post=AsyncMock(return_value=_response(404, text="model not found")))
        provider = OllamaProvider(llm_settings)

        with patch(HTTPX_CLIENT, return_value=client):
            with pytest.raises(ModelNotFoundError):
                await provider.generate("prompt")
        assert provider.circuit_breaker.failures == 0

    async def test_empty_response(self, llm_settings: LLMSettings):
        client = _client(post=AsyncMock(return_value=_response(json_data={"response": "  "})))
        provider = OllamaProvider(llm_settings)

        with patch(HTTPX_CLIENT, return_value=client):
            with pytest.raises(LLMResponseError):
                await provider.generate("prompt")


class TestOllamaHealth:
    async def test_healthy(self, llm_settings: LLMSettings):
        client = _client(
            get=AsyncMock(
                return_value=_response(json_data={"models": [{"name": "llama3.1:8b"}]})
            )
        )
        with patch(HTTPX_CLIENT, return_value=client):
            health = await OllamaProvider(llm_settings).check_health()
        assert health.available is True
        assert health.model == "llama3.1:8b"

    async def test_model_not_pulled(self, llm_settings: LLMSettings):
        client = _client(get=AsyncMock(return_value=_response(json_data={"models": []})))
        provider = OllamaProvider(llm_settings)
        with patch(HTTPX_CLIENT, return_value=client):
            health = await provider.check_health()
        assert health.available is False
        assert "ollama pull" in health.error
        assert provider.is_available() is False

    async def test_server_down(self, llm_settings: LLMSettings):
        client = _client(get=AsyncMock(side_effect=httpx.ConnectError("refused")))
        with patch(HTTPX_CLIENT, return_value=client):
            health = await OllamaProvider(llm_settings).check_health()
        assert health.available is False
        assert "ollama serve" in health.error


class TestGemini:
    async def test_generate_success(self, llm_settings: LLMSettings):
        client = _client(
            post=AsyncMock(
                return_value=_response(
                    json_data={
                        "candidates": [
                            {
                                "content": {"parts": [{"text": "- Top: "}, {"text": "Acme"}]},
                                "finishReason": "STOP",
                            }
                        ],
                        "usageMetadata": {
                            "promptTokenCount": 10,
                            "candidatesTokenCount": 4,
                            "totalTokenCount": 14,
                        },
                    }
                )
            )
        )
        provider = GeminiProvider(llm_settings)

        with patch(HTTPX_CLIENT, return_value=client):
            result = await provider.generate("prompt", system_prompt="analyst")

        assert result.text == "- Top: Acme"
        assert result.total_tokens == 14
        assert result.done_reason == "STOP"

        url = client.post.call_args.args[0]
        kwargs = client.post.call_args.kwargs
        assert url == "https://gemini.test/v1beta/models/gemini-2.5-flash:generateContent"
        assert kwargs["headers"] == {"x-goog-api-key": "test-key"}
        assert kwargs["json"]["systemInstruction"] == {"parts": [{"text": "analyst"}]}
        assert kwargs["json"]["contents"][0]["parts"][0]["text"] == "prompt"

    async def test_missing_api_key(self, llm_settings: LLMSettings):
        provider = GeminiProvider(llm_settings.model_copy(update={"api_key": None}))
        with pytest.raises(LLMUnavailableError):
            await provider.generate("prompt")
        health = await provider.check_health()
        assert health.available is False

    async def test_no_candidates(self, llm_settings: LLMSettings):
        client = _client(post=AsyncMock(return_value=_response(json_data={"candidates": []})))
        with patch(HTTPX_CLIENT, return_value=client):
            with pytest.raises(LLMResponseError):
                await GeminiProvider(llm_settings).generate("prompt")

    async def test_http_error(self, llm_settings: LLMSettings):
        client = _client(post=AsyncMock(return_value=_response(403, text="API key invalid")))
        with patch(HTTPX_CLIENT, return_value=client):
            with pytest.raises(LLMUnavailableError) as exc_info:
                await GeminiProvider(llm_settings).generate("prompt")
        assert "403" in exc_info.value.message

    async def test_health(self, llm_settings: LLMSettings):
        client = _client(get=AsyncMock(return_value=_response(json_data={"name": "models/x"})))
        with patch(HTTPX_CLIENT, return_value=client):
            health = await GeminiProvider(llm_settings).check_health()
        assert health.available is True
        assert health.provider == "gemini"


class TestFactory:
    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError):
            get_llm_provider("openai")

    def test_named_providers(self):
        assert isinstance(get_llm_provider("ollama"), OllamaProvider)
        assert isinstance(get_llm_provider("gemini"), GeminiProvider)
