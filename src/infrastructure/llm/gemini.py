"""
Gemini LLM provider implementation.

Calls the Generative Language REST API (models/<model>:generateContent)
with an API key.
"""

import time

import httpx

from src.config import get_logger
from src.config.settings import LLMSettings
from src.core.exceptions import (
    LLMResponseError,
    LLMUnavailableError,
    ModelNotFoundError,
)
from src.core.interfaces import HealthStatus, LLMResponse
from src.infrastructure.llm.base import BaseLLMProvider

logger = get_logger(__name__)


class GeminiProvider(BaseLLMProvider):
    """Gemini REST API provider."""

    provider_name = "gemini"

    def __init__(self, settings: LLMSettings | None = None):
        super().__init__(settings)
        self.host = self.settings.gemini_host.rstrip("/")
        self.model = self.settings.gemini_model
        self.api_key = self.settings.api_key

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise LLMUnavailableError("gemini", "LLM_API_KEY is not set")
        return {"x-goog-api-key": self.api_key}

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        payload: dict = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": (
                    temperature if temperature is not None else self.settings.temperature
                ),
                "maxOutputTokens": max_tokens or self.settings.max_tokens,
            },
        }
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}

        headers = self._headers()
        url = f"{self.host}/models/{self.model}:generateContent"

        async def _do_generate() -> LLMResponse:
            start_time = time.time()
            response = await self._post_json(url, payload, headers=headers)
            elapsed = time.time() - start_time

            if response.status_code == 404:
                raise ModelNotFoundError(self.model, "gemini")
            if response.status_code != 200:
                raise LLMUnavailableError(
                    "gemini", f"HTTP {response.status_code}: {response.text[:200]}"
                )

            result = response.json()
            candidates = result.get("candidates") or []
            if not candidates:
                raise LLMResponseError("No candidates in response", response.text)

            parts = candidates[0].get("content", {}).get("parts", [])
            response_text = "".join(p.get("text", "") for p in parts)
            if not response_text.strip():
                raise LLMResponseError(
                    f"Empty response (finishReason={candidates[0].get('finishReason')})",
                    response_text,
                )

            usage = result.get("usageMetadata", {})
            logger.info(
                "gemini_generate",
                model=self.model,
                prompt_len=len(prompt),
                response_len=len(response_text),
                elapsed_ms=int(elapsed * 1000),
            )

            return LLMResponse(
                text=response_text,
                model=self.model,
                done_reason=candidates[0].get("finishReason"),
                prompt_tokens=usage.get("promptTokenCount", 0),
                completion_tokens=usage.get("candidatesTokenCount", 0),
                total_tokens=usage.get("totalTokenCount", 0),
            )

        return await self._with_resilience(_do_generate)

    async def check_health(self) -> HealthStatus:
        """Check that the API key is accepted and the model exists."""
        if not self.api_key:
            return self._update_health_cache(
                HealthStatus(
                    available=False,
                    provider="gemini",
                    model=self.model,
                    error="LLM_API_KEY is not set",
                )
            )

        start_time = time.time()
        try:
            async with httpx.AsyncClient(timeout=10) as client:
                response = await client.get(
                    f"{self.host}/models/{self.model}", headers=self._headers()
                )
        except httpx.HTTPError as e:
            return self._update_health_cache(
                HealthStatus(available=False, provider="gemini", error=str(e))
            )

        if response.status_code != 200:
            return self._update_health_cache(
                HealthStatus(
                    available=False,
                    provider="gemini",
                    model=self.model,
                    error=f"HTTP {response.status_code}",
                )
            )

        return self._update_health_cache(
            HealthStatus(
                available=True,
                provider="gemini",
                model=self.model,
                response_time_ms=(time.time() - start_time) * 1000,
            )
        )


# Singleton
_gemini_provider: GeminiProvider | None = None


def get_gemini_provider() -> GeminiProvider:
    """Get or create the Gemini provider singleton."""
    global _gemini_provider
    if _gemini_provider is None:
        _gemini_provider = GeminiProvider()
    return _gemini_provider
