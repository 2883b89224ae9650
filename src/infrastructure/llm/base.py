"""
Base LLM provider with retry and circuit breaker patterns.

Transport failures are retried with exponential backoff; repeated
failures open the circuit so the insights endpoint fails fast while the
provider is down.
"""

import time
from abc import ABC
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar, cast

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.config import get_logger, get_settings
from src.config.settings import LLMSettings
from src.core.exceptions import (
    CircuitBreakerOpenError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from src.core.interfaces import HealthStatus, ILLMProvider

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class CircuitBreakerState:
    """State for circuit breaker pattern."""

    provider: str = "llm"
    failures: int = 0
    last_failure_time: float = 0.0
    is_open: bool = False
    cooldown_seconds: int = 60
    failure_threshold: int = 3

    def record_failure(self) -> None:
        self.failures += 1
        self.last_failure_time = time.time()

        if self.failures >= self.failure_threshold and not self.is_open:
            self.is_open = True
            logger.warning(
                "circuit_breaker_opened",
                provider=self.provider,
                failures=self.failures,
                cooldown=self.cooldown_seconds,
            )

    def record_success(self) -> None:
        if self.is_open:
            logger.info("circuit_breaker_closed", provider=self.provider)
        self.failures = 0
        self.is_open = False

    def check(self) -> None:
        """
        Raises:
            CircuitBreakerOpenError: If the circuit is open and the cooldown
                has not elapsed. After the cooldown one request is let through.
        """
        if not self.is_open:
            return

        if self.cooldown_remaining > 0:
            raise CircuitBreakerOpenError(self.provider, self.cooldown_remaining)

        logger.info("circuit_breaker_half_open", provider=self.provider)

    @property
    def cooldown_remaining(self) -> int:
        if not self.is_open:
            return 0
        elapsed = time.time() - self.last_failure_time
        return max(0, int(self.cooldown_seconds - elapsed))


class BaseLLMProvider(ILLMProvider, ABC):
    """
    Base class for HTTP text-generation providers.

    Provides:
    - Automatic retries with exponential backoff
    - Circuit breaker for cascading failure prevention
    - Health check caching
    """

    provider_name = "llm"

    def __init__(self, settings: LLMSettings | None = None) -> None:
        self.settings = settings or get_settings().llm
        self.circuit_breaker = CircuitBreakerState(
            provider=self.provider_name,
            failure_threshold=self.settings.failure_threshold,
            cooldown_seconds=self.settings.cooldown_seconds,
        )
        self._health_cache: HealthStatus | None = None
        self._health_cache_time: float = 0.0
        self._health_cache_ttl: float = 30.0

    def _get_retry_decorator(self) -> Any:
        s = self.settings
        return retry(
            stop=stop_after_attempt(s.max_retries),
            wait=wait_exponential(
                multiplier=s.retry_delay,
                min=s.retry_delay,
                max=s.retry_delay * (s.retry_multiplier**3),
            ),
            retry=retry_if_exception_type((TimeoutError, ConnectionError)),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "llm_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _post_json(
        self,
        url: str,
        payload: dict,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """
        POST a JSON payload, translating transport failures into the
        builtin TimeoutError and ConnectionError that the retry policy
        recognizes.
        """
        timeout = self.settings.timeout
        try:
            async with httpx.AsyncClient(timeout=timeout + 5) as client:
                return await client.post(url, json=payload, headers=headers, timeout=timeout)
        except httpx.TimeoutException as e:
            raise TimeoutError(str(e) or "request timed out") from e
        except httpx.TransportError as e:
            raise ConnectionError(str(e) or type(e).__name__) from e

    async def _with_resilience(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """
        Execute operation with retry and circuit breaker.

        Raises:
            CircuitBreakerOpenError: If circuit is open
            LLMTimeoutError: If operation times out
            LLMUnavailableError: If provider is unreachable
        """
        self.circuit_breaker.check()

        try:
            result = await self._get_retry_decorator()(operation)(*args, **kwargs)
        except TimeoutError as e:
            self.circuit_breaker.record_failure()
            raise LLMTimeoutError(self.settings.timeout) from e
        except (ConnectionError, OSError) as e:
            self.circuit_breaker.record_failure()
            raise LLMUnavailableError(self.provider_name, str(e)) from e
        except Exception as e:
            # don't trip the circuit for bad responses
            logger.error("llm_error", error=str(e), error_type=type(e).__name__)
            raise

        self.circuit_breaker.record_success()
        return cast(T, result)

    def is_available(self) -> bool:
        """Cached availability; optimistic until a health check says otherwise."""
        if self.circuit_breaker.is_open:
            return False

        now = time.time()
        if self._health_cache and (now - self._health_cache_time) < self._health_cache_ttl:
            return self._health_cache.available

        return True

    def _update_health_cache(self, status: HealthStatus) -> HealthStatus:
        self._health_cache = status
        self._health_cache_time = time.time()
        return status
