"""Tavily search API adapter.

This module provides the concrete implementation of the SearchProviderPort
using the Tavily HTTP search API.
"""

from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, SecretStr
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.application.ports.search_provider_port import SearchProviderPort
from src.domain.entities.university import UniversityResult
from src.infrastructure.monitoring import trace_span, track_fetch_performance
from src.infrastructure.search.query_builder import build_search_query
from src.infrastructure.search.response_parser import UniversityResponseParser
from src.shared.config.settings import SearchProviderSettings
from src.shared.exceptions import FetchError

logger = structlog.get_logger(__name__)

PROVIDER_NAME = "tavily"

# Status codes worth another attempt
_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class _RetryableProviderError(Exception):
    """Transient failure; retried by tenacity."""


class TavilyConfig(BaseModel):
    """Configuration for the Tavily adapter."""

    model_config = ConfigDict(extra="forbid")

    api_key: SecretStr
    base_url: str = "https://api.tavily.com"
    timeout: float = 60.0
    max_results: int = 30
    search_depth: str = "advanced"
    max_retries: int = 3
    retry_wait_min: float = 1.0
    retry_wait_max: float = 10.0

    @classmethod
    def from_settings(cls, settings: SearchProviderSettings) -> "TavilyConfig":
        """Create config from settings object."""
        return cls(
            api_key=settings.tavily_api_key,
            base_url=settings.tavily_base_url,
            timeout=settings.tavily_timeout,
            max_results=settings.tavily_max_results,
            search_depth=settings.tavily_search_depth,
            max_retries=settings.tavily_max_retries,
            retry_wait_min=settings.tavily_retry_wait_min,
            retry_wait_max=settings.tavily_retry_wait_max,
        )


class TavilySearchAdapter(SearchProviderPort):
    """Searches universities for a degree through Tavily.

    Transport errors and 429/5xx responses are retried with exponential
    backoff. Anything that still fails surfaces as ``FetchError``.
    """

    def __init__(
        self,
        config: TavilyConfig,
        parser: UniversityResponseParser | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            parser: Answer parser, defaults to UniversityResponseParser
            client: Optional preconfigured HTTP client (tests inject one)
        """
        self.config = config
        self._parser = parser or UniversityResponseParser()
        self._client = client or httpx.AsyncClient(
            base_url=config.base_url, timeout=config.timeout
        )
        logger.info("tavily_adapter_initialized", base_url=config.base_url)

    @property
    def name(self) -> str:
        return PROVIDER_NAME

    async def search(self, degree: str) -> list[UniversityResult]:
        """Fetch ranked universities for a degree.

        Raises:
            FetchError: If the request fails after retries
        """
        payload = {
            "api_key": self.config.api_key.get_secret_value(),
            "query": build_search_query(degree, limit=self.config.max_results),
            "search_depth": self.config.search_depth,
            "max_results": self.config.max_results,
            "include_answer": True,
        }

        with trace_span("tavily.search", {"degree": degree}):
            async with track_fetch_performance(PROVIDER_NAME, degree):
                data = await self._post_with_retry("/search", payload)

                answer = data.get("answer") or ""
                logger.info(
                    "tavily_response_received",
                    degree=degree,
                    has_answer=bool(answer),
                    source_count=len(data.get("results", [])),
                )

                try:
                    return self._parser.parse(answer, degree)
                except ValueError as e:
                    raise FetchError(
                        provider=PROVIDER_NAME,
                        reason=f"unparseable response: {e}",
                    ) from e

    async def _post_with_retry(
        self, endpoint: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """POST to Tavily, retrying transient failures.

        Raises:
            FetchError: On non-retryable errors or exhausted retries
        """
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.config.max_retries),
                wait=wait_exponential(
                    multiplier=1,
                    min=self.config.retry_wait_min,
                    max=self.config.retry_wait_max,
                ),
                retry=retry_if_exception_type(_RetryableProviderError),
                reraise=True,
            ):
                with attempt:
                    return await self._post_once(endpoint, payload)
        except _RetryableProviderError as e:
            raise FetchError(provider=PROVIDER_NAME, reason=str(e)) from e

        # This line should never be reached due to retry logic, but added for mypy
        raise FetchError(provider=PROVIDER_NAME, reason="retry loop exited")

    async def _post_once(
        self, endpoint: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        try:
            response = await self._client.post(endpoint, json=payload)
        except httpx.TransportError as e:
            logger.warning("tavily_transport_error", error=str(e))
            raise _RetryableProviderError(f"transport error: {e}") from e

        if response.status_code in _RETRYABLE_STATUS:
            logger.warning("tavily_retryable_status", status=response.status_code)
            raise _RetryableProviderError(
                f"status {response.status_code}: {response.text[:200]}"
            )
        if response.status_code != 200:
            raise FetchError(
                provider=PROVIDER_NAME,
                reason=f"status {response.status_code}: {response.text[:200]}",
            )

        try:
            data = response.json()
        except ValueError as e:
            raise FetchError(
                provider=PROVIDER_NAME, reason="response is not valid JSON"
            ) from e
        if not isinstance(data, dict):
            raise FetchError(provider=PROVIDER_NAME, reason="unexpected response shape")
        return data

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
