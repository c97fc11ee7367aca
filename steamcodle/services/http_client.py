"""HTTP client service with retry logic and rate limiting."""

import asyncio
import json
import time
from typing import Any

import httpx
import structlog

from .errors import NetworkError, UpstreamError

log = structlog.stdlib.get_logger()


class HttpClientService:
    """Async HTTP client for the Steam store APIs.

    Retries transport errors, 429 and 5xx responses with exponential backoff;
    other 4xx responses fail immediately.
    """

    def __init__(
        self,
        timeout: float = 15.0,
        max_retries: int = 2,
        base_delay: float = 0.5,
        max_delay: float = 10.0,
        rate_limit_delay: float = 0.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client service.

        Args:
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            base_delay: Base delay for exponential backoff in seconds
            max_delay: Maximum delay between retries in seconds
            rate_limit_delay: Minimum delay between requests in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.rate_limit_delay = rate_limit_delay
        self._last_request_time: float = 0.0

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={
                "User-Agent": "Steamcodle/0.1 (review guessing game)",
                "Accept": "application/json",
            },
            follow_redirects=True,
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
            transport=transport,
        )

        log.info(
            "HTTP client service initialized",
            timeout=timeout,
            max_retries=max_retries,
            rate_limit_delay=rate_limit_delay,
        )

    async def get(
        self,
        url: str,
        params: dict[str, str | int] | None = None,
    ) -> httpx.Response:
        """Make a GET request with retry logic and rate limiting.

        Args:
            url: The URL to request
            params: Optional query parameters

        Returns:
            HTTP response object

        Raises:
            NetworkError: If all retry attempts fail or a non-retryable status is returned
        """
        for attempt in range(self.max_retries + 1):
            await self._enforce_rate_limit()
            try:
                log.debug(
                    "Making HTTP GET request",
                    url=url,
                    attempt=attempt + 1,
                    max_attempts=self.max_retries + 1,
                )
                response = await self._client.get(url, params=params)
                response.raise_for_status()

                log.debug(
                    "HTTP GET request successful",
                    url=url,
                    status_code=response.status_code,
                )
                return response

            except (httpx.HTTPStatusError, httpx.RequestError) as e:
                status_code = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
                log.warning(
                    "HTTP GET request failed",
                    url=url,
                    attempt=attempt + 1,
                    status_code=status_code,
                    error=str(e),
                    error_type=type(e).__name__,
                )

                delay = min(self.base_delay * (2 ** attempt), self.max_delay)
                if status_code is not None:
                    if status_code == 429:
                        retry_after = e.response.headers.get("retry-after")  # type: ignore[union-attr]
                        if retry_after:
                            try:
                                delay = min(float(retry_after), self.max_delay)
                            except ValueError:
                                pass
                    elif 400 <= status_code < 500:
                        log.error("Client error, not retrying", url=url, status_code=status_code)
                        raise NetworkError(
                            f"Steam request failed with status {status_code}",
                            original_error=e,
                            url=url,
                            status_code=status_code,
                        ) from e

                if attempt == self.max_retries:
                    log.error(
                        "HTTP GET request failed after all retries",
                        url=url,
                        total_attempts=self.max_retries + 1,
                    )
                    message = (
                        f"Steam request failed with status {status_code}"
                        if status_code is not None
                        else "Unable to reach the Steam store"
                    )
                    raise NetworkError(message, original_error=e, url=url, status_code=status_code) from e

                log.info("Retrying after delay", url=url, delay=delay)
                await asyncio.sleep(delay)

        raise RuntimeError("Unexpected end of retry loop")

    async def get_json(
        self,
        url: str,
        params: dict[str, str | int] | None = None,
    ) -> Any:
        """GET a URL and decode its JSON body.

        Raises:
            NetworkError: If the request fails
            UpstreamError: If the body is not valid JSON
        """
        response = await self.get(url, params=params)
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            log.warning("Malformed JSON body", url=url, error=str(e))
            raise UpstreamError("Steam returned a malformed response", url=url) from e

    async def _enforce_rate_limit(self) -> None:
        """Enforce the minimum delay between requests."""
        if self.rate_limit_delay <= 0:
            return

        time_since_last = time.monotonic() - self._last_request_time
        if time_since_last < self.rate_limit_delay:
            sleep_time = self.rate_limit_delay - time_since_last
            log.debug("Rate limiting: sleeping", sleep_time=sleep_time)
            await asyncio.sleep(sleep_time)

        self._last_request_time = time.monotonic()

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        await self._client.aclose()
        log.info("HTTP client closed")

    async def __aenter__(self) -> "HttpClientService":
        return self

    async def __aexit__(self, exc_type: type[Exception] | None, exc_val: Exception | None, exc_tb: Any) -> None:
        await self.close()
