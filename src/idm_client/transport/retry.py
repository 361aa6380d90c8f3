"""Retry policy and the retrying resource client.

:class:`RetryRestClient` wraps a :class:`~idm_client.transport.resource.RestClient`
and re-issues a call when it fails with a transient error. It exposes the same
verbs as the client it wraps.

## Which errors are retried

| Error | Retried |
|-------|---------|
| `NetworkError` / `RequestTimeoutError` | ✅ |
| 429 `RateLimitError` | ✅ waits for `Retry-After` / `x-ratelimit-reset` when given |
| 500, 502, 503, 504 | ✅ |
| other 4xx / 5xx | ❌ surfaced at once |
| `ArgumentError` | ❌ raised before any request |

A call makes at most ``max_retries + 1`` attempts, one after another. When the
budget runs out the caller gets :class:`ExhaustedRetryError` wrapping the last
failure. Retries apply to every verb; resubmitting a POST or PATCH relies on
the API treating it as safe to repeat.

## Example

```python
users = RetryRestClient(
    RestClient(http, "https://api.example.com/api/v2/users/:id", token_provider=provider),
    RetryPolicy(max_retries=5, backoff_factor=0.5),
)
user = await users.get("auth0|123")
```
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from idm_client.errors.exceptions import (
    APIError,
    ArgumentError,
    ExhaustedRetryError,
    NetworkError,
    RateLimitError,
)
from idm_client.transport.pagination import Page
from idm_client.transport.resource import RestClient

logger = logging.getLogger(__name__)

MAX_REQUEST_RETRIES = 10

DEFAULT_RETRY_STATUS_CODES: frozenset[int] = frozenset([429, 500, 502, 503, 504])


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to retry, how long to wait, and what to retry on.

    Args:
        enabled: Set to False to pass every error straight through
        max_retries: Retries after the first attempt (0 to 10)
        backoff_factor: Base delay in seconds; doubles on every retry
        max_backoff: Upper bound for any single delay, in seconds
        jitter: Random spread applied to computed delays, as a fraction
        retry_status_codes: HTTP statuses that are retried
        retry_condition: Replaces the default classification when given
    """

    enabled: bool = True
    max_retries: int = 3
    backoff_factor: float = 0.25
    max_backoff: float = 10.0
    jitter: float = 0.1
    retry_status_codes: frozenset[int] = DEFAULT_RETRY_STATUS_CODES
    retry_condition: Callable[[Exception], bool] | None = None

    def __post_init__(self) -> None:
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
            raise ArgumentError("max_retries must be an integer")
        if not 0 <= self.max_retries <= MAX_REQUEST_RETRIES:
            raise ArgumentError(f"max_retries must be between 0 and {MAX_REQUEST_RETRIES}")
        if self.backoff_factor < 0 or self.max_backoff < 0:
            raise ArgumentError("Backoff values cannot be negative")
        if not 0 <= self.jitter <= 1:
            raise ArgumentError("jitter must be between 0 and 1")

    def is_retryable(self, error: Exception) -> bool:
        """Decide whether ``error`` is worth another attempt."""
        if self.retry_condition is not None:
            return self.retry_condition(error)
        if isinstance(error, NetworkError):
            return True
        return isinstance(error, APIError) and error.status_code in self.retry_status_codes

    def backoff_delay(self, retry_number: int, error: Exception | None = None) -> float:
        """Delay before the given retry (1-indexed).

        Uses the server's rate-limit hint when there is one, otherwise
        ``backoff_factor * 2 ** (retry_number - 1)`` with jitter. Both are
        capped at ``max_backoff``.
        """
        if isinstance(error, RateLimitError) and error.retry_after is not None:
            return min(error.retry_after, self.max_backoff)

        delay = min(self.backoff_factor * (2 ** (retry_number - 1)), self.max_backoff)
        if self.jitter and delay:
            delay *= 1 + random.uniform(-self.jitter, self.jitter)
        return max(delay, 0.0)


NO_RETRY = RetryPolicy(enabled=False, max_retries=0)


class RetryRestClient:
    """Resource client that retries transient failures.

    Args:
        client: The RestClient to wrap
        policy: Retry policy; None disables retries
    """

    def __init__(self, client: RestClient, policy: RetryPolicy | None = None) -> None:
        self.client = client
        self.policy = policy if policy is not None else NO_RETRY

    def __repr__(self) -> str:
        return f"RetryRestClient({self.client!r}, max_retries={self.policy.max_retries})"

    async def create(self, data: Any = None, params: Mapping[str, Any] | None = None) -> Any:
        return await self._invoke("POST", self.client.create, data, params)

    async def get(self, id_or_params: str | Mapping[str, Any]) -> Any:
        return await self._invoke("GET", self.client.get, id_or_params)

    async def get_all(self, params: Mapping[str, Any] | None = None) -> Page:
        return await self._invoke("GET", self.client.get_all, params)

    async def patch(self, params: str | Mapping[str, Any], data: Any) -> Any:
        return await self._invoke("PATCH", self.client.patch, params, data)

    update = patch

    async def delete(self, params: str | Mapping[str, Any] | None = None, data: Any = None) -> Any:
        return await self._invoke("DELETE", self.client.delete, params, data)

    async def _invoke(self, method: str, operation: Callable[..., Awaitable[Any]], *args: Any) -> Any:
        """Run ``operation`` until it succeeds, fails for good, or runs out of retries."""
        if not self.policy.enabled:
            return await operation(*args)

        retries = 0
        target = f"{method} {self.client.url_template}"

        while True:
            try:
                return await operation(*args)
            except APIError as e:
                if not self.policy.is_retryable(e):
                    raise

                if retries >= self.policy.max_retries:
                    attempts = retries + 1
                    logger.error(f"Request {target} failed after {attempts} attempts: {e}")
                    raise ExhaustedRetryError(
                        f"Request {target} failed after {attempts} attempts: {e}",
                        last_error=e,
                        attempts=attempts,
                    ) from e

                retries += 1
                delay = self.policy.backoff_delay(retries, e)

                logger.warning(
                    f"Request {target} failed with {e}, "
                    f"retrying in {delay:.2f}s (attempt {retries}/{self.policy.max_retries})"
                )

                await asyncio.sleep(delay)
