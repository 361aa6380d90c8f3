"""Error handling utilities for HTTP responses."""

import math
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import httpx

from idm_client.errors.exceptions import (
    APIError,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InvalidResponseError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    RemoteApiError,
    RequestTimeoutError,
    ServerError,
    TransientServerError,
    UnauthorizedError,
    ValidationError,
)
from idm_client.errors.models import DEFAULT_ERROR_FORMATTER, ErrorBody, ErrorFormatter

TRANSIENT_SERVER_STATUS_CODES: frozenset[int] = frozenset([500, 502, 503, 504])

_EXCEPTION_MAP: dict[int, type[APIError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: RateLimitError,
}


def raise_for_status(response: httpx.Response, formatter: ErrorFormatter = DEFAULT_ERROR_FORMATTER) -> None:
    """Raise the matching exception for an HTTP error response.

    Args:
        response: HTTP response object
        formatter: Keys used to read the remote error message and name

    Raises:
        APIError subclass based on status code
    """
    if response.is_success:
        return

    error_body = ErrorBody.from_response(response, formatter)
    status_code = response.status_code

    if status_code in _EXCEPTION_MAP:
        exc_class = _EXCEPTION_MAP[status_code]
    elif status_code in TRANSIENT_SERVER_STATUS_CODES:
        exc_class = TransientServerError
    elif 500 <= status_code < 600:
        exc_class = ServerError
    else:
        exc_class = RemoteApiError

    if error_body:
        message = f"HTTP {status_code}: {error_body.to_exception_message()}"
    else:
        response_text = response.text[:200]
        message = f"HTTP {status_code}: {response_text}" if response_text else f"HTTP {status_code}"

    if exc_class is RateLimitError:
        raise RateLimitError(
            message=message,
            retry_after=parse_retry_after(response.headers),
            status_code=status_code,
            response=response,
            error_body=error_body,
        )

    raise exc_class(
        message=message,
        status_code=status_code,
        response=response,
        error_body=error_body,
    )


def parse_retry_after(headers: httpx.Headers, now: datetime | None = None) -> float | None:
    """Work out how long the server asked us to wait, in seconds.

    Checks ``Retry-After`` first, in either delay-seconds ("120") or HTTP-date
    form, then falls back to ``x-ratelimit-reset`` (an epoch timestamp).

    Args:
        headers: Response headers
        now: Reference time, defaults to the current UTC time

    Returns:
        Delay in seconds, or None if no usable header is present
    """
    now = now or datetime.now(UTC)

    retry_after = headers.get("retry-after")
    if retry_after:
        try:
            delay = int(retry_after)
            return float(delay) if delay >= 0 else None
        except ValueError:
            pass

        try:
            delay = (parsedate_to_datetime(retry_after) - now).total_seconds()
            return delay if delay >= 0 else None
        except (ValueError, TypeError):
            return None

    reset = headers.get("x-ratelimit-reset")
    if reset:
        try:
            delay = float(reset) - now.timestamp()
        except ValueError:
            return None
        # float() accepts "nan" and "inf"
        if not math.isfinite(delay):
            return None
        return max(delay, 0.0)

    return None


def wrap_transport_error(exc: httpx.RequestError) -> APIError:
    """Convert an httpx request failure into a library error.

    Timeouts and connection failures are transient. Failures that happen after
    the server answered (undecodable bodies, redirect loops) are not.
    """
    if isinstance(exc, httpx.TimeoutException):
        return RequestTimeoutError(f"Request timed out: {exc}")
    if isinstance(exc, httpx.TransportError):
        return NetworkError(f"Network error: {exc}")
    return InvalidResponseError(f"Invalid response: {exc}")
