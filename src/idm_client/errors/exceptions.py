"""Structured exceptions for the management client.

Every error raised by the library derives from :class:`ManagementError`:

- ``ArgumentError`` is raised locally, before any request is sent.
- ``APIError`` carries the remote HTTP status (when one exists) and splits into
  ``TransientTransportError`` (eligible for retry) and ``RemoteApiError``
  (surfaced immediately).
- ``ExhaustedRetryError`` wraps the last transient error once the retry budget
  is spent.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from idm_client.errors.models import ErrorBody


class ManagementError(Exception):
    """Base exception for all management client errors."""

    pass


class ArgumentError(ManagementError, ValueError):
    """A required argument is missing, empty, or of the wrong type."""

    pass


class MissingParameterError(ArgumentError):
    """A mandatory URL template placeholder has no value."""

    def __init__(self, message: str, parameter: str):
        super().__init__(message)
        self.parameter = parameter


class APIError(ManagementError):
    """Base exception for failures of a dispatched request."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
        error_body: "ErrorBody | None" = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response
        self.error_body = error_body


class TransientTransportError(APIError):
    """Network failures and overload responses that may succeed on retry."""

    pass


class NetworkError(TransientTransportError):
    """Connection-level failure: refused, reset, DNS, protocol errors."""

    pass


class RequestTimeoutError(NetworkError):
    """The transport gave up waiting for the remote API."""

    pass


class RateLimitError(TransientTransportError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: float | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class TransientServerError(TransientTransportError):
    """500, 502, 503 or 504 from the remote API."""

    pass


class RemoteApiError(APIError):
    """Non-2xx response that is not worth retrying."""

    pass


class BadRequestError(RemoteApiError):
    """400 Bad Request."""

    pass


class UnauthorizedError(RemoteApiError):
    """401 Unauthorized."""

    pass


class ForbiddenError(RemoteApiError):
    """403 Forbidden."""

    pass


class NotFoundError(RemoteApiError):
    """404 Not Found."""

    pass


class ConflictError(RemoteApiError):
    """409 Conflict."""

    pass


class ValidationError(RemoteApiError):
    """422 Unprocessable Entity."""

    pass


class ServerError(RemoteApiError):
    """Any other 5xx response."""

    pass


class InvalidResponseError(RemoteApiError):
    """The remote API answered, but the reply could not be used.

    Covers undecodable bodies, redirect loops and 2xx bodies of the wrong shape.
    """

    pass


class ExhaustedRetryError(ManagementError):
    """A transient error persisted past the retry budget."""

    def __init__(self, message: str, last_error: Exception, attempts: int):
        super().__init__(message)
        self.last_error = last_error
        self.attempts = attempts
        self.status_code = getattr(last_error, "status_code", None)
