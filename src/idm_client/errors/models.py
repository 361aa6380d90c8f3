"""Models for error bodies returned by the management API."""

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass(frozen=True)
class ErrorFormatter:
    """Names of the JSON keys that carry the error message and error name."""

    message: str = "message"
    name: str = "error"


DEFAULT_ERROR_FORMATTER = ErrorFormatter()


@dataclass
class ErrorBody:
    """Decoded error payload.

    The API answers failures with a body such as::

        {"statusCode": 404, "error": "Not Found", "message": "The user does not exist.", "errorCode": "inexistent_user"}
    """

    name: str | None = None
    message: str | None = None
    error_code: str | None = None
    status: int | None = None

    # Any keys not covered above
    extras: dict[str, Any] | None = None

    @classmethod
    def from_response(
        cls, response: httpx.Response, formatter: ErrorFormatter = DEFAULT_ERROR_FORMATTER
    ) -> "ErrorBody | None":
        """Parse the error body of a response.

        Args:
            response: HTTP response object
            formatter: Keys to read the message and name from

        Returns:
            ErrorBody or None if the body is not a JSON object
        """
        try:
            data = response.json()
        except (ValueError, TypeError, AttributeError):
            return None

        if not isinstance(data, dict):
            return None

        known = {formatter.name, formatter.message, "errorCode", "statusCode"}
        extras = {k: v for k, v in data.items() if k not in known}

        status = data.get("statusCode")
        return cls(
            name=data.get(formatter.name),
            message=data.get(formatter.message),
            error_code=data.get("errorCode"),
            status=status if isinstance(status, int) else None,
            extras=extras if extras else None,
        )

    def to_exception_message(self) -> str:
        """Convert the body to an exception message."""
        if self.name and self.message and self.name != self.message:
            text = f"{self.name}: {self.message}"
        else:
            text = self.message or self.name or "Unknown API error"

        if self.error_code:
            text += f" (code: {self.error_code})"
        return text
