"""Error taxonomy and response-to-exception mapping."""

from idm_client.errors.exceptions import (
    APIError,
    ArgumentError,
    BadRequestError,
    ConflictError,
    ExhaustedRetryError,
    ForbiddenError,
    InvalidResponseError,
    ManagementError,
    MissingParameterError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    RemoteApiError,
    RequestTimeoutError,
    ServerError,
    TransientServerError,
    TransientTransportError,
    UnauthorizedError,
    ValidationError,
)
from idm_client.errors.handler import parse_retry_after, raise_for_status, wrap_transport_error
from idm_client.errors.models import ErrorBody, ErrorFormatter

__all__ = [
    "APIError",
    "ArgumentError",
    "BadRequestError",
    "ConflictError",
    "ErrorBody",
    "ErrorFormatter",
    "ExhaustedRetryError",
    "ForbiddenError",
    "InvalidResponseError",
    "ManagementError",
    "MissingParameterError",
    "NetworkError",
    "NotFoundError",
    "RateLimitError",
    "RemoteApiError",
    "RequestTimeoutError",
    "ServerError",
    "TransientServerError",
    "TransientTransportError",
    "UnauthorizedError",
    "ValidationError",
    "parse_retry_after",
    "raise_for_status",
    "wrap_transport_error",
]
