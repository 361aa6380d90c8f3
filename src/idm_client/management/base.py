"""Shared plumbing for resource managers."""

from collections.abc import Mapping
from typing import Any

import httpx

from idm_client.config import ClientOptions
from idm_client.errors.exceptions import ArgumentError
from idm_client.errors.models import ErrorFormatter
from idm_client.transport.resource import RestClient
from idm_client.transport.retry import RetryRestClient

MANAGEMENT_ERROR_FORMATTER = ErrorFormatter(message="message", name="error")


class BaseManager:
    """Base class for managers of one resource family.

    Args:
        options: Client configuration
        http_client: Shared async HTTP client
    """

    def __init__(self, options: ClientOptions, http_client: httpx.AsyncClient) -> None:
        if not isinstance(options, ClientOptions):
            raise ArgumentError("Must provide manager options")
        if not isinstance(http_client, httpx.AsyncClient):
            raise ArgumentError("Must provide an httpx.AsyncClient")

        self.options = options
        self._http = http_client
        self._token_provider = options.get_token_provider()

    def _resource(self, path: str, *, repeat_params: bool = False, items_key: str | None = None) -> RetryRestClient:
        client = RestClient(
            self._http,
            self.options.url(path),
            headers=self.options.headers,
            token_provider=self._token_provider,
            repeat_params=repeat_params,
            items_key=items_key,
            error_formatter=MANAGEMENT_ERROR_FORMATTER,
        )
        return RetryRestClient(client, self.options.retry)


def require_string(params: Mapping[str, Any] | None, key: str, message: str) -> None:
    """Raise ArgumentError unless ``params[key]`` is a non-empty string."""
    if not isinstance(params, Mapping):
        raise ArgumentError(message)
    value = params.get(key)
    if not isinstance(value, str) or not value:
        raise ArgumentError(message)
