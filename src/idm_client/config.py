"""Client configuration.

:class:`ClientOptions` is an immutable value built once and passed to every
manager. Build it directly, or from the environment with
:meth:`ClientOptions.from_env`:

| Variable | Meaning |
|----------|---------|
| `IDM_BASE_URL` | API base URL (required) |
| `IDM_API_TOKEN` | Static bearer token |
| `IDM_API_TOKEN_FILE` | File holding the bearer token |
| `IDM_MAX_RETRIES` | Retry budget per call |
| `IDM_TIMEOUT` | Per-request timeout in seconds |
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from idm_client.auth.credentials import CredentialResolver
from idm_client.auth.tokens import TokenCallable, TokenProvider, as_token_provider
from idm_client.errors.exceptions import ArgumentError
from idm_client.transport.retry import RetryPolicy

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

ENV_BASE_URL = "IDM_BASE_URL"
ENV_API_TOKEN = "IDM_API_TOKEN"
ENV_API_TOKEN_FILE = "IDM_API_TOKEN_FILE"
ENV_MAX_RETRIES = "IDM_MAX_RETRIES"
ENV_TIMEOUT = "IDM_TIMEOUT"


@dataclass(frozen=True)
class ClientOptions:
    """Settings shared by every manager of a client.

    Args:
        base_url: Base URL of the management API, e.g. ``https://tenant.example.com/api/v2``
        token: Static bearer token
        token_provider: Sync or async callable (or TokenProvider) returning a token;
            exclusive with ``token``
        headers: Extra headers for every request
        retry: Retry policy; None disables retries
        timeout: Per-request timeout in seconds
    """

    base_url: str
    token: str | None = field(default=None, repr=False)
    token_provider: "TokenProvider | TokenCallable | None" = field(default=None, repr=False)
    headers: Mapping[str, str] = field(default_factory=dict)
    retry: RetryPolicy | None = field(default_factory=RetryPolicy)
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if self.base_url is None:
            raise ArgumentError("Must provide a base URL for the API")
        if not isinstance(self.base_url, str) or not self.base_url.strip():
            raise ArgumentError("The provided base URL is invalid")
        if self.timeout is not None and self.timeout <= 0:
            raise ArgumentError("timeout must be positive")

        object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers or {})))
        # Fail fast on conflicting or malformed token settings
        as_token_provider(self.token, self.token_provider)

    def get_token_provider(self) -> TokenProvider | None:
        return as_token_provider(self.token, self.token_provider)

    def url(self, path: str) -> str:
        """Join a resource path onto the base URL."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def with_overrides(self, **changes: Any) -> "ClientOptions":
        return replace(self, **changes)

    @classmethod
    def from_env(cls, resolver: CredentialResolver | None = None, **overrides: Any) -> "ClientOptions":
        """Build options from the environment (and .env file).

        Keyword overrides win over the environment.

        Raises:
            CredentialNotFoundError: If no base URL is configured
            ArgumentError: If a numeric setting cannot be parsed
        """
        resolver = resolver or CredentialResolver()

        base_url = resolver.resolve(
            value=overrides.pop("base_url", None), env_var_name=ENV_BASE_URL, required=True, mask_in_logs=False
        )

        if "token" not in overrides and "token_provider" not in overrides:
            token = resolver.resolve(env_var_name=ENV_API_TOKEN)
            if token is None:
                token = resolver.resolve_from_file(env_var_name=ENV_API_TOKEN_FILE)
            if token is not None:
                overrides["token"] = token
            else:
                logger.warning("No API token configured, requests will be sent unauthenticated")

        if "retry" not in overrides:
            max_retries = resolver.resolve(env_var_name=ENV_MAX_RETRIES, mask_in_logs=False)
            if max_retries is not None:
                overrides["retry"] = RetryPolicy(max_retries=_parse_number(int, ENV_MAX_RETRIES, max_retries))

        if "timeout" not in overrides:
            timeout = resolver.resolve(env_var_name=ENV_TIMEOUT, mask_in_logs=False)
            if timeout is not None:
                overrides["timeout"] = _parse_number(float, ENV_TIMEOUT, timeout)

        return cls(base_url=base_url, **overrides)


def _parse_number(kind, name: str, raw: str):
    try:
        return kind(raw)
    except ValueError:
        raise ArgumentError(f"{name} must be a number, got {raw!r}") from None
