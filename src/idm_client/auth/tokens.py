"""Bearer token providers.

A provider is asked for a token on every request, so callers that rotate
tokens can hand in a callable and the client always sends a fresh one.

Example:
    ```python
    provider = as_token_provider(token="static-token")

    async def fetch_token() -> str:
        return await my_cache.get_or_refresh()

    provider = as_token_provider(token_provider=fetch_token)
    ```
"""

import inspect
from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

from idm_client.auth.exceptions import TokenProviderError
from idm_client.errors.exceptions import ArgumentError

TokenCallable = Callable[[], "str | Awaitable[str]"]


@runtime_checkable
class TokenProvider(Protocol):
    """Anything that can produce a bearer token asynchronously."""

    async def get_access_token(self) -> str: ...


class StaticTokenProvider:
    """Always returns the same token."""

    def __init__(self, token: str):
        if not isinstance(token, str) or not token:
            raise ArgumentError("The access token must be a non-empty string")
        self._token = token

    async def get_access_token(self) -> str:
        return self._token

    def __repr__(self) -> str:
        return "StaticTokenProvider(token='***')"


class CallableTokenProvider:
    """Calls a sync or async function for every token request."""

    def __init__(self, func: TokenCallable):
        if not callable(func):
            raise ArgumentError("The token provider must be callable")
        self._func = func

    async def get_access_token(self) -> str:
        token = self._func()
        if inspect.isawaitable(token):
            token = await token
        if not isinstance(token, str) or not token:
            raise TokenProviderError("The token provider did not return a token")
        return token


def as_token_provider(
    token: str | None = None,
    token_provider: "TokenProvider | TokenCallable | None" = None,
) -> TokenProvider | None:
    """Normalise the token settings of ClientOptions into a provider.

    Returns None when neither is given; requests then go out unauthenticated.
    """
    if token is not None and token_provider is not None:
        raise ArgumentError("Provide either a token or a token provider, not both")

    if token_provider is not None:
        if isinstance(token_provider, TokenProvider):
            return token_provider
        return CallableTokenProvider(token_provider)

    if token is not None:
        return StaticTokenProvider(token)

    return None
