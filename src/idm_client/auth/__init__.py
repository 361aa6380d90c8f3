"""Authentication components.

- Setting and credential resolution (value → env → .env → default, or a file)
- Bearer token providers, static or callable

Example:
    ```python
    from idm_client.auth import CredentialResolver, as_token_provider

    resolver = CredentialResolver()
    token = resolver.resolve(env_var_name="IDM_API_TOKEN", required=True)
    provider = as_token_provider(token=token)
    ```
"""

from idm_client.auth.credentials import CredentialResolver
from idm_client.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
    TokenProviderError,
)
from idm_client.auth.tokens import (
    CallableTokenProvider,
    StaticTokenProvider,
    TokenProvider,
    as_token_provider,
)

__all__ = [
    "CallableTokenProvider",
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "StaticTokenProvider",
    "TokenProvider",
    "TokenProviderError",
    "as_token_provider",
]
