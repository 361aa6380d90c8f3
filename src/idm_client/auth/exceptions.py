"""Exceptions for credential resolution and bearer token retrieval.

Example:
    ```python
    from idm_client.auth.exceptions import CredentialNotFoundError

    if not token:
        raise CredentialNotFoundError("API token not found", env_var_name="IDM_API_TOKEN")
    ```
"""

from idm_client.errors.exceptions import ManagementError


class CredentialError(ManagementError):
    """Base exception for credential-related errors."""

    pass


class CredentialNotFoundError(CredentialError):
    """Raised when a required credential cannot be resolved.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialFileError(CredentialError):
    """Raised when a credential file cannot be read."""

    pass


class TokenProviderError(CredentialError):
    """Raised when a token provider yields no usable bearer token."""

    pass
