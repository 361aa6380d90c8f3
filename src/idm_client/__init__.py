"""idm-client - async client for an identity-management REST API.

- Resource managers for users and connections
- Generic REST resource client with URL templates and pagination
- Retry with exponential backoff and rate-limit awareness
- Configuration from code, environment variables or a .env file

Example:
    ```python
    from idm_client import ClientOptions, ManagementClient, RetryPolicy

    options = ClientOptions(
        base_url="https://tenant.example.com/api/v2",
        token=api_token,
        retry=RetryPolicy(max_retries=5),
    )

    async with ManagementClient(options) as client:
        page = await client.users.get_all({"per_page": 50, "include_totals": True})
        for user in page:
            print(user["email"])
    ```
"""

__version__ = "0.1.0"

from idm_client.client import ManagementClient  # noqa: E402
from idm_client.config import ClientOptions  # noqa: E402
from idm_client.transport.pagination import Page, iter_pages  # noqa: E402
from idm_client.transport.retry import RetryPolicy  # noqa: E402

__all__ = [
    "ClientOptions",
    "ManagementClient",
    "Page",
    "RetryPolicy",
    "__version__",
    "iter_pages",
]
