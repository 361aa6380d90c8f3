"""REST transport layer.

Modules:
    template: URL template resolution and query encoding
    resource: Generic resource client, one HTTP round trip per call
    retry: Retry policy and the retrying resource client
    pagination: Page results and cursor-following iteration

Example:
    ```python
    from idm_client.transport import RestClient, RetryPolicy, RetryRestClient

    roles = RetryRestClient(
        RestClient(http, "https://api.example.com/api/v2/users/:id/roles", items_key="roles"),
        RetryPolicy(max_retries=3),
    )
    page = await roles.get_all({"id": "auth0|123"})
    ```
"""

from idm_client.transport.pagination import Page, iter_pages
from idm_client.transport.resource import RestClient
from idm_client.transport.retry import DEFAULT_RETRY_STATUS_CODES, RetryPolicy, RetryRestClient
from idm_client.transport.template import encode_query, resolve_path

__all__ = [
    "DEFAULT_RETRY_STATUS_CODES",
    "Page",
    "RestClient",
    "RetryPolicy",
    "RetryRestClient",
    "encode_query",
    "iter_pages",
    "resolve_path",
]
