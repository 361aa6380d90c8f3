"""Top-level management API client."""

import logging
from typing import Any

import httpx

from idm_client.config import ClientOptions
from idm_client.management.connections import ConnectionsManager
from idm_client.management.users import UsersManager

logger = logging.getLogger(__name__)


class ManagementClient:
    """Entry point bundling every resource manager over one connection pool.

    Use it as an async context manager so the pool is closed. A caller-supplied
    ``http_client`` is left open; the caller owns it.

    Args:
        options: Client configuration; keyword arguments build one when omitted
        http_client: Existing async HTTP client to share
        transport: Transport for the internally created client (e.g. httpx.MockTransport)
        **kwargs: Forwarded to ClientOptions when ``options`` is None

    Example:
        ```python
        async with ManagementClient(base_url="https://tenant.example.com/api/v2", token=token) as client:
            user = await client.users.get({"id": "auth0|123"})
            connections = await client.connections.get_all({"strategy": "auth0"})
        ```
    """

    def __init__(
        self,
        options: ClientOptions | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        if options is None:
            options = ClientOptions(**kwargs)
        elif kwargs:
            options = options.with_overrides(**kwargs)

        self.options = options
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=options.timeout, transport=transport)

        self.users = UsersManager(options, self.http_client)
        self.connections = ConnectionsManager(options, self.http_client)

        logger.debug(f"Management client created for {options.base_url}")

    async def __aenter__(self) -> "ManagementClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self.http_client.aclose()
