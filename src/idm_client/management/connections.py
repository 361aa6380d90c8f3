"""Connections manager: CRUD on ``/connections``."""

from collections.abc import Mapping
from typing import Any

import httpx

from idm_client.config import ClientOptions
from idm_client.management.base import BaseManager, require_string
from idm_client.transport.pagination import Page


class ConnectionsManager(BaseManager):
    """Create, list, read, update and delete connections."""

    def __init__(self, options: ClientOptions, http_client: httpx.AsyncClient) -> None:
        super().__init__(options, http_client)
        self.resource = self._resource("/connections/:id", items_key="connections")

    async def create(self, data: Mapping[str, Any]) -> dict:
        return await self.resource.create(data)

    async def get_all(self, params: Mapping[str, Any] | None = None) -> Page:
        return await self.resource.get_all(params)

    async def get(self, params: Mapping[str, Any]) -> dict:
        require_string(params, "id", "The connection id must be a non-empty string")
        return await self.resource.get(params)

    async def update(self, params: Mapping[str, Any], data: Mapping[str, Any]) -> dict:
        require_string(params, "id", "The connection id must be a non-empty string")
        return await self.resource.patch(params, data)

    async def delete(self, params: Mapping[str, Any]) -> None:
        require_string(params, "id", "You must provide an id for the delete method")
        return await self.resource.delete(params)
