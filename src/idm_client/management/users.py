"""Users manager.

Covers ``/users`` and its sub-resources: multifactor providers, linked
identities, logs, Guardian enrollments, roles, permissions and organizations.

Example:
    ```python
    users = UsersManager(options, http)

    page = await users.get_all({"per_page": 10, "page": 0, "include_totals": True})
    await users.update_app_metadata({"id": "auth0|123"}, {"plan": "pro"})
    await users.assign_roles({"id": "auth0|123"}, {"roles": ["rol_1"]})
    ```
"""

from collections.abc import Mapping
from typing import Any

import httpx

from idm_client.config import ClientOptions
from idm_client.errors.exceptions import ArgumentError
from idm_client.management.base import BaseManager, require_string
from idm_client.transport.pagination import Page

USER_ID_REQUIRED = "The user_id cannot be null or undefined"


class UsersManager(BaseManager):
    """Domain methods for users, one per API operation."""

    def __init__(self, options: ClientOptions, http_client: httpx.AsyncClient) -> None:
        super().__init__(options, http_client)

        self.users = self._resource("/users/:id", items_key="users")
        self.multifactor = self._resource("/users/:id/multifactor/:provider")
        self.identities = self._resource("/users/:id/identities/:provider/:user_id")
        self.user_logs = self._resource("/users/:id/logs", items_key="logs")
        self.enrollments = self._resource("/users/:id/enrollments")
        self.users_by_email = self._resource("/users-by-email")
        self.recovery_code_regenerations = self._resource("/users/:id/recovery-code-regeneration")
        self.invalidate_remember_browsers = self._resource(
            "/users/:id/multifactor/actions/invalidate-remember-browser"
        )
        self.roles = self._resource("/users/:id/roles", items_key="roles")
        self.permissions = self._resource("/users/:id/permissions", items_key="permissions")
        self.organizations = self._resource("/users/:id/organizations", items_key="organizations")

    async def create(self, data: Mapping[str, Any]) -> dict:
        return await self.users.create(data)

    async def get_all(self, params: Mapping[str, Any] | None = None) -> Page:
        """List users.

        Without pagination parameters the API returns its first page.
        ``{"per_page": 10, "page": 0, "include_totals": True}`` asks for an
        offset envelope with a total count.
        """
        return await self.users.get_all(params)

    async def get_by_email(self, email: str, **options: Any) -> Page:
        """Find users by exact email address through ``/users-by-email``."""
        if not isinstance(email, str) or not email:
            raise ArgumentError("You must provide an email address")
        return await self.users_by_email.get_all({"email": email, **options})

    async def get(self, params: str | Mapping[str, Any]) -> dict:
        if isinstance(params, str):
            params = {"id": params}
        require_string(params, "id", "The id parameter must be a valid user id")
        return await self.users.get(params)

    async def update(self, params: Mapping[str, Any], data: Mapping[str, Any]) -> dict:
        require_string(params, "id", "The id parameter must be a valid user id")
        return await self.users.patch(params, data)

    async def update_user_metadata(self, params: Mapping[str, Any], metadata: Mapping[str, Any]) -> dict:
        require_string(params, "id", "The id parameter must be a valid user id")
        return await self.users.patch(params, {"user_metadata": metadata})

    async def update_app_metadata(self, params: Mapping[str, Any], metadata: Mapping[str, Any]) -> dict:
        require_string(params, "id", "The id parameter must be a valid user id")
        return await self.users.patch(params, {"app_metadata": metadata})

    async def delete(self, params: Mapping[str, Any]) -> None:
        require_string(params, "id", "You must provide an id for the delete method")
        return await self.users.delete(params)

    async def delete_all(self, *, confirm: bool = False) -> None:
        """Delete every user of the tenant.

        Raises:
            ArgumentError: Unless called with ``confirm=True``
        """
        if confirm is not True:
            raise ArgumentError("delete_all removes every user; pass confirm=True to proceed")
        return await self.users.delete({})

    async def delete_multifactor_provider(self, params: Mapping[str, Any]) -> None:
        require_string(params, "id", "The id parameter must be a valid user id")
        require_string(params, "provider", "Must specify a provider")
        return await self.multifactor.delete(params)

    async def link(self, user_id: str, params: Mapping[str, Any] | None = None) -> list:
        """Link another account to the primary user ``user_id``."""
        if not user_id:
            raise ArgumentError("The userId cannot be null or undefined")
        if not isinstance(user_id, str):
            raise ArgumentError("The userId has to be a string")
        return await self.identities.create(dict(params or {}), {"id": user_id})

    async def unlink(self, params: Mapping[str, Any]) -> list:
        require_string(params, "id", "id field is required")
        require_string(params, "user_id", "user_id field is required")
        require_string(params, "provider", "provider field is required")
        return await self.identities.delete(params)

    async def logs(self, params: Mapping[str, Any]) -> Any:
        require_string(params, "id", "id field is required")
        return await self.user_logs.get(params)

    async def get_guardian_enrollments(self, params: Mapping[str, Any]) -> list:
        require_string(params, "id", "id field is required")
        return await self.enrollments.get(params)

    async def regenerate_recovery_code(self, params: Mapping[str, Any]) -> dict:
        require_string(params, "id", "The userId cannot be null or undefined")
        return await self.recovery_code_regenerations.create({}, params)

    async def invalidate_remember_browser(self, params: Mapping[str, Any]) -> None:
        require_string(params, "id", "The userId cannot be null or undefined")
        return await self.invalidate_remember_browsers.create({}, params)

    async def get_roles(self, params: Mapping[str, Any]) -> Page:
        require_string(params, "id", USER_ID_REQUIRED)
        return await self.roles.get_all(params)

    async def assign_roles(self, params: Mapping[str, Any], data: Mapping[str, Any]) -> None:
        require_string(params, "id", USER_ID_REQUIRED)
        return await self.roles.create(data or {}, params)

    async def remove_roles(self, params: Mapping[str, Any], data: Mapping[str, Any]) -> None:
        require_string(params, "id", USER_ID_REQUIRED)
        return await self.roles.delete(params, data or {})

    async def get_permissions(self, params: Mapping[str, Any]) -> Page:
        require_string(params, "id", USER_ID_REQUIRED)
        return await self.permissions.get_all(params)

    async def assign_permissions(self, params: Mapping[str, Any], data: Mapping[str, Any]) -> None:
        require_string(params, "id", USER_ID_REQUIRED)
        return await self.permissions.create(data or {}, params)

    async def remove_permissions(self, params: Mapping[str, Any], data: Mapping[str, Any]) -> None:
        require_string(params, "id", USER_ID_REQUIRED)
        return await self.permissions.delete(params, data or {})

    async def get_user_organizations(self, params: Mapping[str, Any]) -> Page:
        require_string(params, "id", USER_ID_REQUIRED)
        return await self.organizations.get_all(params)
