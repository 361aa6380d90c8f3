"""Generic REST resource client.

A :class:`RestClient` is bound to one URL template and turns the verbs
``create``, ``get``, ``get_all``, ``patch`` and ``delete`` into single HTTP
round trips:

| Verb | Method | Payload |
|------|--------|---------|
| `create` | POST | JSON body, leftover params in the query |
| `get` / `get_all` | GET | query |
| `patch` | PATCH | JSON body, leftover params in the query |
| `delete` | DELETE | query, optional JSON body |

Example:
    ```python
    import httpx

    from idm_client.auth import as_token_provider
    from idm_client.transport.resource import RestClient

    async with httpx.AsyncClient() as http:
        users = RestClient(
            http,
            "https://api.example.com/api/v2/users/:id",
            token_provider=as_token_provider(token="..."),
        )
        user = await users.get({"id": "auth0|123", "fields": ["email", "name"]})
    ```
"""

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from idm_client import __version__
from idm_client.auth.tokens import TokenProvider
from idm_client.errors.exceptions import ArgumentError, InvalidResponseError
from idm_client.errors.handler import raise_for_status, wrap_transport_error
from idm_client.errors.models import DEFAULT_ERROR_FORMATTER, ErrorFormatter
from idm_client.transport.pagination import Page
from idm_client.transport.template import encode_query, resolve_path

logger = logging.getLogger(__name__)

USER_AGENT = f"idm-client/{__version__}"


class RestClient:
    """One-request-per-call client for a single resource URL template.

    Args:
        http_client: Shared async HTTP client
        url_template: Absolute URL with ``:name`` placeholders
        headers: Extra headers sent with every request
        token_provider: Source of the bearer token, asked once per request
        repeat_params: Encode list query values as repeated keys instead of
            comma-joined values
        items_key: Envelope key holding the entities of list responses
        error_formatter: Keys for the message and name of error bodies
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        url_template: str,
        *,
        headers: Mapping[str, str] | None = None,
        token_provider: TokenProvider | None = None,
        repeat_params: bool = False,
        items_key: str | None = None,
        error_formatter: ErrorFormatter = DEFAULT_ERROR_FORMATTER,
    ) -> None:
        if not isinstance(url_template, str) or not url_template.strip():
            raise ArgumentError("The resource URL template must be a non-empty string")

        self._http = http_client
        self.url_template = url_template.strip()
        self.headers = dict(headers or {})
        self.token_provider = token_provider
        self.repeat_params = repeat_params
        self.items_key = items_key
        self.error_formatter = error_formatter

    def __repr__(self) -> str:
        return f"RestClient({self.url_template!r})"

    async def create(self, data: Any = None, params: Mapping[str, Any] | None = None) -> Any:
        """POST ``data`` to the resource."""
        return await self.request("POST", params, json=data)

    async def get(self, id_or_params: str | Mapping[str, Any]) -> Any:
        """GET one entity, by id or by a parameter mapping."""
        return await self.request("GET", _as_params(id_or_params))

    async def get_all(self, params: Mapping[str, Any] | None = None) -> Page:
        """GET a list of entities as a Page.

        Raises:
            InvalidResponseError: If a successful response is not a list or an envelope
        """
        response = await self.send("GET", params)
        try:
            return Page.from_payload(_decode(response), self.items_key)
        except TypeError as e:
            raise InvalidResponseError(
                f"HTTP {response.status_code}: {e}",
                status_code=response.status_code,
                response=response,
            ) from e

    async def patch(self, params: str | Mapping[str, Any], data: Any) -> Any:
        """PATCH the entity addressed by ``params`` with ``data``."""
        return await self.request("PATCH", _as_params(params), json=data)

    update = patch

    async def delete(self, params: str | Mapping[str, Any] | None = None, data: Any = None) -> Any:
        """DELETE the entity (or sub-resource) addressed by ``params``."""
        return await self.request("DELETE", _as_params(params), json=data)

    def build_request(
        self, method: str, params: Mapping[str, Any] | None = None, json: Any = None, token: str | None = None
    ) -> httpx.Request:
        """Build the request for one call without sending it."""
        url, residual = resolve_path(self.url_template, params)

        # Header names are case-insensitive, so caller headers replace defaults whatever their casing
        headers = httpx.Headers({"Accept": "application/json", "User-Agent": USER_AGENT})
        headers.update(self.headers)
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"

        return self._http.build_request(
            method,
            url,
            params=encode_query(residual, self.repeat_params),
            headers=headers,
            json=json,
        )

    async def send(self, method: str, params: Mapping[str, Any] | None = None, json: Any = None) -> httpx.Response:
        """Send exactly one request and return the successful response.

        Raises:
            APIError subclass for non-2xx responses and request failures
        """
        token = await self.token_provider.get_access_token() if self.token_provider else None
        request = self.build_request(method, params, json=json, token=token)

        logger.debug(f"{request.method} {request.url}")
        try:
            response = await self._http.send(request)
        except httpx.RequestError as e:
            raise wrap_transport_error(e) from e

        raise_for_status(response, self.error_formatter)
        return response

    async def request(self, method: str, params: Mapping[str, Any] | None = None, json: Any = None) -> Any:
        """Send exactly one request and decode the response body."""
        return _decode(await self.send(method, params, json=json))


def _as_params(value: str | Mapping[str, Any] | None) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, str):
        return {"id": value}
    if isinstance(value, Mapping):
        return dict(value)
    raise ArgumentError(f"Expected an id string or a parameter mapping, got {type(value).__name__}")


def _decode(response: httpx.Response) -> Any:
    if response.status_code == 204 or not response.content:
        return None

    try:
        return response.json()
    except ValueError:
        return response.text
