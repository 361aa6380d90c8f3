"""Paginated list results.

List endpoints answer in one of three shapes:

- a bare JSON array
- an offset envelope: ``{"users": [...], "start": 0, "limit": 50, "total": 120}``
- a checkpoint envelope: ``{"logs": [...], "next": "cursor"}``

All three become a :class:`Page`. The continuation token is opaque and is
handed back to the server unchanged.
"""

import logging
from collections.abc import AsyncIterator, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)

DEFAULT_CURSOR_PARAM = "from"


@dataclass(frozen=True)
class Page:
    """One page of entities plus whatever pagination metadata came with it."""

    items: list[Any] = field(default_factory=list)
    next_cursor: str | None = None
    start: int | None = None
    limit: int | None = None
    total: int | None = None

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]

    @property
    def has_next(self) -> bool:
        return self.next_cursor is not None

    @classmethod
    def from_payload(cls, payload: Any, items_key: str | None = None) -> "Page":
        """Build a page from a decoded list response.

        Args:
            payload: Decoded JSON body
            items_key: Envelope key holding the entities. When omitted, the
                first list-valued key of the envelope is used.
        """
        if payload is None:
            return cls()

        if isinstance(payload, list):
            return cls(items=payload)

        if not isinstance(payload, Mapping):
            raise TypeError(f"Cannot build a page from {type(payload).__name__}")

        if items_key is not None:
            items = payload.get(items_key) or []
        else:
            items = next((v for v in payload.values() if isinstance(v, list)), [])

        return cls(
            items=list(items),
            next_cursor=payload.get("next"),
            start=payload.get("start"),
            limit=payload.get("limit"),
            total=payload.get("total"),
        )


class SupportsGetAll(Protocol):
    async def get_all(self, params: Mapping[str, Any] | None = None) -> Page: ...


async def iter_pages(
    client: SupportsGetAll,
    params: Mapping[str, Any] | None = None,
    cursor_param: str = DEFAULT_CURSOR_PARAM,
    max_pages: int | None = None,
) -> AsyncIterator[Page]:
    """Follow continuation tokens until the server stops returning one.

    Each follow-up request reuses ``params`` with the cursor set under
    ``cursor_param``.

    Args:
        client: RestClient, RetryRestClient, or anything with ``get_all``
        params: Parameters for every request
        cursor_param: Query parameter that carries the cursor
        max_pages: Stop after this many pages

    Yields:
        Page objects in server order
    """
    base_params = dict(params or {})
    seen: set[str] = set()
    request_params = base_params
    pages = 0

    while True:
        page = await client.get_all(request_params)
        pages += 1
        yield page

        if not page.has_next:
            return
        if max_pages is not None and pages >= max_pages:
            return
        if page.next_cursor in seen:
            logger.warning(f"Server repeated pagination cursor {page.next_cursor!r}, stopping")
            return

        seen.add(page.next_cursor)
        request_params = {**base_params, cursor_param: page.next_cursor}
