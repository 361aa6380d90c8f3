"""URL template resolution and query string encoding.

Resource URLs are written as templates with ``:name`` placeholders::

    https://api.example.com/api/v2/users/:id/multifactor/:provider

Resolving a template against a parameter mapping substitutes the placeholders
it can, drops the path segments of the ones it cannot, and hands back the
parameters that were not consumed so they can go into the query string.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import quote

from idm_client.errors.exceptions import ArgumentError, MissingParameterError

# A leading digit is not a placeholder, so ports ("host:8080") and schemes ("https://") pass through.
PLACEHOLDER_PATTERN = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


def placeholders(template: str) -> list[str]:
    """List the placeholder names of a template, left to right."""
    return PLACEHOLDER_PATTERN.findall(template)


def resolve_path(
    template: str,
    params: Mapping[str, Any] | None = None,
    required: Iterable[str] = (),
) -> tuple[str, dict[str, Any]]:
    """Expand a URL template.

    Args:
        template: URL template with ``:name`` placeholders
        params: Values for the placeholders, plus any extra parameters
        required: Placeholder names that must be present

    Returns:
        Tuple of (resolved URL, residual parameters)

    Raises:
        MissingParameterError: If a required placeholder has no value
        ArgumentError: If a placeholder is given an empty string

    Example:
        >>> resolve_path("/users/:id/roles", {"id": "auth0|1", "page": 2})
        ('/users/auth0%7C1/roles', {'page': 2})
        >>> resolve_path("/users/:id", {})
        ('/users', {})
    """
    residual = dict(params or {})
    template = template.strip()

    for name in required:
        if residual.get(name) is None:
            raise MissingParameterError(f"Missing required URL parameter '{name}'", parameter=name)

    def substitute(match: re.Match) -> str:
        name = match.group(1)
        value = residual.pop(name, None)
        if value is None:
            return ""
        text = str(value)
        if not text:
            # Dropping the segment here would address the parent collection
            raise ArgumentError(f"URL parameter '{name}' cannot be empty")
        return quote(text, safe="")

    segments = []
    for segment in template.split("/"):
        if not PLACEHOLDER_PATTERN.search(segment):
            segments.append(segment)
            continue

        resolved = PLACEHOLDER_PATTERN.sub(substitute, segment)
        if resolved:
            segments.append(resolved)

    return "/".join(segments), residual


def encode_query(params: Mapping[str, Any] | None, repeat_params: bool = False) -> list[tuple[str, str]]:
    """Serialize parameters into query string pairs.

    Args:
        params: Parameters to encode; None values are skipped
        repeat_params: Encode list values as repeated keys (``a=1&a=2``)
            instead of a single comma-joined value (``a=1,2``)

    Returns:
        List of (key, value) pairs, ready for httpx
    """
    pairs: list[tuple[str, str]] = []

    for key, value in (params or {}).items():
        if value is None:
            continue

        if isinstance(value, (list, tuple, set, frozenset)):
            values = [_encode_scalar(v) for v in value if v is not None]
            if repeat_params:
                pairs.extend((key, v) for v in values)
            else:
                pairs.append((key, ",".join(values)))
        else:
            pairs.append((key, _encode_scalar(value)))

    return pairs


def _encode_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
