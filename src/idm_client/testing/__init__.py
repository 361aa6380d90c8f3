"""Testing utilities for code built on the management client.

:class:`ScriptedTransport` replays a fixed sequence of outcomes, one per
request, and records the requests it saw.

Example:
    ```python
    from idm_client.testing import ScriptedTransport

    transport = ScriptedTransport([503, {"id": "u1"}])
    async with ManagementClient(base_url="https://api.example.com", token="t", transport=transport) as client:
        user = await client.users.get({"id": "u1"})

    assert transport.call_count == 2
    ```
"""

from collections.abc import Iterable
from typing import Any

import httpx


class ScriptedTransport(httpx.MockTransport):
    """Mock transport answering each request with the next scripted step.

    Steps can be:

    - ``httpx.Response``: returned as is
    - ``int``: a bodiless response with that status
    - an exception instance: raised
    - anything else: a 200 response with that value as the JSON body

    The last step repeats once the script runs out.
    """

    def __init__(self, steps: Iterable[Any]) -> None:
        self.steps = list(steps)
        if not self.steps:
            raise ValueError("ScriptedTransport needs at least one step")
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        step = self.steps[min(len(self.requests), len(self.steps) - 1)]
        self.requests.append(request)

        if isinstance(step, BaseException):
            raise step
        if isinstance(step, httpx.Response):
            return step
        if isinstance(step, int):
            return httpx.Response(step)
        return httpx.Response(200, json=step)


__all__ = ["ScriptedTransport"]
