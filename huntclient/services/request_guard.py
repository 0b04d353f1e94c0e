from __future__ import annotations
import itertools
from typing import Awaitable, TypeVar
from huntclient.errors import HuntError, StaleResponse

T = TypeVar("T")

class RequestGuard:
    """Per-resource monotonic request tokens. Only the newest request for a resource may land."""

    def __init__(self):
        self._counter = itertools.count(1)
        self._latest: dict[str, int] = {}

    def issue(self, resource: str) -> int:
        token = next(self._counter)
        self._latest[resource] = token
        return token

    def is_current(self, resource: str, token: int) -> bool:
        return self._latest.get(resource) == token

    async def run(self, resource: str, aw: Awaitable[T]) -> T:
        token = self.issue(resource)
        try:
            result = await aw
        except HuntError:
            if not self.is_current(resource, token):
                raise StaleResponse(resource)
            raise
        if not self.is_current(resource, token):
            raise StaleResponse(resource)
        return result
