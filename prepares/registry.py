"""Ordered, append-only route table shared by one prepare run."""
from __future__ import annotations

from typing import Iterator, List, Optional

from .base import Route


class RouteRegistry:
    """
    Routes in emission order.

    Owned by the run and handed to each prepare pass. No deduplication:
    identical routes declared twice are both kept.
    """

    def __init__(self):
        self._routes: List[Route] = []

    def append(self, route: Route):
        self._routes.append(route)

    def all(self) -> List[Route]:
        return list(self._routes)

    def last(self) -> Optional[Route]:
        return self._routes[-1] if self._routes else None

    def reset(self):
        self._routes = []

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)
