from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LatestOnly:
    """Debounced, latest-wins runner for remote queries.

    Each ``run`` waits ``quiet_period`` seconds before issuing its query. A call that is
    superseded during the wait never issues the query; a call whose response arrives after
    a newer call started is discarded. Both cases return None.
    """

    def __init__(self, quiet_period: float = 0.0) -> None:
        self.quiet_period = max(0.0, quiet_period)
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def supersede(self) -> int:
        """Invalidate every in-flight call; returns the new generation."""
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    async def run(self, query: Callable[[], Awaitable[T]]) -> Optional[T]:
        token = self.supersede()
        if self.quiet_period:
            await asyncio.sleep(self.quiet_period)
        if not self.is_current(token):
            logger.debug("Query %d superseded before it was issued", token)
            return None
        result = await query()
        if not self.is_current(token):
            logger.debug("Discarding stale response for query %d", token)
            return None
        return result
