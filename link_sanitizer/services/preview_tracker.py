from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from link_sanitizer.services.metadata import PreviewResult, fetch_preview

PreviewFetcher = Callable[[str], Awaitable[PreviewResult]]


class PreviewTracker:
    """Last-request-wins wrapper around a preview fetcher.

    Each `request` supersedes the previous one: a fetch still in flight is
    cancelled, and a request whose result arrives after a newer request
    started resolves to None instead of the stale preview.
    """

    def __init__(self, fetcher: PreviewFetcher | None = None) -> None:
        self._fetcher = fetcher or fetch_preview
        self._generation = 0
        self._task: Optional[asyncio.Future] = None

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def cancel(self) -> None:
        """Invalidate and cancel whatever is in flight."""
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def request(self, url: str) -> Optional[PreviewResult]:
        self.cancel()
        generation = self._generation
        task = asyncio.ensure_future(self._fetcher(url))
        self._task = task
        try:
            result = await task
        except asyncio.CancelledError:
            if self.is_current(generation):
                raise
            return None
        return result if self.is_current(generation) else None
