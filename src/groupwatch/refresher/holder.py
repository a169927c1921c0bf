"""TreeHolder - Owner of the current tree value."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from groupwatch.hierarchy import GroupNode

logger = logging.getLogger("groupwatch.refresher")


class TreeHolder:
    """Holds the latest tree and serializes updates to it.

    Every update reads the most recent tree, computes its replacement and
    stores it under one lock, so concurrent completions never overwrite each
    other. Once closed, updates are dropped.
    """

    def __init__(self, tree: GroupNode | None = None) -> None:
        self._tree = tree
        self._lock = asyncio.Lock()
        self._closed = False

    @property
    def tree(self) -> GroupNode | None:
        return self._tree

    @property
    def closed(self) -> bool:
        return self._closed

    async def set(self, tree: GroupNode | None) -> None:
        async with self._lock:
            if not self._closed:
                self._tree = tree

    async def update(self, fn: Callable[[GroupNode], GroupNode]) -> GroupNode | None:
        """Replace the current tree with ``fn(current)``.

        Returns:
            The new tree, or None if the holder is closed or empty
        """
        async with self._lock:
            if self._closed:
                logger.debug("Dropping tree update after close")
                return None
            if self._tree is None:
                return None
            self._tree = fn(self._tree)
            return self._tree

    def close(self) -> None:
        self._closed = True
