"""Row selection and the scroll-driven lazy pagination it triggers."""

from __future__ import annotations

import asyncio
import logging

from .data import DataController, Snapshot

logger = logging.getLogger(__name__)


class SelectionCursor:
    """Index of the highlighted row, or None before the first navigation.

    Moving down off the last loaded row of a collection that still has pages
    fetches the next page first, so the operator only ever pays for the rows
    they scroll to.
    """

    def __init__(self) -> None:
        self.index: int | None = None
        self._seen_reload: float | None = None

    def __repr__(self) -> str:
        return f"SelectionCursor(index={self.index})"

    def is_on_last_row(self, snapshot: Snapshot) -> bool:
        return self.index is not None and self.index >= len(snapshot.rows) - 1

    async def advance(self, controller: DataController) -> int | None:
        """Select the next row, loading the next page first when needed.

        On the last row of a non-exhausted collection this queues exactly one
        page load and waits for it to finish (PAGE_LOADED or ERROR) before
        moving. On the last row of an exhausted collection it wraps to 0.
        """
        snapshot = controller.snapshot()
        if not snapshot.rows:
            return self.index
        if self.index is None:
            self.index = 0
            return self.index

        if self.is_on_last_row(snapshot) and not snapshot.is_exhausted():
            done = controller.load_next_page()
            if done is not None:
                logger.debug("selection at row %d, waiting for next page", self.index)
                await asyncio.shield(done)
            snapshot = controller.snapshot()
            if not snapshot.rows:
                self.index = None
                return None

        self.index = (min(self.index, len(snapshot.rows) - 1) + 1) % len(snapshot.rows)
        return self.index

    def retreat(self, snapshot: Snapshot) -> int | None:
        """Select the previous row, wrapping from the top to the bottom."""
        if not snapshot.rows:
            return self.index
        if self.index is None:
            self.index = 0
        else:
            self.index = (min(self.index, len(snapshot.rows) - 1) - 1) % len(snapshot.rows)
        return self.index

    def reconcile(self, snapshot: Snapshot) -> int | None:
        """Follow a reload: reset to the first row and keep the index in range."""
        if snapshot.last_reload != self._seen_reload:
            self._seen_reload = snapshot.last_reload
            self.index = 0 if snapshot.rows else None
        elif not snapshot.rows:
            self.index = None
        elif self.index is not None and self.index >= len(snapshot.rows):
            self.index = len(snapshot.rows) - 1
        return self.index

    def selected(self, snapshot: Snapshot):
        if self.index is None or self.index >= len(snapshot.rows):
            return None
        return snapshot.rows[self.index]
