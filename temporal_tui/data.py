"""Data layer for the Temporal dashboard.

A DataController mediates every remote read for one view. Fetch requests go
through a bounded queue drained by a single background task, which is also the
only writer of the view's collection and loading state. Readers (the render
tick and key handlers) get an immutable Snapshot that is swapped in whole after
each change, so they never observe a half-applied page.

Stale responses: every reload starts a new generation. Requests enqueued
under an older generation are dropped when dequeued, and a response whose
generation went stale while its RPC was in flight is discarded.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .collection import PaginatedCollection

logger = logging.getLogger(__name__)

QUEUE_SIZE = 32


class LoadingState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    RELOADED = "reloaded"
    PAGE_LOADED = "page_loaded"
    ERROR = "error"


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of a controller's data at one point in time."""

    rows: tuple[Any, ...] = ()
    cursor: bytes | None = None
    state: LoadingState = LoadingState.IDLE
    error: str | None = None
    detail: Any = None
    generation: int = 0
    version: int = 0
    last_reload: float | None = None

    def is_exhausted(self) -> bool:
        return self.cursor is None

    @property
    def is_loading(self) -> bool:
        return self.state is LoadingState.LOADING


class RequestKind(Enum):
    RELOAD = "reload"
    LOAD_PAGE = "load_page"


@dataclass
class FetchRequest:
    kind: RequestKind
    generation: int
    query: str = ""
    done: asyncio.Future | None = field(default=None, repr=False)


class DataController:
    """Owns one view's PaginatedCollection and the task that fills it.

    Args:
        source: Object with ``fetch(page_token, query) -> Page`` and an
            ``operation`` name used in error messages. Called in a worker thread.
        name: Label used in logs and the task name.
    """

    def __init__(self, source: Any, name: str = "view") -> None:
        self._source = source
        self.name = name
        self._collection = PaginatedCollection()
        self._queue: asyncio.Queue[FetchRequest] | None = None
        self._task: asyncio.Task | None = None
        self._generation = 0
        self._pending = 0
        self._pending_page: FetchRequest | None = None
        self._query = ""
        self._snapshot = Snapshot()

    @property
    def source(self) -> Any:
        return self._source

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Spawn the fetch task on the running event loop."""
        if self._task is not None:
            raise RuntimeError(f"controller {self.name!r} already started")
        queue: asyncio.Queue[FetchRequest] = asyncio.Queue(maxsize=QUEUE_SIZE)
        self._queue = queue
        self._task = asyncio.get_running_loop().create_task(
            self._run(queue), name=f"fetch-{self.name}"
        )

    async def stop(self) -> None:
        """Cancel the fetch task and wait for it to finish.

        Anyone still waiting on a queued request is released.
        """
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        if self._queue is not None:
            while not self._queue.empty():
                request = self._queue.get_nowait()
                self._pending -= 1
                if request.done is not None and not request.done.done():
                    request.done.cancel()
        logger.debug("%s: fetch task stopped", self.name)

    # -- requests ---------------------------------------------------------

    def reload(self, query: str = "") -> asyncio.Future | None:
        """Queue a replace-fetch of the first page.

        Returns a future resolved with the resulting LoadingState once the
        request has been served, or None if the request queue is full.
        """
        request = FetchRequest(RequestKind.RELOAD, self._generation + 1, query=query)
        if not self._enqueue(request):
            return None
        self._generation = request.generation
        self._query = query
        self._pending_page = None
        return request.done

    def load_next_page(self) -> asyncio.Future | None:
        """Queue an append-fetch of the page after the last loaded one.

        No-op returning None when the collection is exhausted. A page request
        already waiting for this generation is shared rather than duplicated.
        """
        if self._snapshot.cursor is None:
            return None
        pending = self._pending_page
        if pending is not None and pending.done is not None and not pending.done.done():
            return pending.done
        request = FetchRequest(RequestKind.LOAD_PAGE, self._generation, query=self._query)
        if not self._enqueue(request):
            return None
        self._pending_page = request
        return request.done

    def _enqueue(self, request: FetchRequest) -> bool:
        if self._queue is None or self._task is None:
            raise RuntimeError(f"controller {self.name!r} is not running")
        request.done = asyncio.get_running_loop().create_future()
        try:
            self._queue.put_nowait(request)
        except asyncio.QueueFull:
            logger.warning("%s: request queue full, dropping %s", self.name, request.kind.value)
            return False
        self._pending += 1
        return True

    # -- readers ----------------------------------------------------------

    def snapshot(self) -> Snapshot:
        """Current data; reports LOADING while any request is queued or in flight."""
        snap = self._snapshot
        if self._pending and snap.state is not LoadingState.LOADING:
            return replace(snap, state=LoadingState.LOADING, error=None)
        return snap

    def is_loading(self) -> bool:
        return self.snapshot().is_loading

    @property
    def last_reload(self) -> float | None:
        """``time.monotonic()`` of the last successful reload."""
        return self._snapshot.last_reload

    def seconds_since_last_reload(self) -> float | None:
        last = self._snapshot.last_reload
        if last is None:
            return None
        return max(0.0, time.monotonic() - last)

    # -- fetch task -------------------------------------------------------

    async def _run(self, queue: asyncio.Queue[FetchRequest]) -> None:
        logger.debug("%s: starting fetch loop", self.name)
        while True:
            request = await queue.get()
            try:
                await self._serve(request)
            finally:
                self._pending -= 1
                if request.done is not None and not request.done.done():
                    request.done.set_result(self._snapshot.state)

    async def _serve(self, request: FetchRequest) -> None:
        if request.generation != self._generation:
            logger.debug(
                "%s: dropping stale %s (generation %d, current %d)",
                self.name, request.kind.value, request.generation, self._generation,
            )
            return

        if request.kind is RequestKind.LOAD_PAGE:
            page_token = self._collection.cursor
            if page_token is None:
                return
        else:
            page_token = None

        logger.debug("%s: %s (generation %d)", self.name, request.kind.value, request.generation)
        self._publish(LoadingState.LOADING)
        try:
            page = await asyncio.to_thread(self._source.fetch, page_token, request.query)
        except Exception as e:
            message = f"{self._source.operation} request failed: {e}"
            if request.generation != self._generation:
                logger.debug("%s: ignoring failure of stale request: %s", self.name, message)
                return
            logger.exception("%s: %s", self.name, message)
            self._publish(LoadingState.ERROR, error=message)
            return

        if request.generation != self._generation:
            logger.debug("%s: discarding response for stale generation %d", self.name, request.generation)
            return

        if request.kind is RequestKind.RELOAD:
            self._collection.replace(page.rows, page.next_page_token)
            self._publish(
                LoadingState.RELOADED, detail=page.detail, last_reload=time.monotonic()
            )
            logger.debug("%s: reloaded, %d rows", self.name, len(self._collection))
        else:
            self._collection.append(page.rows, page.next_page_token)
            self._publish(LoadingState.PAGE_LOADED)
            logger.debug("%s: loaded next page, %d rows", self.name, len(self._collection))

    def _publish(self, state: LoadingState, error: str | None = None, **changes: Any) -> None:
        """Swap in a new snapshot reflecting the collection and ``state``."""
        previous = self._snapshot
        self._snapshot = Snapshot(
            rows=self._collection.rows,
            cursor=self._collection.cursor,
            state=state,
            error=error,
            detail=changes.get("detail", previous.detail),
            generation=self._generation,
            version=previous.version + 1,
            last_reload=changes.get("last_reload", previous.last_reload),
        )
