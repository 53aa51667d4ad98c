"""View state machine: executions list <-> single execution detail.

Exactly one view is active at a time and it owns the only live
DataController. Leaving a view cancels and joins its fetch task before the
next view's task starts; coming back always starts from scratch.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from .data import DataController, Snapshot
from .models import WorkflowExecution
from .query import QueryFilter
from .selection import SelectionCursor
from .sources import ExecutionDetailSource, ExecutionListSource

logger = logging.getLogger(__name__)


@dataclass
class ListView:
    controller: DataController
    query_filter: QueryFilter = field(default_factory=QueryFilter)
    selection: SelectionCursor = field(default_factory=SelectionCursor)


@dataclass
class DetailView:
    controller: DataController
    execution: WorkflowExecution
    selection: SelectionCursor = field(default_factory=SelectionCursor)
    expanded: int | None = None


View = ListView | DetailView


class ViewNavigator:
    """Owns the active view and moves between views on operator input.

    Args:
        service: Remote service (a TemporalSDK) shared by every view's source.
        page_size: Rows requested per page.
    """

    def __init__(self, service: Any, page_size: int = 48) -> None:
        self._service = service
        self.page_size = page_size
        self.current: View | None = None

    # -- lifecycle --------------------------------------------------------

    async def start(self) -> None:
        """Enter the initial state: a fresh executions list."""
        await self._transition(self._new_list_view())

    async def close(self) -> None:
        if self.current is not None:
            await self.current.controller.stop()

    def _new_list_view(self) -> ListView:
        source = ExecutionListSource(self._service, self.page_size)
        return ListView(controller=DataController(source, name="executions"))

    def _new_detail_view(self, execution: WorkflowExecution) -> DetailView:
        source = ExecutionDetailSource(
            self._service, execution.workflow_id, execution.run_id, self.page_size
        )
        controller = DataController(source, name=f"workflow:{execution.workflow_id}")
        return DetailView(controller=controller, execution=execution)

    async def _transition(self, view: View) -> None:
        previous, self.current = self.current, view
        if previous is not None:
            await previous.controller.stop()
        logger.debug("entering %s", type(view).__name__)
        view.controller.start()
        self.reload()

    # -- operator actions -------------------------------------------------

    @property
    def view(self) -> View:
        if self.current is None:
            raise RuntimeError("navigator has not been started")
        return self.current

    def snapshot(self) -> Snapshot:
        return self.view.controller.snapshot()

    @property
    def selected_index(self) -> int | None:
        return self.view.selection.index

    def tick(self) -> Snapshot:
        """Snapshot for the renderer, with the selection kept consistent with it."""
        view = self.view
        snapshot = view.controller.snapshot()
        view.selection.reconcile(snapshot)
        match view:
            case DetailView(expanded=expanded) if expanded is not None and expanded >= len(snapshot.rows):
                view.expanded = None
        return snapshot

    def reload(self) -> asyncio.Future | None:
        match self.view:
            case ListView(controller=controller, query_filter=query_filter):
                return controller.reload(query_filter.as_query())
            case DetailView(controller=controller):
                return controller.reload()
            case other:
                raise TypeError(f"unknown view: {other!r}")

    async def move_down(self) -> int | None:
        view = self.view
        return await view.selection.advance(view.controller)

    def move_up(self) -> int | None:
        view = self.view
        return view.selection.retreat(view.controller.snapshot())

    async def enter(self) -> bool:
        """Drill into the selected row. Returns False if nothing is selected."""
        view = self.view
        selected = view.selection.selected(view.controller.snapshot())
        if selected is None:
            return False
        match view:
            case ListView():
                await self._transition(self._new_detail_view(selected))
            case DetailView():
                view.expanded = view.selection.index
            case other:
                raise TypeError(f"unknown view: {other!r}")
        return True

    async def back(self) -> bool:
        """Step back one level. Returns False when already at the top."""
        match self.view:
            case DetailView(expanded=expanded) as view if expanded is not None:
                view.expanded = None
            case DetailView():
                await self._transition(self._new_list_view())
            case ListView():
                return False
            case other:
                raise TypeError(f"unknown view: {other!r}")
        return True

    def toggle_mode(self) -> bool:
        """Cycle the list's status filter and reload. No-op in the detail view.

        Returns False, leaving the filter unchanged, when the reload could not
        be queued.
        """
        match self.view:
            case ListView(query_filter=query_filter):
                previous = query_filter.status
                query_filter.cycle_status()
                if self.reload() is None:
                    query_filter.status = previous
                    return False
                return True
            case DetailView():
                return False
            case other:
                raise TypeError(f"unknown view: {other!r}")

    def set_filter(self, text: str) -> bool:
        """Replace the list's query text and reload. No-op in the detail view.

        The previous text is kept if the reload could not be queued.
        """
        match self.view:
            case ListView(query_filter=query_filter):
                previous = query_filter.text
                query_filter.set_text(text)
                if self.reload() is None:
                    query_filter.text = previous
                    return False
                return True
            case DetailView():
                return False
            case other:
                raise TypeError(f"unknown view: {other!r}")
