"""Temporal Dashboard: Textual TUI app.

Launch with: python -m temporal_tui
"""

from __future__ import annotations

import logging
from typing import Any

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import ContentSwitcher, Footer, Header, Input, Label

from .data import Snapshot
from .navigator import DetailView, ListView, ViewNavigator
from .utils import last_reload_text
from .views.executions import ExecutionsView
from .views.workflow import WorkflowView
from .widgets.status_badge import SPINNER_FRAMES

logger = logging.getLogger(__name__)


class TemporalDashboard(App):
    """Read-only Temporal dashboard built with Textual.

    Two views: the executions list and a single execution's detail. Press
    Enter on an execution to open it; Escape goes back. Rendering runs on a
    fixed tick and only reads controller snapshots.
    """

    TITLE = "Temporal TUI"

    CSS = """
    #status-line { height: 1; background: $boost; }
    #status-left { width: 1fr; }
    #status-center { width: 1fr; text-align: center; }
    #status-right { width: 1fr; text-align: right; }
    #status-right.error { color: $error; }
    #filter-input { display: none; }
    #filter-input.visible { display: block; }
    .section-header { text-style: bold; background: $primary-darken-2; width: 100%; }
    .detail-section-header { text-style: bold; color: $text-muted; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("j,down", "cursor_down", "Down", show=False),
        Binding("k,up", "cursor_up", "Up", show=False),
        Binding("r,right", "reload", "Reload", show=True),
        Binding("enter", "open", "Open", show=True),
        Binding("escape", "back", "Back", show=True),
        Binding("m", "toggle_mode", "Status", show=True),
        Binding("slash", "edit_filter", "Filter", show=True),
    ]

    RENDER_INTERVAL = 0.1

    def __init__(self, service: Any, namespace: str, page_size: int = 48, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self._navigator = ViewNavigator(service, page_size=page_size)
        self._namespace = namespace
        self._spinner_index = 0
        self._last_error: str | None = None
        self._rendered_view: object | None = None

    @property
    def navigator(self) -> ViewNavigator:
        return self._navigator

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="status-line"):
            yield Label("", id="status-left")
            yield Label(f"Temporal TUI - {self._namespace}", id="status-center")
            yield Label(last_reload_text(None), id="status-right")
        with ContentSwitcher(initial="executions", id="views"):
            yield ExecutionsView(id="executions")
            yield WorkflowView(id="workflow")
        yield Input(placeholder='Visibility query, e.g. WorkflowType="Foo"', id="filter-input")
        yield Footer()

    async def on_mount(self) -> None:
        self.sub_title = self._namespace
        await self._navigator.start()
        self.set_interval(self.RENDER_INTERVAL, self._render_tick)
        self._render_tick()

    # -- rendering --------------------------------------------------------

    def _render_tick(self) -> None:
        """Redraw from the active controller's snapshot (called on a fixed tick)."""
        if self._navigator.current is None:
            return
        snapshot = self._navigator.tick()
        view = self._navigator.current
        view_changed = view is not self._rendered_view
        self._rendered_view = view

        switcher = self.query_one("#views", ContentSwitcher)
        match view:
            case ListView(query_filter=query_filter, selection=selection):
                switcher.current = "executions"
                executions = self.query_one(ExecutionsView)
                executions.set_filter_label(query_filter.describe())
                executions.update_snapshot(view, snapshot, selection.index)
            case DetailView(execution=execution, selection=selection, expanded=expanded):
                switcher.current = "workflow"
                workflow = self.query_one(WorkflowView)
                if view_changed:
                    workflow.show_execution(execution)
                workflow.update_snapshot(view, snapshot, selection.index)
                workflow.show_expanded(snapshot, expanded)

        if view_changed:
            self.refresh_bindings()
        self._update_status_line(snapshot)

    def _update_status_line(self, snapshot: Snapshot) -> None:
        left = self.query_one("#status-left", Label)
        right = self.query_one("#status-right", Label)

        if snapshot.is_loading:
            self._spinner_index = (self._spinner_index + 1) % len(SPINNER_FRAMES)
            left.update(f"{SPINNER_FRAMES[self._spinner_index]} Loading")
        else:
            left.update(f"{len(snapshot.rows)} rows" + ("" if snapshot.is_exhausted() else " (more)"))

        if snapshot.error:
            right.update(snapshot.error)
            right.add_class("error")
            if snapshot.error != self._last_error:
                self.notify(snapshot.error, severity="error", timeout=4)
        else:
            right.update(last_reload_text(self._navigator.view.controller.seconds_since_last_reload()))
            right.remove_class("error")
        self._last_error = snapshot.error

    # -- actions ----------------------------------------------------------

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        if action in ("toggle_mode", "edit_filter"):
            return isinstance(self._navigator.current, ListView)
        return True

    @work(exclusive=True, group="navigation")
    async def action_cursor_down(self) -> None:
        await self._navigator.move_down()

    def action_cursor_up(self) -> None:
        self._navigator.move_up()

    def action_reload(self) -> None:
        self._navigator.reload()

    async def action_open(self) -> None:
        self.workers.cancel_group(self, "navigation")
        await self._navigator.enter()
        self._render_tick()

    async def action_back(self) -> None:
        filter_input = self.query_one("#filter-input", Input)
        if filter_input.has_class("visible"):
            self._hide_filter()
            return
        self.workers.cancel_group(self, "navigation")
        if not await self._navigator.back():
            await self.action_quit()
            return
        self._render_tick()

    def action_toggle_mode(self) -> None:
        if not self._navigator.toggle_mode():
            self._notify_dropped_reload()

    def action_edit_filter(self) -> None:
        view = self._navigator.current
        if not isinstance(view, ListView):
            return
        filter_input = self.query_one("#filter-input", Input)
        filter_input.value = view.query_filter.text
        filter_input.add_class("visible")
        filter_input.focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "filter-input":
            return
        if not self._navigator.set_filter(event.value):
            self._notify_dropped_reload()
        self._hide_filter()

    def _notify_dropped_reload(self) -> None:
        if isinstance(self._navigator.current, ListView):
            self.notify("Too many pending requests, filter not changed", severity="warning", timeout=4)

    def _hide_filter(self) -> None:
        filter_input = self.query_one("#filter-input", Input)
        filter_input.remove_class("visible")
        self.set_focus(None)

    async def action_quit(self) -> None:
        try:
            await self._navigator.close()
        except Exception:
            logger.exception("Failed to stop fetch task")
        self.exit()
