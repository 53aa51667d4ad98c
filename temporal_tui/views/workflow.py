"""Workflow view: one execution's summary, pending activities and history."""

from __future__ import annotations

from datetime import datetime, timezone

from rich.syntax import Syntax
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import DataTable, Label, Static

from ..data import Snapshot
from ..models import HistoryEvent, PendingActivity, WorkflowDetail, WorkflowExecution, format_timestamp
from ..utils import format_duration
from ..widgets.status_badge import StatusBadge
from .base import ViewBase

HISTORY_COLUMNS = ("ID", "Time", "Event Type")


def summary_lines(
    execution: WorkflowExecution | None, now: datetime | None = None
) -> list[tuple[str, str]]:
    """(label, value) pairs for the summary panel."""
    if execution is None:
        return [
            ("Start", "-"),
            ("End", "-"),
            ("Duration", "-"),
            ("Run ID", ""),
            ("Workflow Type", ""),
            ("Task Queue", ""),
            ("History Length", "0"),
            ("History Size (Bytes)", "0"),
        ]
    return [
        ("Start", execution.start_time_string()),
        ("End", execution.close_time_string()),
        ("Duration", format_duration(execution.duration(now or datetime.now(timezone.utc)))),
        ("Run ID", execution.run_id),
        ("Workflow Type", execution.type),
        ("Task Queue", execution.task_queue),
        ("History Length", str(execution.history_length)),
        ("History Size (Bytes)", str(execution.history_size_bytes)),
    ]


def pending_activity_lines(activities: tuple[PendingActivity, ...]) -> list[str]:
    if not activities:
        return ["(no pending activities)"]
    lines = []
    for activity in activities:
        attempts = f"{activity.attempt}/{activity.maximum_attempts or '∞'}"
        line = f"{activity.id}  {activity.type or '?'}  {activity.state.value}  attempt {attempts}"
        if activity.last_failure is not None:
            line += f"  last failure: {activity.last_failure.message}"
        lines.append(line)
    return lines


def history_row(event: HistoryEvent) -> tuple[str, str, str]:
    return (str(event.event_id), format_timestamp(event.event_time), event.event_type)


class WorkflowView(ViewBase):
    TABLE_ID = "history-table"

    DEFAULT_CSS = """
    WorkflowView { height: 100%; }
    WorkflowView #workflow-header { height: 1; }
    WorkflowView #workflow-summary { height: auto; max-height: 12; }
    WorkflowView #summary-keys { width: 1fr; }
    WorkflowView #summary-values { width: 1fr; text-align: right; }
    WorkflowView #pending-activities { height: auto; max-height: 8; }
    WorkflowView #event-detail { display: none; height: 1fr; }
    WorkflowView.expanded #event-detail { display: block; }
    WorkflowView.expanded #history-table { display: none; }
    """

    def __init__(self, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self._execution: WorkflowExecution | None = None
        self._expanded: int | None = None

    def compose(self) -> ComposeResult:
        with Vertical():
            with Horizontal(classes="section-header", id="workflow-header"):
                yield StatusBadge(id="workflow-status")
                yield Label("", id="workflow-title")
            with Horizontal(id="workflow-summary"):
                yield Static("", id="summary-keys")
                yield Static("", id="summary-values")
            yield Label(" PENDING ACTIVITIES ", classes="detail-section-header")
            yield Static("", id="pending-activities")
            yield Label(" HISTORY ", classes="detail-section-header")
            yield DataTable(id=self.TABLE_ID, cursor_type="row", zebra_stripes=True)
            with VerticalScroll(id="event-detail"):
                yield Static("", id="event-attributes")

    def on_mount(self) -> None:
        table = self.query_one(f"#{self.TABLE_ID}", DataTable)
        table.can_focus = False
        table.add_columns(*HISTORY_COLUMNS)

    def show_execution(self, execution: WorkflowExecution) -> None:
        """Seed the summary from the list row until the describe call returns."""
        self._execution = execution
        self._expanded = None
        self.remove_class("expanded")
        self.reset()

    def show_expanded(self, snapshot: Snapshot, expanded: int | None) -> None:
        if expanded == self._expanded:
            return
        self._expanded = expanded
        if expanded is None or expanded >= len(snapshot.rows):
            self.remove_class("expanded")
            return
        event: HistoryEvent = snapshot.rows[expanded]
        try:
            self.query_one("#event-attributes", Static).update(
                Syntax(event.attributes_json(), "json", word_wrap=True)
            )
        except Exception:
            pass
        self.add_class("expanded")

    def _refresh(self, snapshot: Snapshot) -> None:
        detail: WorkflowDetail | None = snapshot.detail
        execution = detail.execution if detail and detail.execution else self._execution
        pending = detail.pending_activities if detail else ()

        try:
            if execution is not None:
                self.query_one("#workflow-status", StatusBadge).set_status(execution.status)
                self.query_one("#workflow-title", Label).update(execution.workflow_id)
            lines = summary_lines(execution)
            self.query_one("#summary-keys", Static).update("\n".join(k for k, _ in lines))
            self.query_one("#summary-values", Static).update("\n".join(v for _, v in lines))
            self.query_one("#pending-activities", Static).update("\n".join(pending_activity_lines(pending)))
        except Exception:
            pass

        table = self._table()
        if table is None:
            return
        table.clear()
        for event in snapshot.rows:
            table.add_row(*history_row(event))
