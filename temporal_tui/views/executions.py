"""Executions view: paginated table of workflow executions."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import DataTable, Label

from ..data import Snapshot
from ..models import WorkflowExecution
from ..utils import truncate
from ..widgets.status_badge import status_cell
from .base import ViewBase

COLUMNS = ("Status", "Type", "Workflow ID", "Task Queue", "Start Time", "Close Time")


def execution_row(execution: WorkflowExecution) -> tuple[Text | str, ...]:
    return (
        status_cell(execution.status),
        truncate(execution.type, 32),
        truncate(execution.workflow_id, 64),
        truncate(execution.task_queue, 32),
        execution.start_time_string(),
        execution.close_time_string(),
    )


def section_title(snapshot: Snapshot, filter_label: str) -> str:
    more = "" if snapshot.is_exhausted() else "+"
    return f" WORKFLOW EXECUTIONS ({len(snapshot.rows)}{more})  ·  {filter_label} "


class ExecutionsView(ViewBase):
    TABLE_ID = "executions-table"

    def __init__(self, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self._filter_label = "All"

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(section_title(Snapshot(), self._filter_label), classes="section-header", id="executions-header")
            yield DataTable(id=self.TABLE_ID, cursor_type="row", zebra_stripes=True)

    def on_mount(self) -> None:
        table = self.query_one(f"#{self.TABLE_ID}", DataTable)
        table.can_focus = False
        table.add_columns(*COLUMNS)

    def set_filter_label(self, label: str) -> None:
        if label != self._filter_label:
            self._filter_label = label
            self.reset()

    def _refresh(self, snapshot: Snapshot) -> None:
        try:
            self.query_one("#executions-header", Label).update(
                section_title(snapshot, self._filter_label)
            )
        except Exception:
            pass
        table = self._table()
        if table is None:
            return
        table.clear()
        for execution in snapshot.rows:
            table.add_row(*execution_row(execution))
