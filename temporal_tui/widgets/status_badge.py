"""Status badge widget and table cells for workflow execution status."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from ..models import WorkflowExecutionStatus

SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"

# Rich style per status, matching the colours of the web UI.
STATUS_STYLES: dict[WorkflowExecutionStatus, str] = {
    WorkflowExecutionStatus.UNSPECIFIED: "black on #d1d5db",
    WorkflowExecutionStatus.RUNNING: "white on #6366f1",
    WorkflowExecutionStatus.COMPLETED: "white on #16a34a",
    WorkflowExecutionStatus.FAILED: "white on #dc2626",
    WorkflowExecutionStatus.CANCELED: "black on #ca8a04",
    WorkflowExecutionStatus.TERMINATED: "bold #dc2626",
    WorkflowExecutionStatus.CONTINUED_AS_NEW: "black on #d1d5db",
    WorkflowExecutionStatus.TIMED_OUT: "white on #dc2626",
}


def status_cell(status: WorkflowExecutionStatus) -> Text:
    """Coloured table cell for an execution status."""
    return Text(f" {status.label} ", style=STATUS_STYLES.get(status, ""))


def badge_text(status: WorkflowExecutionStatus, frame: int = 0) -> Text:
    """Badge label; running executions get a spinner frame in front."""
    if status is WorkflowExecutionStatus.RUNNING:
        spinner = SPINNER_FRAMES[frame % len(SPINNER_FRAMES)]
        return Text(f" {spinner} {status.label} ", style=STATUS_STYLES[status])
    return status_cell(status)


class StatusBadge(Static):
    """A colored inline badge showing an execution's status.

    Possible statuses and their badges:
    - Running        → "⠋ Running" (animated spinner, indigo)
    - Completed      → green
    - Failed/Timed-Out → red
    - Canceled       → yellow
    - anything else  → grey
    """

    DEFAULT_CSS = """
    StatusBadge { width: auto; margin-right: 1; }
    """

    def __init__(self, status: WorkflowExecutionStatus = WorkflowExecutionStatus.UNSPECIFIED, **kwargs: object) -> None:
        self._status = status
        self._spinner_index = 0
        super().__init__(badge_text(status), **kwargs)
        self.add_class("status-badge")

    @property
    def status(self) -> WorkflowExecutionStatus:
        return self._status

    def on_mount(self) -> None:
        self.set_interval(0.1, self._tick_spinner)

    def set_status(self, status: WorkflowExecutionStatus) -> None:
        self._status = status
        self._spinner_index = 0
        self.update(badge_text(status))

    def _tick_spinner(self) -> None:
        if self._status is not WorkflowExecutionStatus.RUNNING:
            return
        self._spinner_index = (self._spinner_index + 1) % len(SPINNER_FRAMES)
        self.update(badge_text(self._status, self._spinner_index))
