"""Visibility query filter for the executions list."""

from __future__ import annotations

from .models import WorkflowExecutionStatus

# Status modes cycled by the mode-toggle key; None shows every execution.
STATUS_MODES: tuple[WorkflowExecutionStatus | None, ...] = (
    None,
    WorkflowExecutionStatus.RUNNING,
    WorkflowExecutionStatus.COMPLETED,
    WorkflowExecutionStatus.FAILED,
    WorkflowExecutionStatus.TIMED_OUT,
    WorkflowExecutionStatus.CANCELED,
    WorkflowExecutionStatus.TERMINATED,
)


class QueryFilter:
    """Free-text visibility query plus an optional status restriction.

    The combined query is re-submitted on every (re)load of the list view.
    """

    def __init__(self, text: str = "", status: WorkflowExecutionStatus | None = None) -> None:
        self.text = text.strip()
        self.status = status

    def __repr__(self) -> str:
        return f"QueryFilter(text={self.text!r}, status={self.status})"

    def is_empty(self) -> bool:
        return not self.text and self.status is None

    def set_text(self, text: str) -> None:
        self.text = text.strip()

    def clear(self) -> None:
        self.text = ""
        self.status = None

    def cycle_status(self) -> WorkflowExecutionStatus | None:
        """Move to the next status mode and return it."""
        try:
            position = STATUS_MODES.index(self.status)
        except ValueError:
            position = -1
        self.status = STATUS_MODES[(position + 1) % len(STATUS_MODES)]
        return self.status

    def as_query(self) -> str:
        """Build the query string sent with ListWorkflowExecutions."""
        clauses = []
        if self.text:
            clauses.append(self.text)
        if self.status is not None:
            clauses.append(f'ExecutionStatus="{self.status.query_value}"')
        if len(clauses) == 2:
            return f"({clauses[0]}) AND {clauses[1]}"
        return clauses[0] if clauses else ""

    def describe(self) -> str:
        """Short label for the header, e.g. ``Running · WorkflowType="Foo"``."""
        parts = [self.status.label if self.status else "All"]
        if self.text:
            parts.append(self.text)
        return " · ".join(parts)
