"""Page sources: the remote reads behind each view's DataController.

A source turns one (page token, query) pair into a Page of parsed rows. Sources
are called from a worker thread, so they may block on the SDK.
"""

from __future__ import annotations

from typing import Any, NamedTuple

from .models import HistoryEvent, WorkflowDetail, WorkflowExecution
from .sdk.exceptions import ResponseShapeError


class Page(NamedTuple):
    rows: tuple[Any, ...]
    next_page_token: bytes | None
    detail: Any = None


class ExecutionListSource:
    """Pages of workflow executions matching a visibility query."""

    operation = "list workflow executions"

    def __init__(self, service: Any, page_size: int) -> None:
        self._service = service
        self.page_size = page_size

    def fetch(self, page_token: bytes | None, query: str) -> Page:
        executions, next_token = self._service.workflows.list(
            self.page_size, page_token, query
        )
        try:
            rows = tuple(WorkflowExecution.from_api(info) for info in executions)
        except ResponseShapeError as e:
            raise ResponseShapeError(f"invalid workflow execution: {e}") from e
        return Page(rows, next_token)


class ExecutionDetailSource:
    """One execution: describe on reload, then its history page by page.

    Rows are history events; the describe result rides along as the page
    detail and is only refreshed by a reload (first page).
    """

    operation = "describe workflow execution"

    def __init__(
        self,
        service: Any,
        workflow_id: str,
        run_id: str | None = None,
        page_size: int | None = None,
    ) -> None:
        self._service = service
        self.workflow_id = workflow_id
        self.run_id = run_id or None
        self.page_size = page_size

    @property
    def key(self) -> tuple[str, str]:
        return (self.workflow_id, self.run_id or "")

    def fetch(self, page_token: bytes | None, query: str = "") -> Page:
        detail = None
        if page_token is None:
            response = self._service.workflows.describe(self.workflow_id, self.run_id)
            detail = WorkflowDetail.from_api(response)
        events, next_token = self._service.workflows.history(
            self.workflow_id, self.run_id, page_token, self.page_size
        )
        try:
            rows = tuple(HistoryEvent.from_api(event) for event in events)
        except ResponseShapeError as e:
            raise ResponseShapeError(f"invalid history event: {e}") from e
        return Page(rows, next_token, detail)
