"""Base class for the dashboard's view widgets."""

from __future__ import annotations

from textual.widget import Widget
from textual.widgets import DataTable

from ..data import Snapshot


class ViewBase(Widget):
    """Renders one navigator view from controller snapshots.

    The table is only rebuilt when the snapshot version changes; the cursor is
    moved on every tick to follow the navigator's selection.
    """

    DEFAULT_CSS = """
    ViewBase { height: 100%; }
    """

    TABLE_ID = ""

    def __init__(self, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self._rendered_version: int | None = None
        self._rendered_owner: object | None = None

    def reset(self) -> None:
        """Forget what was rendered so the next update rebuilds everything."""
        self._rendered_version = None
        self._rendered_owner = None

    def update_snapshot(self, owner: object, snapshot: Snapshot, selected: int | None) -> None:
        if owner is not self._rendered_owner or snapshot.version != self._rendered_version:
            self._rendered_owner = owner
            self._rendered_version = snapshot.version
            self._refresh(snapshot)
        self._move_cursor(selected)

    def _table(self) -> DataTable | None:
        try:
            return self.query_one(f"#{self.TABLE_ID}", DataTable)
        except Exception:
            return None

    def _move_cursor(self, selected: int | None) -> None:
        table = self._table()
        if table is None:
            return
        table.show_cursor = selected is not None
        if selected is not None and selected < table.row_count and table.cursor_row != selected:
            table.move_cursor(row=selected, animate=False)

    def _refresh(self, snapshot: Snapshot) -> None:
        """Override in subclasses to rebuild the UI from ``snapshot``."""
        pass
