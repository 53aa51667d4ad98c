"""Paginated row collection owned by a DataController."""

from __future__ import annotations

from typing import Any, Iterable, Sequence


def normalize_token(token: bytes | None) -> bytes | None:
    """An empty continuation token means there are no further pages."""
    return token or None


class PaginatedCollection:
    """Ordered rows plus the continuation cursor for the next page.

    Only the owning controller's fetch task mutates a collection; everyone
    else reads the immutable copies handed out through ``rows``.
    """

    def __init__(self) -> None:
        self._rows: list[Any] = []
        self._cursor: bytes | None = None

    @property
    def rows(self) -> tuple[Any, ...]:
        return tuple(self._rows)

    @property
    def cursor(self) -> bytes | None:
        return self._cursor

    def __len__(self) -> int:
        return len(self._rows)

    def replace(self, rows: Iterable[Any], cursor: bytes | None) -> None:
        """Drop everything loaded so far and start over from a first page."""
        self._rows = list(rows)
        self._cursor = normalize_token(cursor)

    def append(self, rows: Sequence[Any], cursor: bytes | None) -> None:
        self._rows.extend(rows)
        self._cursor = normalize_token(cursor)

    def is_exhausted(self) -> bool:
        return self._cursor is None
