"""Tests for PaginatedCollection."""

from temporal_tui.collection import PaginatedCollection, normalize_token


class TestNormalizeToken:
    def test_empty_bytes_is_none(self):
        assert normalize_token(b"") is None

    def test_none_stays_none(self):
        assert normalize_token(None) is None

    def test_non_empty_kept(self):
        assert normalize_token(b"tok1") == b"tok1"


class TestPaginatedCollection:
    def test_new_collection_is_empty_and_exhausted(self):
        collection = PaginatedCollection()
        assert collection.rows == ()
        assert len(collection) == 0
        assert collection.is_exhausted()

    def test_replace_resets_rows_and_cursor(self):
        collection = PaginatedCollection()
        collection.replace(["A", "B"], b"tok1")
        collection.append(["C"], b"tok2")

        collection.replace(["X"], b"")

        assert collection.rows == ("X",)
        assert collection.cursor is None
        assert "A" not in collection.rows

    def test_append_preserves_order(self):
        collection = PaginatedCollection()
        collection.replace(["A", "B", "C"], b"tok1")

        collection.append(["D", "E"], b"tok2")

        assert collection.rows == ("A", "B", "C", "D", "E")
        assert collection.cursor == b"tok2"
        assert not collection.is_exhausted()

    def test_empty_token_on_append_exhausts(self):
        collection = PaginatedCollection()
        collection.replace(["A"], b"tok1")

        collection.append(["B"], b"")

        assert collection.is_exhausted()

    def test_exhausted_tracks_most_recent_page(self):
        collection = PaginatedCollection()
        collection.replace([], b"")
        assert collection.is_exhausted()
        collection.replace(["A"], b"tok1")
        assert not collection.is_exhausted()
        collection.append(["B"], None)
        assert collection.is_exhausted()

    def test_rows_is_a_copy(self):
        collection = PaginatedCollection()
        collection.replace(["A"], None)
        rows = collection.rows
        collection.append(["B"], None)
        assert rows == ("A",)
