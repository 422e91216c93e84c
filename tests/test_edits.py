"""Tests for edit descriptors and the re-validating applicator."""

import pytest

from codebuddy.edits import InsertEdit, ReplaceEdit, TextRange, apply_edit, edit_from_dict


class TestApplyEdit:
    """Test suite for apply_edit()."""

    def test_insert_at_end_of_line(self) -> None:
        """Test inserting after the last character of a line."""
        assert apply_edit("a = 1\nb = 2", InsertEdit(";", 1, 6)) == "a = 1;\nb = 2"

    def test_insert_at_start_of_later_line(self) -> None:
        """Test offsets account for earlier lines."""
        assert apply_edit("x\ny\nz", InsertEdit("> ", 3, 1)) == "x\ny\n> z"

    def test_replace_range(self) -> None:
        """Test a single-line replacement."""
        edit = ReplaceEdit("$x", TextRange(2, 6, 2, 7))
        assert apply_edit("$x = 5;\necho x;", edit) == "$x = 5;\necho $x;"

    def test_replace_across_lines(self) -> None:
        """Test a replacement spanning a newline."""
        edit = ReplaceEdit("", TextRange(1, 2, 2, 1))
        assert apply_edit("ab\ncd", edit) == "acd"

    @pytest.mark.parametrize("edit", [
        InsertEdit(";", 3, 1),
        InsertEdit(";", 0, 1),
        InsertEdit(";", 1, 0),
        InsertEdit(";", 1, 7),
        ReplaceEdit("y", TextRange(1, 1, 4, 1)),
        ReplaceEdit("y", TextRange(1, 4, 1, 2)),
    ])
    def test_stale_edits_are_refused(self, edit) -> None:
        """Test that targets outside the current text give None."""
        assert apply_edit("a = 1\nb = 2", edit) is None

    def test_edit_after_document_shrank(self) -> None:
        """Test re-validation when the document changed since the proposal."""
        edit = InsertEdit(";", 1, len("printf(\"hello\")") + 1)
        assert apply_edit("printf()", edit) is None


class TestSerialization:
    """Test suite for to_dict()/edit_from_dict()."""

    def test_insert_round_trip(self) -> None:
        """Test the insert JSON shape."""
        edit = InsertEdit(":", 1, 9)
        data = edit.to_dict()

        assert data == {"kind": "insert", "text": ":", "line": 1, "column": 9}
        assert edit_from_dict(data) == edit

    def test_replace_round_trip(self) -> None:
        """Test the replace JSON shape."""
        edit = ReplaceEdit("$x", TextRange(2, 6, 2, 7))
        data = edit.to_dict()

        assert data["kind"] == "replace"
        assert data["range"] == {"start_line": 2, "start_column": 6, "end_line": 2, "end_column": 7}
        assert edit_from_dict(data) == edit

    @pytest.mark.parametrize("data", [
        None,
        {},
        {"kind": "delete", "text": ""},
        {"kind": "insert", "text": ";"},
        {"kind": "replace", "text": "x", "range": {"start_line": 1}},
        {"kind": "insert", "text": ";", "line": "one", "column": 1},
    ])
    def test_malformed(self, data) -> None:
        """Test that bad client input raises ValueError."""
        with pytest.raises(ValueError):
            edit_from_dict(data)
