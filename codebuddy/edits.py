"""
Edit descriptors proposed by the fix suggester.

An edit is a one-shot proposal: the editing widget (or the CLI) applies it
to the document it was computed from. `apply_edit` checks that the target
still exists before touching the text, and returns None when it does not.
"""
from dataclasses import dataclass
from typing import Literal, Optional, Union


@dataclass(frozen=True)
class TextRange:
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def to_dict(self) -> dict:
        return {
            "start_line": self.start_line,
            "start_column": self.start_column,
            "end_line": self.end_line,
            "end_column": self.end_column,
        }


@dataclass(frozen=True)
class InsertEdit:
    """Insert `text` before the character at (line, column)."""
    text: str
    line: int
    column: int
    kind: Literal["insert"] = "insert"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "text": self.text, "line": self.line, "column": self.column}


@dataclass(frozen=True)
class ReplaceEdit:
    """Replace the characters covered by `range` with `text`."""
    text: str
    range: TextRange
    kind: Literal["replace"] = "replace"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "text": self.text, "range": self.range.to_dict()}


EditDescriptor = Union[InsertEdit, ReplaceEdit]


def edit_from_dict(data: dict) -> EditDescriptor:
    """Rebuild an edit sent back by a client. Raises ValueError on bad input."""
    if not isinstance(data, dict):
        raise ValueError("Edit must be an object")
    try:
        kind = data["kind"]
        if kind == "insert":
            return InsertEdit(text=str(data["text"]), line=int(data["line"]), column=int(data["column"]))
        if kind == "replace":
            r = data["range"]
            return ReplaceEdit(
                text=str(data["text"]),
                range=TextRange(
                    start_line=int(r["start_line"]),
                    start_column=int(r["start_column"]),
                    end_line=int(r["end_line"]),
                    end_column=int(r["end_column"]),
                ),
            )
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed edit: {e}") from e
    raise ValueError(f"Unknown edit kind: {kind!r}")


def _offset(lines: list[str], line: int, column: int) -> Optional[int]:
    """Character offset of a 1-indexed position, or None if it is outside the text."""
    if line < 1 or line > len(lines):
        return None
    if column < 1 or column > len(lines[line - 1]) + 1:
        return None
    # +1 per preceding line for the newline
    return sum(len(l) + 1 for l in lines[:line - 1]) + column - 1


def apply_edit(source_text: str, edit: EditDescriptor) -> Optional[str]:
    """
    Apply an edit to the text it was proposed for.

    Returns:
        The edited text, or None if the target position no longer exists
        (the document changed since the edit was computed).
    """
    lines = source_text.split("\n")

    if isinstance(edit, InsertEdit):
        at = _offset(lines, edit.line, edit.column)
        if at is None:
            return None
        return source_text[:at] + edit.text + source_text[at:]

    start = _offset(lines, edit.range.start_line, edit.range.start_column)
    end = _offset(lines, edit.range.end_line, edit.range.end_column)
    if start is None or end is None or end < start:
        return None
    return source_text[:start] + edit.text + source_text[end:]
