"""
Diagnostic synthesizer - line-oriented heuristics for beginner mistakes.

These checks are not a parser. Each language gets a handful of substring
rules (missing colon, missing semicolon, missing include, missing '$') that
catch the slips new coders make most often. JavaScript and TypeScript are
left to the editing widget, which has a real checker for them.
"""
import re
from dataclasses import dataclass, asdict
from enum import Enum

from .languages import normalize_language


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A positioned error or warning over source text (1-indexed)."""
    severity: Severity
    message: str
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def __post_init__(self):
        if min(self.start_line, self.start_column, self.end_line, self.end_column) < 1:
            raise ValueError("Diagnostic positions are 1-indexed")
        if self.end_line < self.start_line:
            raise ValueError("Diagnostic ends before it starts")
        if self.end_line == self.start_line and self.end_column < self.start_column:
            raise ValueError("Diagnostic ends before it starts")

    def to_dict(self) -> dict:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data


# Messages carry the same keys the knowledge base and fix rules look for
MISSING_COLON = "SyntaxError: missing colon ':' at the end of the statement"
UNEXPECTED_INDENT = "IndentationError: unexpected indent"
C_MISSING_SEMICOLON = "expected ';' at the end of the statement"
C_MISSING_STDIO = "undeclared identifier 'printf'; did you forget to include <stdio.h>?"
PHP_MISSING_SEMICOLON = "Parse error: syntax error, unexpected end of line, expecting ';'"
PHP_MISSING_SIGIL = "Undefined variable: {name}; did you forget the '$'?"

PYTHON_BLOCK_KEYWORDS = ("if ", "for ", "while ", "def ", "class ")
STATEMENT_ENDINGS = (";", "{", "}")

C_STATEMENT_CUES = ("=", "return", "printf", "cout")
C_SKIP_PREFIXES = ("#", "//")

PHP_STATEMENT_CUES = ("=", "return", "echo")
PHP_SKIP_PREFIXES = ("<?php", "?>", "//")

PHP_ASSIGNMENT = re.compile(r"\b([a-zA-Z_][a-zA-Z0-9_]*)\s*=")


def bare_identifier_pattern(name: str) -> re.Pattern:
    """Match `name` when it is not `$name`, not part of a longer word and not assigned to."""
    return re.compile(rf"(?<![\w$]){re.escape(name)}\b(?!\s*=)")


def _line_diagnostic(message: str, line_number: int, line: str) -> Diagnostic:
    return Diagnostic(Severity.ERROR, message, line_number, 1, line_number, len(line) + 1)


# =============================================================================
# Per-language checks
# =============================================================================

def _check_python(lines: list[str]) -> list[Diagnostic]:
    diagnostics = []
    previous_indent = 0

    for number, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if any(keyword in line for keyword in PYTHON_BLOCK_KEYWORDS) and not stripped.endswith(":"):
            diagnostics.append(_line_diagnostic(MISSING_COLON, number, line))

        indent = len(line) - len(line.lstrip())
        if indent > previous_indent + 4 and indent % 4 != 0:
            diagnostics.append(Diagnostic(Severity.ERROR, UNEXPECTED_INDENT, number, 1, number, indent + 1))
        # Updated on flagged lines too, so one bad line can cascade
        previous_indent = indent

    return diagnostics


def _missing_semicolons(
    lines: list[str],
    skip_prefixes: tuple[str, ...],
    cues: tuple[str, ...],
    message: str
) -> list[Diagnostic]:
    diagnostics = []
    for number, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith(skip_prefixes) or stripped.endswith(STATEMENT_ENDINGS):
            continue
        if any(cue in stripped for cue in cues):
            diagnostics.append(_line_diagnostic(message, number, line))
    return diagnostics


def _check_c(text: str, lines: list[str]) -> list[Diagnostic]:
    diagnostics = _missing_semicolons(lines, C_SKIP_PREFIXES, C_STATEMENT_CUES, C_MISSING_SEMICOLON)

    if "printf" in text and "#include <stdio.h>" not in text:
        number, line = next((n, l) for n, l in enumerate(lines, start=1) if "printf" in l)
        diagnostics.append(_line_diagnostic(C_MISSING_STDIO, number, line))

    return diagnostics


def _check_php(lines: list[str]) -> list[Diagnostic]:
    diagnostics = _missing_semicolons(lines, PHP_SKIP_PREFIXES, PHP_STATEMENT_CUES, PHP_MISSING_SEMICOLON)

    for assigned_at, line in enumerate(lines):
        for assignment in PHP_ASSIGNMENT.finditer(line):
            name = assignment.group(1)
            bare_use = bare_identifier_pattern(name)
            for offset, usage_line in enumerate(lines[assigned_at:]):
                number = assigned_at + offset + 1
                for use in bare_use.finditer(usage_line):
                    diagnostics.append(Diagnostic(
                        Severity.ERROR,
                        PHP_MISSING_SIGIL.format(name=name),
                        number, use.start() + 1,
                        number, use.end() + 1,
                    ))

    return diagnostics


def synthesize(source_text: str, language: str) -> list[Diagnostic]:
    """
    Scan source text and return heuristic diagnostics in line-scan order.

    Args:
        source_text: Full document text (may be empty)
        language: One of the supported language ids

    Returns:
        A fresh list of diagnostics; empty for JavaScript/TypeScript and
        unsupported languages.
    """
    if source_text is None:
        return []
    if not isinstance(source_text, str):
        raise TypeError(f"source_text must be a string, got {type(source_text).__name__}")
    if not source_text:
        return []

    language = normalize_language(language)
    lines = source_text.split("\n")

    if language == "python":
        return _check_python(lines)
    if language in ("c", "cpp"):
        return _check_c(source_text, lines)
    if language == "php":
        return _check_php(lines)
    return []
