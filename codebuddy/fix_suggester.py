"""
Fix suggester - turns one diagnostic into at most one edit proposal.

Rules live in a per-language table. A rule fires when one of its cues is a
substring of the diagnostic message and its builder can produce an edit
for the target line; the first rule that fires wins.
"""
import re
from dataclasses import dataclass
from typing import Callable, Optional

from .diagnostics import PYTHON_BLOCK_KEYWORDS, STATEMENT_ENDINGS, bare_identifier_pattern
from .edits import EditDescriptor, InsertEdit, ReplaceEdit, TextRange
from .languages import normalize_language


@dataclass(frozen=True)
class FixContext:
    """Everything a rule builder may look at."""
    message: str
    line_number: int
    lines: list[str]

    @property
    def line(self) -> str:
        return self.lines[self.line_number - 1]

    @property
    def end_column(self) -> int:
        return len(self.line) + 1


@dataclass(frozen=True)
class FixRule:
    cues: tuple[str, ...]
    build: Callable[[FixContext], Optional[EditDescriptor]]

    def matches(self, message: str) -> bool:
        return any(cue in message for cue in self.cues)


QUOTED_NAME = re.compile(r"'([^']+)'")
PHP_NAMED_VARIABLE = re.compile(r"Undefined variable:?\s*\$?([a-zA-Z_][a-zA-Z0-9_]*)")
BARE_WORD = re.compile(r"(?<![\w$])([a-zA-Z_][a-zA-Z0-9_]*)\b(?!\s*=)")


# =============================================================================
# Rule builders
# =============================================================================

def _append_semicolon(ctx: FixContext) -> Optional[EditDescriptor]:
    if ctx.line.strip().endswith(STATEMENT_ENDINGS):
        return None
    return InsertEdit(text=";", line=ctx.line_number, column=ctx.end_column)


def _declare_variable(ctx: FixContext) -> Optional[EditDescriptor]:
    match = QUOTED_NAME.search(ctx.message)
    if not match:
        return None
    return InsertEdit(text=f"let {match.group(1)} = ", line=ctx.line_number, column=1)


def _append_colon(ctx: FixContext) -> Optional[EditDescriptor]:
    if not any(keyword in ctx.line for keyword in PYTHON_BLOCK_KEYWORDS):
        return None
    if ctx.line.strip().endswith(":"):
        return None
    return InsertEdit(text=":", line=ctx.line_number, column=ctx.end_column)


def _indent_block(ctx: FixContext) -> Optional[EditDescriptor]:
    if ctx.line_number < 2 or not ctx.lines[ctx.line_number - 2].strip().endswith(":"):
        return None
    return InsertEdit(text="    ", line=ctx.line_number, column=1)


def _include_stdio(ctx: FixContext) -> Optional[EditDescriptor]:
    if "printf" not in ctx.message:
        return None
    # Always the top of the file, wherever printf was reported
    return InsertEdit(text="#include <stdio.h>\n", line=1, column=1)


def _add_dollar_sign(ctx: FixContext) -> Optional[EditDescriptor]:
    named = PHP_NAMED_VARIABLE.search(ctx.message)
    if named:
        use = bare_identifier_pattern(named.group(1)).search(ctx.line)
        name = named.group(1)
    else:
        use = BARE_WORD.search(ctx.line)
        name = use.group(1) if use else ""

    if not use or f"${name}" in ctx.line:
        return None
    return ReplaceEdit(
        text=f"${name}",
        range=TextRange(ctx.line_number, use.start() + 1, ctx.line_number, use.end() + 1),
    )


_JS_RULES = (
    FixRule(("Missing semicolon", "expected"), _append_semicolon),
    FixRule(("undefined", "not defined"), _declare_variable),
)

_C_RULES = (
    FixRule(("expected ';'", "expected"), _append_semicolon),
    FixRule(("undeclared identifier",), _include_stdio),
)

FIX_RULES: dict[str, tuple[FixRule, ...]] = {
    "javascript": _JS_RULES,
    "typescript": _JS_RULES,
    "python": (
        FixRule(("SyntaxError",), _append_colon),
        FixRule(("IndentationError",), _indent_block),
    ),
    "c": _C_RULES,
    "cpp": _C_RULES,
    "php": (
        FixRule(("Parse error", "syntax error"), _append_semicolon),
        FixRule(("Undefined variable",), _add_dollar_sign),
    ),
}


def suggest_fix(message: str, language: str, line_number: int, source_text: str) -> Optional[EditDescriptor]:
    """
    Propose a single edit for a diagnostic.

    Args:
        message: Raw diagnostic message
        language: Language id of the document
        line_number: 1-indexed line the diagnostic points at
        source_text: Full document text the diagnostic was computed from

    Returns:
        An InsertEdit or ReplaceEdit, or None when the input is incomplete,
        the line does not exist, or no rule applies.
    """
    if not message or not source_text or not line_number:
        return None

    lines = source_text.split("\n")
    if line_number < 1 or line_number > len(lines) or not lines[line_number - 1]:
        return None

    ctx = FixContext(message=message, line_number=line_number, lines=lines)
    for rule in FIX_RULES.get(normalize_language(language) or "", ()):
        if not rule.matches(message):
            continue
        edit = rule.build(ctx)
        if edit is not None:
            return edit
    return None
