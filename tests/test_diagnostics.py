"""Tests for the heuristic diagnostic synthesizer."""

import pytest

from codebuddy.diagnostics import (
    C_MISSING_SEMICOLON,
    C_MISSING_STDIO,
    MISSING_COLON,
    PHP_MISSING_SEMICOLON,
    UNEXPECTED_INDENT,
    Diagnostic,
    Severity,
    synthesize,
)
from codebuddy.knowledge_base import FALLBACK, explain


class TestDiagnostic:
    """Test suite for the Diagnostic record."""

    def test_rejects_range_ending_before_start(self) -> None:
        """Test the ordering invariant."""
        with pytest.raises(ValueError):
            Diagnostic(Severity.ERROR, "x", 2, 1, 1, 5)
        with pytest.raises(ValueError):
            Diagnostic(Severity.ERROR, "x", 1, 5, 1, 4)

    def test_rejects_zero_positions(self) -> None:
        """Test that positions are 1-indexed."""
        with pytest.raises(ValueError):
            Diagnostic(Severity.WARNING, "x", 0, 1, 1, 1)

    def test_to_dict(self) -> None:
        """Test the JSON shape."""
        data = Diagnostic(Severity.WARNING, "careful", 1, 1, 1, 3).to_dict()

        assert data == {
            "severity": "warning",
            "message": "careful",
            "start_line": 1,
            "start_column": 1,
            "end_line": 1,
            "end_column": 3,
        }


class TestCommon:
    """Behaviour shared by every language."""

    @pytest.mark.parametrize("language", ["javascript", "typescript", "ruby", "", None])
    def test_no_custom_rules(self, language) -> None:
        """Test that languages without rules produce nothing."""
        assert synthesize("let x = 1\nprintf(x)\nif x > 1", language) == []

    @pytest.mark.parametrize("language", ["c", "cpp", "python", "php"])
    def test_empty_text(self, language: str) -> None:
        """Test that empty text yields no diagnostics."""
        assert synthesize("", language) == []

    def test_non_string_text_is_rejected(self) -> None:
        """Test that non-string input is out of contract."""
        with pytest.raises(TypeError):
            synthesize(42, "python")

    def test_is_pure(self) -> None:
        """Test that repeated calls give identical results."""
        source = "$x = 5\necho x;\nif y > 1"
        assert synthesize(source, "php") == synthesize(source, "php")

        py = "if x > 1\n      print(x)\n"
        assert synthesize(py, "python") == synthesize(py, "python")

    def test_every_diagnostic_has_an_explanation(self) -> None:
        """Test that synthesized messages always hit a knowledge base entry."""
        samples = {
            "python": "if x\n       y = 1",
            "c": "int x = 1\nprintf(\"hi\");",
            "cpp": "int y = 2\ncout << y",
            "php": "$a = 1\necho a;",
        }
        for language, source in samples.items():
            diagnostics = synthesize(source, language)
            assert diagnostics, language
            for diagnostic in diagnostics:
                assert explain(diagnostic.message, language) != FALLBACK


class TestPython:
    """Test suite for Python heuristics."""

    def test_missing_colon(self) -> None:
        """Test the canonical missing-colon example."""
        diagnostics = synthesize("if x > 1\n    print(x)", "python")

        assert len(diagnostics) == 1
        d = diagnostics[0]
        assert d.message == MISSING_COLON
        assert "missing colon" in d.message
        assert (d.start_line, d.start_column, d.end_line, d.end_column) == (1, 1, 1, 9)
        assert d.severity is Severity.ERROR

    @pytest.mark.parametrize("line", ["for i in range(3)", "while True", "def main()", "class Pet"])
    def test_other_block_keywords(self, line: str) -> None:
        """Test each control keyword."""
        assert [d.message for d in synthesize(line, "python")] == [MISSING_COLON]

    def test_lines_ending_with_colon_are_fine(self) -> None:
        """Test that correct code is not flagged."""
        source = "def main():\n    for i in range(3):\n        print(i)\n"
        assert synthesize(source, "python") == []

    def test_comments_and_blank_lines_skipped(self) -> None:
        """Test that comments with keywords are ignored."""
        source = "# if you like\n\n   # for later\nx = 1"
        assert synthesize(source, "python") == []

    def test_unexpected_indent(self) -> None:
        """Test the naive indentation check."""
        diagnostics = synthesize("x = 1\n      y = 2", "python")

        assert len(diagnostics) == 1
        d = diagnostics[0]
        assert d.message == UNEXPECTED_INDENT
        assert (d.start_line, d.start_column, d.end_line, d.end_column) == (2, 1, 2, 7)

    def test_indent_multiple_of_four_is_allowed(self) -> None:
        """Test that a deep but aligned indent is not flagged."""
        assert synthesize("x = 1\n        y = 2", "python") == []

    def test_small_indent_steps_are_allowed(self) -> None:
        """Test that an odd indent within four columns is not flagged."""
        assert synthesize("x = 1\n  y = 2", "python") == []

    def test_blank_lines_do_not_reset_indent(self) -> None:
        """Test that the tracker only follows non-blank lines."""
        source = "def f():\n        x = 1\n\n         y = 2"
        # 9 is not more than 8 + 4, so line 4 is fine
        assert synthesize(source, "python") == []

    def test_tracker_updates_on_flagged_lines(self) -> None:
        """Test the accepted cascade: the tracker follows every line."""
        source = "x = 1\n      a = 1\n             b = 2"
        lines = [d.start_line for d in synthesize(source, "python")]
        assert lines == [2, 3]

    def test_both_rules_on_one_line(self) -> None:
        """Test that no cross-rule suppression happens."""
        diagnostics = synthesize("x = 1\n      if x", "python")
        assert [d.message for d in diagnostics] == [MISSING_COLON, UNEXPECTED_INDENT]


class TestC:
    """Test suite for C and C++ heuristics."""

    def test_missing_semicolon(self) -> None:
        """Test the canonical missing-semicolon example."""
        source = '#include <stdio.h>\nint main(){\nprintf("hi")\nreturn 0;\n}'
        diagnostics = synthesize(source, "c")

        assert len(diagnostics) == 1
        d = diagnostics[0]
        assert d.message == C_MISSING_SEMICOLON
        assert "expected ';'" in d.message
        assert d.start_line == 3
        assert d.end_column == len('printf("hi")') + 1

    @pytest.mark.parametrize("line", ["int x = 1", "return x", "cout << x", 'printf("x")'])
    def test_statement_cues(self, line: str) -> None:
        """Test each cue that marks a statement."""
        source = "#include <stdio.h>\n" + line
        assert [d.start_line for d in synthesize(source, "cpp")] == [2]

    @pytest.mark.parametrize("line", [
        "#define MAX = 3",
        "// x = 1",
        "int main() {",
        "}",
        "int x = 1;",
        "foo(bar)",
        "   ",
    ])
    def test_skipped_lines(self, line: str) -> None:
        """Test lines that are never flagged."""
        assert synthesize(line, "c") == []

    def test_missing_stdio_reported_once_at_first_printf(self) -> None:
        """Test that many printf calls give a single include diagnostic."""
        source = 'int main() {\n    int x = 1;\n    printf("a");\n    printf("b");\n    printf("c");\n}'
        diagnostics = synthesize(source, "c")

        assert len(diagnostics) == 1
        d = diagnostics[0]
        assert d.message == C_MISSING_STDIO
        assert d.start_line == 3
        assert d.end_column == len('    printf("a");') + 1

    def test_include_check_comes_after_line_scan(self) -> None:
        """Test ordering: semicolon pass first, then the include check."""
        source = 'int x = 1\nprintf("hi");'
        messages = [d.message for d in synthesize(source, "cpp")]
        assert messages == [C_MISSING_SEMICOLON, C_MISSING_STDIO]

    def test_include_present(self) -> None:
        """Test that the include silences the printf check."""
        assert synthesize('#include <stdio.h>\nprintf("hi");', "c") == []


class TestPhp:
    """Test suite for PHP heuristics."""

    def test_missing_dollar(self) -> None:
        """Test the canonical missing-'$' example."""
        diagnostics = synthesize("$x = 5;\necho x;", "php")

        assert len(diagnostics) == 1
        d = diagnostics[0]
        assert d.message == "Undefined variable: x; did you forget the '$'?"
        assert (d.start_line, d.start_column, d.end_line, d.end_column) == (2, 6, 2, 7)

    def test_dollar_uses_are_fine(self) -> None:
        """Test that '$name' is not a bare use."""
        assert synthesize("<?php\n$name = 'Sam';\necho $name;\n?>", "php") == []

    def test_uses_before_assignment_are_ignored(self) -> None:
        """Test that scanning starts at the assignment line."""
        diagnostics = synthesize("echo total;\n$total = 3;", "php")
        assert diagnostics == []

    def test_every_occurrence_is_reported(self) -> None:
        """Test that each bare occurrence gets its own diagnostic."""
        diagnostics = synthesize("$n = 1;\necho n + n;", "php")
        assert [(d.start_line, d.start_column) for d in diagnostics] == [(2, 6), (2, 10)]

    def test_missing_semicolon(self) -> None:
        """Test the PHP semicolon rule."""
        diagnostics = synthesize("<?php\n$x = 1\necho $x;\n?>", "php")

        assert [d.message for d in diagnostics] == [PHP_MISSING_SEMICOLON]
        assert diagnostics[0].start_line == 2

    @pytest.mark.parametrize("line", ["<?php echo 1", "?> echo", "// echo x", "function f() {"])
    def test_skipped_lines(self, line: str) -> None:
        """Test PHP lines that are never flagged by the semicolon rule."""
        assert synthesize(line, "php") == []
