"""
Kid-friendly explanations for common compiler and interpreter errors.

Each language has an ordered list of entries. An entry matches when its
pattern key appears anywhere in the raw error message; the first matching
entry wins, so more specific keys are declared before the general ones.
"""
from dataclasses import dataclass, asdict

from .languages import normalize_language


@dataclass(frozen=True)
class KnowledgeEntry:
    """One pattern -> explanation mapping for a language."""
    language: str
    pattern_key: str
    explanation: str
    suggestion: str


@dataclass(frozen=True)
class Explanation:
    """What the presentation layer shows next to a diagnostic."""
    explanation: str
    suggestion: str

    def to_dict(self) -> dict:
        return asdict(self)


FALLBACK = Explanation(
    explanation="There seems to be a problem with your code.",
    suggestion="Check for typos, missing symbols, or other mistakes in this area.",
)


def _entries(language: str, rows: list[tuple[str, str, str]]) -> tuple[KnowledgeEntry, ...]:
    return tuple(KnowledgeEntry(language, key, explanation, suggestion) for key, explanation, suggestion in rows)


# =============================================================================
# Entries per language (declaration order is match order)
# =============================================================================

_UNDECLARED = (
    "You're trying to use a variable that hasn't been created yet.",
    "Make sure you've declared the variable before using it.",
)

_MISSING_SEMICOLON_C = (
    "You forgot a semicolon at the end of a line. Semicolons tell the computer when a statement is finished.",
    "Add a semicolon (;) at the end of the line.",
)

KNOWLEDGE_BASE: dict[str, tuple[KnowledgeEntry, ...]] = {
    "javascript": _entries("javascript", [
        ("Unexpected token",
         "Oops! There's something in your code that JavaScript doesn't understand.",
         "Check for missing brackets, quotes, or parentheses near this line."),
        ("Expected expression",
         "JavaScript was looking for a value or action here, but couldn't find one!",
         "Make sure you haven't left any statements empty."),
        ("Expected identifier",
         "JavaScript was expecting a name for something, but couldn't find one.",
         "Check if you missed naming a variable or function."),
        ("Missing semicolon",
         "You forgot a semicolon at the end of a line. Semicolons tell JavaScript when a statement is finished.",
         "Add a semicolon (;) at the end of the line."),
        ("Unexpected semicolon",
         "You put a semicolon where JavaScript wasn't expecting one.",
         "Try removing the extra semicolon."),
        ("Undefined variable",
         "You're trying to use a variable that hasn't been created yet.",
         "Make sure you've declared the variable with 'let', 'const', or 'var' before using it."),
        ("Cannot read property",
         "You're trying to use a property of something that doesn't exist or is undefined.",
         "Check if your object or variable exists before trying to use its properties."),
    ]),
    "typescript": _entries("typescript", [
        ("Type error",
         "TypeScript expected one type but got a different type instead.",
         "Make sure your variable types match what you're trying to do with them."),
        ("Cannot find name",
         "TypeScript can't find the name of something you're trying to use.",
         "Check if you've declared the variable or imported the module you're trying to use."),
        ("Property does not exist",
         "You're trying to use a property that doesn't exist on this object.",
         "Double-check the spelling or make sure the property exists on your object."),
    ]),
    "python": _entries("python", [
        ("SyntaxError",
         "There's a mistake in how you've written your Python code.",
         "Check for missing colons after if/for/while statements or indentation issues."),
        ("IndentationError",
         "Python uses spaces at the beginning of lines to organize code. Something is wrong with your spaces.",
         "Make sure all lines inside functions or loops have the same number of spaces at the beginning."),
        ("NameError",
         "You're trying to use a variable or function that doesn't exist yet.",
         "Check if you've created the variable before using it. Remember Python is case-sensitive!"),
        ("TypeError",
         "You're trying to do something with an object that it can't do.",
         "Check if you're using the right type of value. For example, you can't add a number "
         "to a string without converting it."),
        ("ImportError",
         "Python couldn't find the module you're trying to import.",
         "Check the spelling of the module name or make sure it's installed."),
    ]),
    "cpp": _entries("cpp", [
        ("expected ';'", *_MISSING_SEMICOLON_C),
        ("expected",
         "C++ was expecting something different in your code.",
         "Check for missing semicolons, brackets, or parentheses."),
        ("undeclared identifier", *_UNDECLARED),
        ("no matching function",
         "C++ couldn't find a function that matches what you're trying to call.",
         "Check if the function name is spelled correctly and if you're passing the right number "
         "and types of arguments."),
    ]),
    "c": _entries("c", [
        ("undeclared identifier", *_UNDECLARED),
        ("expected ';'", *_MISSING_SEMICOLON_C),
        ("expected",
         "C was expecting something different in your code.",
         "Check for missing semicolons, brackets, or parentheses."),
        ("implicit declaration",
         "You're using a function that C doesn't know about yet.",
         "Make sure you've included the right header file for the function you're using."),
    ]),
    "php": _entries("php", [
        ("Parse error",
         "PHP couldn't understand part of your code.",
         "Check for missing semicolons, brackets, or the PHP opening tag (<?php)."),
        ("Undefined variable",
         "You're trying to use a variable that hasn't been created yet.",
         "Make sure you've created the variable with '$' before using it."),
        ("Call to undefined function",
         "You're trying to use a function that doesn't exist.",
         "Check the spelling of the function name or if you need to include a library."),
        ("Missing argument",
         "You didn't provide all the required information to a function.",
         "Check how many arguments the function needs and provide all of them."),
    ]),
}


def find_entry(raw_message: str, language: str) -> KnowledgeEntry | None:
    """Return the first entry whose pattern key occurs in the message."""
    if not raw_message:
        return None
    for entry in KNOWLEDGE_BASE.get(normalize_language(language) or "", ()):
        if entry.pattern_key in raw_message:
            return entry
    return None


def explain(raw_message: str, language: str) -> Explanation:
    """
    Get a kid-friendly explanation and suggestion for an error message.

    Never fails: unknown languages and unmatched messages get the generic
    fallback.
    """
    entry = find_entry(raw_message, language)
    if entry is None:
        return FALLBACK
    return Explanation(explanation=entry.explanation, suggestion=entry.suggestion)
