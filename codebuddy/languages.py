"""Supported editor languages and helpers for naming them."""
from pathlib import Path
from typing import Literal, Optional

LanguageId = Literal["c", "cpp", "javascript", "typescript", "python", "php"]

LANGUAGES: tuple[str, ...] = ("c", "cpp", "javascript", "typescript", "python", "php")

# Languages whose diagnostics come from the editing widget's own engine
WIDGET_DIAGNOSED = ("javascript", "typescript")

EXTENSION_TO_LANGUAGE = {
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".js": "javascript",
    ".mjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".php": "php",
}

ALIASES = {
    "c++": "cpp",
    "js": "javascript",
    "node": "javascript",
    "ts": "typescript",
    "py": "python",
    "python3": "python",
}


def normalize_language(name: Optional[str]) -> Optional[str]:
    """Return the canonical language id for a name, or None if unsupported."""
    if not name or not isinstance(name, str):
        return None
    key = name.strip().lower()
    key = ALIASES.get(key, key)
    if key in LANGUAGES:
        return key
    return None


def language_for_path(path: str | Path) -> Optional[str]:
    """Guess the language of a file from its extension."""
    return EXTENSION_TO_LANGUAGE.get(Path(path).suffix.lower())
