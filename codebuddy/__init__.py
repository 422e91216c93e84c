"""
Code Buddy - backend for a kid-friendly online code editor.

Modules:
- languages: supported language ids and extension lookup
- knowledge_base: kid-friendly explanations for error messages
- diagnostics: heuristic diagnostic synthesizer
- edits: insert/replace edit descriptors and a re-validating applicator
- fix_suggester: one edit proposal per diagnostic
- debounce: per-key cancellable scheduling
- checker: the full check pipeline and debounced live checking
- executor: remote code execution (Judge0)
- assistant: AI explanations and chat (Gemini or OpenAI)
- storage: saved user files
- server: Flask API
- cli: command line
"""

from .languages import LANGUAGES, normalize_language, language_for_path
from .knowledge_base import KnowledgeEntry, Explanation, explain, FALLBACK
from .diagnostics import Diagnostic, Severity, synthesize
from .edits import InsertEdit, ReplaceEdit, TextRange, EditDescriptor, apply_edit
from .fix_suggester import suggest_fix
from .debounce import Debouncer
from .checker import CheckReport, LiveChecker, check_code

__all__ = [
    # Languages
    "LANGUAGES",
    "normalize_language",
    "language_for_path",

    # Pipeline
    "KnowledgeEntry",
    "Explanation",
    "explain",
    "FALLBACK",
    "Diagnostic",
    "Severity",
    "synthesize",
    "InsertEdit",
    "ReplaceEdit",
    "TextRange",
    "EditDescriptor",
    "apply_edit",
    "suggest_fix",

    # Live checking
    "Debouncer",
    "CheckReport",
    "LiveChecker",
    "check_code",
]
