"""
Checker - runs the diagnostic pipeline for a document.

    text -> synthesize -> diagnostics -> explain each
                                      -> suggest_fix for the first one

`LiveChecker` does the same on a debounce timer per document, so only the
last edit in a burst of keystrokes is checked.
"""
import itertools
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Optional

from .debounce import Debouncer
from .diagnostics import Diagnostic, synthesize
from .edits import EditDescriptor
from .fix_suggester import suggest_fix
from .knowledge_base import Explanation, explain
from .languages import normalize_language

logger = logging.getLogger(__name__)


@dataclass
class CheckReport:
    """Diagnostics for one snapshot of a document."""
    language: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    explanations: list[Explanation] = field(default_factory=list)
    fix: Optional[EditDescriptor] = None

    @property
    def has_errors(self) -> bool:
        return bool(self.diagnostics)

    def to_dict(self) -> dict:
        return {
            "language": self.language,
            "diagnostics": [
                {**d.to_dict(), **e.to_dict()}
                for d, e in zip(self.diagnostics, self.explanations)
            ],
            "fix": self.fix.to_dict() if self.fix else None,
        }


def check_code(source_text: str, language: str) -> CheckReport:
    """Run synthesis, explanations and the first-diagnostic fix over a snapshot."""
    language = normalize_language(language) or (language or "")
    diagnostics = synthesize(source_text, language)
    explanations = [explain(d.message, language) for d in diagnostics]

    fix = None
    if diagnostics:
        first = diagnostics[0]
        fix = suggest_fix(first.message, language, first.start_line, source_text)

    return CheckReport(language=language, diagnostics=diagnostics, explanations=explanations, fix=fix)


class LiveChecker:
    """
    Debounced checking for documents that are being edited.

    Each submit or immediate check takes a sequence number. A finished check
    is stored and published only if it is still the latest one for its
    document, so a slow check never overwrites a newer result. At most
    `max_documents` reports are kept; the least recently checked document is
    dropped first.
    """

    def __init__(self, delay: float = 0.5, max_documents: int = 256):
        self.max_documents = max_documents
        self._debouncer = Debouncer(delay)
        self._reports: OrderedDict[str, CheckReport] = OrderedDict()
        self._sequences: dict[str, int] = {}
        self._counter = itertools.count(1)
        self._listeners: list[Callable[[str, CheckReport], None]] = []
        # Reentrant so listeners may call latest()
        self._lock = threading.RLock()

    def add_listener(self, listener: Callable[[str, CheckReport], None]) -> None:
        self._listeners.append(listener)

    def _next_sequence(self, doc_id: str) -> int:
        with self._lock:
            sequence = next(self._counter)
            self._sequences[doc_id] = sequence
            return sequence

    def submit(self, doc_id: str, source_text: str, language: str) -> None:
        """Schedule a check; supersedes any check still pending or running for the document."""
        sequence = self._next_sequence(doc_id)
        self._debouncer.schedule(doc_id, self._run, doc_id, source_text, language, sequence)

    def check_now(self, doc_id: str, source_text: str, language: str) -> CheckReport:
        self._debouncer.cancel(doc_id)
        return self._run(doc_id, source_text, language, self._next_sequence(doc_id))

    def _run(self, doc_id: str, source_text: str, language: str, sequence: int) -> CheckReport:
        report = check_code(source_text, language)
        with self._lock:
            if self._sequences.get(doc_id) != sequence:
                logger.debug("Dropped stale check for %s", doc_id)
                return report
            del self._sequences[doc_id]
            self._reports[doc_id] = report
            self._reports.move_to_end(doc_id)
            while len(self._reports) > self.max_documents:
                evicted, _ = self._reports.popitem(last=False)
                logger.debug("Evicted diagnostics for %s", evicted)
            logger.debug("Checked %s: %d diagnostic(s)", doc_id, len(report.diagnostics))
            for listener in list(self._listeners):
                listener(doc_id, report)
        return report

    def latest(self, doc_id: str) -> Optional[CheckReport]:
        with self._lock:
            return self._reports.get(doc_id)

    def pending(self, doc_id: str) -> bool:
        return self._debouncer.pending(doc_id)

    def forget(self, doc_id: str) -> None:
        self._debouncer.cancel(doc_id)
        with self._lock:
            self._sequences.pop(doc_id, None)
            self._reports.pop(doc_id, None)

    def stop(self) -> None:
        self._debouncer.cancel_all()
