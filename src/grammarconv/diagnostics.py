"""Diagnostic types reported while converting a grammar.

A ``Diagnostic`` is a non-fatal finding attached to a production rule:
a dangling ``$NonTerminal`` reference, a malformed wildcard, and so on.
Converters never print them; they hand each one to a ``DiagnosticSink``
supplied by the caller, so the algorithm stays independent of how (or
whether) findings are shown.

Codes
-----
    GC001  Non-terminal referenced but not defined in the grammar
    GC002  Rule left incomplete by a missing non-terminal
    GC003  Malformed wildcard; the replacement is skipped
    GC004  Wildcard with no known keyword; the token is dropped
    GC005  Two rules map to the same output rule id
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

logger = logging.getLogger(__name__)

MISSING_NON_TERMINAL = "GC001"
INCOMPLETE_RULE = "GC002"
MALFORMED_WILDCARD = "GC003"
UNKNOWN_WILDCARD = "GC004"
RULE_ID_COLLISION = "GC005"


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostics, aligned with LSP conventions."""

    ERROR = auto()
    WARNING = auto()
    INFORMATION = auto()
    HINT = auto()


_LOG_LEVELS: dict[DiagnosticSeverity, int] = {
    DiagnosticSeverity.ERROR: logging.ERROR,
    DiagnosticSeverity.WARNING: logging.WARNING,
    DiagnosticSeverity.INFORMATION: logging.INFO,
    DiagnosticSeverity.HINT: logging.DEBUG,
}


@dataclass(frozen=True)
class Diagnostic:
    """A single conversion finding.

    Parameters
    ----------
    severity:
        How serious this finding is.
    code:
        A short machine-readable identifier, e.g. ``"GC001"``.
    message:
        Human-readable description of the problem.
    rule:
        The non-terminal whose replacements produced the finding.
    suggestion:
        Optional human-readable fix suggestion.
    """

    severity: DiagnosticSeverity
    code: str
    message: str
    rule: str = field(default="")
    suggestion: str | None = field(default=None)

    def __str__(self) -> str:
        prefix = f"[{self.code}] {self.severity.name}"
        where = f" in {self.rule}" if self.rule else ""
        suggestion_part = f" (hint: {self.suggestion})" if self.suggestion else ""
        return f"{prefix}{where}: {self.message}{suggestion_part}"

    @property
    def is_error(self) -> bool:
        """Return True if this diagnostic should fail a strict check."""
        return self.severity == DiagnosticSeverity.ERROR


class DiagnosticSink(Protocol):
    """Anything that can receive diagnostics from a conversion."""

    def report(self, diagnostic: Diagnostic) -> None: ...


class DiagnosticCollector:
    """List-backed ``DiagnosticSink`` that also forwards to ``logging``.

    Parameters
    ----------
    log:
        When ``False``, diagnostics are only collected.
    """

    def __init__(self, log: bool = True) -> None:
        self._diagnostics: list[Diagnostic] = []
        self._log = log

    def report(self, diagnostic: Diagnostic) -> None:
        """Record ``diagnostic`` and log it at the matching level."""
        self._diagnostics.append(diagnostic)
        if self._log:
            logger.log(_LOG_LEVELS[diagnostic.severity], "%s", diagnostic)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """All diagnostics reported so far, in report order."""
        return list(self._diagnostics)

    def by_code(self, code: str) -> list[Diagnostic]:
        """Return the diagnostics carrying ``code``."""
        return [d for d in self._diagnostics if d.code == code]

    @property
    def has_warnings(self) -> bool:
        """Return True if anything at WARNING severity or worse was reported."""
        return any(
            d.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.WARNING)
            for d in self._diagnostics
        )

    def clear(self) -> None:
        self._diagnostics.clear()

    def __len__(self) -> int:
        return len(self._diagnostics)
