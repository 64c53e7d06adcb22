"""Parse error types for grammar text files.

Every error carries its line and column so the CLI can point at the
offending definition.
"""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class GrammarParseError(Exception):
    """A single error found while parsing a grammar file.

    Parameters
    ----------
    message:
        Human-readable description of the error.
    line:
        1-based line number.
    col:
        1-based column number.
    """

    message: str
    line: int
    col: int = 1

    def __str__(self) -> str:
        return f"GrammarParseError at {self.line}:{self.col}: {self.message}"

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", (str(self),))


@dataclass
class GrammarParseErrorCollection(Exception):
    """All errors of one parse run; raised once the whole file is read.

    Parameters
    ----------
    errors:
        Errors in the order they were found.
    """

    errors: list[GrammarParseError] = field(default_factory=list)

    def add(self, error: GrammarParseError) -> None:
        self.errors.append(error)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def __str__(self) -> str:
        if not self.errors:
            return "GrammarParseErrorCollection (no errors)"
        lines = [f"GrammarParseErrorCollection ({len(self.errors)} error(s)):"]
        lines.extend(f"  {err}" for err in self.errors)
        return "\n".join(lines)
