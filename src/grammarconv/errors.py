"""Exceptions that abort a single conversion.

Recoverable problems (missing non-terminals, malformed wildcards) are
reported as :class:`~grammarconv.diagnostics.Diagnostic` objects
instead; only the conditions below stop a conversion.
"""
from __future__ import annotations


class ConversionError(Exception):
    """Base class for fatal conversion errors."""


class MissingRootError(ConversionError):
    """Raised when a grammar has no ``$Main`` rule to start from.

    Parameters
    ----------
    grammar_name:
        Name of the offending grammar.
    """

    def __init__(self, grammar_name: str) -> None:
        super().__init__(f"Grammar {grammar_name!r} has no $Main rule")
        self.grammar_name = grammar_name
