"""Parser for grammar text files."""
from __future__ import annotations

from grammarconv.parser.errors import GrammarParseError, GrammarParseErrorCollection
from grammarconv.parser.parser import load_grammar, parse_grammar, split_alternatives

__all__ = [
    "parse_grammar",
    "load_grammar",
    "split_alternatives",
    "GrammarParseError",
    "GrammarParseErrorCollection",
]
