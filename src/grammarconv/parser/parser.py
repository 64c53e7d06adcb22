"""Line-oriented parser for grammar text files.

Format
------
::

    ; grammar name Category I
    ; grammar tier Easy
    ; import common.txt
    # any other line starting with ';' or '#' is a comment

    $Main = $deliver | $fndppl
    $deliver = bring {object} to the {placement 2}
    $deliver = give me {object?}

Each definition line holds one non-terminal and its alternatives
separated by ``|``.  A ``|`` inside a ``{...}`` wildcard does not split.
A non-terminal defined on several lines accumulates the alternatives of
all of them.  Imports are recognised but not followed.

All errors of a file are collected and raised together as a
``GrammarParseErrorCollection``.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Final

from grammarconv.model.nodes import DifficultyTier, Grammar, ProductionRule
from grammarconv.parser.errors import GrammarParseError, GrammarParseErrorCollection

logger = logging.getLogger(__name__)

DEFAULT_GRAMMAR_NAME: Final[str] = "grammar"

_COMMENT_PREFIXES: Final[tuple[str, ...]] = (";", "#")
_DIRECTIVE: Final[re.Pattern[str]] = re.compile(
    r"^;\s*grammar\s+(?P<key>name|tier)\s+(?P<value>.+?)\s*$", re.IGNORECASE
)
_IMPORT: Final[re.Pattern[str]] = re.compile(r"^;\s*import\s+(?P<target>.+?)\s*$", re.IGNORECASE)
_DEFINITION: Final[re.Pattern[str]] = re.compile(
    r"^(?P<head>\$[A-Za-z0-9_]+)\s*=\s*(?P<body>.*)$"
)


def split_alternatives(body: str) -> list[str]:
    """Split ``body`` on ``|`` characters outside wildcard braces.

    Alternatives are stripped; empty ones are dropped.
    """
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    for ch in body:
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth = max(depth - 1, 0)
        elif ch == "|" and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return [part.strip() for part in parts if part.strip()]


def _parse_tier(value: str, line: int, col: int) -> DifficultyTier:
    try:
        return DifficultyTier[value.strip().upper()]
    except KeyError:
        choices = ", ".join(t.name.lower() for t in DifficultyTier)
        raise GrammarParseError(
            f"Unknown grammar tier {value!r}; expected one of {choices}", line, col
        ) from None


def parse_grammar(text: str, name: str | None = None) -> Grammar:
    """Parse grammar ``text`` into a ``Grammar``.

    Parameters
    ----------
    text:
        Full contents of a grammar file.
    name:
        Name used when the text has no ``; grammar name`` directive.

    Returns
    -------
    Grammar
        The parsed grammar.  It is not checked for a ``$Main`` rule;
        converters report that when they run.

    Raises
    ------
    GrammarParseErrorCollection
        If any line could not be parsed.
    """
    errors = GrammarParseErrorCollection()
    rules: list[ProductionRule] = []
    grammar_name = name or DEFAULT_GRAMMAR_NAME
    tier = DifficultyTier.UNKNOWN

    for lineno, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if not stripped:
            continue
        col = len(raw) - len(raw.lstrip()) + 1

        if stripped.startswith(_COMMENT_PREFIXES):
            directive = _DIRECTIVE.match(stripped)
            if directive is not None:
                if directive.group("key").lower() == "name":
                    grammar_name = directive.group("value")
                else:
                    try:
                        tier = _parse_tier(directive.group("value"), lineno, col)
                    except GrammarParseError as exc:
                        errors.add(exc)
                continue
            imported = _IMPORT.match(stripped)
            if imported is not None:
                logger.debug("Line %d: ignoring import of %s", lineno, imported.group("target"))
            continue

        definition = _DEFINITION.match(stripped)
        if definition is None:
            errors.add(
                GrammarParseError(
                    f"Expected a definition '$NonTerminal = ...', found {stripped!r}",
                    lineno,
                    col,
                )
            )
            continue
        rules.append(
            ProductionRule(definition.group("head"), tuple(split_alternatives(definition.group("body"))))
        )

    if errors.has_errors:
        raise errors

    grammar = Grammar.from_rules(grammar_name, rules, tier)
    logger.debug("Parsed grammar %r: %d rule(s)", grammar.name, len(grammar))
    return grammar


def load_grammar(path: str | Path) -> Grammar:
    """Read and parse the grammar file at ``path`` (UTF-8).

    The file stem is used as the name unless the file declares one.
    """
    source = Path(path)
    return parse_grammar(source.read_text(encoding="utf-8"), name=source.stem)
