"""Wildcard lexer: extracts one ``{...}`` token from a template.

Syntax accepted inside the braces::

    name[?] [type[?]] [id] [where <clause>] [meta: <text>]
    name[?]:type[?] ...

A ``?`` suffix on the name or on the type marks the wildcard as
obfuscated.  ``name:type`` is equivalent to ``name type``.  Braces may
nest (``meta:`` payloads often quote other wildcards); the token ends
at the brace that balances the opening one.

:func:`extract_wildcard` always returns a cursor strictly past the
opening brace or raises :class:`WildcardError`, so callers that loop
over a template can never stall on a malformed token.
"""
from __future__ import annotations

import re
from typing import Final

from grammarconv.wildcards.tokens import WildcardToken

_META: Final[re.Pattern[str]] = re.compile(r"\bmeta\s*:", re.IGNORECASE)
_NAME: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class WildcardError(ValueError):
    """Raised when a ``{...}`` span cannot be parsed.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    source:
        The template being scanned.
    position:
        0-based offset of the opening brace.
    """

    def __init__(self, message: str, source: str, position: int) -> None:
        super().__init__(f"WildcardError at offset {position} in {source!r}: {message}")
        self.wildcard_message = message
        self.source = source
        self.position = position


def _find_closing_brace(source: str, start: int) -> int:
    """Return the index of the brace balancing the one at ``start``."""
    depth = 0
    for index in range(start, len(source)):
        ch = source[index]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return index
    raise WildcardError("Unterminated wildcard (missing '}')", source, start)


def _strip_marker(word: str) -> tuple[str, bool]:
    """Split a trailing ``?`` obfuscation marker off ``word``."""
    if word.endswith("?"):
        return word[:-1], True
    return word, False


def _parse_body(body: str, source: str, start: int, end: int) -> WildcardToken:
    metadata: str | None = None
    meta_match = _META.search(body)
    if meta_match is not None:
        metadata = body[meta_match.end():].strip()
        body = body[: meta_match.start()]

    words = body.split()
    if not words:
        raise WildcardError("Empty wildcard", source, start)

    head, rest = words[0], words[1:]
    where: str | None = None
    if "where" in rest:
        where_at = rest.index("where")
        where = " ".join(rest[where_at + 1:])
        rest = rest[:where_at]

    name_part, _, qualifier = head.partition(":")
    name, obfuscated = _strip_marker(name_part)
    if not _NAME.fullmatch(name):
        raise WildcardError(f"Invalid wildcard name {name!r}", source, start)

    wildcard_type: str | None = None
    if qualifier:
        wildcard_type, marked = _strip_marker(qualifier)
        obfuscated = obfuscated or marked

    wildcard_id: int | None = None
    for word in rest:
        word, marked = _strip_marker(word)
        obfuscated = obfuscated or marked
        if not word:
            continue
        if word.isdigit() and wildcard_id is None:
            wildcard_id = int(word)
        elif wildcard_type is None:
            wildcard_type = word

    return WildcardToken(
        name=name.lower(),
        type=wildcard_type.lower() if wildcard_type else None,
        obfuscated=obfuscated,
        id=wildcard_id,
        where=where or None,
        metadata=metadata or None,
        span=(start, end),
    )


def extract_wildcard(source: str, pos: int) -> tuple[WildcardToken, int]:
    """Parse the wildcard starting at ``source[pos]``.

    Parameters
    ----------
    source:
        The template text.
    pos:
        Offset of the opening ``{``.

    Returns
    -------
    tuple[WildcardToken, int]
        The token and the offset just past its closing ``}``.

    Raises
    ------
    WildcardError
        If ``source[pos]`` is not ``{``, the braces are unbalanced, or
        the token has no valid name.
    """
    if pos >= len(source) or source[pos] != "{":
        raise WildcardError("Expected '{'", source, pos)
    close = _find_closing_brace(source, pos)
    token = _parse_body(source[pos + 1 : close], source, pos, close + 1)
    return token, close + 1
