"""Wildcard token type and keyword classification.

A wildcard is a ``{...}`` span inside a replacement template, such as
``{name}``, ``{location beacon}`` or ``{object? alike 2}``.  The lexer
(see ``grammarconv.wildcards.lexer``) turns the span into a
``WildcardToken``; :func:`keyword_of` then maps the token to its
semantic category, the *keyword*.

Keyword rules, checked in order:

1. no type                                  → the name itself
2. ``location`` + beacon/placement/room      → the type
3. ``name`` + male/female                    → the type
4. ``object`` + aobject/kobject/special      → first letter of type + ``object``
5. ``pron`` + obj/sub                        → ``pronobj`` / ``pronsub``
6. anything else                             → the name
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

KEYWORDS: Final[frozenset[str]] = frozenset({
    "category",
    "room",
    "question",
    "void",
    "location",
    "beacon",
    "placement",
    "pron",
    "object",
    "aobject",
    "kobject",
    "sobject",
    "gesture",
    "name",
    "female",
    "male",
    "pronobj",
    "pronsub",
})

_LOCATION_TYPES: Final[frozenset[str]] = frozenset({"beacon", "placement", "room"})
_NAME_TYPES: Final[frozenset[str]] = frozenset({"male", "female"})
_OBJECT_TYPES: Final[frozenset[str]] = frozenset({"aobject", "kobject", "special"})
_PRONOUN_TYPES: Final[dict[str, str]] = {"obj": "pronobj", "sub": "pronsub"}


@dataclass(frozen=True, slots=True)
class WildcardToken:
    """A wildcard parsed from one ``{...}`` occurrence.

    Parameters
    ----------
    name:
        Base name, e.g. ``"location"``.
    type:
        Optional qualifier, e.g. ``"beacon"``.
    obfuscated:
        ``True`` when the wildcard was written with a ``?`` marker.
    id:
        Optional numeric id distinguishing repeated wildcards.
    where:
        Raw ``where`` clause text, if any.
    metadata:
        Raw ``meta:`` payload, if any.
    span:
        ``(start, end)`` offsets of the token in its template, ``end``
        exclusive (just past the closing brace).
    """

    name: str
    type: str | None = None
    obfuscated: bool = False
    id: int | None = None
    where: str | None = None
    metadata: str | None = None
    span: tuple[int, int] = field(default=(0, 0), compare=False)

    def __str__(self) -> str:
        head = self.name + ("?" if self.obfuscated else "")
        parts = [head]
        if self.type:
            parts.append(self.type)
        if self.id is not None:
            parts.append(str(self.id))
        return "{" + " ".join(parts) + "}"


def keyword_of(token: WildcardToken) -> str:
    """Return the semantic keyword of ``token``.

    The function is total: unrecognised name/type combinations fall
    back to the token name.
    """
    if token.type is None:
        return token.name

    if token.name == "location" and token.type in _LOCATION_TYPES:
        return token.type
    if token.name == "name" and token.type in _NAME_TYPES:
        return token.type
    if token.name == "object" and token.type in _OBJECT_TYPES:
        return token.type[0] + "object"
    if token.name == "pron" and token.type in _PRONOUN_TYPES:
        return _PRONOUN_TYPES[token.type]

    return token.name
