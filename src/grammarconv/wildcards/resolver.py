"""Rule-target resolution for wildcard keywords.

Every keyword resolves to one of three outcomes: literal text written
verbatim, a reference to a generated terminal rule, or nothing at all
(``None``).  Obfuscated wildcards resolve to coarser targets than plain
ones: any location subtype collapses to ``_rooms`` and any object
subtype to ``_categories``.

Resolution table
----------------

=================================  ==================  ==================
keyword                            PLAIN               OBFUSCATED
=================================  ==================  ==================
category                           ``_categories``     literal "objects"
room                               ``_rooms``          literal "room"
question                           literal "question"  literal "question"
void                               nothing             nothing
location, beacon, placement        ``_<keyword>s``     ``_rooms``
object, aobject, kobject, sobject  ``_<keyword>s``     ``_categories``
pron                               ``_pronobjs``       ``_pronobjs``
gesture, name, male, female,       ``_<keyword>s``     ``_<keyword>s``
pronobj, pronsub
anything else                      nothing             nothing
=================================  ==================  ==================
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Final, Union


class ResolveMode(Enum):
    """Which column of the resolution table to use."""

    PLAIN = auto()
    OBFUSCATED = auto()


@dataclass(frozen=True, slots=True)
class LiteralTarget:
    """Emit ``text`` verbatim in place of the wildcard."""

    text: str


@dataclass(frozen=True, slots=True)
class RuleRefTarget:
    """Emit a reference to the terminal rule ``rule_id``."""

    rule_id: str


Target = Union[LiteralTarget, RuleRefTarget]

_PRECISE: Final[frozenset[str]] = frozenset({
    "gesture",
    "name",
    "female",
    "male",
    "pronobj",
    "pronsub",
})
_LOCATIONS: Final[frozenset[str]] = frozenset({"location", "beacon", "placement"})
_OBJECTS: Final[frozenset[str]] = frozenset({"object", "aobject", "kobject", "sobject"})

_SHARED: Final[dict[str, Target | None]] = {
    "question": LiteralTarget("question"),
    "void": None,
    "pron": RuleRefTarget("_pronobjs"),
}

_OBFUSCATED_OVERRIDES: Final[dict[str, Target]] = {
    "category": LiteralTarget("objects"),
    "room": LiteralTarget("room"),
}


def rule_id_for(keyword: str) -> str:
    """Return the terminal rule id for a keyword, e.g. ``_beacons``."""
    return f"_{keyword}s"


def resolve_target(keyword: str, mode: ResolveMode = ResolveMode.PLAIN) -> Target | None:
    """Resolve ``keyword`` to its emission target.

    Parameters
    ----------
    keyword:
        A keyword produced by :func:`~grammarconv.wildcards.tokens.keyword_of`.
    mode:
        ``ResolveMode.OBFUSCATED`` for wildcards written with ``?``.

    Returns
    -------
    Target | None
        ``LiteralTarget``, ``RuleRefTarget``, or ``None`` when the
        wildcard produces no output.
    """
    if keyword in _SHARED:
        return _SHARED[keyword]

    if mode is ResolveMode.OBFUSCATED:
        if keyword in _OBFUSCATED_OVERRIDES:
            return _OBFUSCATED_OVERRIDES[keyword]
        if keyword in _LOCATIONS:
            return RuleRefTarget("_rooms")
        if keyword in _OBJECTS:
            return RuleRefTarget("_categories")
        if keyword in _PRECISE:
            return RuleRefTarget(rule_id_for(keyword))
        return None

    if keyword == "category":
        return RuleRefTarget("_categories")
    if keyword in _PRECISE or keyword in _LOCATIONS or keyword in _OBJECTS or keyword == "room":
        return RuleRefTarget(rule_id_for(keyword))
    return None
