"""Terminal enumerations derived from the reference catalogs.

Both backends enumerate the same word lists; they are computed here
once per conversion.  Every list is duplicate-free and keeps the order
in which entries were first seen, which keeps output deterministic.

Cross-contributions:

* ``rooms`` holds every declared room plus every category's room string;
* ``placements`` holds every declared placement plus every category's
  default location when that location is a placement.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Final

from grammarconv.model.nodes import (
    OBJECTIVE_PRONOUNS,
    SUBJECTIVE_PRONOUNS,
    Catalogs,
    Gender,
    ObjectType,
)

# Umbrella rules reference their sub-rules instead of listing words.
UMBRELLA_RULES: Final[dict[str, tuple[str, ...]]] = {
    "_locations": ("_beacons", "_placements", "_rooms"),
    "_names": ("_males", "_females"),
    "_objects": ("_aobjects", "_kobjects", "_sobjects"),
}


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True)
class TerminalEnumerations:
    """Word lists for every terminal rule, keyed by rule id via :meth:`get`."""

    gestures: tuple[str, ...]
    beacons: tuple[str, ...]
    placements: tuple[str, ...]
    rooms: tuple[str, ...]
    males: tuple[str, ...]
    females: tuple[str, ...]
    categories: tuple[str, ...]
    aobjects: tuple[str, ...]
    kobjects: tuple[str, ...]
    sobjects: tuple[str, ...]
    pronobjs: tuple[str, ...]
    pronsubs: tuple[str, ...]
    questions: tuple[str, ...]

    @classmethod
    def from_catalogs(cls, catalogs: Catalogs) -> "TerminalEnumerations":
        locations = catalogs.locations
        objects = catalogs.objects
        return cls(
            gestures=_unique(g.name for g in catalogs.gestures),
            beacons=_unique(loc.name for loc in locations if loc.is_beacon),
            placements=_unique(
                [loc.name for loc in locations if loc.is_placement]
                + [
                    c.default_location.name
                    for c in catalogs.categories
                    if c.default_location.is_placement
                ]
            ),
            rooms=_unique(
                [room.name for room in catalogs.rooms]
                + [c.room_string for c in catalogs.categories if c.room_string]
            ),
            males=_unique(n.name for n in catalogs.names if n.gender is Gender.MALE),
            females=_unique(n.name for n in catalogs.names if n.gender is Gender.FEMALE),
            categories=_unique(c.name for c in catalogs.categories),
            aobjects=_unique(o.name for o in objects if o.type is ObjectType.ALIKE),
            kobjects=_unique(o.name for o in objects if o.type is ObjectType.KNOWN),
            sobjects=_unique(o.name for o in objects if o.type is ObjectType.SPECIAL),
            pronobjs=_unique(OBJECTIVE_PRONOUNS),
            pronsubs=_unique(SUBJECTIVE_PRONOUNS),
            questions=tuple(q.question for q in catalogs.questions),
        )

    def get(self, rule_id: str) -> tuple[str, ...]:
        """Return the words of terminal rule ``rule_id`` (e.g. ``"_rooms"``)."""
        return getattr(self, rule_id.lstrip("_"))
