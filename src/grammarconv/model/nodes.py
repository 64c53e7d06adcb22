"""Data model for command grammars and their reference catalogs.

A ``Grammar`` maps non-terminal names (always ``$``-prefixed, the root
is ``$Main``) to ``ProductionRule`` objects.  Each rule owns an ordered
tuple of replacement templates: plain strings that may embed
``$NonTerminal`` references and ``{...}`` wildcard tokens.

The catalog types (gestures, names, locations, objects, questions) are
flat reference data.  Converters treat them as read-only for the whole
duration of a conversion, which is why every node here is a frozen
dataclass.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum, auto

from grammarconv.errors import MissingRootError

ROOT_NON_TERMINAL = "$Main"

OBJECTIVE_PRONOUNS: tuple[str, ...] = ("me", "you", "him", "her", "it", "us", "them")
SUBJECTIVE_PRONOUNS: tuple[str, ...] = ("I", "you", "he", "she", "it", "we", "they")


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class DifficultyTier(Enum):
    """Difficulty tier a grammar is written for."""

    UNKNOWN = auto()
    EASY = auto()
    MODERATE = auto()
    HIGH = auto()


class Gender(Enum):
    """Gender of a person name, used to split the name enumerations."""

    MALE = auto()
    FEMALE = auto()


class ObjectType(Enum):
    """Object kind: alike objects, known objects, or special objects."""

    ALIKE = auto()
    KNOWN = auto()
    SPECIAL = auto()


# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProductionRule:
    """A non-terminal and the ordered templates it can expand to.

    Parameters
    ----------
    non_terminal:
        Rule name including the ``$`` prefix, e.g. ``"$deliver"``.
    replacements:
        Replacement templates.  Order only affects output order.
    """

    non_terminal: str
    replacements: tuple[str, ...] = ()

    def __str__(self) -> str:
        return f"{self.non_terminal} = {' | '.join(self.replacements)}"


@dataclass(frozen=True)
class Grammar:
    """A named command grammar.

    Parameters
    ----------
    name:
        Human-readable grammar name, e.g. ``"Category I"``.
    tier:
        Difficulty tier the grammar belongs to.
    rules:
        Mapping of non-terminal name (with ``$``) to its rule.
    """

    name: str
    tier: DifficultyTier = DifficultyTier.UNKNOWN
    rules: dict[str, ProductionRule] = field(default_factory=dict)

    @classmethod
    def from_rules(
        cls,
        name: str,
        rules: Iterable[ProductionRule],
        tier: DifficultyTier = DifficultyTier.UNKNOWN,
    ) -> "Grammar":
        """Build a grammar, merging repeated definitions of a non-terminal.

        Replacements of a rule defined more than once are appended in
        the order they are given.
        """
        merged: dict[str, list[str]] = {}
        for rule in rules:
            merged.setdefault(rule.non_terminal, []).extend(rule.replacements)
        return cls(
            name=name,
            tier=tier,
            rules={nt: ProductionRule(nt, tuple(alts)) for nt, alts in merged.items()},
        )

    @property
    def root(self) -> ProductionRule:
        """Return the ``$Main`` rule.

        Raises
        ------
        MissingRootError
            If the grammar has no ``$Main`` rule.
        """
        try:
            return self.rules[ROOT_NON_TERMINAL]
        except KeyError:
            raise MissingRootError(self.name) from None

    def get(self, non_terminal: str) -> ProductionRule | None:
        """Return the rule named ``non_terminal`` or ``None``."""
        return self.rules.get(non_terminal)

    def __contains__(self, non_terminal: object) -> bool:
        return non_terminal in self.rules

    def __iter__(self) -> Iterator[ProductionRule]:
        return iter(self.rules.values())

    def __len__(self) -> int:
        return len(self.rules)


# ---------------------------------------------------------------------------
# Catalogs
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Gesture:
    name: str


@dataclass(frozen=True, slots=True)
class PersonName:
    name: str
    gender: Gender


@dataclass(frozen=True, slots=True)
class Location:
    """A named location inside a room.

    A location can be a beacon (somewhere to go to), a placement
    (somewhere to put things on) or both.
    """

    name: str
    is_beacon: bool = False
    is_placement: bool = False


@dataclass(frozen=True, slots=True)
class Room:
    name: str
    locations: tuple[Location, ...] = ()


@dataclass(frozen=True, slots=True)
class CatalogObject:
    name: str
    type: ObjectType = ObjectType.KNOWN


@dataclass(frozen=True, slots=True)
class Category:
    """An object category.

    Parameters
    ----------
    name:
        Category name, e.g. ``"fruits"``.
    default_location:
        Where objects of this category are usually found.
    room_string:
        Name of the room holding ``default_location``.
    objects:
        Objects belonging to the category.
    """

    name: str
    default_location: Location
    room_string: str
    objects: tuple[CatalogObject, ...] = ()


@dataclass(frozen=True, slots=True)
class PredefinedQuestion:
    question: str
    answer: str = ""


@dataclass(frozen=True)
class Catalogs:
    """All reference data a conversion enumerates into terminal rules."""

    gestures: tuple[Gesture, ...] = ()
    names: tuple[PersonName, ...] = ()
    rooms: tuple[Room, ...] = ()
    categories: tuple[Category, ...] = ()
    questions: tuple[PredefinedQuestion, ...] = ()

    @property
    def locations(self) -> tuple[Location, ...]:
        """Every location of every room, in declaration order."""
        return tuple(loc for room in self.rooms for loc in room.locations)

    @property
    def objects(self) -> tuple[CatalogObject, ...]:
        """Every object of every category, in declaration order."""
        return tuple(obj for category in self.categories for obj in category.objects)
