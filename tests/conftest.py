"""Shared test fixtures for grammar-converters.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import pytest

from grammarconv.model import (
    CatalogObject,
    Catalogs,
    Category,
    Gender,
    Gesture,
    Grammar,
    Location,
    ObjectType,
    PersonName,
    PredefinedQuestion,
    ProductionRule,
    Room,
)

SAMPLE_GRAMMAR_TEXT = """\
; grammar name Category I
; grammar tier Easy
; import common.txt

# Entry point
$Main = $deliver | $greet
$deliver = bring me the {object} from the {placement}
$deliver = take the {category} to the {room}
$greet = say hello to {name} at the {beacon}
$unused = dance with {gesture}
"""


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "grammarconv"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def sample_grammar_text() -> str:
    return SAMPLE_GRAMMAR_TEXT


@pytest.fixture()
def sample_grammar() -> Grammar:
    """A small grammar with one unreachable rule (``$unused``)."""
    return Grammar.from_rules(
        "Category I",
        [
            ProductionRule("$Main", ("$deliver", "$greet")),
            ProductionRule(
                "$deliver",
                (
                    "bring me the {object} from the {placement}",
                    "take the {category} to the {room}",
                ),
            ),
            ProductionRule("$greet", ("say hello to {name} at the {beacon}",)),
            ProductionRule("$unused", ("dance with {gesture}",)),
        ],
    )


@pytest.fixture()
def sample_catalogs() -> Catalogs:
    """Catalogs with one duplicated room and a placement shared by a category."""
    table = Location("dining table", is_placement=True)
    door = Location("entrance", is_beacon=True)
    shelf = Location("bookshelf", is_beacon=True, is_placement=True)
    return Catalogs(
        gestures=(Gesture("waving"), Gesture("raising left arm")),
        names=(
            PersonName("Alex", Gender.MALE),
            PersonName("Jamie", Gender.FEMALE),
            PersonName("Alex", Gender.MALE),
        ),
        rooms=(
            Room("kitchen", (table,)),
            Room("corridor", (door,)),
            Room("living room", (shelf,)),
        ),
        categories=(
            Category(
                "fruits",
                table,
                "kitchen",
                (CatalogObject("apple"), CatalogObject("orange", ObjectType.ALIKE)),
            ),
            Category(
                "snacks",
                shelf,
                "living room",
                (CatalogObject("chips"), CatalogObject("cookies", ObjectType.SPECIAL)),
            ),
        ),
        questions=(
            PredefinedQuestion("what's the capital of France?", "Paris"),
            PredefinedQuestion("how many legs does a spider have?", "eight"),
        ),
    )


@pytest.fixture()
def empty_catalogs() -> Catalogs:
    return Catalogs()
