#!/usr/bin/env python3
"""Example: Quickstart for grammar-converters

Minimal working example: parse a command-generator grammar, build the
catalogs its wildcards draw from, and convert it to BNF and SRGS.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install grammar-converters
"""
from __future__ import annotations

import tempfile
from pathlib import Path

import grammarconv
from grammarconv.model import (
    CatalogObject,
    Catalogs,
    Category,
    Gender,
    Location,
    PersonName,
    PredefinedQuestion,
    Room,
)

GRAMMAR_SOURCE = """\
; grammar name Quickstart
$Main = $fetch | $meet
$fetch = bring me the {object} from the {placement}
$fetch = find the {category?} in the {room}
$meet = meet {name 1} at the {beacon} and follow {pron}
$orphan = this rule is never reached
"""


def build_catalogs() -> Catalogs:
    table = Location("kitchen table", is_placement=True)
    door = Location("entrance", is_beacon=True)
    return Catalogs(
        names=(PersonName("Alex", Gender.MALE), PersonName("Jamie", Gender.FEMALE)),
        rooms=(Room("kitchen", (table,)), Room("hallway", (door,))),
        categories=(
            Category("drinks", table, "kitchen", (CatalogObject("coke"), CatalogObject("water"))),
        ),
        questions=(PredefinedQuestion("what day is today?", "Friday"),),
    )


def main() -> None:
    print(f"grammar-converters version: {grammarconv.__version__}")

    # Step 1: Parse grammar text into a Grammar
    grammar = grammarconv.parse_grammar(GRAMMAR_SOURCE)
    print(f"Parsed grammar: '{grammar.name}', rules={len(grammar)}")

    catalogs = build_catalogs()

    # Step 2: Convert to BNF; only rules reachable from $Main are written
    output = grammarconv.convert(grammar, catalogs, target="bnf")
    print(output.summary())
    print(f"Terminal rules: {', '.join(output.metadata['terminal_rules'])}")
    print(output.text[:400])

    # Step 3: Convert to SRGS XML
    srgs = grammarconv.convert_to_srgs(grammar, catalogs)
    print(f"\nSRGS document ({len(srgs)} chars):")
    print(srgs[:300])

    # Step 4: Save to disk
    with tempfile.TemporaryDirectory() as tmp:
        destination = Path(tmp) / "quickstart.bnf"
        grammarconv.save(grammar, catalogs, destination, target="bnf")
        print(f"\nWrote {destination.stat().st_size} bytes to {destination.name}")


if __name__ == "__main__":
    main()
