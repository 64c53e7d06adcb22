"""End-to-end tests for the SRGS target.

Output is parsed back with ``xml.etree.ElementTree`` so assertions work
on the document structure rather than on whitespace.
"""
from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from grammarconv.converters import ConverterOptions, SrgsTarget, convert, convert_to_srgs
from grammarconv.converters.srgs import SRGS_NAMESPACE, XML_DECLARATION
from grammarconv.diagnostics import RULE_ID_COLLISION
from grammarconv.errors import MissingRootError
from grammarconv.model import Catalogs, Grammar, ProductionRule

NS = {"g": SRGS_NAMESPACE}
XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"

TERMINAL_RULES = (
    "_gestures",
    "_locations",
    "_beacons",
    "_placements",
    "_rooms",
    "_names",
    "_males",
    "_females",
    "_objects",
    "_categories",
    "_aobjects",
    "_kobjects",
    "_sobjects",
    "_pronobjs",
    "_pronsubs",
    "_questions",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def grammar_of(**rules: tuple[str, ...]) -> Grammar:
    return Grammar.from_rules(
        "test", [ProductionRule(f"${nt}", alts) for nt, alts in rules.items()]
    )


def parse(text: str) -> ET.Element:
    return ET.fromstring(text.encode("utf-8"))


def srgs_tree(grammar: Grammar, catalogs: Catalogs | None = None) -> ET.Element:
    return parse(convert_to_srgs(grammar, catalogs or Catalogs()))


def rule(root: ET.Element, rule_id: str) -> ET.Element:
    found = root.find(f"g:rule[@id='{rule_id}']", NS)
    assert found is not None, f"rule {rule_id!r} missing"
    return found


def item_texts(parent: ET.Element) -> list[str]:
    return ["".join(item.itertext()) for item in parent.findall("g:one-of/g:item", NS)]


def refs(element: ET.Element) -> list[str]:
    return [r.get("uri", "") for r in element.iter(f"{{{SRGS_NAMESPACE}}}ruleref")]


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


class TestDocument:
    def test_declaration(self, sample_grammar: Grammar, sample_catalogs: Catalogs) -> None:
        text = convert_to_srgs(sample_grammar, sample_catalogs)
        assert text.startswith(XML_DECLARATION + "\n<grammar ")

    def test_root_attributes(self, sample_grammar: Grammar) -> None:
        root = srgs_tree(sample_grammar)
        assert root.tag == f"{{{SRGS_NAMESPACE}}}grammar"
        assert root.get("version") == "1.0"
        assert root.get("root") == "main"
        assert root.get(XML_LANG) == "en-US"

    def test_language_option(self, sample_grammar: Grammar) -> None:
        options = ConverterOptions(language="es-MX")
        root = parse(convert_to_srgs(sample_grammar, Catalogs(), options=options))
        assert root.get(XML_LANG) == "es-MX"

    def test_indent_option(self, sample_grammar: Grammar) -> None:
        text = convert_to_srgs(sample_grammar, Catalogs(), options=ConverterOptions(indent="  "))
        assert '\n  <rule id="main" scope="public">' in text

    def test_items_are_not_indented(self) -> None:
        text = convert_to_srgs(grammar_of(Main=("go to {room}",)), Catalogs())
        assert '<item>go to <ruleref uri="#_rooms" /></item>' in text

    def test_text_is_escaped(self) -> None:
        root = srgs_tree(grammar_of(Main=("bring salt & pepper <now>",)))
        assert item_texts(rule(root, "main"))[0] == "bring salt & pepper <now>"


# ---------------------------------------------------------------------------
# Main rule
# ---------------------------------------------------------------------------


class TestMainRule:
    def test_public_with_question_item(self, sample_grammar: Grammar) -> None:
        main = rule(srgs_tree(sample_grammar), "main")
        assert main.get("scope") == "public"
        items = main.findall("g:one-of/g:item", NS)
        assert len(items) == 3
        assert refs(items[-1]) == ["#_questions"]

    def test_non_terminal_refs_use_srgs_ids(self) -> None:
        root = srgs_tree(grammar_of(Main=("$Deliver",), Deliver=("x",)))
        assert refs(rule(root, "main")) == ["#deliver", "#_questions"]
        rule(root, "deliver")

    def test_mixed_content(self) -> None:
        root = srgs_tree(grammar_of(Main=("bring the {object} to {name} now",)))
        item = rule(root, "main").find("g:one-of/g:item", NS)
        assert item is not None
        assert item.text == "bring the "
        first, second = list(item)
        assert first.get("uri") == "#_objects"
        assert first.tail == " to "
        assert second.get("uri") == "#_names"
        assert second.tail == " now"


# ---------------------------------------------------------------------------
# Production rules
# ---------------------------------------------------------------------------


class TestProductionRules:
    def test_all_rules_emitted_including_unreachable(self, sample_grammar: Grammar) -> None:
        root = srgs_tree(sample_grammar)
        for rule_id in ("deliver", "greet", "unused"):
            assert rule(root, rule_id).get("scope") == "private"

    def test_single_replacement_is_bare_item(self, sample_grammar: Grammar) -> None:
        greet = rule(srgs_tree(sample_grammar), "greet")
        assert greet.find("g:one-of", NS) is None
        assert refs(greet) == ["#_names", "#_beacons"]

    def test_several_replacements_use_one_of(self, sample_grammar: Grammar) -> None:
        deliver = rule(srgs_tree(sample_grammar), "deliver")
        assert item_texts(deliver) == ["bring me the  from the ", "take the  to the "]

    def test_no_valid_replacements_is_empty_item(self) -> None:
        root = srgs_tree(grammar_of(Main=("go",), empty=("{void}", "  ")))
        empty = rule(root, "empty")
        [item] = list(empty)
        assert item.tag == f"{{{SRGS_NAMESPACE}}}item"
        assert len(item) == 0 and not item.text

    def test_void_elided(self) -> None:
        root = srgs_tree(grammar_of(Main=("{void}", "go {void} now")))
        assert item_texts(rule(root, "main")) == ["go  now", ""]


# ---------------------------------------------------------------------------
# Terminal rules
# ---------------------------------------------------------------------------


class TestTerminalRules:
    def test_all_terminal_rules_always_present(self) -> None:
        root = srgs_tree(grammar_of(Main=("stop",)))
        ids = [r.get("id") for r in root.findall("g:rule", NS)]
        assert ids == ["main", *TERMINAL_RULES]

    @pytest.mark.parametrize("umbrella, parts", [
        ("_locations", ["#_beacons", "#_placements", "#_rooms"]),
        ("_names", ["#_males", "#_females"]),
        ("_objects", ["#_aobjects", "#_kobjects", "#_sobjects"]),
    ])
    def test_umbrella_rules(self, umbrella: str, parts: list[str]) -> None:
        root = srgs_tree(grammar_of(Main=("stop",)))
        assert refs(rule(root, umbrella)) == parts

    def test_empty_catalog_is_single_empty_item(self) -> None:
        gestures = rule(srgs_tree(grammar_of(Main=("stop",))), "_gestures")
        items = gestures.findall("g:one-of/g:item", NS)
        assert len(items) == 1
        assert not items[0].text

    def test_enumerations(self, sample_grammar: Grammar, sample_catalogs: Catalogs) -> None:
        root = srgs_tree(sample_grammar, sample_catalogs)
        assert item_texts(rule(root, "_males")) == ["Alex"]
        assert item_texts(rule(root, "_rooms")) == ["kitchen", "corridor", "living room"]
        assert item_texts(rule(root, "_beacons")) == ["entrance", "bookshelf"]
        assert item_texts(rule(root, "_placements")) == ["dining table", "bookshelf"]
        assert item_texts(rule(root, "_categories")) == ["fruits", "snacks"]
        assert item_texts(rule(root, "_aobjects")) == ["orange"]
        assert item_texts(rule(root, "_kobjects")) == ["apple", "chips"]
        assert item_texts(rule(root, "_sobjects")) == ["cookies"]

    def test_questions_not_sanitized(self, sample_catalogs: Catalogs) -> None:
        root = srgs_tree(grammar_of(Main=("stop",)), sample_catalogs)
        assert item_texts(rule(root, "_questions"))[0] == "what's the capital of France?"


# ---------------------------------------------------------------------------
# Obfuscation, errors, determinism
# ---------------------------------------------------------------------------


class TestBehaviour:
    def test_obfuscation_ignored(self) -> None:
        root = srgs_tree(grammar_of(Main=("go to the {location beacon?}", "bring {category?}")))
        assert refs(rule(root, "main")) == ["#_beacons", "#_categories", "#_questions"]

    def test_case_collision_reported(self) -> None:
        output = convert(grammar_of(Main=("$Foo",), Foo=("x",), foo=("y",)), Catalogs(), target="srgs")
        assert [d.rule for d in output.diagnostics if d.code == RULE_ID_COLLISION] == ["$foo"]

    def test_terminal_id_collision_reported(self) -> None:
        output = convert(grammar_of(Main=("x",), _names=("y",)), Catalogs(), target="srgs")
        assert [d.rule for d in output.diagnostics if d.code == RULE_ID_COLLISION] == ["$_names"]

    def test_missing_root_raises(self) -> None:
        with pytest.raises(MissingRootError):
            convert_to_srgs(grammar_of(deliver=("x",)), Catalogs())

    def test_deterministic(self, sample_grammar: Grammar, sample_catalogs: Catalogs) -> None:
        target = SrgsTarget()
        first = target.convert(sample_grammar, sample_catalogs).text
        assert target.convert(sample_grammar, sample_catalogs).text == first

    def test_metadata(self, sample_grammar: Grammar) -> None:
        output = convert(sample_grammar, Catalogs(), target="srgs")
        assert output.target == "srgs"
        assert output.metadata["rule_count"] == 4
        assert output.metadata["language"] == "en-US"
