"""SRGS target: emits W3C Speech Recognition Grammar XML.

Unlike BNF, SRGS output is exhaustive: every production rule of the
grammar and every terminal enumeration is written whether or not
``main`` reaches it, and obfuscation markers are ignored (all wildcards
resolve with ``ResolveMode.PLAIN``).

The document is built with ``xml.etree.ElementTree`` so text is escaped
by the serializer; no further sanitization is applied.
"""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from typing import TYPE_CHECKING, Final

from grammarconv.converters.base import ConverterOptions, ConverterTarget
from grammarconv.converters.enumerations import UMBRELLA_RULES, TerminalEnumerations
from grammarconv.diagnostics import DiagnosticSink
from grammarconv.scanner.scanner import (
    RefKind,
    ReplacementScanner,
    report_id_collisions,
    srgs_rule_id,
    valid_replacements,
)

if TYPE_CHECKING:
    from grammarconv.model.nodes import Catalogs, Grammar

logger = logging.getLogger(__name__)

SRGS_NAMESPACE: Final[str] = "http://www.w3.org/2001/06/grammar"
XML_DECLARATION: Final[str] = '<?xml version="1.0" encoding="utf-8"?>'

# Terminal rules in document order.  Umbrella rules come straight from
# UMBRELLA_RULES; the others enumerate catalog words.
_TERMINAL_ORDER: Final[tuple[str, ...]] = (
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


def _append_text(element: ET.Element, text: str) -> None:
    """Append ``text`` after the last child of ``element`` (or as its text)."""
    if len(element):
        last = element[-1]
        last.tail = (last.tail or "") + text
    else:
        element.text = (element.text or "") + text


class _ItemSink:
    """``ScanSink`` that fills one ``<item>`` with text and rulerefs."""

    def __init__(self, item: ET.Element) -> None:
        self._item = item

    def on_literal(self, text: str) -> None:
        _append_text(self._item, text)

    def on_ruleref(self, rule_id: str, kind: RefKind) -> None:
        uri = srgs_rule_id(rule_id) if kind is RefKind.NON_TERMINAL else rule_id
        ET.SubElement(self._item, "ruleref", uri=f"#{uri}")


def _indent(element: ET.Element, space: str, level: int = 0) -> None:
    # Like ET.indent, but <item> content is mixed text and is left alone.
    if element.tag == "item" or not len(element):
        return
    child_pad = "\n" + space * (level + 1)
    element.text = child_pad
    for child in element:
        _indent(child, space, level + 1)
        child.tail = child_pad
    element[-1].tail = "\n" + space * level


class SrgsTarget(ConverterTarget):
    """Converts a grammar to an SRGS XML document."""

    def __init__(self, options: ConverterOptions | None = None) -> None:
        super().__init__(options)
        self._scanner = ReplacementScanner(honor_obfuscation=False)

    @property
    def name(self) -> str:
        return "srgs"

    @property
    def extension(self) -> str:
        return "xml"

    def render(
        self,
        grammar: "Grammar",
        catalogs: "Catalogs",
        sink: DiagnosticSink,
    ) -> tuple[str, dict[str, object]]:
        root_rule = grammar.root
        enums = TerminalEnumerations.from_catalogs(catalogs)
        report_id_collisions(
            (rule.non_terminal for rule in grammar),
            srgs_rule_id,
            sink,
            reserved=_TERMINAL_ORDER,
        )

        document = ET.Element(
            "grammar",
            {
                "xmlns": SRGS_NAMESPACE,
                "version": "1.0",
                "xml:lang": self.options.language,
                "root": "main",
            },
        )

        main = self._rule(document, "main", scope="public")
        one_of = ET.SubElement(main, "one-of")
        for replacement in valid_replacements(root_rule, sink):
            self._scan_item(one_of, replacement)
        question_item = ET.SubElement(one_of, "item")
        ET.SubElement(question_item, "ruleref", uri="#_questions")

        production_count = 0
        for rule in grammar:
            if rule.non_terminal == root_rule.non_terminal:
                continue
            self._write_production(document, srgs_rule_id(rule.non_terminal), valid_replacements(rule, sink))
            production_count += 1

        for rule_id in _TERMINAL_ORDER:
            if rule_id in UMBRELLA_RULES:
                self._write_umbrella(document, rule_id, UMBRELLA_RULES[rule_id])
            else:
                self._write_enumeration(document, rule_id, enums.get(rule_id))

        _indent(document, self.options.indent)
        text = XML_DECLARATION + "\n" + ET.tostring(document, encoding="unicode") + "\n"

        logger.debug(
            "Rendered SRGS for %r: %d production rule(s), %d terminal rule(s)",
            grammar.name,
            production_count,
            len(_TERMINAL_ORDER),
        )
        metadata: dict[str, object] = {
            "rule_count": production_count + 1,
            "terminal_rules": list(_TERMINAL_ORDER),
            "language": self.options.language,
        }
        return text, metadata

    # ------------------------------------------------------------------
    # Element builders
    # ------------------------------------------------------------------

    def _rule(self, parent: ET.Element, rule_id: str, scope: str = "private") -> ET.Element:
        return ET.SubElement(parent, "rule", id=rule_id, scope=scope)

    def _scan_item(self, parent: ET.Element, replacement: str) -> ET.Element:
        item = ET.SubElement(parent, "item")
        self._scanner.scan(replacement, _ItemSink(item))
        return item

    def _write_production(self, document: ET.Element, rule_id: str, replacements: list[str]) -> None:
        rule = self._rule(document, rule_id)
        if not replacements:
            ET.SubElement(rule, "item")
        elif len(replacements) == 1:
            self._scan_item(rule, replacements[0])
        else:
            one_of = ET.SubElement(rule, "one-of")
            for replacement in replacements:
                self._scan_item(one_of, replacement)

    def _write_umbrella(self, document: ET.Element, rule_id: str, parts: Iterable[str]) -> None:
        one_of = ET.SubElement(self._rule(document, rule_id), "one-of")
        for part in parts:
            item = ET.SubElement(one_of, "item")
            ET.SubElement(item, "ruleref", uri=f"#{part}")

    def _write_enumeration(self, document: ET.Element, rule_id: str, words: Iterable[str]) -> None:
        one_of = ET.SubElement(self._rule(document, rule_id), "one-of")
        for word in words:
            ET.SubElement(one_of, "item").text = word
        if not len(one_of):
            ET.SubElement(one_of, "item")
