"""BNF target: emits Julius-style ``#BNF+EMV1.1`` grammars.

Only what is reachable from ``$Main`` is written.  The reachability
closure decides which production rules appear and which terminal
enumerations (``_names``, ``_rooms``, ...) are needed; unreferenced
catalogs produce no output at all.

Document layout::

    #BNF+EMV1.1;
    !grammar <name>;
    !start <commands>;
    <commands>: <main>;
    <main>: ...alternatives... | <_questions>;
    [answer rules]
    [production rules, expansion order]
    [terminal enumerations]
    <_questions>: ...;
"""
from __future__ import annotations

import io
import logging
import re
from collections.abc import Iterable
from typing import TYPE_CHECKING, Final

from grammarconv.closure.closure import ClosureResult, ReachabilityClosure
from grammarconv.converters.base import ConverterOptions, ConverterTarget
from grammarconv.converters.enumerations import UMBRELLA_RULES, TerminalEnumerations
from grammarconv.diagnostics import DiagnosticSink
from grammarconv.scanner.scanner import (
    RefKind,
    ReplacementScanner,
    bnf_rule_name,
    report_id_collisions,
)

if TYPE_CHECKING:
    from grammarconv.model.nodes import Catalogs, Grammar

logger = logging.getLogger(__name__)

BNF_HEADER: Final[str] = "#BNF+EMV1.1;"

_RESERVED_PUNCTUATION: Final[re.Pattern[str]] = re.compile(r'"[?,]"|([?,])')

# Seeded into the closure when the answer rules are written, since those
# rules reference both classes.
_ANSWER_WILDCARDS: Final[tuple[str, ...]] = ("_names", "_objects")

_ANSWER_RULES: Final[tuple[str, ...]] = (
    "<__answers> : <__name_answer> | <__object_answer> | wait here | wait | follow me;",
    "<__name_answer>: my name is <_names> | I am <_names>;",
    "<__object_answer>: The <_objects> would be great;",
)

_PRONOUN_RULES: Final[tuple[str, ...]] = ("_pronobjs", "_pronsubs")


def _wrap_punctuation(match: re.Match[str]) -> str:
    mark = match.group(1)
    if mark is None:
        return match.group(0)
    return f' "{mark}" '


def sanitize_bnf(text: str) -> str:
    """Make ``text`` safe for a BNF alternative.

    Apostrophes are removed and every bare ``?`` or ``,`` is wrapped as
    `` "?" `` / `` "," ``.  Marks already written as ``"?"`` or ``","``
    are left alone, so applying it twice gives the same result as
    applying it once.
    """
    return _RESERVED_PUNCTUATION.sub(_wrap_punctuation, text.replace("'", ""))


class _BnfWriter:
    """Text buffer that sanitizes everything except rule references.

    Doubles as the ``ScanSink`` for replacement templates.
    """

    def __init__(self) -> None:
        self._buffer = io.StringIO()

    def write(self, text: str) -> None:
        self._buffer.write(sanitize_bnf(text))

    def write_raw(self, text: str) -> None:
        self._buffer.write(text)

    def write_ref(self, rule_name: str) -> None:
        self._buffer.write(f"<{rule_name}>")

    def on_literal(self, text: str) -> None:
        self.write(text)

    def on_ruleref(self, rule_id: str, kind: RefKind) -> None:
        if kind is RefKind.NON_TERMINAL:
            self.write_ref(bnf_rule_name(rule_id))
        else:
            self.write_ref(rule_id)

    def getvalue(self) -> str:
        return self._buffer.getvalue()


class BnfTarget(ConverterTarget):
    """Converts a grammar to BNF, writing only reachable rules."""

    def __init__(self, options: ConverterOptions | None = None) -> None:
        super().__init__(options)
        self._scanner = ReplacementScanner(honor_obfuscation=True)

    @property
    def name(self) -> str:
        return "bnf"

    @property
    def extension(self) -> str:
        return "bnf"

    def render(
        self,
        grammar: "Grammar",
        catalogs: "Catalogs",
        sink: DiagnosticSink,
    ) -> tuple[str, dict[str, object]]:
        answers = self.options.include_manual_answers
        closure = ReachabilityClosure(
            grammar,
            scanner=self._scanner,
            sink=sink,
            seed_wildcards=_ANSWER_WILDCARDS if answers else (),
        ).run()
        enums = TerminalEnumerations.from_catalogs(catalogs)
        report_id_collisions(closure.non_terminals, bnf_rule_name, sink, reserved=("commands",))

        out = _BnfWriter()
        self._write_header(out, grammar.name)
        self._write_main(out, closure, answers)
        if answers:
            self._comment(out, "Manually Added Rules")
            for line in _ANSWER_RULES:
                out.write(line + "\n\n")
        self._write_productions(out, closure)
        written = self._write_terminals(out, closure, enums)

        logger.debug("Rendered BNF for %r: %d rule(s)", grammar.name, len(closure.rules))
        metadata: dict[str, object] = {
            "rule_count": len(closure.rules),
            "non_terminals": list(closure.non_terminals),
            "wildcards": list(closure.wildcards),
            "terminal_rules": written,
            "manual_answers": answers,
        }
        return out.getvalue(), metadata

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _comment(self, out: _BnfWriter, title: str) -> None:
        if self.options.include_comments:
            out.write(f"/*\n{title}\n*/\n")

    def _write_header(self, out: _BnfWriter, grammar_name: str) -> None:
        out.write_raw(f"{BNF_HEADER}\n\n")
        out.write_raw(f"!grammar {grammar_name.replace(' ', '_')};\n\n")
        out.write_raw("!start <commands>;\n\n")

    def _write_main(self, out: _BnfWriter, closure: ClosureResult, answers: bool) -> None:
        self._comment(out, "Main Rule")
        if answers:
            out.write("<commands>: <main> | <__answers>;\n\n")
        else:
            out.write("<commands>: <main>;\n\n")
        out.write("<main>:\n")
        for replacement in closure.root.replacements:
            self._scanner.scan(replacement, out)
            out.write("|\n")
        out.write_ref("_questions")
        out.write(";\n\n")

    def _write_productions(self, out: _BnfWriter, closure: ClosureResult) -> None:
        self._comment(out, "Production Rules")
        for expanded in closure.rules[1:]:
            out.write_ref(bnf_rule_name(expanded.non_terminal))
            out.write(":\n")
            for index, replacement in enumerate(expanded.replacements):
                if index:
                    out.write("|\n")
                self._scanner.scan(replacement, out)
            out.write(";\n\n")

    def _write_terminals(
        self,
        out: _BnfWriter,
        closure: ClosureResult,
        enums: TerminalEnumerations,
    ) -> list[str]:
        """Write every terminal rule the closure reached; return their ids."""
        self._comment(out, "Wildcard Rules")
        written: list[str] = []

        def emit(rule_id: str, alternatives: Iterable[str], refs: bool = False) -> None:
            out.write_ref(rule_id)
            out.write(":\n")
            for index, alternative in enumerate(alternatives):
                if index:
                    out.write("|\n")
                if refs:
                    out.write_ref(alternative)
                else:
                    out.write(alternative)
            out.write(";\n\n")
            written.append(rule_id)

        if closure.references_wildcard("_gestures"):
            emit("_gestures", enums.gestures)

        for umbrella, parts in UMBRELLA_RULES.items():
            if closure.references_wildcard(umbrella):
                emit(umbrella, parts, refs=True)
                for part in parts:
                    emit(part, enums.get(part))
            else:
                for part in parts:
                    if closure.references_wildcard(part):
                        emit(part, enums.get(part))
            if umbrella == "_objects" and closure.references_wildcard("_objects", "_categories"):
                emit("_categories", enums.categories)

        for rule_id in _PRONOUN_RULES:
            if closure.references_wildcard(rule_id):
                emit(rule_id, enums.get(rule_id))

        self._comment(out, "Questions Rules")
        emit("_questions", enums.questions)
        return written
