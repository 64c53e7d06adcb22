"""Reachability closure over a grammar's production rules.

Starting at ``$Main``, the closure discovers every non-terminal reachable
through ``$`` references and every wildcard class (``_names``,
``_categories``, ...) referenced along the way.  The BNF backend emits
exactly these rules and enumerations and nothing else.

Algorithm
---------
A FIFO worklist holds rules that are *queued*.  Each step pops one rule,
marks it *expanded* and collects the references of its valid
replacements.  Wildcard ids join the discovered set; a referenced
non-terminal that is neither expanded nor queued is queued if the
grammar defines it, and reported as a missing reference otherwise.  The
closure is *done* when the queue is empty.

Both the expanded set and the discovered set only ever grow during a
run, and each run builds its own state, so one ``ReachabilityClosure``
can be run repeatedly.
"""
from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass

from grammarconv.diagnostics import (
    INCOMPLETE_RULE,
    MISSING_NON_TERMINAL,
    Diagnostic,
    DiagnosticSeverity,
    DiagnosticSink,
)
from grammarconv.model.nodes import Grammar, ProductionRule
from grammarconv.scanner.scanner import (
    ReplacementScanner,
    collect_references,
    valid_replacements,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpandedRule:
    """A rule reached by the closure together with its valid replacements."""

    rule: ProductionRule
    replacements: tuple[str, ...]

    @property
    def non_terminal(self) -> str:
        return self.rule.non_terminal


@dataclass(frozen=True)
class ClosureResult:
    """Outcome of one closure run.

    Parameters
    ----------
    rules:
        Expanded rules in expansion order; the root comes first.
    wildcards:
        Discovered wildcard rule ids in discovery order.
    """

    rules: tuple[ExpandedRule, ...]
    wildcards: tuple[str, ...]

    @property
    def root(self) -> ExpandedRule:
        return self.rules[0]

    @property
    def non_terminals(self) -> tuple[str, ...]:
        return tuple(r.non_terminal for r in self.rules)

    def references_wildcard(self, *rule_ids: str) -> bool:
        """Return True if any of ``rule_ids`` was discovered."""
        return any(rule_id in self.wildcards for rule_id in rule_ids)


class ReachabilityClosure:
    """Worklist closure from the root rule of ``grammar``.

    Parameters
    ----------
    grammar:
        The grammar to explore.
    scanner:
        Scanner used in collect mode; it decides how obfuscated
        wildcards resolve.  Defaults to an obfuscation-aware scanner.
    sink:
        Receives missing-reference diagnostics.  ``None`` discards them.
    seed_wildcards:
        Wildcard ids registered as discovered before the run starts.
    """

    def __init__(
        self,
        grammar: Grammar,
        scanner: ReplacementScanner | None = None,
        sink: DiagnosticSink | None = None,
        seed_wildcards: Iterable[str] = (),
    ) -> None:
        self._grammar = grammar
        self._scanner = scanner if scanner is not None else ReplacementScanner()
        self._sink = sink
        self._seed_wildcards = tuple(seed_wildcards)

    def run(self) -> ClosureResult:
        """Run the closure to completion.

        Raises
        ------
        MissingRootError
            If the grammar has no ``$Main`` rule.
        """
        root = self._grammar.root
        queue: deque[ProductionRule] = deque([root])
        queued: set[str] = {root.non_terminal}
        expanded: dict[str, ExpandedRule] = {}
        wildcards: dict[str, None] = dict.fromkeys(self._seed_wildcards)

        while queue:
            rule = queue.popleft()
            queued.discard(rule.non_terminal)
            replacements = tuple(valid_replacements(rule, self._sink))
            expanded[rule.non_terminal] = ExpandedRule(rule, replacements)
            logger.debug("Expanding %s (%d replacement(s))", rule.non_terminal, len(replacements))

            for replacement in replacements:
                refs = collect_references(replacement, self._scanner)
                for wildcard in refs.wildcards:
                    wildcards.setdefault(wildcard)
                for non_terminal in refs.non_terminals:
                    if non_terminal in expanded or non_terminal in queued:
                        continue
                    target = self._grammar.get(non_terminal)
                    if target is None:
                        self._report_missing(rule, replacement, non_terminal)
                        continue
                    queue.append(target)
                    queued.add(non_terminal)

        logger.debug(
            "Closure of %r: %d rule(s), %d wildcard class(es)",
            self._grammar.name,
            len(expanded),
            len(wildcards),
        )
        return ClosureResult(rules=tuple(expanded.values()), wildcards=tuple(wildcards))

    def _report_missing(self, rule: ProductionRule, replacement: str, non_terminal: str) -> None:
        if self._sink is None:
            return
        self._sink.report(
            Diagnostic(
                severity=DiagnosticSeverity.WARNING,
                code=MISSING_NON_TERMINAL,
                message=(
                    f"Non terminal replacement {non_terminal!r} in {replacement!r} "
                    "not found in grammar rules"
                ),
                rule=rule.non_terminal,
                suggestion="The grammar may be missing some rules; compare it with the command generator",
            )
        )
        self._sink.report(
            Diagnostic(
                severity=DiagnosticSeverity.INFORMATION,
                code=INCOMPLETE_RULE,
                message=f"Incomplete rule: {rule}",
                rule=rule.non_terminal,
            )
        )


def compute_closure(
    grammar: Grammar,
    sink: DiagnosticSink | None = None,
    seed_wildcards: Iterable[str] = (),
) -> ClosureResult:
    """Convenience function: run the BNF closure of ``grammar``."""
    return ReachabilityClosure(grammar, sink=sink, seed_wildcards=seed_wildcards).run()
