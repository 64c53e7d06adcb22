"""Replacement scanner: one walker shared by every backend.

The scanner walks a replacement template left to right and dispatches
on two characters:

* ``$`` followed by ``[A-Za-z0-9_]+`` is a non-terminal reference;
* ``{`` starts a wildcard token (see ``grammarconv.wildcards``).

Everything else is literal text.  Output goes to a ``ScanSink``; the
BNF and SRGS backends each provide an emitting sink, and
``CollectSink`` records references without emitting anything (used by
the reachability closure).

Consecutive literal characters are delivered as a single
``on_literal`` call, together with any literal text a wildcard
resolved to, so sanitizers always see whole runs.
"""
from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Final, Protocol

from grammarconv.diagnostics import (
    MALFORMED_WILDCARD,
    RULE_ID_COLLISION,
    UNKNOWN_WILDCARD,
    Diagnostic,
    DiagnosticSeverity,
    DiagnosticSink,
)
from grammarconv.model.nodes import ROOT_NON_TERMINAL, ProductionRule
from grammarconv.wildcards.lexer import WildcardError, extract_wildcard
from grammarconv.wildcards.resolver import (
    LiteralTarget,
    ResolveMode,
    RuleRefTarget,
    resolve_target,
)
from grammarconv.wildcards.tokens import KEYWORDS, WildcardToken, keyword_of

_IDENT_CONT: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9_]")


class RefKind(Enum):
    """What a rule reference points at."""

    NON_TERMINAL = auto()
    WILDCARD = auto()


class ScanSink(Protocol):
    """Receives the pieces of a scanned template."""

    def on_literal(self, text: str) -> None: ...

    def on_ruleref(self, rule_id: str, kind: RefKind) -> None: ...


# ---------------------------------------------------------------------------
# Rule naming
# ---------------------------------------------------------------------------


def bnf_rule_name(non_terminal: str) -> str:
    """Return the BNF rule name for ``$Name`` (the name without ``$``).

    The root ``$Main`` is written as ``main`` in BNF output.
    """
    if non_terminal == ROOT_NON_TERMINAL:
        return "main"
    return non_terminal[1:]


def srgs_rule_id(non_terminal: str) -> str:
    """Return the SRGS rule id for ``$Name``: ``$`` dropped, first letter lowered."""
    name = non_terminal[1:]
    return name[:1].lower() + name[1:]


def report_id_collisions(
    non_terminals: Iterable[str],
    naming: Callable[[str], str],
    sink: DiagnosticSink,
    reserved: Iterable[str] = (),
) -> int:
    """Report every non-terminal whose output id is already taken.

    Both naming schemes are lossy: ``$main`` and ``$Main`` are both
    ``main`` in BNF, and ``$Foo`` and ``$foo`` share an SRGS id.  The
    first rule to claim an id keeps it; each later claimant is reported
    as ``GC005`` and is still written, so the output holds a duplicate.

    Returns
    -------
    int
        The number of collisions reported.
    """
    owners: dict[str, str] = {rule_id: rule_id for rule_id in reserved}
    collisions = 0
    for non_terminal in non_terminals:
        rule_id = naming(non_terminal)
        owner = owners.setdefault(rule_id, non_terminal)
        if owner == non_terminal:
            continue
        collisions += 1
        sink.report(
            Diagnostic(
                severity=DiagnosticSeverity.WARNING,
                code=RULE_ID_COLLISION,
                message=f"Rule id {rule_id!r} of {non_terminal!r} is already used by {owner!r}",
                rule=non_terminal,
                suggestion="Rename one of the rules",
            )
        )
    return collisions


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


class ReplacementScanner:
    """Walks replacement templates and feeds a ``ScanSink``.

    Parameters
    ----------
    honor_obfuscation:
        When ``True`` (BNF), wildcards written with ``?`` resolve with
        ``ResolveMode.OBFUSCATED``.  When ``False`` (SRGS), every
        wildcard resolves with ``ResolveMode.PLAIN``.
    """

    __slots__ = ("_honor_obfuscation",)

    def __init__(self, honor_obfuscation: bool = True) -> None:
        self._honor_obfuscation = honor_obfuscation

    @property
    def honor_obfuscation(self) -> bool:
        return self._honor_obfuscation

    def mode_for(self, token: WildcardToken) -> ResolveMode:
        """Return the resolution mode this scanner applies to ``token``."""
        if self._honor_obfuscation and token.obfuscated:
            return ResolveMode.OBFUSCATED
        return ResolveMode.PLAIN

    def scan(self, template: str, sink: ScanSink) -> None:
        """Scan ``template`` and report every piece to ``sink``.

        Raises
        ------
        WildcardError
            If the template holds a malformed wildcard.  Templates that
            went through :func:`valid_replacements` never do.
        """
        buf: list[str] = []
        pos = 0
        length = len(template)
        while pos < length:
            ch = template[pos]
            if ch == "$":
                end = _fetch_non_terminal(template, pos)
                if end > pos + 1:
                    _flush(buf, sink)
                    sink.on_ruleref(template[pos:end], RefKind.NON_TERMINAL)
                    pos = end
                    continue
            elif ch == "{":
                token, end = extract_wildcard(template, pos)
                target = resolve_target(keyword_of(token), self.mode_for(token))
                if isinstance(target, LiteralTarget):
                    buf.append(target.text)
                elif isinstance(target, RuleRefTarget):
                    _flush(buf, sink)
                    sink.on_ruleref(target.rule_id, RefKind.WILDCARD)
                pos = end
                continue
            buf.append(ch)
            pos += 1
        _flush(buf, sink)


def _fetch_non_terminal(template: str, pos: int) -> int:
    """Return the offset just past the identifier following ``$`` at ``pos``."""
    end = pos + 1
    while end < len(template) and _IDENT_CONT.match(template[end]):
        end += 1
    return end


def _flush(buf: list[str], sink: ScanSink) -> None:
    if buf:
        sink.on_literal("".join(buf))
        buf.clear()


# ---------------------------------------------------------------------------
# Collect mode
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class References:
    """Non-terminals and wildcard rule ids referenced by a template."""

    non_terminals: tuple[str, ...] = ()
    wildcards: tuple[str, ...] = ()


class CollectSink:
    """A ``ScanSink`` that records references and ignores literal text.

    Both collections keep first-seen order and hold no duplicates.
    """

    def __init__(self) -> None:
        self._non_terminals: dict[str, None] = {}
        self._wildcards: dict[str, None] = {}

    def on_literal(self, text: str) -> None:
        return None

    def on_ruleref(self, rule_id: str, kind: RefKind) -> None:
        if kind is RefKind.NON_TERMINAL:
            self._non_terminals.setdefault(rule_id)
        else:
            self._wildcards.setdefault(rule_id)

    def references(self) -> References:
        return References(
            non_terminals=tuple(self._non_terminals),
            wildcards=tuple(self._wildcards),
        )


def collect_references(template: str, scanner: ReplacementScanner) -> References:
    """Return what ``template`` references, without emitting anything."""
    sink = CollectSink()
    scanner.scan(template, sink)
    return sink.references()


# ---------------------------------------------------------------------------
# Replacement validity filtering
# ---------------------------------------------------------------------------


def _strip_void_wildcards(
    replacement: str,
    rule: str,
    sink: DiagnosticSink | None,
) -> str:
    """Remove every ``{...}`` span whose keyword is ``void``."""
    pos = replacement.find("{")
    while pos != -1:
        token, end = extract_wildcard(replacement, pos)
        keyword = keyword_of(token)
        if keyword == "void":
            replacement = replacement[:pos] + replacement[end:]
            resume = pos
        else:
            if keyword not in KEYWORDS and sink is not None:
                sink.report(
                    Diagnostic(
                        severity=DiagnosticSeverity.HINT,
                        code=UNKNOWN_WILDCARD,
                        message=f"Wildcard {token} has no known keyword and is dropped",
                        rule=rule,
                    )
                )
            resume = end
        pos = replacement.find("{", resume)
    return replacement.strip()


def valid_replacements(
    rule: ProductionRule,
    sink: DiagnosticSink | None = None,
) -> list[str]:
    """Return the replacements of ``rule`` that contribute an alternative.

    Each template is trimmed and every ``void`` wildcard is cut out;
    templates left empty are dropped.  Templates holding a malformed
    wildcard are reported to ``sink`` (``GC003``) and dropped as well.
    """
    valid: list[str] = []
    for raw in rule.replacements:
        try:
            replacement = _strip_void_wildcards((raw or "").strip(), rule.non_terminal, sink)
        except WildcardError as exc:
            if sink is not None:
                sink.report(
                    Diagnostic(
                        severity=DiagnosticSeverity.WARNING,
                        code=MALFORMED_WILDCARD,
                        message=f"Skipping replacement {raw!r}: {exc.wildcard_message}",
                        rule=rule.non_terminal,
                        suggestion="Check that every '{' has a matching '}' and a name",
                    )
                )
            continue
        if replacement:
            valid.append(replacement)
    return valid
