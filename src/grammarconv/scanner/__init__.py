"""Replacement scanning, reference collection and validity filtering."""
from __future__ import annotations

from grammarconv.scanner.scanner import (
    CollectSink,
    RefKind,
    References,
    ReplacementScanner,
    ScanSink,
    bnf_rule_name,
    collect_references,
    report_id_collisions,
    srgs_rule_id,
    valid_replacements,
)

__all__ = [
    "ReplacementScanner",
    "ScanSink",
    "RefKind",
    "CollectSink",
    "References",
    "collect_references",
    "valid_replacements",
    "bnf_rule_name",
    "srgs_rule_id",
    "report_id_collisions",
]
