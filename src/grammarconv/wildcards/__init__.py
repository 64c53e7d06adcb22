"""Wildcard lexing, keyword classification and target resolution."""
from __future__ import annotations

from grammarconv.wildcards.lexer import WildcardError, extract_wildcard
from grammarconv.wildcards.resolver import (
    LiteralTarget,
    ResolveMode,
    RuleRefTarget,
    Target,
    resolve_target,
    rule_id_for,
)
from grammarconv.wildcards.tokens import KEYWORDS, WildcardToken, keyword_of

__all__ = [
    "WildcardToken",
    "WildcardError",
    "KEYWORDS",
    "extract_wildcard",
    "keyword_of",
    "ResolveMode",
    "LiteralTarget",
    "RuleRefTarget",
    "Target",
    "resolve_target",
    "rule_id_for",
]
