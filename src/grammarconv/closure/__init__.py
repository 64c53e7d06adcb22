"""Reachability closure used by the BNF backend."""
from __future__ import annotations

from grammarconv.closure.closure import (
    ClosureResult,
    ExpandedRule,
    ReachabilityClosure,
    compute_closure,
)

__all__ = ["ReachabilityClosure", "ClosureResult", "ExpandedRule", "compute_closure"]
