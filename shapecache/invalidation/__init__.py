"""
Invalidation — plan which cache entries a mutation makes stale.

    from shapecache import invalidation as V

    planner = V.Planner(provider)
    ops = planner.plan("Order", order, V.REFERENCE)

Two policies:
    EXACT      — precise sub-keys; 2 + 2k operations for k relations
    REFERENCE  — substring sweeps; 3 + 3k operations for k relations
"""

from __future__ import annotations

from shapecache._types import InvalidationPolicy, EXACT, REFERENCE
from shapecache.invalidation._types import (
    Exact,
    Pattern,
    InvalidationOperation,
    Plan,
    escape_glob,
)
from shapecache.invalidation._planner import Planner, plan

__all__ = (
    "InvalidationPolicy",
    "EXACT",
    "REFERENCE",
    "Exact",
    "Pattern",
    "InvalidationOperation",
    "Plan",
    "escape_glob",
    "Planner",
    "plan",
)
