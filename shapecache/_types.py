"""
Core types for shapecache.

Re-exports from kungfu + shared constants and parameter helpers.
"""

from __future__ import annotations

import asyncio
import contextvars
from collections.abc import Iterable
from enum import Enum, auto

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Aggregate Key
# ═══════════════════════════════════════════════════════════════════════════════

ALL = "all"
"""Reserved sub-key: the full collection of a bucket."""

# ═══════════════════════════════════════════════════════════════════════════════
# Invalidation Policy
# ═══════════════════════════════════════════════════════════════════════════════


class InvalidationPolicy(Enum):
    """
    How writes invalidate and how single-entity reads look up.

    EXACT: remove precisely known sub-keys. O(1) store operations.
           Entities are cached under their read key.

    REFERENCE: remove every sub-key containing a mutated identifier or the
               owner's type name. O(bucket size) per pattern.
               Entities are cached under composite keys, found by scan.
    """

    EXACT = auto()
    REFERENCE = auto()


EXACT = InvalidationPolicy.EXACT
REFERENCE = InvalidationPolicy.REFERENCE

# ═══════════════════════════════════════════════════════════════════════════════
# Call Parameters
# ═══════════════════════════════════════════════════════════════════════════════

DEFAULT_CONTEXT_TYPES: tuple[type, ...] = (asyncio.Event, contextvars.Context)
"""Cancellation / context objects never taking part in key derivation."""


def stringify(value: object) -> str:
    """Key fragment text of a value; `None` renders empty."""
    return "" if value is None else str(value)


def first_parameter(
    parameters: Iterable[object],
    context_types: tuple[type, ...] = DEFAULT_CONTEXT_TYPES,
) -> object | None:
    """First call parameter that is not a context token, or None."""
    for p in parameters:
        if not isinstance(p, context_types):
            return p
    return None


__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Constants
    "ALL",
    "DEFAULT_CONTEXT_TYPES",
    # Policy
    "InvalidationPolicy",
    "EXACT",
    "REFERENCE",
    # Helpers
    "stringify",
    "first_parameter",
)
