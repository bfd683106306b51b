"""
Cache operations — standalone utilities over a store.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from kungfu import LazyCoroResult
from combinators import lift as L

from shapecache.cache._types import CacheError, Store
from shapecache.invalidation import Exact, InvalidationOperation, Pattern

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# invalidate() — Single Sub-Key
# ═══════════════════════════════════════════════════════════════════════════════


def invalidate(store: Store, bucket: str, sub_key: str) -> LazyCoroResult[bool, CacheError]:
    """
    Invalidate single sub-key in a bucket.

    Example:
        result = await C.invalidate(store, "Customer", "7")
    """

    async def do_invalidate() -> bool:
        return await store.remove_exact(bucket, sub_key)

    return L.catching_async(do_invalidate, on_error=CacheError.from_exception)


# ═══════════════════════════════════════════════════════════════════════════════
# invalidate_pattern() — Pattern Match in Bucket
# ═══════════════════════════════════════════════════════════════════════════════


def invalidate_pattern(store: Store, bucket: str, pattern: str) -> LazyCoroResult[int, CacheError]:
    """
    Invalidate all sub-keys of a bucket matching pattern.

    Example:
        count = await C.invalidate_pattern(store, "Customer", "*7*")

    Returns:
        Number of sub-keys invalidated
    """

    async def do_invalidate() -> int:
        return await store.remove_by_pattern(bucket, pattern)

    return L.catching_async(do_invalidate, on_error=CacheError.from_exception)


# ═══════════════════════════════════════════════════════════════════════════════
# execute() — Whole Plan, Concurrently
# ═══════════════════════════════════════════════════════════════════════════════


async def _apply(store: Store, op: InvalidationOperation) -> int:
    match op:
        case Exact(bucket, sub_key):
            return int(await store.remove_exact(bucket, sub_key))
        case Pattern(bucket, _):
            return await store.remove_by_pattern(bucket, op.glob)


def execute(
    store: Store,
    operations: Iterable[InvalidationOperation],
) -> LazyCoroResult[int, CacheError]:
    """
    Apply invalidation operations.

    Operations are independent, so they run concurrently. The first store
    failure becomes the error; operations already applied stay applied.

    Example:
        ops = planner.plan("Order", order, V.EXACT)
        removed = await C.execute(store, ops)

    Returns:
        Number of entries removed
    """
    ops = tuple(operations)

    async def do_execute() -> int:
        removed = await asyncio.gather(*(_apply(store, op) for op in ops))
        total = sum(removed)
        logger.debug("invalidated %d entries with %d operations on %s", total, len(ops), store.name)
        return total

    return L.catching_async(do_execute, on_error=CacheError.from_exception)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("invalidate", "invalidate_pattern", "execute")
