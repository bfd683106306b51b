"""
Invalidating write — mutate, then apply the invalidation plan.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

from kungfu import LazyCoroResult, Result, Ok, Error

from shapecache.cache import CacheError, Store, execute
from shapecache.invalidation import Plan, Planner
from shapecache.intercept._options import CacheOptions


@dataclass(frozen=True, slots=True)
class WriteResult[T]:
    """Mutation result with the plan that was applied."""

    value: T
    plan: Plan
    removed: int


@dataclass(slots=True, frozen=True)
class InvalidatingWrite:
    """
    Compiled write path.

    The mutation runs first. If it raises, nothing is invalidated and the
    exception propagates. Otherwise the plan for the owner bucket and the
    first non-context parameter is executed against the store.
    """

    store: Store
    planner: Planner
    options: CacheOptions

    def run[T](
        self,
        owner: str,
        parameters: Iterable[object],
        mutate: Callable[[], Awaitable[T]],
    ) -> LazyCoroResult[WriteResult[T], CacheError]:
        store = self.store
        planner = self.planner
        bucket = planner.schemas.naming.owner_bucket(owner)
        policy = self.options.policy
        params = tuple(parameters)

        async def run_write() -> Result[WriteResult[T], CacheError]:
            value = await mutate()
            ops = planner.plan_call(bucket, params, policy)
            if not ops:
                return Ok(WriteResult(value=value, plan=ops, removed=0))

            match await execute(store, ops):
                case Ok(removed):
                    return Ok(WriteResult(value=value, plan=ops, removed=removed))
                case Error(e):
                    return Error(e)

        return LazyCoroResult(run_write)


__all__ = ("WriteResult", "InvalidatingWrite")
