"""
Interceptor — decorators that route repository methods through the cache.

    interceptor = caching(store).build()

    @interceptor.repository
    class OrderRepository:
        async def get_order(self, order_id: int) -> Order | None: ...
        async def update_order(self, order: Order) -> None: ...

Read methods (`get*`) go through the cached read path; write methods
(`create*`, `update*`, `delete*`) run and then invalidate. Everything else
is left alone.
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, get_type_hints

from kungfu import Ok, Error

from shapecache.cache import CacheStoreError, Codec, Store
from shapecache.keys import KeyBuilder
from shapecache.invalidation import Planner
from shapecache.schema import SchemaProvider
from shapecache.intercept._options import CacheOptions
from shapecache.intercept._read import CachedRead
from shapecache.intercept._write import InvalidatingWrite

logger = logging.getLogger(__name__)

_UNRESOLVED = object()


# ═══════════════════════════════════════════════════════════════════════════════
# Call Inspection
# ═══════════════════════════════════════════════════════════════════════════════


def call_parameters(
    signature: inspect.Signature,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> list[object]:
    """
    Declared parameter values in order, receiver excluded, defaults applied.

    Example:
        async def get_order(self, order_id: int, event: asyncio.Event): ...
        call_parameters(signature(get_order), (repo, 42, ev), {})  # [42, ev]
    """
    bound = signature.bind(*args, **kwargs)
    bound.apply_defaults()
    values: list[object] = []
    for i, (name, param) in enumerate(signature.parameters.items()):
        if i == 0 and name in ("self", "cls"):
            continue
        value = bound.arguments[name]
        match param.kind:
            case inspect.Parameter.VAR_POSITIONAL:
                values.extend(value)
            case inspect.Parameter.VAR_KEYWORD:
                values.extend(value.values())
            case _:
                values.append(value)
    return values


def owner_name(fn: Callable[..., Any]) -> str | None:
    """Name of the class a function was defined in, from its qualified name."""
    path = fn.__qualname__.split(".")
    if len(path) < 2 or path[-2] == "<locals>":
        return None
    return path[-2]


# ═══════════════════════════════════════════════════════════════════════════════
# Interceptor
# ═══════════════════════════════════════════════════════════════════════════════


class Interceptor:
    """
    Wraps async callables with cached reads and invalidating writes.

    Store failures surface as CacheStoreError. Exceptions raised by the
    wrapped callable propagate untouched.
    """

    def __init__(
        self,
        store: Store,
        options: CacheOptions,
        schemas: SchemaProvider,
        codec: Codec,
    ) -> None:
        self.store = store
        self.options = options
        self.schemas = schemas
        self._read = CachedRead(
            store=store,
            keys=KeyBuilder(schemas, options.context_types),
            codec=codec,
            options=options,
        )
        self._write = InvalidatingWrite(
            store=store,
            planner=Planner(schemas, options.context_types),
            options=options,
        )

    # ─── read ─────────────────────────────────────────────────────────────────

    def reads[**P, R](self, fn: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        """
        Cache an async read.

        The cache bucket comes from the declared return type; without one the
        call goes straight through.
        """
        signature = inspect.signature(fn)
        resolved: list[object] = []

        def result_type() -> object:
            if not resolved:
                try:
                    hints = get_type_hints(fn, localns=self.schemas.namespace())
                except Exception as e:
                    logger.debug("cannot resolve return type of %s: %s", fn.__qualname__, e)
                    hints = {}
                resolved.append(hints.get("return", _UNRESOLVED))
            return resolved[0]

        @functools.wraps(fn)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            tp = result_type()
            if not self.options.enable_interception or tp is _UNRESOLVED:
                return await fn(*args, **kwargs)

            params = call_parameters(signature, args, kwargs)
            match await self._read.run(params, tp, lambda: fn(*args, **kwargs)):
                case Ok(result):
                    return result.value
                case Error(e):
                    raise CacheStoreError(e)

        return wrapper

    # ─── write ────────────────────────────────────────────────────────────────

    def writes[**P, R](
        self,
        fn: Callable[P, Awaitable[R]] | None = None,
        *,
        owner: str | None = None,
    ) -> Any:
        """
        Invalidate after an async write.

        The owner bucket is the defining class name with the owner suffix
        stripped; plain functions must name it.

        Example:
            @interceptor.writes
            async def update_order(self, order: Order) -> None: ...

            @interceptor.writes(owner="Order")
            async def archive(order: Order) -> None: ...
        """
        if fn is None:
            return functools.partial(self.writes, owner=owner)

        bucket_owner = owner if owner is not None else owner_name(fn)
        if bucket_owner is None:
            raise ValueError(f"owner is required for {fn.__qualname__}")

        signature = inspect.signature(fn)

        @functools.wraps(fn)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            if not self.options.enable_interception:
                return await fn(*args, **kwargs)

            params = call_parameters(signature, args, kwargs)
            match await self._write.run(bucket_owner, params, lambda: fn(*args, **kwargs)):
                case Ok(result):
                    return result.value
                case Error(e):
                    raise CacheStoreError(e)

        return wrapper

    # ─── class ────────────────────────────────────────────────────────────────

    def repository[C: type](self, cls: C) -> C:
        """
        Intercept every public async method of a class matched by name.

        Example:
            @interceptor.repository
            class CustomerRepository:
                async def get_customer(self, customer_id: int) -> Customer: ...
                async def delete_customer(self, customer_id: int) -> None: ...
        """
        naming = self.schemas.naming
        for name, member in list(vars(cls).items()):
            if name.startswith("_") or not inspect.iscoroutinefunction(member):
                continue
            if naming.is_read(name):
                setattr(cls, name, self.reads(member))
            elif naming.is_write(name):
                setattr(cls, name, self.writes(member, owner=cls.__name__))
        return cls


__all__ = ("Interceptor", "call_parameters", "owner_name")
