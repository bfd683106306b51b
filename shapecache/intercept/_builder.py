"""
Caching builder — fluent API.
"""

from __future__ import annotations

from dataclasses import dataclass

from shapecache.cache import Codec, JsonCodec, Store
from shapecache.schema import SchemaProvider
from shapecache.intercept._options import CacheOptions
from shapecache.intercept._interceptor import Interceptor


@dataclass(slots=True, frozen=True)
class Caching:
    """
    Fluent interceptor builder.

    Example:
        interceptor = (
            caching(RedisStore.from_url())
            .options(CacheOptions().with_reference_policy())
            .schemas(SchemaProvider(own=(Order, Customer)))
            .build()
        )
    """

    _store: Store
    _options: CacheOptions
    _schemas: SchemaProvider | None
    _codec: Codec | None

    def options(self, options: CacheOptions) -> Caching:
        return Caching(
            _store=self._store,
            _options=options,
            _schemas=self._schemas,
            _codec=self._codec,
        )

    def schemas(self, schemas: SchemaProvider) -> Caching:
        return Caching(
            _store=self._store,
            _options=self._options,
            _schemas=schemas,
            _codec=self._codec,
        )

    def codec(self, codec: Codec) -> Caching:
        return Caching(
            _store=self._store,
            _options=self._options,
            _schemas=self._schemas,
            _codec=codec,
        )

    def build(self) -> Interceptor:
        return Interceptor(
            store=self._store,
            options=self._options,
            schemas=self._schemas if self._schemas is not None else SchemaProvider(),
            codec=self._codec if self._codec is not None else JsonCodec(),
        )


def caching(store: Store) -> Caching:
    """
    Start building an interceptor over a store.

    Example:
        interceptor = caching(MemoryStore()).build()
    """
    return Caching(
        _store=store,
        _options=CacheOptions(),
        _schemas=None,
        _codec=None,
    )


__all__ = ("Caching", "caching")
