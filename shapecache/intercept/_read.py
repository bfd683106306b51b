"""
Cached read — lookup, fetch on miss, populate.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from kungfu import LazyCoroResult, Result, Ok, Error

from shapecache._types import ALL, InvalidationPolicy
from shapecache.cache import CacheError, CacheResult, Codec, Store
from shapecache.invalidation import escape_glob
from shapecache.keys import KeyBuilder
from shapecache.intercept._options import CacheOptions

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CachedRead:
    """
    Compiled read path.

    Lookup:
        collection         → get(bucket, "all")
        entity, EXACT      → get(bucket, read key)
        entity, REFERENCE  → scan(bucket, "*<read key>*")

    A miss calls the source; a non-None result is stored under its sub-key.
    Exceptions from the source propagate untouched; store failures become
    CacheError.
    """

    store: Store
    keys: KeyBuilder
    codec: Codec
    options: CacheOptions

    def run[T](
        self,
        parameters: Iterable[object],
        result_type: Any,
        fetch: Callable[[], Awaitable[T]],
    ) -> LazyCoroResult[CacheResult[T], CacheError]:
        store = self.store
        keys = self.keys
        codec = self.codec
        options = self.options
        params = tuple(parameters)

        async def execute() -> Result[CacheResult[T], CacheError]:
            key = keys.read_key(params)
            bucket = keys.bucket_for(result_type)
            collection = keys.is_collection(result_type)
            policy = options.policy

            try:
                if collection:
                    payload = await store.get(bucket, ALL)
                elif policy is InvalidationPolicy.REFERENCE:
                    payload = await store.scan(bucket, f"*{escape_glob(key)}*")
                else:
                    payload = await store.get(bucket, key)
            except Exception as e:
                return Error(CacheError.from_exception(e))

            if payload is not None:
                try:
                    cached = codec.load(payload, result_type)
                except Exception as e:
                    logger.warning("unreadable entry in %s for %s, refetching: %s", bucket, key, e)
                else:
                    hit_key = ALL if collection else key
                    return Ok(CacheResult(value=cached, hit=True, bucket=bucket, sub_key=hit_key))

            # Cache miss — fetch from source
            value = await fetch()
            if value is None:
                return Ok(CacheResult(value=value, hit=False, bucket=bucket, sub_key=None))

            sub_key = keys.sub_key_for(key, value, result_type, policy)
            try:
                encoded = codec.dump(value, result_type)
            except Exception as e:
                logger.warning("cannot serialize %s result for %s, not cached: %s", bucket, sub_key, e)
                return Ok(CacheResult(value=value, hit=False, bucket=bucket, sub_key=None))

            try:
                await store.set(bucket, sub_key, encoded, options.ttl)
            except Exception as e:
                return Error(CacheError.from_exception(e))

            logger.debug("cached %s/%s on %s", bucket, sub_key, store.name)
            return Ok(CacheResult(value=value, hit=False, bucket=bucket, sub_key=sub_key))

        return LazyCoroResult(execute)


__all__ = ("CachedRead",)
