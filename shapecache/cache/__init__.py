"""
Cache — two-level stores and plan execution.

    from shapecache import cache as C

    store = C.MemoryStore(max_size=1000)
    await store.set("Customer", "7", payload)

    removed = await C.execute(store, ops)     # Result[int, CacheError]
"""

from __future__ import annotations

from shapecache.cache._types import (
    Store,
    MemoryStore,
    CacheResult,
    CacheError,
    CacheErrorKind,
    CacheStoreError,
)
from shapecache.cache._codec import Codec, JsonCodec
from shapecache.cache._ops import invalidate, invalidate_pattern, execute

# Redis integration (optional import)
try:
    from shapecache.cache._redis import RedisStore
except ImportError:
    pass

# SQLAlchemy integration (optional import)
try:
    from shapecache.cache._sqlalchemy import (
        CacheBase,
        CacheEntryMixin,
        CacheEntryRow,
        SQLAlchemyStore,
        create_tables,
    )
except ImportError:
    pass

__all__ = (
    # Store
    "Store",
    "MemoryStore",
    # Results
    "CacheResult",
    "CacheError",
    "CacheErrorKind",
    "CacheStoreError",
    # Codec
    "Codec",
    "JsonCodec",
    # Ops
    "invalidate",
    "invalidate_pattern",
    "execute",
    # Redis (optional)
    "RedisStore",
    # SQLAlchemy (optional)
    "CacheBase",
    "CacheEntryMixin",
    "CacheEntryRow",
    "SQLAlchemyStore",
    "create_tables",
)
