"""
shapecache — transparent repository caching driven by data shape.

    from shapecache import schema as S        # Property classification
    from shapecache import keys as K          # Read / composite keys
    from shapecache import invalidation as V  # Invalidation plans
    from shapecache import cache as C         # Stores and plan execution
    from shapecache import intercept as I     # Decorators and builder

    interceptor = shapecache.caching(C.MemoryStore()).build()
"""

from shapecache import schema
from shapecache import keys
from shapecache import invalidation
from shapecache import cache
from shapecache import intercept
from shapecache._types import (
    Result,
    Ok,
    Error,
    LazyCoroResult,
    ALL,
    InvalidationPolicy,
    EXACT,
    REFERENCE,
)
from shapecache.cache import CacheError, CacheStoreError, MemoryStore
from shapecache.intercept import CacheOptions, Interceptor, caching

__version__ = "0.1.0"

__all__ = (
    "schema",
    "keys",
    "invalidation",
    "cache",
    "intercept",
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    "ALL",
    "InvalidationPolicy",
    "EXACT",
    "REFERENCE",
    "CacheError",
    "CacheStoreError",
    "MemoryStore",
    "CacheOptions",
    "Interceptor",
    "caching",
)
