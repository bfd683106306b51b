"""
Intercept — transparent caching around repository methods.

    from shapecache import intercept as I

    interceptor = I.caching(store).options(I.CacheOptions().with_ttl(minutes=5)).build()

    @interceptor.repository
    class OrderRepository: ...
"""

from __future__ import annotations

from shapecache.intercept._options import CacheOptions, DEFAULT_TTL
from shapecache.intercept._read import CachedRead
from shapecache.intercept._write import InvalidatingWrite, WriteResult
from shapecache.intercept._interceptor import Interceptor, call_parameters, owner_name
from shapecache.intercept._builder import Caching, caching

__all__ = (
    # Options
    "CacheOptions",
    "DEFAULT_TTL",
    # Paths
    "CachedRead",
    "InvalidatingWrite",
    "WriteResult",
    # Decorators
    "Interceptor",
    "call_parameters",
    "owner_name",
    # Builder
    "Caching",
    "caching",
)
