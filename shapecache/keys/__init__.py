"""
Keys — cache key derivation from call parameters and result shape.

    from shapecache import keys as K

    K.build_read_key([42])                       # "42"
    K.KeyBuilder(provider).write_key("42", order, Order)
    # "42-Customer-7-Tags-Tag-all"
"""

from __future__ import annotations

from shapecache.keys._builder import (
    build_read_key,
    build_write_key,
    KeyBuilder,
)

__all__ = (
    "build_read_key",
    "build_write_key",
    "KeyBuilder",
)
