"""
Cache types — store protocol, in-memory store, results and errors.
"""

from __future__ import annotations

import asyncio
import fnmatch
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum, auto
from typing import Protocol

# ═══════════════════════════════════════════════════════════════════════════════
# Store Protocol — Users Implement This
# ═══════════════════════════════════════════════════════════════════════════════


class Store(Protocol):
    """
    Two-level cache store: bucket → sub-key → serialized payload.

    Patterns are globs (`*`, `?`, `[...]`), matched case-sensitively against
    sub-keys of one bucket. Failures are raised; callers wrap them.

    Example:
        class DictStore:
            def __init__(self) -> None:
                self.data: dict[str, dict[str, str]] = {}

            @property
            def name(self) -> str:
                return "dict"

            async def get(self, bucket: str, sub_key: str) -> str | None:
                return self.data.get(bucket, {}).get(sub_key)

            async def set(self, bucket, sub_key, payload, ttl=None) -> None:
                self.data.setdefault(bucket, {})[sub_key] = payload

            async def remove_exact(self, bucket: str, sub_key: str) -> bool:
                return self.data.get(bucket, {}).pop(sub_key, None) is not None

            async def remove_by_pattern(self, bucket: str, pattern: str) -> int:
                ...

            async def scan(self, bucket: str, pattern: str) -> str | None:
                ...
    """

    @property
    def name(self) -> str:
        """Store name for debugging."""
        ...

    async def get(self, bucket: str, sub_key: str) -> str | None:
        """Get payload. Returns None on miss."""
        ...

    async def set(
        self,
        bucket: str,
        sub_key: str,
        payload: str,
        ttl: timedelta | None = None,
    ) -> None:
        """Set payload."""
        ...

    async def remove_exact(self, bucket: str, sub_key: str) -> bool:
        """Remove one sub-key. Returns True if existed."""
        ...

    async def remove_by_pattern(self, bucket: str, pattern: str) -> int:
        """Remove sub-keys matching pattern. Returns count (0 is fine)."""
        ...

    async def scan(self, bucket: str, pattern: str) -> str | None:
        """First payload whose sub-key matches pattern, or None."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Store — In-Memory LRU (Default)
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class _Entry:
    payload: str
    expires_at: datetime | None

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and datetime.now() > self.expires_at


class MemoryStore:
    """
    In-memory two-level LRU store with per-entry TTL.

    Note: Single-process only — nothing is shared between instances.

    Example:
        store = MemoryStore(max_size=1000)
    """

    def __init__(self, max_size: int = 1000) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self._max_size = max_size
        self._buckets: dict[str, dict[str, _Entry]] = {}
        self._order: list[tuple[str, str]] = []
        self._lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return "memory"

    def __len__(self) -> int:
        return len(self._order)

    async def get(self, bucket: str, sub_key: str) -> str | None:
        async with self._lock:
            entry = self._buckets.get(bucket, {}).get(sub_key)
            if entry is None:
                return None
            if entry.is_expired:
                self._drop(bucket, sub_key)
                return None
            # Move to end (most recent)
            self._order.remove((bucket, sub_key))
            self._order.append((bucket, sub_key))
            return entry.payload

    async def set(
        self,
        bucket: str,
        sub_key: str,
        payload: str,
        ttl: timedelta | None = None,
    ) -> None:
        async with self._lock:
            if sub_key in self._buckets.get(bucket, {}):
                self._order.remove((bucket, sub_key))
            elif len(self._order) >= self._max_size:
                # Evict oldest
                old_bucket, old_key = self._order[0]
                self._drop(old_bucket, old_key)

            entries = self._buckets.setdefault(bucket, {})

            expires_at = datetime.now() + ttl if ttl else None
            entries[sub_key] = _Entry(payload, expires_at)
            self._order.append((bucket, sub_key))

    async def remove_exact(self, bucket: str, sub_key: str) -> bool:
        async with self._lock:
            if sub_key in self._buckets.get(bucket, {}):
                self._drop(bucket, sub_key)
                return True
            return False

    async def remove_by_pattern(self, bucket: str, pattern: str) -> int:
        async with self._lock:
            matched = [
                k for k in self._buckets.get(bucket, {}) if fnmatch.fnmatchcase(k, pattern)
            ]
            for k in matched:
                self._drop(bucket, k)
            return len(matched)

    async def scan(self, bucket: str, pattern: str) -> str | None:
        async with self._lock:
            for k, entry in list(self._buckets.get(bucket, {}).items()):
                if not fnmatch.fnmatchcase(k, pattern):
                    continue
                if entry.is_expired:
                    self._drop(bucket, k)
                    continue
                return entry.payload
            return None

    def _drop(self, bucket: str, sub_key: str) -> None:
        entries = self._buckets[bucket]
        del entries[sub_key]
        if not entries:
            del self._buckets[bucket]
        self._order.remove((bucket, sub_key))


# ═══════════════════════════════════════════════════════════════════════════════
# Cache Result
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CacheResult[T]:
    """Read result with metadata."""

    value: T
    hit: bool
    bucket: str
    sub_key: str | None


class CacheErrorKind(Enum):
    """Cache error kinds."""

    CONNECTION = auto()
    SERIALIZATION = auto()
    TIMEOUT = auto()


@dataclass(frozen=True, slots=True)
class CacheError:
    """Cache operation error."""

    kind: CacheErrorKind
    message: str

    @staticmethod
    def from_exception(e: Exception) -> CacheError:
        message = str(e) or type(e).__name__
        if isinstance(e, TimeoutError):
            return CacheError(CacheErrorKind.TIMEOUT, message)
        # pydantic ValidationError and codec failures are ValueError subclasses
        if isinstance(e, (ValueError, TypeError)):
            return CacheError(CacheErrorKind.SERIALIZATION, message)
        return CacheError(CacheErrorKind.CONNECTION, message)


class CacheStoreError(Exception):
    """Raised by decorated methods when the store fails."""

    def __init__(self, error: CacheError) -> None:
        super().__init__(f"{error.kind.name.lower()}: {error.message}")
        self.error = error


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "Store",
    "MemoryStore",
    "CacheResult",
    "CacheError",
    "CacheErrorKind",
    "CacheStoreError",
)
