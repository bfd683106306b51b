"""
Redis store — one hash per bucket.

    store = RedisStore.from_url("redis://localhost:6379", key_prefix="app:")

Bucket `Customer` lives in hash `app:Customer`; sub-keys are hash fields.
TTL applies to the whole bucket hash and is refreshed on every write.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from redis.asyncio import Redis

logger = logging.getLogger(__name__)

DEFAULT_URL = "redis://localhost:6379"


def _text(raw: bytes | str | None) -> str | None:
    if raw is None:
        return None
    return raw.decode() if isinstance(raw, bytes) else raw


class RedisStore:
    """
    Redis hash-backed store.

    Pattern operations walk the bucket with HSCAN MATCH, so they cost
    O(bucket size).
    """

    def __init__(self, client: Redis, key_prefix: str = "") -> None:
        self._client = client
        self._prefix = key_prefix

    @classmethod
    def from_url(cls, url: str = DEFAULT_URL, key_prefix: str = "") -> RedisStore:
        return cls(Redis.from_url(url, decode_responses=True), key_prefix)

    @property
    def name(self) -> str:
        return "redis"

    def _key(self, bucket: str) -> str:
        return f"{self._prefix}{bucket}"

    async def get(self, bucket: str, sub_key: str) -> str | None:
        return _text(await self._client.hget(self._key(bucket), sub_key))

    async def set(
        self,
        bucket: str,
        sub_key: str,
        payload: str,
        ttl: timedelta | None = None,
    ) -> None:
        key = self._key(bucket)
        async with self._client.pipeline(transaction=False) as pipe:
            pipe.hset(key, sub_key, payload)
            if ttl:
                pipe.expire(key, ttl)
            await pipe.execute()

    async def remove_exact(self, bucket: str, sub_key: str) -> bool:
        return await self._client.hdel(self._key(bucket), sub_key) > 0

    async def remove_by_pattern(self, bucket: str, pattern: str) -> int:
        key = self._key(bucket)
        fields = [field async for field, _ in self._client.hscan_iter(key, match=pattern)]
        if not fields:
            return 0
        removed = await self._client.hdel(key, *fields)
        logger.debug("removed %d fields of %s matching %s", removed, key, pattern)
        return removed

    async def scan(self, bucket: str, pattern: str) -> str | None:
        async for _, value in self._client.hscan_iter(self._key(bucket), match=pattern):
            return _text(value)
        return None

    async def close(self) -> None:
        await self._client.aclose()


__all__ = ("RedisStore", "DEFAULT_URL")
