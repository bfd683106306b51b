"""
SQLAlchemy integration — cache entries in a relational table.

Usage:
    1. Create the table once:

        engine = create_async_engine("sqlite+aiosqlite:///cache.db")
        await create_tables(engine)

    2. Create the store:

        store = SQLAlchemyStore(async_sessionmaker(engine, expire_on_commit=False))

    3. Use it like any other store:

        interceptor = caching(store).build()
"""

from __future__ import annotations

import fnmatch
from datetime import datetime, timedelta

from sqlalchemy import DateTime, String, Text, delete, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# ═══════════════════════════════════════════════════════════════════════════════
# Table
# ═══════════════════════════════════════════════════════════════════════════════


class CacheBase(DeclarativeBase):
    """Declarative base owning the cache table metadata."""


class CacheEntryMixin:
    """
    Columns of a cache entry row.

    - bucket: partition name (`Customer`)
    - sub_key: key inside the bucket (`42-Order-7`, `all`)
    - payload: serialized value
    - expires_at: optional TTL
    """

    bucket: Mapped[str] = mapped_column(String(255), primary_key=True)

    sub_key: Mapped[str] = mapped_column(String(1024), primary_key=True)

    payload: Mapped[str] = mapped_column(Text, nullable=False)

    expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and datetime.now() > self.expires_at


class CacheEntryRow(CacheBase, CacheEntryMixin):
    __tablename__ = "shapecache_entries"


async def create_tables(engine: AsyncEngine) -> None:
    """Create the cache table if it does not exist."""
    async with engine.begin() as conn:
        await conn.run_sync(CacheBase.metadata.create_all)


# ═══════════════════════════════════════════════════════════════════════════════
# SQLAlchemy Store
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyStore:
    """
    Relational store.

    Pattern operations load the bucket's sub-keys and match them with the
    same glob rules as the in-memory store.

    Example:
        store = SQLAlchemyStore(session_factory)
        await store.set("Customer", "7", payload, timedelta(minutes=20))
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """
        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session_factory = session_factory

    @property
    def name(self) -> str:
        return "sqlalchemy"

    async def get(self, bucket: str, sub_key: str) -> str | None:
        async with self._session_factory() as session:
            row = await session.get(CacheEntryRow, (bucket, sub_key))
            if row is None or row.is_expired:
                return None
            return row.payload

    async def set(
        self,
        bucket: str,
        sub_key: str,
        payload: str,
        ttl: timedelta | None = None,
    ) -> None:
        async with self._session_factory() as session:
            await session.merge(
                CacheEntryRow(
                    bucket=bucket,
                    sub_key=sub_key,
                    payload=payload,
                    expires_at=datetime.now() + ttl if ttl else None,
                )
            )
            await session.commit()

    async def remove_exact(self, bucket: str, sub_key: str) -> bool:
        async with self._session_factory() as session:
            row = await session.get(CacheEntryRow, (bucket, sub_key))
            if row is None:
                return False
            await session.delete(row)
            await session.commit()
            return True

    async def remove_by_pattern(self, bucket: str, pattern: str) -> int:
        async with self._session_factory() as session:
            keys = (
                await session.scalars(
                    select(CacheEntryRow.sub_key).where(CacheEntryRow.bucket == bucket)
                )
            ).all()
            matched = [k for k in keys if fnmatch.fnmatchcase(k, pattern)]
            if not matched:
                return 0
            await session.execute(
                delete(CacheEntryRow).where(
                    CacheEntryRow.bucket == bucket,
                    CacheEntryRow.sub_key.in_(matched),
                )
            )
            await session.commit()
            return len(matched)

    async def scan(self, bucket: str, pattern: str) -> str | None:
        async with self._session_factory() as session:
            rows = await session.scalars(
                select(CacheEntryRow)
                .where(CacheEntryRow.bucket == bucket)
                .order_by(CacheEntryRow.sub_key)
            )
            for row in rows:
                if fnmatch.fnmatchcase(row.sub_key, pattern) and not row.is_expired:
                    return row.payload
            return None


__all__ = (
    "CacheBase",
    "CacheEntryMixin",
    "CacheEntryRow",
    "create_tables",
    "SQLAlchemyStore",
)
