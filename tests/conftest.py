"""Pytest configuration and fixtures for shapecache tests."""

import pytest

from shapecache.cache import MemoryStore
from shapecache.schema import SchemaProvider

from tests.models import Article, Customer, Invoice, Order, Post, Referral, Shipment, Tag


@pytest.fixture
def provider():
    """Schema provider that knows every test entity."""
    return SchemaProvider(own=(Customer, Tag, Order, Post, Invoice, Shipment, Article, Referral))


@pytest.fixture
def store():
    """Fresh in-memory store."""
    return MemoryStore(max_size=100)


class FailingStore:
    """Store whose every operation fails like a dropped connection."""

    name = "failing"

    async def get(self, bucket, sub_key):
        raise ConnectionError("store unreachable")

    async def set(self, bucket, sub_key, payload, ttl=None):
        raise ConnectionError("store unreachable")

    async def remove_exact(self, bucket, sub_key):
        raise ConnectionError("store unreachable")

    async def remove_by_pattern(self, bucket, pattern):
        raise ConnectionError("store unreachable")

    async def scan(self, bucket, pattern):
        raise ConnectionError("store unreachable")


@pytest.fixture
def failing_store():
    return FailingStore()
