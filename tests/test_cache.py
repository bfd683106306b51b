import asyncio
from datetime import timedelta

import pytest
from kungfu import Ok, Error

from shapecache.cache import (
    CacheError,
    CacheErrorKind,
    CacheStoreError,
    JsonCodec,
    MemoryStore,
    execute,
    invalidate,
    invalidate_pattern,
)
from shapecache.invalidation import Exact, Pattern

from tests.models import Customer, Order, Tag


# ─── memory store ─────────────────────────────────────────────────────────────


async def test_memory_store_buckets_are_separate(store):
    await store.set("Customer", "7", "c7")
    await store.set("Order", "7", "o7")

    assert await store.get("Customer", "7") == "c7"
    assert await store.get("Order", "7") == "o7"
    assert await store.get("Tag", "7") is None


async def test_memory_store_overwrite_keeps_size(store):
    await store.set("Customer", "7", "old")
    await store.set("Customer", "7", "new")

    assert await store.get("Customer", "7") == "new"
    assert len(store) == 1


async def test_memory_store_remove_exact(store):
    await store.set("Customer", "7", "c7")

    assert await store.remove_exact("Customer", "7") is True
    assert await store.remove_exact("Customer", "7") is False
    assert await store.remove_exact("Nowhere", "7") is False


async def test_memory_store_pattern_ops(store):
    await store.set("Order", "42-Customer-7", "a")
    await store.set("Order", "43-Customer-7", "b")
    await store.set("Order", "44-Customer-8", "c")

    assert await store.scan("Order", "*44*") == "c"
    assert await store.scan("Order", "*99*") is None
    assert await store.remove_by_pattern("Order", "*Customer-7*") == 2
    assert await store.remove_by_pattern("Order", "*Customer-7*") == 0
    assert await store.remove_by_pattern("Nowhere", "*") == 0
    assert len(store) == 1


async def test_memory_store_patterns_are_case_sensitive(store):
    await store.set("Order", "42-Customer-7", "a")
    assert await store.scan("Order", "*customer*") is None


async def test_memory_store_evicts_least_recent():
    store = MemoryStore(max_size=2)
    await store.set("Customer", "1", "a")
    await store.set("Customer", "2", "b")
    await store.get("Customer", "1")
    await store.set("Order", "3", "c")

    assert await store.get("Customer", "2") is None
    assert await store.get("Customer", "1") == "a"
    assert await store.get("Order", "3") == "c"
    assert len(store) == 2


async def test_memory_store_ttl_expiry(store):
    await store.set("Customer", "7", "c7", timedelta(microseconds=1))
    await asyncio.sleep(0.01)

    assert await store.get("Customer", "7") is None
    assert len(store) == 0


def test_memory_store_requires_positive_size():
    with pytest.raises(ValueError):
        MemoryStore(max_size=0)

    MemoryStore(max_size=1)


# ─── ops ──────────────────────────────────────────────────────────────────────


async def test_invalidate_and_invalidate_pattern(store):
    await store.set("Customer", "7", "c7")
    await store.set("Customer", "7-Order-1", "x")
    await store.set("Customer", "8", "c8")

    match await invalidate(store, "Customer", "7"):
        case Ok(existed):
            assert existed is True
        case Error(e):
            pytest.fail(str(e))

    match await invalidate_pattern(store, "Customer", "*Order*"):
        case Ok(count):
            assert count == 1
        case Error(e):
            pytest.fail(str(e))

    assert await store.get("Customer", "8") == "c8"


async def test_execute_surfaces_store_failure(failing_store):
    match await execute(failing_store, [Exact("Customer", "7"), Pattern("Customer", "7")]):
        case Ok(_):
            pytest.fail("expected failure")
        case Error(e):
            assert e.kind is CacheErrorKind.CONNECTION
            assert "unreachable" in e.message


async def test_execute_empty_plan(store):
    match await execute(store, ()):
        case Ok(removed):
            assert removed == 0
        case Error(e):
            pytest.fail(str(e))


def test_error_kinds():
    assert CacheError.from_exception(TimeoutError()).kind is CacheErrorKind.TIMEOUT
    assert CacheError.from_exception(OSError("reset")).kind is CacheErrorKind.CONNECTION

    error = CacheStoreError(CacheError(CacheErrorKind.CONNECTION, "reset"))
    assert str(error) == "connection: reset"
    assert error.error.message == "reset"


def test_decode_failures_are_serialization_errors():
    with pytest.raises(ValueError) as exc_info:
        JsonCodec().load("not json", Order)

    assert CacheError.from_exception(exc_info.value).kind is CacheErrorKind.SERIALIZATION
    assert CacheError.from_exception(TypeError("bad payload")).kind is CacheErrorKind.SERIALIZATION
    assert CacheError.from_exception(ConnectionError()).kind is CacheErrorKind.CONNECTION


# ─── codec ────────────────────────────────────────────────────────────────────


def test_json_codec_round_trips_entity_graph():
    codec = JsonCodec()
    order = Order(id=42, customer=Customer(id=7, name="Ann"), total=9.5)

    assert codec.load(codec.dump(order, Order), Order) == order
    assert codec.load(codec.dump(None, Order | None), Order | None) is None


def test_json_codec_collections():
    codec = JsonCodec()
    tags = [Tag(id=1, label="a"), Tag(id=2, label="b")]

    assert codec.load(codec.dump(tags, list[Tag]), list[Tag]) == tags
    assert codec.adapter(list[Tag]) is codec.adapter(list[Tag])


def test_json_codec_rejects_garbage():
    with pytest.raises(ValueError):
        JsonCodec().load("not json", Order)
