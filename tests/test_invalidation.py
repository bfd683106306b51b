import asyncio

import pytest
from kungfu import Ok, Error

from shapecache import EXACT, REFERENCE
from shapecache.cache import MemoryStore, execute
from shapecache.invalidation import Exact, Pattern, Planner, escape_glob, plan

from tests.models import Article, Customer, Invoice, Order, Post, Referral, Tag


# ─── exact policy ─────────────────────────────────────────────────────────────


def test_exact_simple_parameter():
    assert plan("Customer", "7", EXACT) == (
        Exact("Customer", "7"),
        Exact("Customer", "all"),
    )


def test_exact_entity_with_reference(provider):
    ops = Planner(provider).plan("Order", Order(id=42, customer=Customer(id=7)), EXACT)

    assert ops == (
        Exact("Customer", "7"),
        Exact("Customer", "all"),
        Exact("Order", "42"),
        Exact("Order", "all"),
    )


def test_exact_entity_with_identifier(provider):
    ops = Planner(provider).plan("Invoice", Invoice(id=3, customer_id=7), EXACT)

    assert ops == (
        Exact("Customer", "7"),
        Exact("Customer", "all"),
        Exact("Invoice", "3"),
        Exact("Invoice", "all"),
    )


def test_exact_does_not_walk_collections(provider):
    ops = Planner(provider).plan("Post", Post(id=5, tags=[Tag(id=1)]), EXACT)
    assert ops == (Exact("Post", "5"), Exact("Post", "all"))


def test_exact_count_is_two_plus_two_per_relation(provider):
    planner = Planner(provider)

    assert len(planner.plan("Order", Order(id=1), EXACT)) == 2
    assert len(planner.plan("Order", Order(id=1, customer=Customer(id=2)), EXACT)) == 4


# ─── reference policy ─────────────────────────────────────────────────────────


def test_reference_simple_parameter():
    assert plan("Customer", "7", REFERENCE) == (
        Pattern("Customer", "7"),
        Pattern("Customer", "Customer"),
        Exact("Customer", "all"),
    )


def test_reference_entity_with_reference(provider):
    ops = Planner(provider).plan("Order", Order(id=42, customer=Customer(id=7)), REFERENCE)

    assert ops == (
        Pattern("Customer", "7"),
        Pattern("Customer", "Order"),
        Exact("Customer", "all"),
        Pattern("Order", "42"),
        Pattern("Order", "Order"),
        Exact("Order", "all"),
    )
    assert [op.glob for op in ops if isinstance(op, Pattern)] == [
        "*7*",
        "*Order*",
        "*42*",
        "*Order*",
    ]


def test_reference_walks_collections_with_owner_id(provider):
    ops = Planner(provider).plan("Post", Post(id=5, tags=[Tag(id=1)]), REFERENCE)

    assert ops == (
        Pattern("Tag", "5"),
        Pattern("Tag", "Post"),
        Exact("Tag", "all"),
        Pattern("Post", "5"),
        Pattern("Post", "Post"),
        Exact("Post", "all"),
    )


def test_reference_count_is_three_plus_three_per_relation(provider):
    planner = Planner(provider)

    assert len(planner.plan("Order", Order(id=1), REFERENCE)) == 3
    assert len(planner.plan("Order", Order(id=1, customer=Customer(id=2)), REFERENCE)) == 6


def test_reference_skips_collections_of_scalars(provider):
    article = Article(id=5, labels=["a"], counters={"views": 1}, extras=[1])
    ops = Planner(provider).plan("Article", article, REFERENCE)

    assert ops == (
        Pattern("Article", "5"),
        Pattern("Article", "Article"),
        Exact("Article", "all"),
    )


def test_plans_never_repeat_an_operation(provider):
    referral = Referral(id=1, customer_id=7, customer=Customer(id=7))

    exact = Planner(provider).plan("Referral", referral, EXACT)
    reference = Planner(provider).plan("Referral", referral, REFERENCE)

    assert exact == (
        Exact("Customer", "7"),
        Exact("Customer", "all"),
        Exact("Referral", "1"),
        Exact("Referral", "all"),
    )
    assert len(set(reference)) == len(reference) == 6


# ─── degraded inputs ──────────────────────────────────────────────────────────


def test_none_parameter_plans_nothing(provider):
    planner = Planner(provider)

    assert planner.plan("Order", None, EXACT) == ()
    assert planner.plan_call("Order", [], REFERENCE) == ()
    assert planner.plan_call("Order", [asyncio.Event()], EXACT) == ()


def test_entity_without_id_only_touches_aggregate(provider):
    ops = Planner(provider).plan("Invoice", Invoice(id=None, customer_id=None), EXACT)
    assert ops == (Exact("Invoice", "all"),)


def test_unknown_entity_type_only_touches_owner():
    class Opaque:
        pass

    assert plan("Thing", Opaque(), EXACT) == (Exact("Thing", "all"),)


def test_collection_parameter_plans_each_item_once(provider):
    ops = Planner(provider).plan("Customer", ["7", "8", "7"], EXACT)

    assert ops == (
        Exact("Customer", "7"),
        Exact("Customer", "all"),
        Exact("Customer", "8"),
    )


def test_plan_call_skips_context_tokens(provider):
    ops = Planner(provider).plan_call("Customer", [asyncio.Event(), "7"], EXACT)
    assert ops == (Exact("Customer", "7"), Exact("Customer", "all"))


# ─── glob escaping ────────────────────────────────────────────────────────────


def test_escape_glob():
    assert escape_glob("a*b?c[d]") == "a[*]b[?]c[[]d]"
    assert Pattern("Order", "4*2").glob == "*4[*]2*"


# ─── application ──────────────────────────────────────────────────────────────


async def removed_by(store, ops):
    match await execute(store, ops):
        case Ok(removed):
            return removed
        case Error(e):
            pytest.fail(f"store failed: {e}")


async def test_reference_plan_removes_composite_keys(provider):
    store = MemoryStore()
    await store.set("Order", "42-Customer-7", "{}")
    await store.set("Order", "all", "[]")
    await store.set("Order", "43-Customer-8", "{}")
    await store.set("Customer", "7", "{}")

    ops = Planner(provider).plan("Order", Order(id=42, customer=Customer(id=7)), REFERENCE)

    assert await removed_by(store, ops) == 3
    assert await store.get("Order", "43-Customer-8") == "{}"
    assert len(store) == 1


async def test_plan_application_is_idempotent(provider):
    store = MemoryStore()
    await store.set("Customer", "7", "{}")
    await store.set("Customer", "8", "{}")

    ops = Planner(provider).plan("Customer", "7", EXACT)

    assert await removed_by(store, ops) == 1
    assert await removed_by(store, ops) == 0
    assert await store.get("Customer", "8") == "{}"
