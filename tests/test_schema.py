from __future__ import annotations

from dataclasses import dataclass

from shapecache.schema import (
    Naming,
    PropertyDescriptor,
    PropertyKind,
    SchemaProvider,
    TypeSchema,
    TypeTraits,
    pascalize,
)

from tests import models
from tests.models import Customer, Invoice, Order, Post, Shipment, Tag


def kinds(schema):
    return {p.name: p.kind for p in schema.properties}


# ─── naming ───────────────────────────────────────────────────────────────────


def test_pascalize():
    assert pascalize("customer") == "Customer"
    assert pascalize("line_items") == "LineItems"
    assert pascalize("Customer") == "Customer"


def test_identifier_buckets_for_both_spellings():
    naming = Naming()
    assert naming.identifier_bucket("customer_id") == "Customer"
    assert naming.identifier_bucket("CustomerId") == "Customer"
    assert not naming.is_identifier("id")
    assert not naming.is_identifier("Id")
    assert naming.is_primary("id")
    assert naming.is_primary("Id")


def test_owner_bucket_strips_suffix():
    naming = Naming()
    assert naming.owner_bucket("CustomerRepository") == "Customer"
    assert naming.owner_bucket("Customer") == "Customer"
    assert naming.owner_bucket("Repository") == "Repository"
    assert Naming().with_owner_suffix("Repo").owner_bucket("OrderRepo") == "Order"


def test_singular_truncates_or_uses_table():
    naming = Naming()
    assert naming.singular("Tags") == "Tag"
    assert naming.singular("People") == "Peopl"
    assert naming.with_plurals({"People": "Person"}).singular("People") == "Person"


def test_method_roles():
    naming = Naming()
    assert naming.is_read("get_order")
    assert naming.is_write("create_order")
    assert naming.is_write("update_order")
    assert naming.is_write("delete_order")
    assert not naming.is_read("list_orders")
    assert not naming.is_write("list_orders")

    custom = naming.with_prefixes(read=("find",))
    assert custom.is_read("find_order")
    assert not custom.is_read("get_order")
    assert custom.is_write("delete_order")


# ─── traits ───────────────────────────────────────────────────────────────────


def test_traits():
    traits = TypeTraits()
    assert traits.is_scalar(int)
    assert traits.is_scalar(str)
    assert traits.is_scalar(int | None)
    assert not traits.is_collection(str)
    assert traits.is_collection(list[Tag])
    assert traits.is_collection(dict[str, Tag])
    assert not traits.is_collection(Order)
    assert traits.is_reference(Customer | None)
    assert traits.element_type(list[Tag]) is Tag
    assert traits.element_type(dict[str, Tag]) is Tag
    assert traits.element_type(list) is object


# ─── classification ───────────────────────────────────────────────────────────


def test_reference_property(provider):
    schema = provider.scope().resolve(Order)

    assert schema.type_name == "Order"
    assert schema.primary == "id"
    assert kinds(schema) == {
        "id": PropertyKind.SCALAR,
        "customer": PropertyKind.REFERENCE,
        "total": PropertyKind.SCALAR,
    }
    customer = schema.get("customer")
    assert customer.bucket == "Customer"
    assert customer.target is Customer


def test_collection_property_uses_element_type(provider):
    schema = provider.scope().resolve(Post)
    tags = schema.get("tags")

    assert tags.kind is PropertyKind.COLLECTION
    assert tags.bucket == "Tag"
    assert tags.target is Tag


def test_identifier_property(provider):
    schema = provider.scope().resolve(Invoice)
    customer_id = schema.get("customer_id")

    assert customer_id.kind is PropertyKind.IDENTIFIER
    assert customer_id.bucket == "Customer"


def test_pascal_case_entity(provider):
    schema = provider.scope().resolve(Shipment)

    assert schema.primary == "Id"
    assert kinds(schema) == {
        "Id": PropertyKind.SCALAR,
        "CustomerId": PropertyKind.IDENTIFIER,
        "Notes": PropertyKind.SCALAR,
    }


@dataclass
class Album:
    id: int
    labels: list


def test_unparameterised_collection_singularises_property_name():
    schema = SchemaProvider().scope().resolve(Album)
    labels = schema.get("labels")

    assert labels.kind is PropertyKind.COLLECTION
    assert labels.bucket == "Label"


def test_properties_keep_declaration_order(provider):
    names = [p.name for p in provider.scope().resolve(Order).properties]
    assert names == ["id", "customer", "total"]


# ─── resolution ───────────────────────────────────────────────────────────────


def test_unknown_type_yields_empty_schema():
    schema = SchemaProvider().scope().resolve("Nowhere")

    assert schema.is_empty
    assert schema.type_name == "Nowhere"
    assert schema.primary is None


def test_explicit_schema_wins():
    widget = TypeSchema(
        "Widget",
        (PropertyDescriptor("part_id", PropertyKind.IDENTIFIER, "Part", "Part"),),
        None,
    )
    provider = SchemaProvider(schemas=(widget,))

    assert provider.scope().resolve("Widget") is widget


def test_lookup_prefers_own_types():
    shadow = type("Customer", (), {})
    provider = SchemaProvider(own=(shadow,), referenced=(models,))

    assert provider.lookup("Customer") is shadow
    assert provider.lookup("Tag") is Tag
    assert provider.lookup("Missing") is None


def test_referenced_module_resolves_by_name():
    provider = SchemaProvider(referenced=(models,))
    schema = provider.scope().resolve("Order")

    assert schema.type_name == "Order"
    assert schema.get("customer").kind is PropertyKind.REFERENCE


@dataclass
class Draft:
    id: int
    customer: Customer
    ghost: Ghost  # noqa: F821


def test_unresolvable_annotation_degrades_to_scalar(provider):
    schema = provider.scope().resolve(Draft)

    assert schema.get("customer").kind is PropertyKind.REFERENCE
    assert schema.get("ghost").kind is PropertyKind.SCALAR


def test_scope_memoizes(provider):
    scope = provider.scope()
    first = scope.resolve(Order)

    assert scope.resolve(Order) is first
    assert provider.scope().resolve(Order) == first
