"""
Key builder — read keys from call parameters, composite keys from results.
"""

from __future__ import annotations

from collections.abc import Iterable

from shapecache._types import (
    ALL,
    DEFAULT_CONTEXT_TYPES,
    InvalidationPolicy,
    first_parameter,
    stringify,
)
from shapecache.schema import (
    PropertyKind,
    SchemaProvider,
    SchemaScope,
    TypeRef,
    type_name,
)

# ═══════════════════════════════════════════════════════════════════════════════
# Read Key — Pre-Fetch
# ═══════════════════════════════════════════════════════════════════════════════


def build_read_key(
    parameters: Iterable[object],
    context_types: tuple[type, ...] = DEFAULT_CONTEXT_TYPES,
) -> str:
    """
    Pre-fetch key: the first non-context parameter as text, else `"all"`.

    Example:
        build_read_key([42])                 # "42"
        build_read_key([asyncio.Event()])    # "all"
        build_read_key([])                   # "all"
    """
    first = first_parameter(parameters, context_types)
    return ALL if first is None else stringify(first)


# ═══════════════════════════════════════════════════════════════════════════════
# Write Key — Composite
# ═══════════════════════════════════════════════════════════════════════════════


def build_write_key(
    base_key: str,
    value: object,
    result_type: TypeRef,
    scope: SchemaScope,
) -> str:
    """
    Composite key: base key plus one fragment per keyed property.

    IDENTIFIER  → "-<value>"
    COLLECTION  → "-<Property>-<Element>-all"   (elements are not visited)
    REFERENCE   → "-<Property>-<nested id>"     (omitted without an id)

    Example:
        Employee(id=42, department=Department(id=7), tags=[...])
        build_write_key("42", employee, Employee, scope)
        # "42-Department-7-Tags-Tag-all"
    """
    naming = scope.naming
    schema = scope.resolve(result_type)
    parts = [base_key]

    for p in schema.properties:
        match p.kind:
            case PropertyKind.IDENTIFIER:
                parts.append(stringify(getattr(value, p.name, None)))
            case PropertyKind.COLLECTION:
                parts.append(f"{naming.property_bucket(p.name)}-{p.bucket}-{ALL}")
            case PropertyKind.REFERENCE:
                nested = getattr(value, p.name, None)
                primary = scope.resolve(p.target).primary
                if nested is None or primary is None:
                    continue
                parts.append(f"{p.bucket}-{stringify(getattr(nested, primary, None))}")
            case PropertyKind.SCALAR:
                pass

    return "-".join(parts)


# ═══════════════════════════════════════════════════════════════════════════════
# Key Builder — Bound to a Schema Provider
# ═══════════════════════════════════════════════════════════════════════════════


class KeyBuilder:
    """
    Read/write key derivation with bucket naming.

    Example:
        keys = KeyBuilder(SchemaProvider(own=(Order,)))
        bucket = keys.bucket_for(list[Order])               # "Order"
        key = keys.sub_key_for("42", order, Order, REFERENCE)
    """

    def __init__(
        self,
        schemas: SchemaProvider,
        context_types: tuple[type, ...] = (),
    ) -> None:
        self.schemas = schemas
        self.context_types = (*DEFAULT_CONTEXT_TYPES, *context_types)

    def read_key(self, parameters: Iterable[object]) -> str:
        return build_read_key(parameters, self.context_types)

    def write_key(self, base_key: str, value: object, result_type: TypeRef) -> str:
        scope = self.schemas.scope()
        target = scope.concrete(self.schemas.traits.unwrap(result_type))
        return build_write_key(base_key, value, _as_ref(target, value), scope)

    def is_collection(self, result_type: object) -> bool:
        return self.schemas.traits.is_collection(result_type)

    def bucket_for(self, result_type: object) -> str:
        """Result type name; element type name for collections."""
        traits = self.schemas.traits
        scope = self.schemas.scope()
        if traits.is_collection(result_type):
            return type_name(scope.concrete(traits.element_type(result_type)))
        return type_name(scope.concrete(traits.unwrap(result_type)))

    def sub_key_for(
        self,
        base_key: str,
        value: object,
        result_type: object,
        policy: InvalidationPolicy,
    ) -> str:
        """
        Sub-key a fetched result is stored under.

        Collections always use `"all"`. Single entities use the composite key
        under the reference policy, and the read key under the exact policy
        (exact invalidation only reaches keys known from the mutation).
        """
        if self.is_collection(result_type):
            return ALL
        if policy is InvalidationPolicy.REFERENCE:
            return self.write_key(base_key, value, _as_ref(result_type, value))
        return base_key


def _as_ref(tp: object, value: object) -> TypeRef:
    if isinstance(tp, (type, str)):
        return tp
    return type(value)


__all__ = ("build_read_key", "build_write_key", "KeyBuilder")
