"""
Schema — property classification for key derivation and invalidation.

    from shapecache import schema as S

    provider = S.SchemaProvider(own=(Order, Customer))
    schema = provider.scope().resolve(Order)

    for p in schema.of_kind(S.PropertyKind.REFERENCE):
        print(p.name, p.bucket)
"""

from __future__ import annotations

from shapecache.schema._types import (
    TypeRef,
    type_name,
    PropertyKind,
    PropertyDescriptor,
    TypeSchema,
)
from shapecache.schema._naming import Naming, pascalize
from shapecache.schema._traits import TypeTraits
from shapecache.schema._provider import SchemaProvider, SchemaScope

__all__ = (
    "TypeRef",
    "type_name",
    "PropertyKind",
    "PropertyDescriptor",
    "TypeSchema",
    "Naming",
    "pascalize",
    "TypeTraits",
    "SchemaProvider",
    "SchemaScope",
)
