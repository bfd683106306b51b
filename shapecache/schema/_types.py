"""
Schema types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

# ═══════════════════════════════════════════════════════════════════════════════
# Type Reference
# ═══════════════════════════════════════════════════════════════════════════════

type TypeRef = type | str
"""A type object, or a type name to be resolved by the provider."""


def type_name(ref: object) -> str:
    """Bare name of a type reference (`"Customer"` for both forms)."""
    if isinstance(ref, str):
        return ref.rsplit(".", 1)[-1].strip("'\"")
    return getattr(ref, "__name__", None) or str(ref)


# ═══════════════════════════════════════════════════════════════════════════════
# Property Kind — Explicit Tag
# ═══════════════════════════════════════════════════════════════════════════════


class PropertyKind(Enum):
    """
    How a property contributes to keys and plans.

    IDENTIFIER: foreign identifier (`customer_id`) — its value is a key fragment.
    REFERENCE:  nested entity (`customer: Customer`) — its `id` is a fragment.
    COLLECTION: iterable of entities (`tags: list[Tag]`) — fixed marker only.
    SCALAR:     everything else — ignored.
    """

    IDENTIFIER = auto()
    REFERENCE = auto()
    COLLECTION = auto()
    SCALAR = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# Property Descriptor
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """
    A classified property.

    target: element type for COLLECTION, referenced type for REFERENCE,
            declared type otherwise.
    bucket: bucket name this property maps to (already derived, so read and
            write paths agree on it).
    """

    name: str
    kind: PropertyKind
    target: TypeRef
    bucket: str

    @property
    def target_name(self) -> str:
        return type_name(self.target)


# ═══════════════════════════════════════════════════════════════════════════════
# Type Schema
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TypeSchema:
    """
    Ordered property graph of one type. Empty when unresolvable.

    primary: name of the type's own identifier property (`id` / `Id`), if any.
    """

    type_name: str
    properties: tuple[PropertyDescriptor, ...] = ()
    primary: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.properties

    def of_kind(self, *kinds: PropertyKind) -> tuple[PropertyDescriptor, ...]:
        return tuple(p for p in self.properties if p.kind in kinds)

    def get(self, name: str) -> PropertyDescriptor | None:
        for p in self.properties:
            if p.name == name:
                return p
        return None


__all__ = (
    "TypeRef",
    "type_name",
    "PropertyKind",
    "PropertyDescriptor",
    "TypeSchema",
)
