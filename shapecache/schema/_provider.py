"""
Schema provider — classifies a type's properties, two-tier type lookup.

    provider = SchemaProvider(own=(Order, Customer), referenced=(billing.models,))
    scope = provider.scope()          # one per operation
    schema = scope.resolve(Order)     # memoized within the scope
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from types import ModuleType
from typing import ClassVar, ForwardRef, get_origin, get_type_hints

from shapecache.schema._naming import Naming
from shapecache.schema._traits import TypeTraits
from shapecache.schema._types import (
    PropertyDescriptor,
    PropertyKind,
    TypeRef,
    TypeSchema,
    type_name,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Schema Provider — Configuration Holder
# ═══════════════════════════════════════════════════════════════════════════════


class SchemaProvider:
    """
    Resolves types to schemas.

    Tiers:
        1. own — explicit schema table, then registered types, then the type
           object handed in.
        2. referenced — modules searched by type name.

    Unresolvable types yield an empty schema; resolution never raises.
    """

    def __init__(
        self,
        own: Iterable[type] = (),
        referenced: Iterable[ModuleType] = (),
        schemas: Iterable[TypeSchema] = (),
        traits: TypeTraits | None = None,
        naming: Naming | None = None,
    ) -> None:
        self._own: dict[str, type] = {t.__name__: t for t in own}
        self._referenced: tuple[ModuleType, ...] = tuple(referenced)
        self._table: dict[str, TypeSchema] = {s.type_name: s for s in schemas}
        self.traits = traits if traits is not None else TypeTraits()
        self.naming = naming if naming is not None else Naming()

    def scope(self) -> SchemaScope:
        """Fresh per-operation memo."""
        return SchemaScope(self)

    def lookup(self, name: str) -> type | None:
        """Find a class by name: own types first, then referenced modules."""
        if name in self._own:
            return self._own[name]
        for module in self._referenced:
            found = getattr(module, name, None)
            if isinstance(found, type):
                return found
        return None

    def explicit(self, name: str) -> TypeSchema | None:
        return self._table.get(name)

    def namespace(self) -> dict[str, object]:
        """Names visible to annotation evaluation; own types shadow referenced ones."""
        ns: dict[str, object] = {}
        for module in reversed(self._referenced):
            ns.update(vars(module))
        ns.update(self._own)
        return ns


# ═══════════════════════════════════════════════════════════════════════════════
# Schema Scope — Per-Operation Memo
# ═══════════════════════════════════════════════════════════════════════════════


class SchemaScope:
    """Resolution session; caches each type's schema for its own lifetime."""

    __slots__ = ("_provider", "_memo")

    def __init__(self, provider: SchemaProvider) -> None:
        self._provider = provider
        self._memo: dict[object, TypeSchema] = {}

    @property
    def naming(self) -> Naming:
        return self._provider.naming

    @property
    def traits(self) -> TypeTraits:
        return self._provider.traits

    def resolve(self, ref: TypeRef) -> TypeSchema:
        key = ref if isinstance(ref, type) else type_name(ref)
        cached = self._memo.get(key)
        if cached is None:
            cached = self._memo[key] = self._build(ref)
        return cached

    def concrete(self, ref: object) -> object:
        """Turn a name / forward reference into a class when one can be found."""
        if isinstance(ref, ForwardRef):
            ref = ref.__forward_arg__
        if isinstance(ref, str):
            return self._provider.lookup(type_name(ref)) or ref
        return ref

    # ─── building ─────────────────────────────────────────────────────────────

    def _build(self, ref: TypeRef) -> TypeSchema:
        name = type_name(ref)

        explicit = self._provider.explicit(name)
        if explicit is not None:
            return explicit

        target = self.concrete(ref)
        target = get_origin(target) or target
        if not isinstance(target, type):
            logger.debug("schema not found for %s", name)
            return TypeSchema(name)

        hints = self._hints(target)
        properties = tuple(self._classify(n, h) for n, h in hints.items())
        primary = next((n for n in hints if self.naming.is_primary(n)), None)
        return TypeSchema(type_name=target.__name__, properties=properties, primary=primary)

    def _hints(self, target: type) -> dict[str, object]:
        try:
            hints = get_type_hints(target, localns=self._provider.namespace())
        except Exception as e:
            logger.debug("falling back to raw annotations for %s: %s", target.__name__, e)
            hints = _raw_annotations(target)

        return {
            n: h
            for n, h in hints.items()
            if not n.startswith("_")
            and get_origin(h) is not ClassVar
            and h is not ClassVar
            and not isinstance(h, dataclasses.InitVar)
        }

    def _classify(self, name: str, hint: object) -> PropertyDescriptor:
        naming, traits = self.naming, self.traits

        if naming.is_identifier(name):
            return PropertyDescriptor(
                name, PropertyKind.IDENTIFIER, _ref(hint), naming.identifier_bucket(name)
            )

        hint = self.concrete(hint)
        if isinstance(hint, str):
            # Unresolvable annotation string
            return PropertyDescriptor(
                name, PropertyKind.SCALAR, hint, naming.property_bucket(name)
            )

        if traits.is_collection(hint):
            element = self.concrete(traits.element_type(hint))
            bucket = (
                naming.singular(naming.property_bucket(name))
                if element is object
                else type_name(element)
            )
            return PropertyDescriptor(name, PropertyKind.COLLECTION, _ref(element), bucket)

        if traits.is_reference(hint) and not naming.is_primary(name):
            return PropertyDescriptor(
                name,
                PropertyKind.REFERENCE,
                _ref(traits.unwrap(hint)),
                naming.property_bucket(name),
            )

        return PropertyDescriptor(
            name, PropertyKind.SCALAR, _ref(hint), naming.property_bucket(name)
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def _ref(hint: object) -> TypeRef:
    if isinstance(hint, (type, str)):
        return hint
    origin = get_origin(hint)
    if isinstance(origin, type):
        return origin
    return type_name(hint)


def _raw_annotations(target: type) -> dict[str, object]:
    """Annotations without evaluation; bare-name strings stay resolvable by name."""
    raw: dict[str, object] = {}
    for klass in reversed(target.__mro__):
        try:
            annotations = dict(getattr(klass, "__annotations__", None) or {})
        except NameError:
            continue
        for n, a in annotations.items():
            raw[n] = a.strip() if isinstance(a, str) else a
    return raw


__all__ = ("SchemaProvider", "SchemaScope")
