"""
Invalidation planner — which cache entries a mutation makes stale.

Parameter classification:

    None        → nothing to invalidate
    scalar      → Simple: owner bucket, by value
    collection  → each element planned, duplicates dropped
    object      → Entity: owner bucket + related buckets from its schema
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from shapecache._types import (
    ALL,
    DEFAULT_CONTEXT_TYPES,
    InvalidationPolicy,
    first_parameter,
    stringify,
)
from shapecache.invalidation._types import Exact, InvalidationOperation, Pattern, Plan
from shapecache.schema import (
    PropertyDescriptor,
    PropertyKind,
    SchemaProvider,
    SchemaScope,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Operation Groups
# ═══════════════════════════════════════════════════════════════════════════════


def _pair(bucket: str, sub_key: str) -> list[InvalidationOperation]:
    return [Exact(bucket, sub_key), Exact(bucket, ALL)]


def _trio(bucket: str, fragment: str | None, owner: str) -> list[InvalidationOperation]:
    ops: list[InvalidationOperation] = []
    if fragment is not None:
        ops.append(Pattern(bucket, fragment))
    ops.append(Pattern(bucket, owner))
    ops.append(Exact(bucket, ALL))
    return ops


# ═══════════════════════════════════════════════════════════════════════════════
# Planner
# ═══════════════════════════════════════════════════════════════════════════════


class Planner:
    """
    Plans invalidation operations for a mutation.

    Example:
        planner = Planner(SchemaProvider(own=(Order, Customer)))

        planner.plan("Customer", "7", EXACT)
        # (Exact(Customer, '7'), Exact(Customer, 'all'))

        planner.plan("Order", Order(id=42, customer=Customer(id=7)), REFERENCE)
        # (Pattern(Customer, '*7*'), Pattern(Customer, '*Order*'), Exact(Customer, 'all'),
        #  Pattern(Order, '*42*'), Pattern(Order, '*Order*'), Exact(Order, 'all'))
    """

    def __init__(
        self,
        schemas: SchemaProvider,
        context_types: tuple[type, ...] = (),
    ) -> None:
        self.schemas = schemas
        self.context_types = (*DEFAULT_CONTEXT_TYPES, *context_types)

    def plan_call(
        self,
        owner: str,
        parameters: Iterable[object],
        policy: InvalidationPolicy,
    ) -> Plan:
        """Plan from a call's parameter list (first non-context parameter)."""
        return self.plan(owner, first_parameter(parameters, self.context_types), policy)

    def plan(self, owner: str, parameter: object, policy: InvalidationPolicy) -> Plan:
        if parameter is None:
            logger.debug("nothing to invalidate in %s: no mutation parameter", owner)
            return ()
        ops = self._plan(owner, parameter, policy, self.schemas.scope())
        return tuple(dict.fromkeys(ops))

    # ─── classification ───────────────────────────────────────────────────────

    def _plan(
        self,
        owner: str,
        parameter: object,
        policy: InvalidationPolicy,
        scope: SchemaScope,
    ) -> list[InvalidationOperation]:
        kind = type(parameter)
        if scope.traits.is_scalar(kind):
            return self._simple(owner, stringify(parameter), policy)

        if scope.traits.is_collection(kind):
            items = parameter.values() if isinstance(parameter, Mapping) else parameter
            ops: list[InvalidationOperation] = []
            for item in items:  # type: ignore[attr-defined]
                if item is not None:
                    ops.extend(self._plan(owner, item, policy, scope))
            return ops

        return self._entity(owner, parameter, policy, scope)

    def _simple(
        self, owner: str, value: str, policy: InvalidationPolicy
    ) -> list[InvalidationOperation]:
        if policy is InvalidationPolicy.REFERENCE:
            return _trio(owner, value, owner)
        return _pair(owner, value)

    # ─── entity ───────────────────────────────────────────────────────────────

    def _entity(
        self,
        owner: str,
        entity: object,
        policy: InvalidationPolicy,
        scope: SchemaScope,
    ) -> list[InvalidationOperation]:
        schema = scope.resolve(type(entity))
        own_id = _value(entity, schema.primary) if schema.primary else None
        if own_id is None:
            logger.debug("%s entity has no identifier; only aggregate keys invalidated", owner)

        ops: list[InvalidationOperation] = []

        if policy is InvalidationPolicy.REFERENCE:
            for p in schema.of_kind(PropertyKind.REFERENCE, PropertyKind.COLLECTION):
                if p.kind is PropertyKind.COLLECTION and not _entity_elements(p, scope):
                    continue
                fragment = (
                    _nested_id(entity, p, scope)
                    if p.kind is PropertyKind.REFERENCE
                    else own_id
                )
                if fragment is None:
                    continue
                ops.extend(_trio(p.bucket, fragment, owner))
            ops.extend(_trio(owner, own_id, owner))
            return ops

        for p in schema.properties:
            match p.kind:
                case PropertyKind.IDENTIFIER:
                    fragment = _value(entity, p.name)
                case PropertyKind.REFERENCE:
                    fragment = _nested_id(entity, p, scope)
                case _:
                    continue
            if fragment is None:
                logger.debug("skipping %s.%s: no identifier value", owner, p.name)
                continue
            ops.extend(_pair(p.bucket, fragment))

        if own_id is not None:
            ops.append(Exact(owner, own_id))
        ops.append(Exact(owner, ALL))
        return ops


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def _value(obj: object, name: str) -> str | None:
    value = getattr(obj, name, None)
    return None if value is None else stringify(value)


def _nested_id(entity: object, prop: PropertyDescriptor, scope: SchemaScope) -> str | None:
    nested = getattr(entity, prop.name, None)
    if nested is None:
        return None
    primary = scope.resolve(prop.target).primary
    if primary is None:
        logger.debug("%s has no identifier property; relation skipped", prop.target_name)
        return None
    return _value(nested, primary)


def _entity_elements(prop: PropertyDescriptor, scope: SchemaScope) -> bool:
    """Collection of entities; scalar and untyped elements have no bucket of their own."""
    return prop.target is not object and not scope.traits.is_scalar(prop.target)


# ═══════════════════════════════════════════════════════════════════════════════
# plan() — Entry Point
# ═══════════════════════════════════════════════════════════════════════════════


def plan(
    owner: str,
    parameter: object,
    policy: InvalidationPolicy = InvalidationPolicy.EXACT,
    schemas: SchemaProvider | None = None,
) -> Plan:
    """
    Plan invalidation for a mutation of `owner`'s bucket.

    Example:
        from shapecache import invalidation as V

        ops = V.plan("Customer", "7")
        # (Exact(Customer, '7'), Exact(Customer, 'all'))
    """
    return Planner(schemas if schemas is not None else SchemaProvider()).plan(
        owner, parameter, policy
    )


__all__ = ("Planner", "plan")
