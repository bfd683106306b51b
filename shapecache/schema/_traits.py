"""
Type traits — host type-system queries used by classification.
"""

from __future__ import annotations

import dataclasses
import types
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, ForwardRef, Literal, Union, get_args, get_origin
from uuid import UUID

_TEXT: tuple[type, ...] = (str, bytes, bytearray)

_SCALARS: tuple[type, ...] = (
    *_TEXT,
    bool,
    int,
    float,
    complex,
    Decimal,
    UUID,
    datetime,
    date,
    time,
    timedelta,
    Enum,
    types.NoneType,
)


def _is_structured(cls: type) -> bool:
    """Dataclasses and pydantic models iterate, but are entities, not collections."""
    return dataclasses.is_dataclass(cls) or hasattr(cls, "model_fields")


class TypeTraits:
    """
    Default type capability.

    Subclass to teach classification about custom scalar types:

        class MoneyAwareTraits(TypeTraits):
            scalars = (*TypeTraits.scalars, Money)
    """

    scalars: tuple[type, ...] = _SCALARS
    text: tuple[type, ...] = _TEXT

    def unwrap(self, tp: object) -> object:
        """Strip `Annotated[...]` and `X | None` down to `X`."""
        origin = get_origin(tp)
        if origin is Annotated:
            return self.unwrap(get_args(tp)[0])
        if origin is Union or origin is types.UnionType:
            members = [a for a in get_args(tp) if a is not types.NoneType]
            if len(members) == 1:
                return self.unwrap(members[0])
        return tp

    def _class_of(self, tp: object) -> type | None:
        tp = self.unwrap(tp)
        cls = get_origin(tp) or tp
        return cls if isinstance(cls, type) else None

    def is_scalar(self, tp: object) -> bool:
        tp = self.unwrap(tp)
        if tp is None or tp is Any:
            return True
        origin = get_origin(tp)
        if origin is Union or origin is types.UnionType or origin is Literal:
            return True
        cls = self._class_of(tp)
        if cls is None:
            return not isinstance(tp, (str, ForwardRef))
        return issubclass(cls, self.scalars)

    def is_collection(self, tp: object) -> bool:
        cls = self._class_of(tp)
        if cls is None or issubclass(cls, self.text) or _is_structured(cls):
            return False
        return issubclass(cls, Iterable)

    def is_reference(self, tp: object) -> bool:
        cls = self._class_of(tp)
        if cls is None:
            return False
        return not self.is_scalar(tp) and not self.is_collection(tp)

    def element_type(self, tp: object) -> object:
        """Element type of a collection annotation; `object` when not parameterised."""
        tp = self.unwrap(tp)
        args = get_args(tp)
        if not args:
            return object
        cls = self._class_of(tp)
        if cls is not None and issubclass(cls, Mapping) and len(args) == 2:
            return self.unwrap(args[1])
        return self.unwrap(args[0])


__all__ = ("TypeTraits",)
