"""
Payload codec — JSON text through pydantic type adapters.
"""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import TypeAdapter


class Codec(Protocol):
    """Turns values of a declared type into store payloads and back."""

    def dump(self, value: Any, tp: Any) -> str: ...

    def load(self, payload: str | bytes, tp: Any) -> Any: ...


class JsonCodec:
    """
    JSON codec for dataclasses, pydantic models, and collections of them.

    Adapters are built once per declared type.

    Example:
        codec = JsonCodec()
        payload = codec.dump(order, Order)
        again = codec.load(payload, Order)
    """

    def __init__(self) -> None:
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    def adapter(self, tp: Any) -> TypeAdapter[Any]:
        adapter = self._adapters.get(tp)
        if adapter is None:
            adapter = self._adapters[tp] = TypeAdapter(tp)
        return adapter

    def dump(self, value: Any, tp: Any) -> str:
        return self.adapter(tp).dump_json(value).decode()

    def load(self, payload: str | bytes, tp: Any) -> Any:
        return self.adapter(tp).validate_json(payload)


__all__ = ("Codec", "JsonCodec")
