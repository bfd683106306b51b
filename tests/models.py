"""Entities shared by the test modules."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Customer:
    id: int
    name: str = ""


@dataclass
class Tag:
    id: int
    label: str = ""


@dataclass
class Order:
    id: int
    customer: Customer | None = None
    total: float = 0.0


@dataclass
class Post:
    id: int
    tags: list[Tag] = field(default_factory=list)


@dataclass
class Invoice:
    id: int
    customer_id: int | None = None
    amount: float = 0.0


@dataclass
class Shipment:
    Id: int
    CustomerId: int
    Notes: str = ""


@dataclass
class Article:
    id: int
    labels: list[str] = field(default_factory=list)
    counters: dict[str, int] = field(default_factory=dict)
    extras: list = field(default_factory=list)


@dataclass
class Referral:
    id: int
    customer_id: int | None = None
    customer: Customer | None = None
