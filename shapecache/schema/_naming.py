"""
Naming conventions — every name-derived rule in one value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def pascalize(name: str) -> str:
    """
    snake_case / camelCase → PascalCase.

    Already-PascalCase names are returned unchanged:
        customer     → Customer
        line_items   → LineItems
        Customer     → Customer
    """
    parts = [p for p in name.split("_") if p]
    return "".join(p[0].upper() + p[1:] for p in parts)


# ═══════════════════════════════════════════════════════════════════════════════
# Naming
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Naming:
    """
    Naming convention configuration.

    Both C#-style (`CustomerId`, `Id`) and Python-style (`customer_id`, `id`)
    spellings are recognised by default.

    Example:
        naming = (
            Naming()
            .with_owner_suffix("Repo")
            .with_plurals({"People": "Person"})
        )

    Note: Immutable — each method returns new Naming.
    """

    identifier_markers: tuple[str, ...] = ("Id", "_id")
    primary_identifiers: tuple[str, ...] = ("Id", "id")
    owner_suffix: str = "Repository"
    read_prefixes: tuple[str, ...] = ("get",)
    write_prefixes: tuple[str, ...] = ("create", "update", "delete")
    plurals: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    # ─── identifiers ──────────────────────────────────────────────────────────

    def identifier_index(self, name: str) -> int:
        """Position of the first identifier marker past index 0, or -1."""
        for marker in self.identifier_markers:
            idx = name.find(marker, 1)
            if idx > 0:
                return idx
        return -1

    def is_identifier(self, name: str) -> bool:
        return self.identifier_index(name) > 0

    def is_primary(self, name: str) -> bool:
        return name in self.primary_identifiers

    # ─── buckets ──────────────────────────────────────────────────────────────

    def owner_bucket(self, owner: str) -> str:
        """`CustomerRepository` → `Customer`. Names without the suffix are kept."""
        if self.owner_suffix and owner.endswith(self.owner_suffix) and owner != self.owner_suffix:
            return owner[: -len(self.owner_suffix)]
        return owner

    def identifier_bucket(self, name: str) -> str:
        """`customer_id` / `CustomerId` → `Customer`."""
        idx = self.identifier_index(name)
        return pascalize(name[:idx] if idx > 0 else name)

    def property_bucket(self, name: str) -> str:
        """`customer` → `Customer`."""
        return pascalize(name)

    def singular(self, plural: str) -> str:
        """
        Approximate singular of a PascalCase collection name.

        Explicit table first, then one trailing character truncated
        (`Tags` → `Tag`). Irregular plurals need a table entry.
        """
        if plural in self.plurals:
            return self.plurals[plural]
        return plural[:-1] if len(plural) > 1 else plural

    # ─── method roles ─────────────────────────────────────────────────────────

    def is_read(self, method: str) -> bool:
        return method.startswith(self.read_prefixes)

    def is_write(self, method: str) -> bool:
        return method.startswith(self.write_prefixes)

    # ─── fluent ───────────────────────────────────────────────────────────────

    def with_owner_suffix(self, suffix: str) -> Naming:
        return Naming(
            identifier_markers=self.identifier_markers,
            primary_identifiers=self.primary_identifiers,
            owner_suffix=suffix,
            read_prefixes=self.read_prefixes,
            write_prefixes=self.write_prefixes,
            plurals=self.plurals,
        )

    def with_prefixes(
        self,
        *,
        read: tuple[str, ...] | None = None,
        write: tuple[str, ...] | None = None,
    ) -> Naming:
        """
        Replace method-name prefixes.

        Example:
            .with_prefixes(read=("get", "find"), write=("save", "remove"))
        """
        return Naming(
            identifier_markers=self.identifier_markers,
            primary_identifiers=self.primary_identifiers,
            owner_suffix=self.owner_suffix,
            read_prefixes=read if read is not None else self.read_prefixes,
            write_prefixes=write if write is not None else self.write_prefixes,
            plurals=self.plurals,
        )

    def with_plurals(self, table: Mapping[str, str]) -> Naming:
        """Add plural → singular entries (merged over existing ones)."""
        return Naming(
            identifier_markers=self.identifier_markers,
            primary_identifiers=self.primary_identifiers,
            owner_suffix=self.owner_suffix,
            read_prefixes=self.read_prefixes,
            write_prefixes=self.write_prefixes,
            plurals=MappingProxyType({**self.plurals, **table}),
        )


__all__ = ("Naming", "pascalize")
