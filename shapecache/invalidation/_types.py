"""
Invalidation operation types.
"""

from __future__ import annotations

from dataclasses import dataclass

_GLOB_SPECIAL = frozenset("*?[")

# ═══════════════════════════════════════════════════════════════════════════════
# Operations — Independent, Idempotent
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Exact:
    """Remove one known sub-key from a bucket."""

    bucket: str
    sub_key: str

    def __str__(self) -> str:
        return f"Exact({self.bucket}, {self.sub_key!r})"


@dataclass(frozen=True, slots=True)
class Pattern:
    """
    Remove every sub-key of a bucket containing `fragment`.

    Note: Matches by substring — an unrelated key that happens to contain the
    fragment is removed too.
    """

    bucket: str
    fragment: str

    @property
    def glob(self) -> str:
        """`*<fragment>*` with glob metacharacters of the fragment escaped."""
        return f"*{escape_glob(self.fragment)}*"

    def __str__(self) -> str:
        return f"Pattern({self.bucket}, {self.glob!r})"


type InvalidationOperation = Exact | Pattern

type Plan = tuple[InvalidationOperation, ...]


def escape_glob(text: str) -> str:
    """Bracket-escape `*?[` so they match literally (fnmatch and Redis alike)."""
    return "".join(f"[{c}]" if c in _GLOB_SPECIAL else c for c in text)


__all__ = (
    "Exact",
    "Pattern",
    "InvalidationOperation",
    "Plan",
    "escape_glob",
)
