"""
Interception options — behavior configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from shapecache._types import InvalidationPolicy

DEFAULT_TTL = timedelta(minutes=20)


@dataclass(frozen=True, slots=True)
class CacheOptions:
    """
    Interception configuration.

    Fluent builder pattern — chain methods to configure.

    Example:
        options = (
            CacheOptions()
            .with_reference_policy()
            .with_ttl(minutes=5)
            .with_context_types(CancelScope)
        )

    enable_interception: master switch; off means every call goes straight
        through and the store is never touched.
    use_reference_policy: wildcard invalidation and scan-based entity reads
        instead of exact ones.

    Note: Immutable — each method returns new CacheOptions.
    """

    enable_interception: bool = True
    use_reference_policy: bool = False
    ttl: timedelta | None = DEFAULT_TTL
    context_types: tuple[type, ...] = ()

    @property
    def policy(self) -> InvalidationPolicy:
        if self.use_reference_policy:
            return InvalidationPolicy.REFERENCE
        return InvalidationPolicy.EXACT

    def with_interception(self, enabled: bool = True) -> CacheOptions:
        return CacheOptions(
            enable_interception=enabled,
            use_reference_policy=self.use_reference_policy,
            ttl=self.ttl,
            context_types=self.context_types,
        )

    def with_reference_policy(self, enabled: bool = True) -> CacheOptions:
        return CacheOptions(
            enable_interception=self.enable_interception,
            use_reference_policy=enabled,
            ttl=self.ttl,
            context_types=self.context_types,
        )

    def with_ttl(
        self,
        *,
        seconds: float | None = None,
        minutes: float | None = None,
        hours: float | None = None,
        delta: timedelta | None = None,
    ) -> CacheOptions:
        """
        Set TTL for written entries. Zero means no expiry.

        Example:
            .with_ttl(minutes=20)
            .with_ttl(delta=timedelta(hours=1))
        """
        if delta is not None:
            ttl_val: timedelta | None = delta
        else:
            total_seconds = (seconds or 0) + (minutes or 0) * 60 + (hours or 0) * 3600
            ttl_val = timedelta(seconds=total_seconds) if total_seconds > 0 else None
        return CacheOptions(
            enable_interception=self.enable_interception,
            use_reference_policy=self.use_reference_policy,
            ttl=ttl_val,
            context_types=self.context_types,
        )

    def with_context_types(self, *types: type) -> CacheOptions:
        """Extra parameter types to skip when deriving keys."""
        return CacheOptions(
            enable_interception=self.enable_interception,
            use_reference_policy=self.use_reference_policy,
            ttl=self.ttl,
            context_types=(*self.context_types, *types),
        )


__all__ = ("CacheOptions", "DEFAULT_TTL")
