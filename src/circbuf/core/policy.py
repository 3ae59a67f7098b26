"""Shrink policies understood by :meth:`RingBuffer.set_capacity`."""

from __future__ import annotations

from .errors import InvalidArgumentError

SHRINK_TRUNCATE = "truncate"
SHRINK_ERROR = "error"
SHRINK_POLICIES = frozenset({SHRINK_TRUNCATE, SHRINK_ERROR})


def normalize_shrink_policy(policy: str) -> str:
    """Return the canonical policy name or raise :class:`InvalidArgumentError`."""
    value = str(policy or "").strip().lower()
    if value not in SHRINK_POLICIES:
        raise InvalidArgumentError(
            f"unknown shrink policy {policy!r}; expected one of {sorted(SHRINK_POLICIES)}"
        )
    return value


__all__ = ["SHRINK_ERROR", "SHRINK_POLICIES", "SHRINK_TRUNCATE", "normalize_shrink_policy"]
