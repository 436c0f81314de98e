"""Overflow policies for fixed-width arithmetic."""

from __future__ import annotations

from enum import Enum


class OverflowPolicy(Enum):
    """How an operation disposes of a result that does not fit the width."""

    CHECKED = "checked"
    """Raise `UintOverflowError` or `UintUnderflowError`."""

    WRAPPING = "wrapping"
    """Truncate the result modulo 2^width."""

    SATURATING = "saturating"
    """Clamp to the maximum value on overflow, or to zero on underflow."""

    @classmethod
    def coerce(cls, policy: OverflowPolicy | str) -> OverflowPolicy:
        """Accept either a member or its string value (case-insensitive)."""
        if isinstance(policy, cls):
            return policy
        if isinstance(policy, str):
            return cls(policy.lower())
        raise TypeError(f"Expected OverflowPolicy or str, got {type(policy).__name__}")
