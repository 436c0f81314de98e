"""
Limb sequences and width masks.

A wide integer is stored as a fixed-length sequence of 64-bit limbs, least
significant limb first. Widths that are not a multiple of the limb size leave
unused bits in the top limb; `WidthMask` keeps those bits at zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable, Sequence

from typing_extensions import Self

from .exceptions import ValueOutOfRangeError

LIMB_BITS: Final = 64
"""Number of bits in a single limb."""

LIMB_MAX: Final = (1 << LIMB_BITS) - 1
"""Largest value a single limb can hold."""

LIMB_BYTES: Final = LIMB_BITS // 8
"""Number of bytes in a single limb."""


def limb_count(width: int) -> int:
    """Number of limbs needed for `width` bits."""
    return -(-width // LIMB_BITS)


def byte_count(width: int) -> int:
    """Number of bytes needed for `width` bits."""
    return -(-width // 8)


@dataclass(frozen=True, slots=True)
class WidthMask:
    """The set of valid bits for a declared width."""

    width: int
    """Declared number of significant bits."""

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError(f"Width must be positive, got {self.width}")

    @property
    def bits(self) -> int:
        """The mask as a single integer: `2^width - 1`."""
        return (1 << self.width) - 1

    @property
    def limb_count(self) -> int:
        """Number of limbs covering the width."""
        return limb_count(self.width)

    @property
    def top_limb(self) -> int:
        """Mask applied to the most significant limb."""
        spare = self.width % LIMB_BITS
        return LIMB_MAX if spare == 0 else (1 << spare) - 1

    def apply_word(self, word: int) -> int:
        """Clear every bit of a single word at or above the width."""
        return word & self.bits

    def apply(self, limbs: Sequence[int]) -> list[int]:
        """
        Truncate to the covering limb count and clear the bits above the width.

        Returns a new list; `limbs` may be longer than the width requires
        (e.g. a double-width product) but not shorter.
        """
        count = self.limb_count
        masked = [limb & LIMB_MAX for limb in limbs[:count]]
        masked[-1] &= self.top_limb
        return masked

    def exceeds(self, limbs: Sequence[int]) -> bool:
        """Return whether any bit at or above the width is set."""
        for index, limb in enumerate(limbs):
            start = index * LIMB_BITS
            if start >= self.width:
                if limb:
                    return True
            elif start + LIMB_BITS > self.width and limb >> (self.width - start):
                return True
        return False


def int_to_limbs(value: int, count: int) -> list[int]:
    """Split a non-negative integer into `count` limbs, least significant first."""
    return [(value >> (index * LIMB_BITS)) & LIMB_MAX for index in range(count)]


def limbs_to_int(limbs: Iterable[int]) -> int:
    """Join limbs (least significant first) into a single integer."""
    value = 0
    for index, limb in enumerate(limbs):
        value |= limb << (index * LIMB_BITS)
    return value


class LimbSequence(tuple[int, ...]):
    """
    An immutable, ordered sequence of 64-bit limbs, least significant first.

    Pure data: arithmetic lives in `fixwidth.types.arithmetic`.
    """

    __slots__ = ()

    def __new__(cls, limbs: Iterable[int] = ()) -> Self:
        """
        Create a limb sequence, validating every limb.

        Raises:
            TypeError: If a limb is not an int (bools are rejected).
            ValueOutOfRangeError: If a limb is outside [0, 2^64 - 1].
        """
        values = tuple(limbs)
        for limb in values:
            if not isinstance(limb, int) or isinstance(limb, bool):
                raise TypeError(f"Expected int limb, got {type(limb).__name__}")
            if not 0 <= limb <= LIMB_MAX:
                raise ValueOutOfRangeError(limb, "limb", max_value=LIMB_MAX)
        return super().__new__(cls, values)

    @classmethod
    def zeros(cls, count: int) -> Self:
        """Create a sequence of `count` zero limbs."""
        return cls([0] * count)

    @classmethod
    def from_int(cls, value: int, count: int) -> Self:
        """
        Split `value` into exactly `count` limbs.

        Raises:
            ValueOutOfRangeError: If `value` is negative or needs more than `count` limbs.
        """
        max_value = (1 << (count * LIMB_BITS)) - 1
        if not 0 <= value <= max_value:
            raise ValueOutOfRangeError(value, f"{count}-limb sequence", max_value=max_value)
        return cls(int_to_limbs(value, count))

    def to_int(self) -> int:
        """Join the limbs into a single integer."""
        return limbs_to_int(self)

    def masked(self, width: int) -> LimbSequence:
        """Return a copy with every bit at or above `width` cleared."""
        return LimbSequence(WidthMask(width).apply(self))

    def is_zero(self) -> bool:
        """Return whether every limb is zero."""
        return not any(self)

    def __repr__(self) -> str:
        return f"LimbSequence([{', '.join(f'{limb:#018x}' for limb in self)}])"
