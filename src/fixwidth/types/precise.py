"""
Precise-width unsigned integers.

Widths that fit in a single machine word but are not a standard byte size.
Values are stored as a plain `int` word; every operation computes on the word
and clears the bits above the width through a `WidthMask`.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic_core import core_schema
from typing_extensions import Self

from fixwidth import config

from .codec import ByteOrder, check_byteorder, word_from_bytes
from .exceptions import DivisionByZeroError, ValueOutOfRangeError
from .fixed_base import FixedUint
from .limbs import WidthMask, byte_count


class PreciseUint(FixedUint, int):
    """
    A base class for sub-word unsigned integer types that inherits from `int`.

    Arithmetic and comparison operators are provided by `FixedUint` and take
    precedence over the inherited `int` ones, so mixing with plain ints is
    rejected instead of silently widening.
    """

    __slots__ = ()

    BITS: ClassVar[int]
    """The number of bits in the integer (overridden by subclasses)."""

    def __new__(cls, value: Any = 0) -> Self:
        """
        Create and validate a new instance.

        Raises:
            TypeError: If `value` is not an int or a fixed-width integer.
            ValueOutOfRangeError: If `value` is outside [0, 2**BITS - 1].
        """
        if isinstance(value, FixedUint):
            int_value = value.as_int()
        elif isinstance(value, int) and not isinstance(value, bool):
            int_value = int(value)
        else:
            raise TypeError(f"Expected int for {cls.__name__}, got {type(value).__name__}")

        max_value = WidthMask(cls.BITS).bits
        if not 0 <= int_value <= max_value:
            raise ValueOutOfRangeError(int_value, cls.__name__, max_value=max_value)
        return super().__new__(cls, int_value)

    @classmethod
    def _make(cls, word: int) -> Self:
        """Wrap an already-masked word, skipping validation outside test runs."""
        if config.CHECK_INVARIANTS:
            return cls(word)
        return int.__new__(cls, word)

    def as_int(self) -> int:
        return int.__int__(self)

    @classmethod
    def max_value(cls) -> Self:
        return cls._make(WidthMask(cls.BITS).bits)

    # Arithmetic

    def overflowing_add(self, other: Any) -> tuple[Self, bool]:
        other = self._check_operand(other, "+")
        total = self.as_int() + other.as_int()
        wrapped = WidthMask(self.BITS).apply_word(total)
        return self._make(wrapped), wrapped != total

    def overflowing_sub(self, other: Any) -> tuple[Self, bool]:
        other = self._check_operand(other, "-")
        diff = self.as_int() - other.as_int()
        return self._make(WidthMask(self.BITS).apply_word(diff)), diff < 0

    def overflowing_mul(self, other: Any) -> tuple[Self, bool]:
        other = self._check_operand(other, "*")
        product = self.as_int() * other.as_int()
        wrapped = WidthMask(self.BITS).apply_word(product)
        return self._make(wrapped), wrapped != product

    def div_rem(self, other: Any) -> tuple[Self, Self]:
        other = self._check_operand(other, "divmod")
        divisor = other.as_int()
        if divisor == 0:
            raise DivisionByZeroError(type(self).__name__)
        quotient, remainder = divmod(self.as_int(), divisor)
        return self._make(quotient), self._make(remainder)

    # Shifts and bitwise logic

    def shl(self, shift: Any) -> Self:
        count = self._count(shift, "<<")
        if count >= self.BITS:
            return self.zero()
        return self._make(WidthMask(self.BITS).apply_word(self.as_int() << count))

    def shr(self, shift: Any) -> Self:
        count = self._count(shift, ">>")
        if count >= self.BITS:
            return self.zero()
        return self._make(self.as_int() >> count)

    def bitand(self, other: Any) -> Self:
        other = self._check_operand(other, "&")
        return self._make(self.as_int() & other.as_int())

    def bitor(self, other: Any) -> Self:
        other = self._check_operand(other, "|")
        return self._make(self.as_int() | other.as_int())

    def bitxor(self, other: Any) -> Self:
        other = self._check_operand(other, "^")
        return self._make(self.as_int() ^ other.as_int())

    def invert(self) -> Self:
        return self._make(WidthMask(self.BITS).apply_word(~self.as_int()))

    # Inspection

    def compare(self, other: Any) -> int:
        other = self._check_operand(other, "compare")
        a, b = self.as_int(), other.as_int()
        return (a > b) - (a < b)

    def bit(self, index: int) -> bool:
        return bool((self.as_int() >> self._bit_index(index)) & 1)

    def bits_required(self) -> int:
        return self.as_int().bit_length()

    # Bytes

    def to_bytes(self, byteorder: ByteOrder = "big") -> bytes:  # type: ignore[override]
        """Return exactly `ceil(BITS / 8)` bytes, big-endian unless asked otherwise."""
        return int.to_bytes(self, byte_count(self.BITS), check_byteorder(byteorder))

    @classmethod
    def from_bytes(cls, data: bytes, byteorder: ByteOrder = "big") -> Self:  # type: ignore[override]
        word = word_from_bytes(bytes(data), cls.BITS, check_byteorder(byteorder), cls.__name__)
        return cls._make(word)

    # Pydantic

    @classmethod
    def _coerce(cls, value: Any) -> Self:
        if not isinstance(value, int):
            raise TypeError(f"Expected int for {cls.__name__}, got {type(value).__name__}")
        return cls(value)

    @classmethod
    def _json_input_schema(cls) -> core_schema.CoreSchema:
        return core_schema.int_schema(strict=True, ge=0, lt=2**cls.BITS)

    def _serialize(self) -> int:
        return self.as_int()


class Uint1(PreciseUint):
    """A type representing a 1-bit unsigned integer (uint1)."""

    BITS = 1


class Uint2(PreciseUint):
    """A type representing a 2-bit unsigned integer (uint2)."""

    BITS = 2


class Uint3(PreciseUint):
    """A type representing a 3-bit unsigned integer (uint3)."""

    BITS = 3


class Uint4(PreciseUint):
    """A type representing a 4-bit unsigned integer (uint4)."""

    BITS = 4


class Uint5(PreciseUint):
    """A type representing a 5-bit unsigned integer (uint5)."""

    BITS = 5


class Uint6(PreciseUint):
    """A type representing a 6-bit unsigned integer (uint6)."""

    BITS = 6


class Uint7(PreciseUint):
    """A type representing a 7-bit unsigned integer (uint7)."""

    BITS = 7


class Uint24(PreciseUint):
    """A type representing a 24-bit unsigned integer (uint24)."""

    BITS = 24
