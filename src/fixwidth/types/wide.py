"""
Wide unsigned integers.

Widths of several machine words, stored as a fixed-length `LimbSequence` of
64-bit limbs (least significant first). Arithmetic runs on the limbs through
`fixwidth.types.arithmetic`; every result is passed through a `WidthMask`
before it becomes a value.
"""

from __future__ import annotations

from typing import Any, ClassVar, Iterable, Sequence

from pydantic_core import core_schema
from typing_extensions import Self

from fixwidth import config

from . import arithmetic
from .codec import ByteOrder, check_byteorder, limbs_from_bytes, limbs_to_bytes
from .exceptions import DivisionByZeroError, LengthMismatchError, ValueOutOfRangeError
from .fixed_base import FixedUint
from .limbs import LIMB_MAX, LimbSequence, WidthMask, int_to_limbs


class WideUint(FixedUint):
    """
    A base class for multi-limb unsigned integer types.

    Instances are immutable: the limb sequence is fixed at construction and
    attribute assignment is rejected.
    """

    __slots__ = ("_limbs",)

    BITS: ClassVar[int]
    """The number of bits in the integer (overridden by subclasses)."""

    _limbs: LimbSequence

    def __init__(self, value: Any = 0) -> None:
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
            raise TypeError(f"Expected int for {type(self).__name__}, got {type(value).__name__}")

        mask = WidthMask(self.BITS)
        if not 0 <= int_value <= mask.bits:
            raise ValueOutOfRangeError(int_value, type(self).__name__, max_value=mask.bits)
        object.__setattr__(self, "_limbs", LimbSequence(int_to_limbs(int_value, mask.limb_count)))

    @classmethod
    def from_limbs(cls, limbs: Iterable[int]) -> Self:
        """
        Create an instance from limbs, least significant first.

        Raises:
            LengthMismatchError: If the limb count does not match the width.
            ValueOutOfRangeError: If a limb is out of range or bits above the width are set.
        """
        sequence = LimbSequence(limbs)
        mask = WidthMask(cls.BITS)
        if len(sequence) != mask.limb_count:
            raise LengthMismatchError(
                cls.__name__, expected=mask.limb_count, actual=len(sequence), unit="limbs"
            )
        if mask.exceeds(sequence):
            raise ValueOutOfRangeError(sequence.to_int(), cls.__name__, max_value=mask.bits)
        return cls._wrap(sequence)

    @classmethod
    def _wrap(cls, limbs: LimbSequence) -> Self:
        instance = cls.__new__(cls)
        object.__setattr__(instance, "_limbs", limbs)
        return instance

    @classmethod
    def _make(cls, limbs: Sequence[int]) -> Self:
        """Wrap already-masked limbs, skipping validation outside test runs."""
        if config.CHECK_INVARIANTS:
            return cls.from_limbs(limbs)
        return cls._wrap(tuple.__new__(LimbSequence, limbs))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self) -> tuple[type[Self], tuple[int]]:
        return type(self), (self.as_int(),)

    @property
    def limbs(self) -> LimbSequence:
        """The underlying limbs, least significant first."""
        return self._limbs

    def as_int(self) -> int:
        return self._limbs.to_int()

    @classmethod
    def max_value(cls) -> Self:
        mask = WidthMask(cls.BITS)
        return cls._make(mask.apply([LIMB_MAX] * mask.limb_count))

    def low_u32(self) -> int:
        """Return the lowest 32 bits."""
        return self._limbs[0] & 0xFFFFFFFF

    def low_u64(self) -> int:
        """Return the lowest 64 bits (the first limb)."""
        return self._limbs[0]

    # =================================================================
    # Arithmetic
    # =================================================================

    def overflowing_add(self, other: Any) -> tuple[Self, bool]:
        other = self._check_operand(other, "+")
        mask = WidthMask(self.BITS)
        total, carry = arithmetic.add_limbs(self._limbs, other._limbs)
        return self._make(mask.apply(total)), bool(carry) or mask.exceeds(total)

    def overflowing_sub(self, other: Any) -> tuple[Self, bool]:
        other = self._check_operand(other, "-")
        diff, borrow = arithmetic.sub_limbs(self._limbs, other._limbs)
        return self._make(WidthMask(self.BITS).apply(diff)), bool(borrow)

    def overflowing_mul(self, other: Any) -> tuple[Self, bool]:
        other = self._check_operand(other, "*")
        mask = WidthMask(self.BITS)
        product = arithmetic.mul_limbs(self._limbs, other._limbs)
        return self._make(mask.apply(product)), mask.exceeds(product)

    def div_rem(self, other: Any) -> tuple[Self, Self]:
        other = self._check_operand(other, "divmod")
        if other._limbs.is_zero():
            raise DivisionByZeroError(type(self).__name__)
        quotient, remainder = arithmetic.divmod_limbs(self._limbs, other._limbs)
        return self._make(quotient), self._make(remainder)

    # =================================================================
    # Shifts and bitwise logic
    # =================================================================

    def shl(self, shift: Any) -> Self:
        count = self._count(shift, "<<")
        if count >= self.BITS:
            return self.zero()
        return self._make(WidthMask(self.BITS).apply(arithmetic.shl_limbs(self._limbs, count)))

    def shr(self, shift: Any) -> Self:
        count = self._count(shift, ">>")
        if count >= self.BITS:
            return self.zero()
        return self._make(arithmetic.shr_limbs(self._limbs, count))

    def bitand(self, other: Any) -> Self:
        other = self._check_operand(other, "&")
        return self._make(arithmetic.and_limbs(self._limbs, other._limbs))

    def bitor(self, other: Any) -> Self:
        other = self._check_operand(other, "|")
        limbs = arithmetic.or_limbs(self._limbs, other._limbs)
        return self._make(WidthMask(self.BITS).apply(limbs))

    def bitxor(self, other: Any) -> Self:
        other = self._check_operand(other, "^")
        limbs = arithmetic.xor_limbs(self._limbs, other._limbs)
        return self._make(WidthMask(self.BITS).apply(limbs))

    def invert(self) -> Self:
        return self._make(WidthMask(self.BITS).apply(arithmetic.not_limbs(self._limbs)))

    # =================================================================
    # Inspection
    # =================================================================

    def compare(self, other: Any) -> int:
        other = self._check_operand(other, "compare")
        return arithmetic.compare_limbs(self._limbs, other._limbs)

    def bit(self, index: int) -> bool:
        return arithmetic.get_bit(self._limbs, self._bit_index(index))

    def bits_required(self) -> int:
        return arithmetic.bits_required(self._limbs)

    def is_zero(self) -> bool:
        return self._limbs.is_zero()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(0x{self.to_hex()})"

    # =================================================================
    # Bytes
    # =================================================================

    def to_bytes(self, byteorder: ByteOrder = "big") -> bytes:
        """Return exactly `ceil(BITS / 8)` bytes, big-endian unless asked otherwise."""
        return limbs_to_bytes(self._limbs, self.BITS, check_byteorder(byteorder))

    @classmethod
    def from_bytes(cls, data: bytes, byteorder: ByteOrder = "big") -> Self:
        limbs = limbs_from_bytes(bytes(data), cls.BITS, check_byteorder(byteorder), cls.__name__)
        return cls._make(limbs)

    # =================================================================
    # Pydantic
    # =================================================================

    @classmethod
    def _coerce(cls, value: Any) -> Self:
        """
        Accept an int, another fixed-width integer, hex text or big-endian bytes.

        Hex text and bytes must cover exactly the width, as in `from_hex` and
        `from_bytes`.
        """
        if isinstance(value, str):
            return cls.from_hex(value)
        if isinstance(value, (bytes, bytearray)):
            return cls.from_bytes(bytes(value), "big")
        return cls(value)

    @classmethod
    def _json_input_schema(cls) -> core_schema.CoreSchema:
        return core_schema.union_schema(
            [core_schema.str_schema(), core_schema.int_schema(ge=0)]
        )

    def _serialize(self) -> str:
        return self.to_hex()


class Uint256(WideUint):
    """A type representing a 256-bit unsigned integer (uint256)."""

    BITS = 256


class Uint512(WideUint):
    """A type representing a 512-bit unsigned integer (uint512)."""

    BITS = 512


class Uint1024(WideUint):
    """A type representing a 1024-bit unsigned integer (uint1024)."""

    BITS = 1024
