"""Fixed-width unsigned integer types."""

from .exceptions import (
    DivisionByZeroError,
    FixedWidthError,
    InvalidDecimalDigitError,
    InvalidHexDigitError,
    LengthMismatchError,
    OddLengthError,
    OverflowOnDecodeError,
    UintArithmeticError,
    UintDecodeError,
    UintOverflowError,
    UintStreamError,
    UintUnderflowError,
    ValueOutOfRangeError,
    WidthMismatchError,
)
from .fixed_base import FixedUint
from .limbs import LIMB_BITS, LimbSequence, WidthMask
from .policy import OverflowPolicy
from .precise import PreciseUint, Uint1, Uint2, Uint3, Uint4, Uint5, Uint6, Uint7, Uint24
from .wide import Uint256, Uint512, Uint1024, WideUint

__all__ = [
    # Core types
    "FixedUint",
    "PreciseUint",
    "WideUint",
    "Uint1",
    "Uint2",
    "Uint3",
    "Uint4",
    "Uint5",
    "Uint6",
    "Uint7",
    "Uint24",
    "Uint256",
    "Uint512",
    "Uint1024",
    "OverflowPolicy",
    "LimbSequence",
    "WidthMask",
    "LIMB_BITS",
    # Exceptions
    "FixedWidthError",
    "WidthMismatchError",
    "ValueOutOfRangeError",
    "UintArithmeticError",
    "UintOverflowError",
    "UintUnderflowError",
    "DivisionByZeroError",
    "UintDecodeError",
    "LengthMismatchError",
    "OddLengthError",
    "InvalidHexDigitError",
    "InvalidDecimalDigitError",
    "OverflowOnDecodeError",
    "UintStreamError",
]
