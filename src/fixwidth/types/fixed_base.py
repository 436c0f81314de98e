"""Base class and shared contract for all fixed-width unsigned integer types."""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from typing import IO, Any, ClassVar, SupportsIndex

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema
from typing_extensions import Self

from .codec import ByteOrder, decode_hex, encode_hex, parse_decimal
from .exceptions import (
    FixedWidthError,
    LengthMismatchError,
    UintOverflowError,
    UintStreamError,
    UintUnderflowError,
    WidthMismatchError,
)
from .limbs import byte_count
from .policy import OverflowPolicy

logger = logging.getLogger(__name__)


class FixedUint(ABC):
    """
    Abstract base for unsigned integers of a fixed declared width.

    Concrete families implement the primitive operations (overflowing
    arithmetic, division, shifts, bitwise logic, comparison and byte
    conversion). Everything else, including policies, operators, text
    codecs, stream serialization and Pydantic integration, is built here
    on top of them.
    """

    __slots__ = ()

    BITS: ClassVar[int]
    """The declared width in bits (overridden by subclasses)."""

    # =================================================================
    # Primitives
    # =================================================================

    @abstractmethod
    def as_int(self) -> int:
        """Return the value as a plain Python `int`."""

    @classmethod
    @abstractmethod
    def max_value(cls) -> Self:
        """Return the largest representable value, `2^BITS - 1`."""

    @abstractmethod
    def overflowing_add(self, other: Any) -> tuple[Self, bool]:
        """
        Compute `self + other` modulo 2^BITS.

        Returns:
            The wrapped sum and whether the true sum exceeded the width.
        """

    @abstractmethod
    def overflowing_sub(self, other: Any) -> tuple[Self, bool]:
        """
        Compute `self - other` modulo 2^BITS.

        Returns:
            The wrapped difference and whether the true difference was negative.
        """

    @abstractmethod
    def overflowing_mul(self, other: Any) -> tuple[Self, bool]:
        """
        Compute `self * other` modulo 2^BITS.

        Returns:
            The truncated product and whether nonzero bits were truncated.
        """

    @abstractmethod
    def div_rem(self, other: Any) -> tuple[Self, Self]:
        """
        Divide, returning `(quotient, remainder)`.

        Raises:
            DivisionByZeroError: If `other` is zero.
        """

    @abstractmethod
    def shl(self, shift: Any) -> Self:
        """Shift left, discarding bits pushed above the width."""

    @abstractmethod
    def shr(self, shift: Any) -> Self:
        """Logical shift right."""

    @abstractmethod
    def bitand(self, other: Any) -> Self:
        """Bitwise AND."""

    @abstractmethod
    def bitor(self, other: Any) -> Self:
        """Bitwise OR."""

    @abstractmethod
    def bitxor(self, other: Any) -> Self:
        """Bitwise XOR."""

    @abstractmethod
    def invert(self) -> Self:
        """Bitwise NOT within the width."""

    @abstractmethod
    def compare(self, other: Any) -> int:
        """
        Three-way comparison with a value of the same width.

        Returns:
            -1, 0 or 1.

        Raises:
            WidthMismatchError: If `other` has a different width.
        """

    @abstractmethod
    def bit(self, index: int) -> bool:
        """Return whether bit `index` is set."""

    @abstractmethod
    def bits_required(self) -> int:
        """Return the least number of bits needed to represent the value."""

    @abstractmethod
    def to_bytes(self, byteorder: ByteOrder = "big") -> bytes:
        """Encode as exactly `ceil(BITS / 8)` bytes."""

    @classmethod
    @abstractmethod
    def from_bytes(cls, data: bytes, byteorder: ByteOrder = "big") -> Self:
        """
        Decode exactly `ceil(BITS / 8)` bytes.

        Raises:
            LengthMismatchError: On the wrong number of bytes.
            OverflowOnDecodeError: If bits above the width are set.
        """

    # =================================================================
    # Constants and constructors
    # =================================================================

    @classmethod
    def zero(cls) -> Self:
        """Return the value 0."""
        return cls(0)  # type: ignore[call-arg]

    @classmethod
    def one(cls) -> Self:
        """Return the value 1."""
        return cls(1)  # type: ignore[call-arg]

    @classmethod
    def min_value(cls) -> Self:
        """Return the smallest representable value (always 0)."""
        return cls.zero()

    @classmethod
    def from_hex(cls, text: str) -> Self:
        """
        Parse big-endian hex text (either case, optional `0x` prefix).

        Raises:
            InvalidHexDigitError: On a non-hex character.
            OddLengthError: On an odd digit count for a byte-aligned width.
            LengthMismatchError: If the digits do not cover exactly the width.
            OverflowOnDecodeError: If bits above the width are set.
        """
        return cls.from_bytes(decode_hex(text, cls.BITS, cls.__name__), "big")

    @classmethod
    def from_str(cls, text: str) -> Self:
        """
        Parse ASCII decimal text.

        Raises:
            InvalidDecimalDigitError: On empty input or a non-digit character.
            ValueOutOfRangeError: If the value does not fit the width.
        """
        return cls(parse_decimal(text, cls.BITS, cls.__name__))  # type: ignore[call-arg]

    def to_hex(self) -> str:
        """Return lowercase big-endian hex, exactly two digits per byte, no prefix."""
        return encode_hex(self.to_bytes("big"))

    def is_zero(self) -> bool:
        """Return whether the value is zero."""
        return self.bits_required() == 0

    # =================================================================
    # Operand handling
    # =================================================================

    def _raise_type_error(self, other: Any, op_symbol: str) -> None:
        """Helper to raise a consistent TypeError."""
        raise TypeError(
            f"Unsupported operand type(s) for {op_symbol}: "
            f"'{type(self).__name__}' and '{type(other).__name__}'"
        )

    def _check_operand(self, other: Any, op_symbol: str) -> Self:
        """Ensure `other` is a fixed-width value of the same width."""
        if not isinstance(other, FixedUint):
            self._raise_type_error(other, op_symbol)
        if other.BITS != self.BITS:
            raise WidthMismatchError(self.BITS, other.BITS, operation=op_symbol)
        if not isinstance(other, type(self)) and not isinstance(self, type(other)):
            # Same width, different family or unrelated subclass: convert by value.
            return type(self)(other.as_int())  # type: ignore[call-arg]
        return other  # type: ignore[return-value]

    def _count(self, value: Any, op_symbol: str, what: str = "shift count") -> int:
        """Normalize a shift count or exponent to a non-negative int."""
        if isinstance(value, FixedUint):
            count = value.as_int()
        elif isinstance(value, int) and not isinstance(value, bool):
            count = int(value)
        else:
            self._raise_type_error(value, op_symbol)
        if count < 0:
            raise ValueError(f"negative {what}")
        return count

    def _bit_index(self, index: Any) -> int:
        """Validate a bit index against the width."""
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"Bit index must be an int, got {type(index).__name__}")
        if not 0 <= index < self.BITS:
            raise IndexError(f"Bit index {index} out of range for {type(self).__name__}")
        return int(index)

    # =================================================================
    # Policy arithmetic
    # =================================================================

    def _resolve(
        self,
        operation: str,
        wrapped: Self,
        overflowed: bool,
        policy: OverflowPolicy,
        *,
        underflow: bool = False,
    ) -> Self:
        """Apply `policy` to the outcome of an overflowing primitive."""
        if not overflowed:
            return wrapped

        type_name = type(self).__name__
        if policy is OverflowPolicy.CHECKED:
            if underflow:
                raise UintUnderflowError(type_name, operation)
            raise UintOverflowError(type_name, operation)

        direction = "underflowed" if underflow else "overflowed"
        if policy is OverflowPolicy.SATURATING:
            bound = self.min_value() if underflow else self.max_value()
            logger.debug("%s %s %s; saturating to %s", type_name, operation, direction, bound)
            return bound

        logger.debug("%s %s %s; wrapping to %s", type_name, operation, direction, wrapped)
        return wrapped

    def add(self, other: Any, policy: OverflowPolicy | str = OverflowPolicy.CHECKED) -> Self:
        """Add under the given overflow policy."""
        policy = OverflowPolicy.coerce(policy)
        wrapped, overflowed = self.overflowing_add(other)
        return self._resolve("add", wrapped, overflowed, policy)

    def sub(self, other: Any, policy: OverflowPolicy | str = OverflowPolicy.CHECKED) -> Self:
        """Subtract under the given overflow policy; underflow saturates to zero."""
        policy = OverflowPolicy.coerce(policy)
        wrapped, underflowed = self.overflowing_sub(other)
        return self._resolve("sub", wrapped, underflowed, policy, underflow=True)

    def mul(self, other: Any, policy: OverflowPolicy | str = OverflowPolicy.CHECKED) -> Self:
        """Multiply under the given overflow policy."""
        policy = OverflowPolicy.coerce(policy)
        wrapped, overflowed = self.overflowing_mul(other)
        return self._resolve("mul", wrapped, overflowed, policy)

    def pow(self, exponent: Any, policy: OverflowPolicy | str = OverflowPolicy.CHECKED) -> Self:
        """
        Raise to a non-negative integer power by square-and-multiply.

        Every squaring that is computed is also used, so the overflow flag is
        exact: it is set if and only if the true power exceeds the width.
        """
        policy = OverflowPolicy.coerce(policy)
        remaining = self._count(exponent, "** or pow()", "exponent")

        result, base = self.one(), self
        overflowed = False
        while remaining:
            if remaining & 1:
                result, flag = result.overflowing_mul(base)
                overflowed = overflowed or flag
            remaining >>= 1
            if remaining:
                base, flag = base.overflowing_mul(base)
                overflowed = overflowed or flag
        return self._resolve("pow", result, overflowed, policy)

    def checked_add(self, other: Any) -> Self:
        """Add, raising `UintOverflowError` on overflow."""
        return self.add(other, OverflowPolicy.CHECKED)

    def wrapping_add(self, other: Any) -> Self:
        """Add modulo 2^BITS."""
        return self.add(other, OverflowPolicy.WRAPPING)

    def saturating_add(self, other: Any) -> Self:
        """Add, clamping at the maximum value."""
        return self.add(other, OverflowPolicy.SATURATING)

    def checked_sub(self, other: Any) -> Self:
        """Subtract, raising `UintUnderflowError` on underflow."""
        return self.sub(other, OverflowPolicy.CHECKED)

    def wrapping_sub(self, other: Any) -> Self:
        """Subtract modulo 2^BITS."""
        return self.sub(other, OverflowPolicy.WRAPPING)

    def saturating_sub(self, other: Any) -> Self:
        """Subtract, clamping at zero."""
        return self.sub(other, OverflowPolicy.SATURATING)

    def checked_mul(self, other: Any) -> Self:
        """Multiply, raising `UintOverflowError` on overflow."""
        return self.mul(other, OverflowPolicy.CHECKED)

    def wrapping_mul(self, other: Any) -> Self:
        """Multiply modulo 2^BITS."""
        return self.mul(other, OverflowPolicy.WRAPPING)

    def saturating_mul(self, other: Any) -> Self:
        """Multiply, clamping at the maximum value."""
        return self.mul(other, OverflowPolicy.SATURATING)

    def increment(self, policy: OverflowPolicy | str = OverflowPolicy.CHECKED) -> Self:
        """Return `self + 1` under the given policy."""
        return self.add(self.one(), policy)

    def decrement(self, policy: OverflowPolicy | str = OverflowPolicy.CHECKED) -> Self:
        """Return `self - 1` under the given policy."""
        return self.sub(self.one(), policy)

    def wrapping_neg(self) -> Self:
        """Two's complement negation modulo 2^BITS; zero maps to zero."""
        return self.invert().wrapping_add(self.one())

    def div(self, other: Any) -> Self:
        """Integer quotient."""
        return self.div_rem(other)[0]

    def rem(self, other: Any) -> Self:
        """Integer remainder."""
        return self.div_rem(other)[1]

    def checked_shl(self, shift: Any) -> Self:
        """Shift left, raising `UintOverflowError` if `shift >= BITS`."""
        if self._count(shift, "<<") >= self.BITS:
            raise UintOverflowError(type(self).__name__, "shl")
        return self.shl(shift)

    def checked_shr(self, shift: Any) -> Self:
        """Shift right, raising `UintOverflowError` if `shift >= BITS`."""
        if self._count(shift, ">>") >= self.BITS:
            raise UintOverflowError(type(self).__name__, "shr")
        return self.shr(shift)

    # =================================================================
    # Operators
    # =================================================================

    def __add__(self, other: Any) -> Self:
        """Handle the addition operator (`+`), checked."""
        return self.add(other)

    def __sub__(self, other: Any) -> Self:
        """Handle the subtraction operator (`-`), checked."""
        return self.sub(other)

    def __mul__(self, other: Any) -> Self:
        """Handle the multiplication operator (`*`), checked."""
        return self.mul(other)

    def __pow__(self, exponent: Any, modulo: Any | None = None) -> Self:
        """Handle the exponentiation operator (`**`), checked."""
        if modulo is not None:
            self._raise_type_error(modulo, "pow() with modulus")
        return self.pow(exponent)

    def __floordiv__(self, other: Any) -> Self:
        """Handle the floor division operator (`//`)."""
        return self.div(other)

    def __mod__(self, other: Any) -> Self:
        """Handle the modulo operator (`%`)."""
        return self.rem(other)

    def __divmod__(self, other: Any) -> tuple[Self, Self]:
        """Handle `divmod(self, other)`."""
        return self.div_rem(other)

    def __and__(self, other: Any) -> Self:
        """Handle the bitwise AND operator (`&`)."""
        return self.bitand(other)

    def __or__(self, other: Any) -> Self:
        """Handle the bitwise OR operator (`|`)."""
        return self.bitor(other)

    def __xor__(self, other: Any) -> Self:
        """Handle the bitwise XOR operator (`^`)."""
        return self.bitxor(other)

    def __invert__(self) -> Self:
        """Handle the bitwise NOT operator (`~`)."""
        return self.invert()

    def __lshift__(self, shift: Any) -> Self:
        """Handle the left bit-shift operator (`<<`)."""
        return self.shl(shift)

    def __rshift__(self, shift: Any) -> Self:
        """Handle the right bit-shift operator (`>>`)."""
        return self.shr(shift)

    def __radd__(self, other: Any) -> Self:
        self._raise_type_error(other, "+")

    def __rsub__(self, other: Any) -> Self:
        self._raise_type_error(other, "-")

    def __rmul__(self, other: Any) -> Self:
        self._raise_type_error(other, "*")

    def __rpow__(self, other: Any) -> Self:  # type: ignore[misc]
        self._raise_type_error(other, "**")

    def __rfloordiv__(self, other: Any) -> Self:
        self._raise_type_error(other, "//")

    def __rmod__(self, other: Any) -> Self:
        self._raise_type_error(other, "%")

    def __rdivmod__(self, other: Any) -> tuple[Self, Self]:
        self._raise_type_error(other, "divmod")

    def __rand__(self, other: Any) -> Self:
        self._raise_type_error(other, "&")

    def __ror__(self, other: Any) -> Self:
        self._raise_type_error(other, "|")

    def __rxor__(self, other: Any) -> Self:
        self._raise_type_error(other, "^")

    def __rlshift__(self, other: Any) -> Self:
        self._raise_type_error(other, "<<")

    def __rrshift__(self, other: Any) -> Self:
        self._raise_type_error(other, ">>")

    def __truediv__(self, other: Any) -> Self:
        raise TypeError(f"True division is not supported for {type(self).__name__}; use //")

    def __rtruediv__(self, other: Any) -> Self:
        raise TypeError(f"True division is not supported for {type(self).__name__}; use //")

    def __neg__(self) -> Self:
        raise TypeError(f"Cannot negate unsigned {type(self).__name__}; use wrapping_neg()")

    def __pos__(self) -> Self:
        return self

    def __abs__(self) -> Self:
        return self

    # =================================================================
    # Ordering
    # =================================================================

    def __eq__(self, other: object) -> bool:
        """Handle the equality operator (`==`)."""
        return self.compare(self._check_operand(other, "==")) == 0

    def __ne__(self, other: object) -> bool:
        """Handle the inequality operator (`!=`)."""
        return self.compare(self._check_operand(other, "!=")) != 0

    def __lt__(self, other: Any) -> bool:
        """Handle the less-than operator (`<`)."""
        return self.compare(self._check_operand(other, "<")) < 0

    def __le__(self, other: Any) -> bool:
        """Handle the less-than-or-equal-to operator (`<=`)."""
        return self.compare(self._check_operand(other, "<=")) <= 0

    def __gt__(self, other: Any) -> bool:
        """Handle the greater-than operator (`>`)."""
        return self.compare(self._check_operand(other, ">")) > 0

    def __ge__(self, other: Any) -> bool:
        """Handle the greater-than-or-equal-to operator (`>=`)."""
        return self.compare(self._check_operand(other, ">=")) >= 0

    def __hash__(self) -> int:
        """Return a distinct hash for the object."""
        return hash((type(self), self.as_int()))

    # =================================================================
    # Conversions
    # =================================================================

    def __int__(self) -> int:
        return self.as_int()

    def __index__(self) -> int:
        return self.as_int()

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __str__(self) -> str:
        """Return the decimal representation."""
        return str(self.as_int())

    def __repr__(self) -> str:
        """Return the official string representation of the object."""
        return f"{type(self).__name__}({self.as_int()})"

    def __format__(self, format_spec: str) -> str:
        """Format using the underlying integer's formatting."""
        return format(self.as_int(), format_spec)

    # =================================================================
    # Fixed-size serialization
    # =================================================================

    @classmethod
    def is_fixed_size(cls) -> bool:
        """Fixed-width integers always encode to the same number of bytes."""
        return True

    @classmethod
    def get_byte_length(cls) -> int:
        """Number of bytes in the encoding: `ceil(BITS / 8)`."""
        return byte_count(cls.BITS)

    def encode_bytes(self) -> bytes:
        """Return the canonical (big-endian) encoding."""
        return self.to_bytes("big")

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        """Parse the canonical (big-endian) encoding."""
        return cls.from_bytes(data, "big")

    def serialize(self, stream: IO[bytes]) -> int:
        """
        Write the canonical encoding to `stream`.

        Returns:
            Number of bytes written (always `get_byte_length()`).
        """
        data = self.encode_bytes()
        stream.write(data)
        return len(data)

    @classmethod
    def deserialize(cls, stream: IO[bytes], scope: int) -> Self:
        """
        Read exactly `scope` bytes from `stream` and decode them.

        Raises:
            LengthMismatchError: If `scope` differs from `get_byte_length()`.
            UintStreamError: If the stream ends prematurely.
        """
        expected = cls.get_byte_length()
        if scope != expected:
            raise LengthMismatchError(cls.__name__, expected=expected, actual=scope)
        data = stream.read(scope)
        if len(data) != scope:
            raise UintStreamError(cls.__name__, expected_bytes=scope, actual_bytes=len(data))
        return cls.decode_bytes(data)

    @classmethod
    def read_from(cls, data: bytes, offset: SupportsIndex = 0) -> Self:
        """Decode one value from `data` starting at byte `offset`."""
        with io.BytesIO(bytes(data)) as stream:
            stream.seek(int(offset))
            return cls.deserialize(stream, cls.get_byte_length())

    # =================================================================
    # Pydantic integration
    # =================================================================

    @classmethod
    @abstractmethod
    def _coerce(cls, value: Any) -> Self:
        """Build an instance from a Python-side input during validation."""

    @classmethod
    @abstractmethod
    def _json_input_schema(cls) -> core_schema.CoreSchema:
        """Core schema for the raw JSON input, before `_coerce`."""

    @abstractmethod
    def _serialize(self) -> Any:
        """Return the serialized form used by `model_dump`."""

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Hook into Pydantic's validation system."""

        def validate(value: Any) -> FixedUint:
            """Pydantic validation function that calls the family's coercion."""
            if isinstance(value, cls):
                return value
            try:
                return cls._coerce(value)
            except (FixedWidthError, TypeError) as e:
                raise ValueError(str(e)) from e

        validator = core_schema.no_info_plain_validator_function(validate)
        return core_schema.json_or_python_schema(
            json_schema=core_schema.chain_schema([cls._json_input_schema(), validator]),
            python_schema=validator,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda instance: instance._serialize()
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, core_schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        """Hook into Pydantic's JSON Schema generation system."""
        json_schema = handler(cls._json_input_schema())
        json_schema.update(format=f"uint{cls.BITS}")
        return json_schema
