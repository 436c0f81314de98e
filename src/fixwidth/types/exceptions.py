"""Exception hierarchy for the fixed-width integer types."""

from __future__ import annotations


class FixedWidthError(Exception):
    """
    Base exception for all fixed-width integer errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class WidthMismatchError(FixedWidthError, TypeError):
    """
    Raised when two values of different declared widths are compared or combined.

    Attributes:
        left_bits: Width of the left-hand operand.
        right_bits: Width of the right-hand operand.
        operation: The operator or method that was attempted (if known).
    """

    def __init__(self, left_bits: int, right_bits: int, *, operation: str | None = None) -> None:
        self.left_bits = left_bits
        self.right_bits = right_bits
        self.operation = operation

        msg = f"Width mismatch: {left_bits}-bit and {right_bits}-bit operands"
        if operation is not None:
            msg = f"{msg} for {operation}"

        super().__init__(msg)


class ValueOutOfRangeError(FixedWidthError, OverflowError):
    """
    Raised when a value cannot be represented in the requested width.

    Attributes:
        value: The offending value (or its decimal text when it was never materialized).
        type_name: The type that couldn't hold the value.
        max_value: The maximum allowed value (inclusive).
    """

    def __init__(self, value: int | str, type_name: str, *, max_value: int) -> None:
        self.value = value
        self.type_name = type_name
        self.max_value = max_value

        super().__init__(
            f"{value} is out of range for {type_name} (valid range: [0, {max_value}])"
        )


class UintArithmeticError(FixedWidthError, ArithmeticError):
    """
    Base class for arithmetic failures.

    Attributes:
        type_name: The type the operation was performed on.
        operation: The operation that failed.
    """

    def __init__(self, type_name: str, operation: str, detail: str) -> None:
        self.type_name = type_name
        self.operation = operation
        super().__init__(f"{type_name} {operation}: {detail}")


class UintOverflowError(UintArithmeticError, OverflowError):
    """Raised under the checked policy when a result exceeds the maximum value."""

    def __init__(self, type_name: str, operation: str) -> None:
        super().__init__(type_name, operation, "attempt to overflow")


class UintUnderflowError(UintArithmeticError, OverflowError):
    """Raised under the checked policy when a result would drop below zero."""

    def __init__(self, type_name: str, operation: str) -> None:
        super().__init__(type_name, operation, "attempt to underflow")


class DivisionByZeroError(UintArithmeticError, ZeroDivisionError):
    """Raised by every division or remainder with a zero divisor."""

    def __init__(self, type_name: str = "limb sequence", operation: str = "division") -> None:
        super().__init__(type_name, operation, "division by zero")


class UintDecodeError(FixedWidthError, ValueError):
    """
    Raised when decoding bytes or text into a value fails.

    Attributes:
        type_name: The type being decoded.
        detail: Description of what went wrong.
    """

    def __init__(self, type_name: str, detail: str) -> None:
        self.type_name = type_name
        self.detail = detail
        super().__init__(f"Failed to decode {type_name}: {detail}")


class LengthMismatchError(UintDecodeError):
    """
    Raised when an encoding has the wrong length for the type.

    Attributes:
        expected: The exact length the type requires.
        actual: The length received.
        unit: What was counted ("bytes" or "hex digits").
    """

    def __init__(self, type_name: str, *, expected: int, actual: int, unit: str = "bytes") -> None:
        self.expected = expected
        self.actual = actual
        self.unit = unit
        super().__init__(type_name, f"expected exactly {expected} {unit}, got {actual}")


class OddLengthError(UintDecodeError):
    """
    Raised when a hex string for a byte-aligned width has an odd number of digits.

    Attributes:
        length: Number of hex digits received.
    """

    def __init__(self, type_name: str, length: int) -> None:
        self.length = length
        super().__init__(type_name, f"odd number of hex digits ({length})")


class InvalidHexDigitError(UintDecodeError):
    """
    Raised when a hex string contains a character outside [0-9a-fA-F].

    Attributes:
        char: The offending character.
        position: Index of the character in the digit string (after any prefix).
    """

    def __init__(self, type_name: str, char: str, position: int) -> None:
        self.char = char
        self.position = position
        super().__init__(type_name, f"invalid hex digit {char!r} at position {position}")


class InvalidDecimalDigitError(UintDecodeError):
    """
    Raised when decimal text is empty or contains a character outside [0-9].

    Attributes:
        char: The offending character, or None for empty input.
        position: Index of the character, or None for empty input.
    """

    def __init__(self, type_name: str, char: str | None = None, position: int | None = None) -> None:
        self.char = char
        self.position = position
        if char is None:
            detail = "empty decimal string"
        else:
            detail = f"invalid decimal digit {char!r} at position {position}"
        super().__init__(type_name, detail)


class OverflowOnDecodeError(UintDecodeError):
    """
    Raised when decoded data sets bits above the declared width.

    Attributes:
        bits: The declared width of the type.
    """

    def __init__(self, type_name: str, bits: int) -> None:
        self.bits = bits
        super().__init__(type_name, f"bits set above the declared width of {bits}")


class UintStreamError(UintDecodeError):
    """
    Raised when a stream ends before a full encoding could be read.

    Attributes:
        expected_bytes: Number of bytes needed.
        actual_bytes: Number of bytes received.
    """

    def __init__(self, type_name: str, *, expected_bytes: int, actual_bytes: int) -> None:
        self.expected_bytes = expected_bytes
        self.actual_bytes = actual_bytes
        super().__init__(
            type_name,
            f"stream ended prematurely: expected {expected_bytes} bytes, got {actual_bytes}",
        )
