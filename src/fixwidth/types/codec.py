"""
Byte and text codecs for fixed-width integers.

All encodings are fixed-size: a value of width `w` always occupies exactly
`ceil(w / 8)` bytes, or twice that many hex digits.
"""

from __future__ import annotations

from typing import Final, Literal, Sequence

from .exceptions import (
    InvalidDecimalDigitError,
    InvalidHexDigitError,
    LengthMismatchError,
    OddLengthError,
    OverflowOnDecodeError,
    ValueOutOfRangeError,
)
from .limbs import LIMB_BYTES, WidthMask, byte_count

ByteOrder = Literal["big", "little"]

HEX_ALPHABET: Final = "0123456789abcdef"
"""Canonical lowercase hex digits; encoding always uses these."""

_HEX_VALUES: Final = {
    **{digit: value for value, digit in enumerate(HEX_ALPHABET)},
    **{digit.upper(): value for value, digit in enumerate(HEX_ALPHABET)},
}
"""Digit lookup for decoding; accepts both cases."""

DECIMAL_DIGITS: Final = "0123456789"


def check_byteorder(byteorder: str) -> ByteOrder:
    """Validate a byte order string."""
    if byteorder not in ("big", "little"):
        raise ValueError(f"byteorder must be either 'little' or 'big', not {byteorder!r}")
    return byteorder  # type: ignore[return-value]


# =================================================================
# Bytes
# =================================================================


def check_length(data: bytes, width: int, type_name: str) -> None:
    """
    Ensure `data` is exactly `ceil(width / 8)` bytes long.

    Raises:
        LengthMismatchError: On any other length.
    """
    expected = byte_count(width)
    if len(data) != expected:
        raise LengthMismatchError(type_name, expected=expected, actual=len(data))


def limbs_to_bytes(limbs: Sequence[int], width: int, byteorder: ByteOrder) -> bytes:
    """Encode limbs as exactly `ceil(width / 8)` bytes."""
    little = b"".join(limb.to_bytes(LIMB_BYTES, "little") for limb in limbs)
    little = little[: byte_count(width)]
    return little if byteorder == "little" else little[::-1]


def limbs_from_bytes(data: bytes, width: int, byteorder: ByteOrder, type_name: str) -> list[int]:
    """
    Decode a fixed-size byte string into limbs.

    Raises:
        LengthMismatchError: If `data` is not exactly `ceil(width / 8)` bytes.
        OverflowOnDecodeError: If bits above the width are set.
    """
    check_length(data, width, type_name)
    mask = WidthMask(width)
    little = bytes(data) if byteorder == "little" else bytes(data)[::-1]
    little = little.ljust(mask.limb_count * LIMB_BYTES, b"\x00")
    limbs = [
        int.from_bytes(little[index : index + LIMB_BYTES], "little")
        for index in range(0, len(little), LIMB_BYTES)
    ]
    if mask.exceeds(limbs):
        raise OverflowOnDecodeError(type_name, width)
    return limbs


def word_from_bytes(data: bytes, width: int, byteorder: ByteOrder, type_name: str) -> int:
    """
    Decode a fixed-size byte string into a single word.

    Raises:
        LengthMismatchError: If `data` is not exactly `ceil(width / 8)` bytes.
        OverflowOnDecodeError: If bits above the width are set.
    """
    check_length(data, width, type_name)
    word = int.from_bytes(data, byteorder)
    if word != WidthMask(width).apply_word(word):
        raise OverflowOnDecodeError(type_name, width)
    return word


# =================================================================
# Hex
# =================================================================


def encode_hex(data: bytes) -> str:
    """Encode bytes as lowercase hex, two digits per byte."""
    return "".join(HEX_ALPHABET[byte >> 4] + HEX_ALPHABET[byte & 0x0F] for byte in data)


def decode_hex(text: str, width: int, type_name: str) -> bytes:
    """
    Decode hex text into exactly `ceil(width / 8)` big-endian bytes.

    An optional `0x`/`0X` prefix is accepted. For widths that are not a
    multiple of 8, a single missing leading zero digit is implied.

    Raises:
        InvalidHexDigitError: On any character outside [0-9a-fA-F].
        OddLengthError: On an odd digit count for a byte-aligned width.
        LengthMismatchError: If the digit count does not cover exactly the width.
    """
    digits = text[2:] if text[:2] in ("0x", "0X") else text

    values = []
    for position, char in enumerate(digits):
        value = _HEX_VALUES.get(char)
        if value is None:
            raise InvalidHexDigitError(type_name, char, position)
        values.append(value)

    if len(values) % 2:
        if width % 8 == 0:
            raise OddLengthError(type_name, len(values))
        values.insert(0, 0)

    expected = 2 * byte_count(width)
    if len(values) != expected:
        raise LengthMismatchError(type_name, expected=expected, actual=len(values), unit="hex digits")

    return bytes((values[index] << 4) | values[index + 1] for index in range(0, len(values), 2))


# =================================================================
# Decimal
# =================================================================


def parse_decimal(text: str, width: int, type_name: str) -> int:
    """
    Parse ASCII decimal digits into an integer that fits `width` bits.

    Raises:
        InvalidDecimalDigitError: On empty input or any non-digit character.
        ValueOutOfRangeError: If the value needs more than `width` bits.
    """
    if not text:
        raise InvalidDecimalDigitError(type_name)
    for position, char in enumerate(text):
        if char not in DECIMAL_DIGITS:
            raise InvalidDecimalDigitError(type_name, char, position)

    max_value = WidthMask(width).bits
    significant = text.lstrip("0") or "0"
    # Bound the digit count before int() so oversized input never hits the
    # interpreter's int/str conversion limit.
    if len(significant) > len(str(max_value)):
        raise ValueOutOfRangeError(significant, type_name, max_value=max_value)

    value = int(significant)
    if value > max_value:
        raise ValueOutOfRangeError(value, type_name, max_value=max_value)
    return value
