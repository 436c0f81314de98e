"""
Limb-level arithmetic.

Every function here takes limb sequences (least significant limb first) and
returns fresh lists; inputs are never mutated. Width masking is the caller's
job: these functions only know about limb boundaries.
"""

from __future__ import annotations

from typing import Sequence

from .exceptions import DivisionByZeroError, WidthMismatchError
from .limbs import LIMB_BITS, LIMB_MAX


def _check_lengths(a: Sequence[int], b: Sequence[int], operation: str) -> None:
    if len(a) != len(b):
        raise WidthMismatchError(len(a) * LIMB_BITS, len(b) * LIMB_BITS, operation=operation)


# =================================================================
# Comparator
# =================================================================


def compare_limbs(a: Sequence[int], b: Sequence[int]) -> int:
    """
    Compare two equal-length limb sequences.

    Scans from the most significant limb down and stops at the first
    difference.

    Returns:
        -1 if a < b, 0 if a == b, 1 if a > b.

    Raises:
        WidthMismatchError: If the sequences have different lengths.
    """
    _check_lengths(a, b, "compare")
    for index in range(len(a) - 1, -1, -1):
        if a[index] != b[index]:
            return -1 if a[index] < b[index] else 1
    return 0


# =================================================================
# Addition and subtraction
# =================================================================


def add_limbs(a: Sequence[int], b: Sequence[int]) -> tuple[list[int], int]:
    """
    Ripple-carry addition.

    Returns:
        The limb-wise sum and the carry out of the most significant limb (0 or 1).
    """
    _check_lengths(a, b, "+")
    result: list[int] = []
    carry = 0
    for x, y in zip(a, b):
        total = x + y + carry
        result.append(total & LIMB_MAX)
        carry = total >> LIMB_BITS
    return result, carry


def sub_limbs(a: Sequence[int], b: Sequence[int]) -> tuple[list[int], int]:
    """
    Ripple-borrow subtraction.

    Returns:
        The difference modulo 2^(64 * len) and the borrow out of the most
        significant limb (0 or 1).
    """
    _check_lengths(a, b, "-")
    result: list[int] = []
    borrow = 0
    for x, y in zip(a, b):
        diff = x - y - borrow
        if diff < 0:
            diff += 1 << LIMB_BITS
            borrow = 1
        else:
            borrow = 0
        result.append(diff)
    return result, borrow


# =================================================================
# Multiplication
# =================================================================


def mul_limbs(a: Sequence[int], b: Sequence[int]) -> list[int]:
    """
    Schoolbook multiplication into a double-width buffer.

    Returns:
        The full product as `len(a) + len(b)` limbs. Nothing is truncated.
    """
    scratch = [0] * (len(a) + len(b))
    for i, x in enumerate(a):
        if x == 0:
            continue
        carry = 0
        for j, y in enumerate(b):
            # x * y fits in two limbs; adding two more single limbs still does.
            total = scratch[i + j] + x * y + carry
            scratch[i + j] = total & LIMB_MAX
            carry = total >> LIMB_BITS
        # Row i never wrote past i + len(b) - 1, so this slot is still empty.
        scratch[i + len(b)] = carry
    return scratch


# =================================================================
# Shifts
# =================================================================


def shl_limbs(a: Sequence[int], shift: int) -> list[int]:
    """Shift left by `shift` bits, dropping bits that leave the top limb."""
    count = len(a)
    word_shift, bit_shift = divmod(shift, LIMB_BITS)
    result = [0] * count
    for index in range(count - word_shift):
        limb = a[index]
        result[index + word_shift] |= (limb << bit_shift) & LIMB_MAX
        if bit_shift and index + word_shift + 1 < count:
            result[index + word_shift + 1] |= limb >> (LIMB_BITS - bit_shift)
    return result


def shr_limbs(a: Sequence[int], shift: int) -> list[int]:
    """Logical shift right by `shift` bits."""
    count = len(a)
    word_shift, bit_shift = divmod(shift, LIMB_BITS)
    result = [0] * count
    for index in range(word_shift, count):
        result[index - word_shift] |= a[index] >> bit_shift
        if bit_shift and index + 1 < count:
            result[index - word_shift] |= (a[index + 1] << (LIMB_BITS - bit_shift)) & LIMB_MAX
    return result


# =================================================================
# Bitwise
# =================================================================


def and_limbs(a: Sequence[int], b: Sequence[int]) -> list[int]:
    """Limb-wise AND."""
    _check_lengths(a, b, "&")
    return [x & y for x, y in zip(a, b)]


def or_limbs(a: Sequence[int], b: Sequence[int]) -> list[int]:
    """Limb-wise OR."""
    _check_lengths(a, b, "|")
    return [x | y for x, y in zip(a, b)]


def xor_limbs(a: Sequence[int], b: Sequence[int]) -> list[int]:
    """Limb-wise XOR."""
    _check_lengths(a, b, "^")
    return [x ^ y for x, y in zip(a, b)]


def not_limbs(a: Sequence[int]) -> list[int]:
    """Limb-wise NOT. Sets the unused bits of the top limb too; mask afterwards."""
    return [~x & LIMB_MAX for x in a]


# =================================================================
# Bit inspection
# =================================================================


def bits_required(a: Sequence[int]) -> int:
    """Least number of bits needed to represent the value (0 for zero)."""
    for index in range(len(a) - 1, -1, -1):
        if a[index]:
            return index * LIMB_BITS + a[index].bit_length()
    return 0


def get_bit(a: Sequence[int], index: int) -> bool:
    """Return whether bit `index` is set."""
    word, bit = divmod(index, LIMB_BITS)
    return bool((a[word] >> bit) & 1)


# =================================================================
# Division
# =================================================================


def divmod_limbs(a: Sequence[int], b: Sequence[int]) -> tuple[list[int], list[int]]:
    """
    Binary long division.

    Walks the dividend from its most significant set bit downward, shifting
    each bit into a running remainder and subtracting the divisor whenever
    the remainder reaches it.

    Returns:
        (quotient, remainder), both of `len(a)` limbs, with
        `a == quotient * b + remainder` and `remainder < b`.

    Raises:
        DivisionByZeroError: If `b` is zero.
    """
    _check_lengths(a, b, "divmod")
    if not any(b):
        raise DivisionByZeroError()

    count = len(a)
    if compare_limbs(a, b) < 0:
        return [0] * count, list(a)

    quotient = [0] * count
    # One spare limb: the remainder is below b before the shift, so below 2b after it.
    remainder = [0] * (count + 1)
    divisor = list(b) + [0]

    for bit in range(bits_required(a) - 1, -1, -1):
        remainder = shl_limbs(remainder, 1)
        word, offset = divmod(bit, LIMB_BITS)
        remainder[0] |= (a[word] >> offset) & 1
        if compare_limbs(remainder, divisor) >= 0:
            remainder, _ = sub_limbs(remainder, divisor)
            quotient[word] |= 1 << offset

    return quotient, remainder[:count]
