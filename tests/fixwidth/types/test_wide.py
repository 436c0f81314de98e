"""Wide Integer Tests."""

import copy
import pickle
from typing import Type

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fixwidth.types import (
    LengthMismatchError,
    LimbSequence,
    OverflowPolicy,
    Uint256,
    Uint512,
    Uint1024,
    UintOverflowError,
    ValueOutOfRangeError,
    WideUint,
)
from fixwidth.types.limbs import LIMB_MAX

WIDE_TYPES = (Uint256, Uint512, Uint1024)
"""A collection of all wide types to test against."""


@st.composite
def wide_operands(draw: st.DrawFn) -> tuple[Type[WideUint], int, int]:
    """Draw a wide type and two in-range operands, biased toward the boundaries."""
    uint_class = draw(st.sampled_from(WIDE_TYPES))
    bound = 2**uint_class.BITS - 1
    operand = st.one_of(
        st.integers(min_value=0, max_value=bound),
        st.integers(min_value=0, max_value=2**64),
        st.integers(min_value=bound - 2**64, max_value=bound),
        st.sampled_from([0, 1, bound, 2 ** (uint_class.BITS - 1)]),
    )
    return uint_class, draw(operand), draw(operand)


class TestMultiplyOverflowScenario:
    """Tests for 2 * 2^255 at 256 bits."""

    def test_checked_overflows(self) -> None:
        """Tests that the true product 2^256 is an overflow under the checked policy."""
        with pytest.raises(UintOverflowError):
            Uint256(2).mul(Uint256(2**255), OverflowPolicy.CHECKED)
        with pytest.raises(UintOverflowError):
            _ = Uint256(2) * Uint256(2**255)

    def test_wrapping_yields_zero(self) -> None:
        """Tests that the truncated product is 0 under the wrapping policy."""
        assert Uint256(2).mul(Uint256(2**255), OverflowPolicy.WRAPPING) == Uint256(0)

    def test_saturating_yields_max(self) -> None:
        """Tests that the product clamps under the saturating policy."""
        assert Uint256(2).saturating_mul(Uint256(2**255)) == Uint256.max_value()


class TestLimbs:
    """Tests for the multi-limb representation."""

    @pytest.mark.parametrize("uint_class, count", [(Uint256, 4), (Uint512, 8), (Uint1024, 16)])
    def test_limb_count(self, uint_class: Type[WideUint], count: int) -> None:
        """Tests that the limb sequence has a fixed length."""
        assert len(uint_class.zero().limbs) == count
        assert len(uint_class.max_value().limbs) == count
        assert isinstance(uint_class.one().limbs, LimbSequence)

    def test_least_significant_limb_first(self) -> None:
        """Tests the limb order."""
        value = Uint256((4 << 192) | (3 << 128) | (2 << 64) | 1)
        assert value.limbs == (1, 2, 3, 4)
        assert value.low_u64() == 1
        assert value.low_u32() == 1

    def test_low_words(self) -> None:
        """Tests extracting the lowest 32 and 64 bits."""
        value = Uint512(2**300 + 0x1122334455667788)
        assert value.low_u64() == 0x1122334455667788
        assert value.low_u32() == 0x55667788

    def test_from_limbs(self) -> None:
        """Tests construction from a literal limb array."""
        assert Uint256.from_limbs([1, 0, 0, 0]) == Uint256(1)
        assert Uint256.from_limbs([LIMB_MAX] * 4) == Uint256.max_value()
        assert Uint256.from_limbs(LimbSequence([0, 1, 0, 0])) == Uint256(2**64)

    def test_from_limbs_rejects_wrong_count(self) -> None:
        """Tests that the limb count must match the width."""
        with pytest.raises(LengthMismatchError, match="4 limbs, got 3"):
            Uint256.from_limbs([0, 0, 0])

    def test_from_limbs_rejects_out_of_range_limb(self) -> None:
        """Tests that every limb must fit in 64 bits."""
        with pytest.raises(ValueOutOfRangeError):
            Uint256.from_limbs([LIMB_MAX + 1, 0, 0, 0])

    def test_carry_across_every_limb(self) -> None:
        """Tests that incrementing a value of all-ones low limbs carries to the top."""
        value = Uint256.from_limbs([LIMB_MAX, LIMB_MAX, LIMB_MAX, 0])
        assert value + Uint256(1) == Uint256.from_limbs([0, 0, 0, 1])

    def test_borrow_across_every_limb(self) -> None:
        """Tests that decrementing a power of the limb base borrows through every limb."""
        value = Uint256.from_limbs([0, 0, 0, 1])
        assert value - Uint256(1) == Uint256.from_limbs([LIMB_MAX, LIMB_MAX, LIMB_MAX, 0])


class TestValueSemantics:
    """Tests for immutability and Python protocols."""

    def test_is_immutable(self) -> None:
        """Tests that attributes cannot be assigned or deleted."""
        value = Uint256(5)
        with pytest.raises(AttributeError):
            value._limbs = LimbSequence([0, 0, 0, 0])  # type: ignore[misc]
        with pytest.raises(AttributeError):
            value.extra = 1  # type: ignore[attr-defined]
        with pytest.raises(AttributeError):
            del value._limbs
        assert value == Uint256(5)

    def test_operations_return_new_values(self) -> None:
        """Tests that operands are never modified."""
        a, b = Uint512(7), Uint512(9)
        _ = a + b
        _ = a.wrapping_sub(b)
        assert a == Uint512(7)
        assert b == Uint512(9)

    def test_is_not_an_int(self) -> None:
        """Tests that wide values are not `int` instances."""
        assert not isinstance(Uint256(1), int)

    def test_repr_is_hex(self) -> None:
        """Tests the official representation of wide types."""
        assert repr(Uint256(255)) == "Uint256(0x" + "00" * 31 + "ff)"
        assert str(Uint256(255)) == "255"

    @pytest.mark.parametrize("uint_class", WIDE_TYPES)
    def test_pickle_and_copy(self, uint_class: Type[WideUint]) -> None:
        """Tests that wide values survive pickling and copying."""
        value = uint_class.max_value()
        assert pickle.loads(pickle.dumps(value)) == value
        assert copy.copy(value) == value
        assert copy.deepcopy(value) == value

    def test_to_bytes_specifics(self) -> None:
        """Tests specific byte representations in both orders."""
        value = Uint256(0x0102)
        assert value.to_bytes() == b"\x00" * 30 + b"\x01\x02"
        assert value.to_bytes("little") == b"\x02\x01" + b"\x00" * 30


class TestComparatorConsistency:
    """Tests that ordering agrees with the big-endian encoding."""

    BOUNDARIES = [0, 1, 2**64 - 1, 2**64, 2**255, 2**256 - 1]

    @pytest.mark.parametrize("a", BOUNDARIES)
    @pytest.mark.parametrize("b", BOUNDARIES)
    def test_boundaries(self, a: int, b: int) -> None:
        """Tests boundary values, including 0 and the maximum."""
        x, y = Uint256(a), Uint256(b)
        assert x.compare(y) == (x.to_bytes() > y.to_bytes()) - (x.to_bytes() < y.to_bytes())

    @given(st.lists(st.integers(min_value=0, max_value=2**256 - 1), min_size=3, max_size=8))
    def test_randomized(self, values: list[int]) -> None:
        """Tests sorting by compare matches sorting by encoding."""
        uints = [Uint256(v) for v in values]
        assert sorted(uints) == sorted(uints, key=lambda u: u.to_bytes("big"))
        assert [u.as_int() for u in sorted(uints)] == sorted(values)


class TestAgainstIntReference:
    """Property tests against Python's unbounded integers."""

    @given(wide_operands())
    def test_wrapping_arithmetic(self, operands: tuple[Type[WideUint], int, int]) -> None:
        """Tests wrapping add, sub and mul modulo `2^BITS`."""
        uint_class, a, b = operands
        modulus = 2**uint_class.BITS
        x, y = uint_class(a), uint_class(b)
        assert x.wrapping_add(y).as_int() == (a + b) % modulus
        assert x.wrapping_sub(y).as_int() == (a - b) % modulus
        assert x.wrapping_mul(y).as_int() == (a * b) % modulus

    @given(wide_operands())
    def test_checked_arithmetic(self, operands: tuple[Type[WideUint], int, int]) -> None:
        """Tests that checked results are exact or raise."""
        uint_class, a, b = operands
        modulus = 2**uint_class.BITS
        x, y = uint_class(a), uint_class(b)
        for op, expected in (("add", a + b), ("sub", a - b), ("mul", a * b)):
            if 0 <= expected < modulus:
                assert getattr(x, op)(y).as_int() == expected
            else:
                with pytest.raises(OverflowError):
                    getattr(x, op)(y)

    @given(wide_operands())
    def test_saturating_arithmetic(self, operands: tuple[Type[WideUint], int, int]) -> None:
        """Tests clamping to the representable bounds."""
        uint_class, a, b = operands
        bound = 2**uint_class.BITS - 1
        x, y = uint_class(a), uint_class(b)
        assert x.saturating_add(y).as_int() == min(a + b, bound)
        assert x.saturating_sub(y).as_int() == max(a - b, 0)
        assert x.saturating_mul(y).as_int() == min(a * b, bound)

    @given(wide_operands())
    def test_algebraic_identities(self, operands: tuple[Type[WideUint], int, int]) -> None:
        """Tests identities and commutativity."""
        uint_class, a, b = operands
        x, y = uint_class(a), uint_class(b)
        zero, one = uint_class.zero(), uint_class.one()
        assert x + zero == x
        assert x * one == x
        assert x.wrapping_add(y) == y.wrapping_add(x)
        assert x.wrapping_mul(y) == y.wrapping_mul(x)

    @given(
        st.integers(min_value=0, max_value=2**254),
        st.integers(min_value=0, max_value=2**254),
        st.integers(min_value=0, max_value=2**254),
    )
    def test_checked_add_is_associative(self, a: int, b: int, c: int) -> None:
        """Tests associativity where no intermediate sum overflows."""
        x, y, z = Uint256(a), Uint256(b), Uint256(c)
        assert (x + y) + z == x + (y + z)

    @given(wide_operands())
    def test_division(self, operands: tuple[Type[WideUint], int, int]) -> None:
        """Tests that `a == q * b + r` with `r < b`."""
        uint_class, a, b = operands
        if b == 0:
            return
        q, r = divmod(uint_class(a), uint_class(b))
        assert a == q.as_int() * b + r.as_int()
        assert r.as_int() < b

    @given(wide_operands(), st.integers(min_value=0, max_value=1100))
    def test_shifts_and_bitwise(self, operands: tuple[Type[WideUint], int, int], shift: int) -> None:
        """Tests shifts and logic against masked integer results."""
        uint_class, a, b = operands
        bound = 2**uint_class.BITS - 1
        x, y = uint_class(a), uint_class(b)
        assert (x << shift).as_int() == (a << shift) & bound
        assert (x >> shift).as_int() == a >> shift
        assert (x & y).as_int() == a & b
        assert (x | y).as_int() == a | b
        assert (x ^ y).as_int() == a ^ b
        assert (~x).as_int() == bound ^ a

    @given(wide_operands())
    def test_bits(self, operands: tuple[Type[WideUint], int, int]) -> None:
        """Tests bit inspection."""
        uint_class, a, _ = operands
        value = uint_class(a)
        assert value.bits_required() == a.bit_length()
        assert value.is_zero() == (a == 0)
        if a:
            assert value.bit(a.bit_length() - 1)

    @given(wide_operands())
    def test_byte_and_hex_roundtrip(self, operands: tuple[Type[WideUint], int, int]) -> None:
        """Tests lossless byte and hex conversion."""
        uint_class, a, _ = operands
        value = uint_class(a)
        for byteorder in ("big", "little"):
            assert uint_class.from_bytes(value.to_bytes(byteorder), byteorder) == value
        assert value.to_bytes("big") == a.to_bytes(uint_class.BITS // 8, "big")
        assert uint_class.from_hex(value.to_hex()) == value
        assert uint_class.from_hex("0X" + value.to_hex().upper()) == value
        assert uint_class.from_str(str(value)) == value
