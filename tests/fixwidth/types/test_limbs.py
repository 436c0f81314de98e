"""Limb Sequence and Width Mask Tests."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fixwidth.types.exceptions import ValueOutOfRangeError
from fixwidth.types.limbs import (
    LIMB_BITS,
    LIMB_MAX,
    LimbSequence,
    WidthMask,
    byte_count,
    int_to_limbs,
    limb_count,
    limbs_to_int,
)


@pytest.mark.parametrize(
    "width, limbs, nbytes",
    [(1, 1, 1), (5, 1, 1), (8, 1, 1), (24, 1, 3), (64, 1, 8), (65, 2, 9), (256, 4, 32), (1024, 16, 128)],
)
def test_limb_and_byte_counts(width: int, limbs: int, nbytes: int) -> None:
    """Tests that limb and byte counts round up to cover the width."""
    assert limb_count(width) == limbs
    assert byte_count(width) == nbytes


class TestWidthMask:
    """Tests for masking bits above a declared width."""

    def test_rejects_non_positive_width(self) -> None:
        """Tests that a zero or negative width is refused."""
        with pytest.raises(ValueError):
            WidthMask(0)
        with pytest.raises(ValueError):
            WidthMask(-8)

    @pytest.mark.parametrize("width", [1, 5, 7, 24, 64, 100, 256])
    def test_bits_is_all_ones(self, width: int) -> None:
        """Tests that the mask value is exactly `2^width - 1`."""
        assert WidthMask(width).bits == 2**width - 1

    def test_top_limb_for_aligned_and_unaligned_widths(self) -> None:
        """Tests the mask applied to the most significant limb."""
        assert WidthMask(256).top_limb == LIMB_MAX
        assert WidthMask(5).top_limb == 0b11111
        assert WidthMask(70).top_limb == 0b111111

    def test_apply_word(self) -> None:
        """Tests masking a single word."""
        assert WidthMask(5).apply_word(0b1110_0001) == 0b0000_0001
        assert WidthMask(24).apply_word(0x1FFFFFF) == 0xFFFFFF

    def test_apply_truncates_and_masks(self) -> None:
        """Tests that extra limbs are dropped and the top limb is masked."""
        mask = WidthMask(70)
        assert mask.apply([LIMB_MAX, LIMB_MAX, LIMB_MAX, 1]) == [LIMB_MAX, 0b111111]

    def test_apply_does_not_mutate_input(self) -> None:
        """Tests that masking returns a new list."""
        limbs = [LIMB_MAX, LIMB_MAX]
        WidthMask(70).apply(limbs)
        assert limbs == [LIMB_MAX, LIMB_MAX]

    def test_exceeds(self) -> None:
        """Tests detection of bits at or above the width, even in extra limbs."""
        mask = WidthMask(128)
        assert not mask.exceeds([LIMB_MAX, LIMB_MAX])
        assert not mask.exceeds([LIMB_MAX, LIMB_MAX, 0, 0])
        assert mask.exceeds([0, 0, 1])
        assert mask.exceeds([0, 0, 0, 1 << 63])

        unaligned = WidthMask(70)
        assert not unaligned.exceeds([0, 0b111111])
        assert unaligned.exceeds([0, 0b1000000])

    @given(st.integers(min_value=0, max_value=2**300 - 1), st.integers(min_value=1, max_value=300))
    def test_exceeds_matches_int_reference(self, value: int, width: int) -> None:
        """Tests that `exceeds` agrees with comparing against `2^width`."""
        limbs = int_to_limbs(value, limb_count(300))
        assert WidthMask(width).exceeds(limbs) == (value >= 2**width)


class TestLimbSequence:
    """Tests for the immutable limb container."""

    def test_zeros(self) -> None:
        """Tests the all-zero constructor."""
        zeros = LimbSequence.zeros(4)
        assert zeros == (0, 0, 0, 0)
        assert zeros.is_zero()
        assert zeros.to_int() == 0

    def test_from_int_and_back(self) -> None:
        """Tests splitting an integer into least-significant-first limbs."""
        value = (3 << (2 * LIMB_BITS)) | (2 << LIMB_BITS) | 1
        limbs = LimbSequence.from_int(value, 4)
        assert limbs == (1, 2, 3, 0)
        assert limbs.to_int() == value
        assert not limbs.is_zero()

    def test_from_int_rejects_out_of_range(self) -> None:
        """Tests that values needing more limbs than requested are refused."""
        with pytest.raises(ValueOutOfRangeError):
            LimbSequence.from_int(2**128, 2)
        with pytest.raises(ValueOutOfRangeError):
            LimbSequence.from_int(-1, 2)

    @pytest.mark.parametrize("limb", [-1, LIMB_MAX + 1])
    def test_rejects_out_of_range_limb(self, limb: int) -> None:
        """Tests that every limb must fit in 64 bits."""
        with pytest.raises(ValueOutOfRangeError):
            LimbSequence([0, limb])

    @pytest.mark.parametrize("limb", [True, 1.0, "1", None])
    def test_rejects_non_int_limb(self, limb: object) -> None:
        """Tests that limbs must be real ints."""
        with pytest.raises(TypeError):
            LimbSequence([limb])  # type: ignore[list-item]

    def test_masked(self) -> None:
        """Tests clearing bits above a width."""
        limbs = LimbSequence([LIMB_MAX, LIMB_MAX])
        assert limbs.masked(70) == (LIMB_MAX, 0b111111)
        assert isinstance(limbs.masked(70), LimbSequence)

    def test_is_immutable(self) -> None:
        """Tests that a limb sequence cannot be modified in place."""
        limbs = LimbSequence([1, 2])
        with pytest.raises(TypeError):
            limbs[0] = 5  # type: ignore[index]

    def test_repr(self) -> None:
        """Tests the hex representation of limbs."""
        assert repr(LimbSequence([1, 0])) == (
            "LimbSequence([0x0000000000000001, 0x0000000000000000])"
        )

    @given(st.integers(min_value=0, max_value=2**512 - 1))
    def test_int_conversion_roundtrip(self, value: int) -> None:
        """Tests that joining split limbs restores the integer."""
        assert limbs_to_int(int_to_limbs(value, 8)) == value
