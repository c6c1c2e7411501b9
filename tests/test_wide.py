"""Tests for the add-with-carry / subtract-with-borrow kernel."""

import pytest

from apk_verifier.primitives.wide import (WORD_MASK, add_with_carry, shr1,
                                          sub_with_borrow)


class TestAddWithCarry:
    """Carry propagation over 256-bit words."""

    def test_no_carry(self) -> None:
        """Small operands add without carry."""
        assert add_with_carry(2, 3) == (0, 5)

    def test_wraparound_sets_carry(self) -> None:
        """MAX + 1 wraps to zero with carry out."""
        assert add_with_carry(WORD_MASK, 1) == (1, 0)

    def test_carry_in(self) -> None:
        """Carry in is added to the sum."""
        assert add_with_carry(WORD_MASK, 0, 1) == (1, 0)
        assert add_with_carry(5, 6, 1) == (0, 12)

    def test_max_plus_max_plus_carry(self) -> None:
        """Largest possible sum keeps carry at a single bit."""
        assert add_with_carry(WORD_MASK, WORD_MASK, 1) == (1, WORD_MASK)


class TestSubWithBorrow:
    """Borrow propagation over 256-bit words."""

    def test_no_borrow(self) -> None:
        """Larger minus smaller does not borrow."""
        assert sub_with_borrow(10, 3) == (0, 7)

    def test_underflow_sets_borrow(self) -> None:
        """0 - 1 wraps to MAX with borrow out."""
        assert sub_with_borrow(0, 1) == (1, WORD_MASK)

    def test_borrow_in(self) -> None:
        """Borrow in is subtracted."""
        assert sub_with_borrow(5, 5, 1) == (1, WORD_MASK)
        assert sub_with_borrow(6, 5, 1) == (0, 0)

    @pytest.mark.parametrize("x,y", [(0, 0), (1, WORD_MASK), (WORD_MASK, 1), (12345, 678)])
    def test_add_then_sub_recovers(self, x: int, y: int) -> None:
        """A chained add followed by the matching subtract restores the operand."""
        carry, s = add_with_carry(x, y)
        borrow, d = sub_with_borrow(s, y)
        assert d == x
        assert borrow == carry


class TestShiftRight:
    """Single-bit shifts across limbs."""

    def test_low_bit_moves_into_next_limb(self) -> None:
        """The low bit of a higher limb becomes the top bit of the lower limb."""
        assert shr1((1, 0)) == (0, 1 << 255)

    def test_four_limbs(self) -> None:
        """Shift matches integer shift on the concatenated value."""
        limbs = (3, 5, 7, 9)
        value = 0
        for limb in limbs:
            value = (value << 256) | limb
        shifted = shr1(limbs)
        out = 0
        for limb in shifted:
            out = (out << 256) | limb
        assert out == value >> 1
