"""Add-with-carry and subtract-with-borrow over fixed-width words.

Words are Python ints in [0, 2^256). Arithmetic wraps around; the overflow
bit is returned explicitly so limb chains can propagate it.
"""

from typing import Tuple

WORD_BITS = 256
WORD_MASK = (1 << WORD_BITS) - 1


def add_with_carry(x: int, y: int, carry_in: int = 0) -> Tuple[int, int]:
    """Return (carry_out, (x + y + carry_in) mod 2^256)."""
    total = x + y + carry_in
    return total >> WORD_BITS, total & WORD_MASK


def sub_with_borrow(x: int, y: int, borrow_in: int = 0) -> Tuple[int, int]:
    """Return (borrow_out, (x - y - borrow_in) mod 2^256)."""
    diff = x - y - borrow_in
    return int(diff < 0), diff & WORD_MASK


def shr1(limbs: Tuple[int, ...]) -> Tuple[int, ...]:
    """Logical right shift by one bit across big-endian limbs.

    The low bit of each limb moves into the top bit of the next lower limb.
    """
    out = []
    carry = 0
    for limb in limbs:
        out.append((limb >> 1) | (carry << (WORD_BITS - 1)))
        carry = limb & 1
    return tuple(out)
