"""Modular exponentiation over big-endian 256-bit limbs.

This is the numeric capability the field engine delegates squaring, powers,
inversion, unreduced squaring and double-width reduction to. Operands travel
as tuples of big-endian words (the layout a precompile would consume); the
arithmetic itself is left-to-right binary square-and-multiply on Python ints.

Malformed input raises ModexpError. The engine lets it propagate.
"""

from typing import Sequence, Tuple

from apk_verifier.errors import ModexpError
from apk_verifier.primitives.wide import WORD_BITS, WORD_MASK

# Sentinel modulus for a plain (non-modular) square of a 512-bit operand.
ALL_ONES_1024 = (1 << 1024) - 1


def limbs_to_int(limbs: Sequence[int]) -> int:
    """Concatenate big-endian words into one integer."""
    value = 0
    for i, limb in enumerate(limbs):
        if not 0 <= limb <= WORD_MASK:
            raise ModexpError(f"limb {i} out of range: {limb:#x}")
        value = (value << WORD_BITS) | limb
    return value


def int_to_limbs(value: int, n_limbs: int) -> Tuple[int, ...]:
    """Split a non-negative integer into n_limbs big-endian words."""
    if value >> (WORD_BITS * n_limbs):
        raise ModexpError(f"result does not fit in {n_limbs} limbs")
    return tuple((value >> (WORD_BITS * i)) & WORD_MASK for i in reversed(range(n_limbs)))


def pow_mod(base: int, exponent: int, modulus: int) -> int:
    """Left-to-right binary exponentiation: base^exponent mod modulus."""
    result = 1 % modulus
    base %= modulus
    for bit in bin(exponent)[2:]:
        result = result * result % modulus
        if bit == "1":
            result = result * base % modulus
    return result


def modexp(
    base_limbs: Sequence[int],
    exponent: int,
    modulus: int,
    out_limbs: int = 2,
) -> Tuple[int, ...]:
    """Compute base^exponent mod modulus on limb-encoded operands.

    Args:
        base_limbs: Base magnitude as big-endian 256-bit words (one or more)
        exponent: Non-negative exponent
        modulus: Positive modulus; ALL_ONES_1024 gives an unreduced square for
            operands below 2^512
        out_limbs: Number of big-endian words in the result

    Returns:
        Tuple of out_limbs words holding the result

    Raises:
        ModexpError: On an empty base, out-of-range limb, negative exponent,
            non-positive modulus or a result wider than out_limbs words
    """
    if not base_limbs:
        raise ModexpError("base must have at least one limb")
    if exponent < 0:
        raise ModexpError(f"negative exponent: {exponent}")
    if modulus <= 0:
        raise ModexpError(f"modulus must be positive, got {modulus}")
    if out_limbs <= 0:
        raise ModexpError(f"out_limbs must be positive, got {out_limbs}")

    base = limbs_to_int(base_limbs)
    return int_to_limbs(pow_mod(base, exponent, modulus), out_limbs)
