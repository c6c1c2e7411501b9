"""Vector helpers over the field engine: powers, sums, inner products, Horner."""

from typing import List, Sequence

from apk_verifier.errors import LengthMismatchError
from apk_verifier.primitives.field import FieldElement, add, mul


def powers(base: FieldElement, max_exponent: int) -> List[FieldElement]:
    """Return [1, base, base^2, ..., base^max_exponent].

    Args:
        base: Field element to raise
        max_exponent: Highest exponent (inclusive), must be >= 0

    Returns:
        List of max_exponent + 1 elements; [1] when max_exponent is 0
    """
    if max_exponent < 0:
        raise ValueError(f"max_exponent must be >= 0, got {max_exponent}")
    result = [FieldElement.one()]
    for _ in range(max_exponent):
        result.append(mul(result[-1], base))
    return result


def sum_elements(xs: Sequence[FieldElement]) -> FieldElement:
    total = FieldElement.zero()
    for x in xs:
        total = add(total, x)
    return total


def mul_sum(xs: Sequence[FieldElement], ys: Sequence[FieldElement]) -> FieldElement:
    """Inner product sum(x_i * y_i). Lengths must match."""
    if len(xs) != len(ys):
        raise LengthMismatchError(f"Length mismatch: {len(xs)} vs {len(ys)}")
    total = FieldElement.zero()
    for x, y in zip(xs, ys):
        total = add(total, mul(x, y))
    return total


def horner_eval(coefficients: Sequence[FieldElement], point: FieldElement) -> FieldElement:
    """Evaluate sum(c_i * point^i) with coefficients in ascending degree order."""
    result = FieldElement.zero()
    for c in reversed(coefficients):
        result = add(mul(result, point), c)
    return result
