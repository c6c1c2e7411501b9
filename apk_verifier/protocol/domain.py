"""Multiplicative evaluation domain and Lagrange evaluations at zeta.

The domain is the subgroup of size n (a power of two) generated by a
primitive n-th root of unity omega. Roots of unity come from galois' GF(r),
the same field class the BLS12-377 G1 coordinates live in; everything
evaluated at zeta uses the limb engine.
"""

from functools import lru_cache

from apk_verifier.primitives.curve import BLS12_377_G1
from apk_verifier.primitives.field import (TWO_ADICITY, FieldElement, inverse,
                                           power)
from apk_verifier.protocol.data import LagrangeEvaluations


def scalar_field():
    """galois GF(r) with the generator pinned. Shared with the BLS12-377 G1 coordinates."""
    return BLS12_377_G1.field


@lru_cache(maxsize=64)
def root_of_unity(size: int) -> FieldElement:
    """Primitive size-th root of unity; size must be a power of two <= 2^46."""
    if size <= 0 or size & (size - 1):
        raise ValueError(f"Domain size must be a power of two, got {size}")
    if size.bit_length() - 1 > TWO_ADICITY:
        raise ValueError(f"Domain size 2^{size.bit_length() - 1} exceeds two-adicity {TWO_ADICITY}")
    omega = scalar_field().primitive_root_of_unity(size)
    return FieldElement.from_int(int(omega))


class Domain:
    """Evaluation domain {omega^i : 0 <= i < size}."""

    def __init__(self, size: int):
        self.size = size
        self.omega = root_of_unity(size)
        self.omega_inv = inverse(self.omega)  # = omega^(n-1), the last domain point
        self.size_inv = inverse(FieldElement.from_int(size))

    def element(self, i: int) -> FieldElement:
        return power(self.omega, i % self.size)

    def evaluate(self, zeta: FieldElement) -> LagrangeEvaluations:
        """Lagrange evaluations at zeta.

        Args:
            zeta: Evaluation point, expected outside the domain

        Returns:
            LagrangeEvaluations with
              vanishing_polynomial = zeta^n - 1
              l_first = (zeta^n - 1) / (n * (zeta - 1))
              l_last = omega^(n-1) * (zeta^n - 1) / (n * (zeta - omega^(n-1)))
              zeta_omega = zeta * omega
              zeta_minus_omega_inv = 1 / (zeta - omega^(n-1))
        """
        one = FieldElement.one()
        vanishing = power(zeta, self.size) - one
        zeta_minus_omega_inv = inverse(zeta - self.omega_inv)
        l_first = vanishing * self.size_inv * inverse(zeta - one)
        l_last = vanishing * zeta_minus_omega_inv * self.omega_inv * self.size_inv
        return LagrangeEvaluations(
            vanishing_polynomial=vanishing,
            l_first=l_first,
            l_last=l_last,
            zeta_omega=zeta * self.omega,
            zeta_minus_omega_inv=zeta_minus_omega_inv,
        )
