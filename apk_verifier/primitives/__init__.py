"""Primitives - limb arithmetic, the field engine and its collaborators."""

from apk_verifier.primitives.bitmask import CHUNK_BITS, Bitmask
from apk_verifier.primitives.curve import BLS12_377_G1, Curve, Point
from apk_verifier.primitives.field import (
    BYTES_PER_ELEMENT,
    GENERATOR,
    MODULUS,
    TWO_ADICITY,
    FieldElement,
    UnreducedPair,
)
from apk_verifier.primitives.modexp import modexp
from apk_verifier.primitives.polynomial import (
    horner_eval,
    mul_sum,
    powers,
    sum_elements,
)
from apk_verifier.primitives.wide import add_with_carry, sub_with_borrow

__all__ = [
    # Field
    "FieldElement",
    "UnreducedPair",
    "MODULUS",
    "GENERATOR",
    "TWO_ADICITY",
    "BYTES_PER_ELEMENT",
    # Kernel
    "add_with_carry",
    "sub_with_borrow",
    "modexp",
    # Vector helpers
    "powers",
    "sum_elements",
    "mul_sum",
    "horner_eval",
    # Bitmask
    "Bitmask",
    "CHUNK_BITS",
    # Curves
    "Curve",
    "Point",
    "BLS12_377_G1",
]
