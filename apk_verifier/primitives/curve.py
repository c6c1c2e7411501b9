"""Affine short-Weierstrass group arithmetic: y^2 = x^3 + a*x + b over GF(p).

Used for the BLS12-377 G1 aggregate public key and seed point, and as the
group capability that folds polynomial commitments. Points store canonical
int coordinates (the point at infinity has both coordinates None); the
arithmetic on them runs in the curve's galois GF(p). Each curve carries a known
multiplicative generator so building GF(p) never factors p - 1.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Union

import galois

from apk_verifier.errors import PointNotOnCurveError
from apk_verifier.primitives.field import GENERATOR, MODULUS, FieldElement


@lru_cache(maxsize=None)
def prime_field(p: int, generator: int):
    """galois GF(p) with the multiplicative generator pinned."""
    return galois.GF(p, primitive_element=generator, verify=False)


@dataclass(frozen=True)
class Curve:
    """Curve parameters. generator is a multiplicative generator of GF(p)."""
    name: str
    p: int
    a: int
    b: int
    generator: int

    @property
    def field(self):
        return prime_field(self.p, self.generator)

    @property
    def coordinate_bytes(self) -> int:
        return (self.p.bit_length() + 7) // 8


@dataclass(frozen=True)
class Point:
    """Affine point. x = y = None is the identity."""
    curve: Curve
    x: Optional[int] = None
    y: Optional[int] = None

    @classmethod
    def infinity(cls, curve: Curve) -> "Point":
        return cls(curve)

    @classmethod
    def from_affine(cls, curve: Curve, x: int, y: int) -> "Point":
        """Build a point and check it lies on the curve."""
        point = cls(curve, x % curve.p, y % curve.p)
        if not is_on_curve(point):
            raise PointNotOnCurveError(f"({x:#x}, {y:#x}) is not on {curve.name}")
        return point

    @property
    def is_infinity(self) -> bool:
        return self.x is None

    def __add__(self, other: "Point") -> "Point":
        return add(self, other)

    def __neg__(self) -> "Point":
        return neg(self)

    def __mul__(self, scalar: "Scalar") -> "Point":
        return mul(self, scalar)

    __rmul__ = __mul__


Scalar = Union[int, FieldElement]

BLS12_377_G1 = Curve("BLS12-377 G1", MODULUS, 0, 1, GENERATOR)
"""Signer key group. Its base field is the field of FieldElement."""

BLS12_377_G1_ORDER = 0x12AB655E9A2CA55660B44D1E5C37B00159AA76FED00000010A11800000000001
BLS12_377_G1_GENERATOR_X = 0x008848DEFE740A67C8FC6225BF87FF5485951E2CAA9D41BB188282C8BD37CB5CD5481512FFCD394EEAB9B16EB21BE9EF
BLS12_377_G1_GENERATOR_Y = 0x01914A69C5102EFF1F674F5D30AFEEC4BD7FB348CA3E52D96D182AD44FB82305C2FE3D3634A9591AFD82DE55559C8EA6


def bls12_377_generator() -> Point:
    return Point.from_affine(BLS12_377_G1, BLS12_377_G1_GENERATOR_X, BLS12_377_G1_GENERATOR_Y)


def is_on_curve(point: Point) -> bool:
    if point.is_infinity:
        return True
    c = point.curve
    F = c.field
    x, y = F(point.x), F(point.y)
    return int(y * y) == int(x ** 3 + F(c.a % c.p) * x + F(c.b % c.p))


def neg(point: Point) -> Point:
    if point.is_infinity:
        return point
    F = point.curve.field
    return Point(point.curve, point.x, int(-F(point.y)))


def double(point: Point) -> Point:
    if point.is_infinity or point.y == 0:
        return Point.infinity(point.curve)
    c = point.curve
    F = c.field
    x, y = F(point.x), F(point.y)
    slope = (F(3) * x * x + F(c.a % c.p)) / (F(2) * y)
    x3 = slope * slope - F(2) * x
    y3 = slope * (x - x3) - y
    return Point(c, int(x3), int(y3))


def add(p1: Point, p2: Point) -> Point:
    """Affine addition with the usual identity / inverse / doubling cases."""
    if p1.curve != p2.curve:
        raise ValueError(f"Cannot add points on {p1.curve.name} and {p2.curve.name}")
    if p1.is_infinity:
        return p2
    if p2.is_infinity:
        return p1
    if p1.x == p2.x:
        if p1.y != p2.y or p1.y == 0:
            return Point.infinity(p1.curve)
        return double(p1)
    F = p1.curve.field
    x1, y1 = F(p1.x), F(p1.y)
    x2, y2 = F(p2.x), F(p2.y)
    slope = (y2 - y1) / (x2 - x1)
    x3 = slope * slope - x1 - x2
    y3 = slope * (x1 - x3) - y1
    return Point(p1.curve, int(x3), int(y3))


def mul(point: Point, scalar: Scalar) -> Point:
    """Double-and-add scalar multiplication. FieldElement scalars use their integer value."""
    k = scalar.to_int() if isinstance(scalar, FieldElement) else scalar
    if k < 0:
        return mul(neg(point), -k)
    result = Point.infinity(point.curve)
    addend = point
    while k:
        if k & 1:
            result = add(result, addend)
        addend = double(addend)
        k >>= 1
    return result


def to_bytes(point: Point) -> bytes:
    """Uncompressed affine encoding x || y, big-endian; all zeros for the identity."""
    n = point.curve.coordinate_bytes
    if point.is_infinity:
        return bytes(2 * n)
    return point.x.to_bytes(n, "big") + point.y.to_bytes(n, "big")
