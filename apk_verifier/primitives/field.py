"""BW6-761 scalar field (= BLS12-377 base field) on two 256-bit limbs.

A FieldElement is the pair (high, low) with value high * 2^256 + low. Every
element returned by an arithmetic operation is fully reduced below MODULUS.

Multiplication avoids a wide native multiply by the square-difference
identity

    x * y = ((x + y)^2 - (x - y)^2) / 4

where both squares are taken unreduced on four limbs, the difference is
shifted right twice, and one double-width reduction brings the result back
below the modulus. All squaring, exponentiation and reduction is delegated to
the modexp capability (primitives/modexp.py); its failures propagate.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from apk_verifier.errors import FieldDecodeError
from apk_verifier.primitives.modexp import ALL_ONES_1024, modexp
from apk_verifier.primitives.wide import (WORD_BITS, WORD_MASK, add_with_carry,
                                          shr1, sub_with_borrow)

# --- Field Constants ---

MODULUS = 0x01AE3A4617C510EAC63B05C06CA1493B1A22D9F300F5138F1EF3622FBA094800170B5D44300000008508C00000000001
"""377-bit prime r: BLS12-377 base field, BW6-761 scalar field."""

MODULUS_HIGH = MODULUS >> WORD_BITS
MODULUS_LOW = MODULUS & WORD_MASK

GENERATOR = 15
"""Multiplicative generator of the field."""

TWO_ADICITY = 46
"""Largest k with 2^k | (MODULUS - 1)."""

BYTES_PER_ELEMENT = 48
LOW_BYTES = 32
HIGH_BYTES = 16
RANDOM_BYTES = 16


@dataclass(frozen=True)
class FieldElement:
    """Field element stored as (high, low) 256-bit words.

    Equality is structural on the limbs. Use the module functions or the
    arithmetic operators; plain ints are accepted as operands and reduced.

    The constructor only accepts reduced values (high * 2^256 + low < MODULUS).
    """
    high: int
    low: int

    def __post_init__(self):
        if not (0 <= self.high <= WORD_MASK and 0 <= self.low <= WORD_MASK):
            raise ValueError(f"limbs must be 256-bit words, got ({self.high:#x}, {self.low:#x})")
        if is_geq_modulus(self):
            raise ValueError(f"value {self.to_int():#x} is not below the modulus")

    # --- Constructors ---

    @classmethod
    def _unchecked(cls, high: int, low: int) -> "FieldElement":
        # Limb pair that may be >= r, for intermediates inside the engine only
        element = object.__new__(cls)
        object.__setattr__(element, "high", high)
        object.__setattr__(element, "low", low)
        return element

    @classmethod
    def zero(cls) -> "FieldElement":
        return cls(0, 0)

    @classmethod
    def one(cls) -> "FieldElement":
        return cls(0, 1)

    @classmethod
    def two(cls) -> "FieldElement":
        return cls(0, 2)

    @classmethod
    def modulus(cls) -> "FieldElement":
        """The modulus itself. Not a reduced element; used for limb arithmetic."""
        return cls._unchecked(MODULUS_HIGH, MODULUS_LOW)

    @classmethod
    def from_int(cls, value: int) -> "FieldElement":
        """Reduce an arbitrary integer into the field."""
        value %= MODULUS
        return cls(value >> WORD_BITS, value & WORD_MASK)

    @classmethod
    def from_random_bytes(cls, data: bytes) -> "FieldElement":
        return from_random_bytes(data)

    @classmethod
    def from_bytes(cls, data: bytes) -> "FieldElement":
        return deserialize(data)

    # --- Conversions ---

    def to_int(self) -> int:
        return (self.high << WORD_BITS) | self.low

    def __int__(self) -> int:
        return self.to_int()

    def to_bytes(self) -> bytes:
        return serialize(self)

    def debug_bytes(self) -> bytes:
        return debug_bytes(self)

    def __repr__(self) -> str:
        return f"FieldElement(high={self.high:#x}, low={self.low:#x})"

    # --- Operators ---

    def __add__(self, other: "Operand") -> "FieldElement":
        return add(self, _coerce(other))

    def __radd__(self, other: "Operand") -> "FieldElement":
        return add(_coerce(other), self)

    def __sub__(self, other: "Operand") -> "FieldElement":
        return sub(self, _coerce(other))

    def __rsub__(self, other: "Operand") -> "FieldElement":
        return sub(_coerce(other), self)

    def __mul__(self, other: "Operand") -> "FieldElement":
        return mul(self, _coerce(other))

    def __rmul__(self, other: "Operand") -> "FieldElement":
        return mul(_coerce(other), self)

    def __neg__(self) -> "FieldElement":
        return neg(self)

    def __pow__(self, exponent: int) -> "FieldElement":
        if exponent < 0:
            return power(inverse(self), -exponent)
        return power(self, exponent)


Operand = Union[FieldElement, int]


def _coerce(value: Operand) -> FieldElement:
    if isinstance(value, FieldElement):
        return value
    if isinstance(value, int):
        return FieldElement.from_int(value)
    raise TypeError(f"expected FieldElement or int, got {type(value).__name__}")


@dataclass(frozen=True)
class UnreducedPair:
    """Double-width scratch value: high * 2^512 + low, never exposed reduced."""
    high: FieldElement
    low: FieldElement

    def limbs(self) -> Tuple[int, int, int, int]:
        """Big-endian four-limb view."""
        return (self.high.high, self.high.low, self.low.high, self.low.low)

    @classmethod
    def from_limbs(cls, limbs: Tuple[int, ...]) -> "UnreducedPair":
        w3, w2, w1, w0 = limbs
        return cls(FieldElement._unchecked(w3, w2), FieldElement._unchecked(w1, w0))


# --- Comparisons ---

def is_zero(x: FieldElement) -> bool:
    return x.high == 0 and x.low == 0


def greater_than(x: FieldElement, y: FieldElement) -> bool:
    """Lexicographic (high, low) comparison. Representational, not a field order."""
    return x.high > y.high or (x.high == y.high and x.low > y.low)


def is_geq_modulus(x: FieldElement) -> bool:
    return x.high > MODULUS_HIGH or (x.high == MODULUS_HIGH and x.low >= MODULUS_LOW)


# --- Addition / Subtraction ---

def add_unreduced(x: FieldElement, y: FieldElement) -> FieldElement:
    """Two-limb add with carry and no reduction. For reduced inputs the result is < 2r."""
    carry, low = add_with_carry(x.low, y.low)
    _, high = add_with_carry(x.high, y.high, carry)
    return FieldElement._unchecked(high, low)


def _sub_limbs(x: FieldElement, y: FieldElement) -> FieldElement:
    # Caller guarantees x >= y.
    borrow, low = sub_with_borrow(x.low, y.low)
    _, high = sub_with_borrow(x.high, y.high, borrow)
    return FieldElement(high, low)


def normalize(x: FieldElement) -> FieldElement:
    """Subtract the modulus once if x >= r. Sufficient for any x < 2r."""
    if is_geq_modulus(x):
        return _sub_limbs(x, FieldElement.modulus())
    return x


def add(x: FieldElement, y: FieldElement) -> FieldElement:
    return normalize(add_unreduced(x, y))


def sub(x: FieldElement, y: FieldElement) -> FieldElement:
    """x - y mod r in one pass.

    When y > x the modulus is added to x first so the limb subtraction cannot
    underflow; the result is then already below r.
    """
    if greater_than(y, x):
        x = add_unreduced(x, FieldElement.modulus())
    return _sub_limbs(x, y)


def neg(x: FieldElement) -> FieldElement:
    return sub(FieldElement.zero(), x)


# --- Multiplication ---

def power(base: FieldElement, exponent: int) -> FieldElement:
    """base^exponent mod r via the modexp capability."""
    high, low = modexp((base.high, base.low), exponent, MODULUS, out_limbs=2)
    return FieldElement(high, low)


def square(x: FieldElement) -> FieldElement:
    return power(x, 2)


def unreduced_square(x: FieldElement) -> UnreducedPair:
    """Exact integer square of x on four limbs (modulus is all ones, so no reduction)."""
    return UnreducedPair.from_limbs(modexp((x.high, x.low), 2, ALL_ONES_1024, out_limbs=4))


def normalize_double_width(value: UnreducedPair) -> FieldElement:
    """Reduce a four-limb magnitude modulo r (numerator^1 mod r)."""
    high, low = modexp(value.limbs(), 1, MODULUS, out_limbs=2)
    return FieldElement(high, low)


def _sub_wide(x: UnreducedPair, y: UnreducedPair) -> Tuple[int, int, int, int]:
    # Four-limb subtract, low limb first. Caller guarantees x >= y.
    xs, ys = x.limbs(), y.limbs()
    out = [0, 0, 0, 0]
    borrow = 0
    for i in reversed(range(4)):
        borrow, out[i] = sub_with_borrow(xs[i], ys[i], borrow)
    return tuple(out)


def mul(x: FieldElement, y: FieldElement) -> FieldElement:
    """x * y mod r using ((x + y)^2 - (x - y)^2) / 4."""
    if x == y:
        return square(x)

    total = add_unreduced(x, y)
    # |x - y| as a plain integer, not a field difference
    diff = _sub_limbs(y, x) if greater_than(y, x) else _sub_limbs(x, y)

    # Both squares are exact, and (x + y)^2 >= (x - y)^2
    quadruple = _sub_wide(unreduced_square(total), unreduced_square(diff))
    product = shr1(shr1(quadruple))
    return normalize_double_width(UnreducedPair.from_limbs(product))


def inverse(x: FieldElement) -> FieldElement:
    """x^(r-2) by Fermat's little theorem. Zero maps to zero.

    The exponent is fixed, so the work does not depend on the value of x.
    """
    if is_zero(x):
        return FieldElement.zero()
    return power(x, MODULUS - 2)


# --- Serialization ---

def from_random_bytes(data: bytes) -> FieldElement:
    """Lift 16 little-endian bytes into the low limb.

    2^128 < r, so every input is already a reduced element.
    """
    if len(data) != RANDOM_BYTES:
        raise FieldDecodeError(f"expected {RANDOM_BYTES} random bytes, got {len(data)}")
    return FieldElement(0, int.from_bytes(data, "little"))


def serialize(x: FieldElement) -> bytes:
    """48-byte encoding: low limb reversed to 32 bytes, then high limb reversed to 16 bytes."""
    low = x.low.to_bytes(LOW_BYTES, "big")[::-1]
    high = x.high.to_bytes(HIGH_BYTES, "big")[::-1]
    return low + high


def deserialize(data: bytes) -> FieldElement:
    """Inverse of serialize. Rejects wrong lengths and values >= r."""
    if len(data) != BYTES_PER_ELEMENT:
        raise FieldDecodeError(f"expected {BYTES_PER_ELEMENT} bytes, got {len(data)}")
    low = int.from_bytes(data[:LOW_BYTES][::-1], "big")
    high = int.from_bytes(data[LOW_BYTES:][::-1], "big")
    value = (high << WORD_BITS) | low
    if value >= MODULUS:
        raise FieldDecodeError(f"non-canonical field element: {value:#x}")
    return FieldElement(high, low)


def debug_bytes(x: FieldElement) -> bytes:
    """Raw limb dump without byte reversal. Diagnostic only."""
    return x.low.to_bytes(LOW_BYTES, "big") + x.high.to_bytes(HIGH_BYTES, "big")
