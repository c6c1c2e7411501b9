"""Data structures passed into the constraint evaluators.

All containers are frozen: a verification call assembles them once and the
evaluators only read from them.

Layout:
    LagrangeEvaluations      - domain-dependent values at zeta
    BasicEvaluations         - keyset, bitmask and partial-sum evaluations at zeta
    AccountableEvaluations   - basic evaluations plus c and acc
    BasicCommitments         - commitments to the basic-protocol polynomials
    AccountableCommitments   - basic commitments plus c and acc commitments
    ProtocolEvaluationInputs - everything one evaluation call consumes
"""

from dataclasses import dataclass
from typing import Tuple

from apk_verifier.primitives.bitmask import Bitmask
from apk_verifier.primitives.curve import Point
from apk_verifier.primitives.field import FieldElement

# Type aliases
AffinePair = Tuple[FieldElement, FieldElement]  # (x, y) evaluations of a point-valued register
PointPair = Tuple[Point, Point]  # commitments to the x and y polynomials


@dataclass(frozen=True)
class LagrangeEvaluations:
    """Domain values at the evaluation point zeta.

    Attributes:
        vanishing_polynomial: zeta^n - 1
        l_first: first Lagrange basis polynomial at zeta
        l_last: last Lagrange basis polynomial at zeta
        zeta_omega: zeta * omega, the shifted evaluation point
        zeta_minus_omega_inv: 1 / (zeta - omega^(n-1))
    """
    vanishing_polynomial: FieldElement
    l_first: FieldElement
    l_last: FieldElement
    zeta_omega: FieldElement
    zeta_minus_omega_inv: FieldElement


@dataclass(frozen=True)
class BasicEvaluations:
    """Prover-claimed evaluations of the basic (affine addition) registers at zeta."""
    keyset: AffinePair
    bitmask: FieldElement
    partial_sums: AffinePair

    def to_bytes(self) -> bytes:
        """Serialized evaluations in register order, for transcript binding."""
        values = (*self.keyset, self.bitmask, *self.partial_sums)
        return b"".join(v.to_bytes() for v in values)


@dataclass(frozen=True)
class AccountableEvaluations:
    """Basic evaluations plus the accountability registers c and acc."""
    c: FieldElement
    acc: FieldElement
    basic: BasicEvaluations

    def to_bytes(self) -> bytes:
        return self.basic.to_bytes() + self.c.to_bytes() + self.acc.to_bytes()


@dataclass(frozen=True)
class BasicCommitments:
    pks: PointPair
    bitmask: Point
    partial_sums: PointPair


@dataclass(frozen=True)
class AccountableCommitments:
    c: Point
    acc: Point
    basic: BasicCommitments


@dataclass(frozen=True)
class ProtocolEvaluationInputs:
    """Read-only view assembled per verification call.

    Attributes:
        r: bitmask aggregation challenge
        phi: linearization challenge
        lagrange: domain values at zeta
        bitmask: signer bitmask, chunked by 256 bits
        domain_size: size of the evaluation domain
        apk: claimed aggregate public key (BLS12-377 G1)
        seed: fixed seed point h the partial sums start from (BLS12-377 G1)
        evaluations: prover-claimed evaluations at zeta
        commitments: polynomial commitments
    """
    r: FieldElement
    phi: FieldElement
    lagrange: LagrangeEvaluations
    bitmask: Bitmask
    domain_size: int
    apk: Point
    seed: Point
    evaluations: AccountableEvaluations
    commitments: AccountableCommitments

    @property
    def zeta_minus_omega_inv(self) -> FieldElement:
        return self.lagrange.zeta_minus_omega_inv
