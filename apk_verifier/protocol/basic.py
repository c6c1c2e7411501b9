"""Basic (affine addition) protocol: five constraint residues and the base
linearization commitment.

Registers, all evaluated at zeta:
    (x2, y2)  keyset - the signer public keys
    b         bitmask
    (x1, y1)  partial sums of the selected keys, starting from a seed h

The conditional affine addition constraints relate row i to row i + 1. The
row-(i + 1) terms (x3, y3) enter linearly, so the verifier drops them from the
residues and restores them through the linearization commitment instead.

Constraints:
    c1 = (b ((x1 - x2)^2 (x1 + x2 + x3) - (y2 - y1)^2) + (1 - b)(y3 - y1)) * (zeta - omega^(n-1))
    c2 = (b ((x1 - x2)(y3 + y1) - (y2 - y1)(x3 - x1)) + (1 - b)(x3 - x1)) * (zeta - omega^(n-1))
    c3 = b (1 - b)
    c4 = (x1 - h.x) L_first + (x1 - (apk + h).x) L_last
    c5 = (y1 - h.y) L_first + (y1 - (apk + h).y) L_last
"""

from typing import List

from apk_verifier.primitives import curve
from apk_verifier.primitives.curve import Point
from apk_verifier.primitives.field import FieldElement, inverse
from apk_verifier.protocol.data import (BasicCommitments, BasicEvaluations,
                                        LagrangeEvaluations)

N_BASIC_CONSTRAINTS = 5


def _coordinates(point: Point):
    if point.is_infinity:
        raise ValueError("Boundary point must not be the identity")
    return FieldElement.from_int(point.x), FieldElement.from_int(point.y)


def evaluate_constraint_polynomials(
    evaluations: BasicEvaluations,
    apk: Point,
    seed: Point,
    lagrange: LagrangeEvaluations,
) -> List[FieldElement]:
    """Residues c1..c5 with the shifted terms removed.

    Args:
        evaluations: Claimed keyset, bitmask and partial-sum evaluations at zeta
        apk: Aggregate public key on BLS12-377 G1
        seed: Seed point h on BLS12-377 G1
        lagrange: Domain values at zeta

    Returns:
        [c1, c2, c3, c4, c5]
    """
    one = FieldElement.one()
    zero = FieldElement.zero()

    b = evaluations.bitmask
    x1, y1 = evaluations.partial_sums
    x2, y2 = evaluations.keyset
    x3, y3 = zero, zero  # linearized away
    not_b = one - b

    # Inverse of the precomputed inverse; the constraints are switched off on the last row
    zeta_minus_omega = inverse(lagrange.zeta_minus_omega_inv)

    dx = x1 - x2
    dy = y2 - y1
    c1 = (b * (dx * dx * (x1 + x2 + x3) - dy * dy) + not_b * (y3 - y1)) * zeta_minus_omega
    c2 = (b * (dx * (y3 + y1) - dy * (x3 - x1)) + not_b * (x3 - x1)) * zeta_minus_omega
    c3 = b * not_b

    h_x, h_y = _coordinates(seed)
    apk_plus_h_x, apk_plus_h_y = _coordinates(curve.add(apk, seed))
    c4 = (x1 - h_x) * lagrange.l_first + (x1 - apk_plus_h_x) * lagrange.l_last
    c5 = (y1 - h_y) * lagrange.l_first + (y1 - apk_plus_h_y) * lagrange.l_last

    return [c1, c2, c3, c4, c5]


def restore_commitment_to_linearization_polynomial(
    evaluations: BasicEvaluations,
    phi: FieldElement,
    zeta_minus_omega_inv: FieldElement,
    commitments: BasicCommitments,
) -> Point:
    """Commitment to the part of c1 + phi * c2 that is linear in x3, y3.

    The x3 coefficient is b (x1 - x2)^2 + phi (b (y1 - y2) + (1 - b)) and the
    y3 coefficient is (1 - b) + phi b (x1 - x2), both scaled by
    (zeta - omega^(n-1)).
    """
    one = FieldElement.one()
    b = evaluations.bitmask
    x1, y1 = evaluations.partial_sums
    x2, y2 = evaluations.keyset
    zeta_minus_omega = inverse(zeta_minus_omega_inv)

    acc_x_coeff = (b * (x1 - x2) * (x1 - x2) + phi * (b * (y1 - y2) + (one - b))) * zeta_minus_omega
    acc_y_coeff = ((one - b) + phi * b * (x1 - x2)) * zeta_minus_omega

    acc_x_comm, acc_y_comm = commitments.partial_sums
    return curve.add(curve.mul(acc_x_comm, acc_x_coeff), curve.mul(acc_y_comm, acc_y_coeff))
