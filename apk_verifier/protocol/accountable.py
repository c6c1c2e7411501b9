"""Accountable (packed bitmask) protocol evaluation.

On top of the basic protocol the prover commits to two more registers:

    acc  running inner product of the bitmask with the multipacking mask c
    c    multipacking mask: within chunk k it steps through 2^j * r^k, resetting
         with a factor r at every chunk boundary

The verifier knows the bitmask, so it aggregates the bitmask chunks with powers
of the challenge r and checks two extra constraints at zeta (shifted terms are
linearized away, as in the basic protocol):

    inner_product     = -acc - b c + (sum_k chunk_k r^k) L_last
    multipacking_mask = -c a - (1 - r^m) L_last

where a = 2 + (r / 2^255 - 2) s(zeta omega) and s is the polynomial that is 1 on
every 256th domain point and 0 elsewhere. s(zeta omega) is computed twice, in
closed form and as an explicit geometric sum, and the two must agree.
"""

from typing import List, Tuple

from apk_verifier.errors import (ConsistencyCheckError, InvalidDomainSizeError,
                                 LengthMismatchError)
from apk_verifier.primitives import curve
from apk_verifier.primitives.bitmask import CHUNK_BITS, Bitmask
from apk_verifier.primitives.curve import Point
from apk_verifier.primitives.field import FieldElement, inverse, power
from apk_verifier.primitives.polynomial import mul_sum, powers, sum_elements
from apk_verifier.protocol import basic
from apk_verifier.protocol.data import (AccountableCommitments,
                                        AccountableEvaluations,
                                        LagrangeEvaluations)

N_CONSTRAINTS = basic.N_BASIC_CONSTRAINTS + 2

# Exponent of phi for each extra linearized register
ACC_PHI_POWER = 5
C_PHI_POWER = 6


def chunk_count(domain_size: int) -> int:
    """Number of 256-bit bitmask chunks covering the domain."""
    if domain_size <= 0 or domain_size % CHUNK_BITS != 0:
        raise InvalidDomainSizeError(
            f"Domain size must be a positive multiple of {CHUNK_BITS}, got {domain_size}"
        )
    return domain_size // CHUNK_BITS


def chunk_start_indicator(zeta_omega: FieldElement, n_chunks: int) -> FieldElement:
    """Evaluate at zeta * omega the polynomial that is 1 on every 256th domain point.

    With m = n_chunks and x = zeta_omega^m the value is
        (1/256) (x^256 - 1) / (x - 1)      (closed form)
        (1/256) sum_{i < 256} x^i           (direct sum)
    Both are computed; a mismatch means the inputs are forged or degenerate
    (zeta * omega inside the subgroup of size m).

    Raises:
        ConsistencyCheckError: If the two evaluations differ
    """
    one = FieldElement.one()
    inv_chunk_bits = inverse(FieldElement.from_int(CHUNK_BITS))
    x = power(zeta_omega, n_chunks)

    closed_form = inv_chunk_bits * (power(zeta_omega, n_chunks * CHUNK_BITS) - one) * inverse(x - one)
    direct_sum = inv_chunk_bits * sum_elements(powers(x, CHUNK_BITS - 1))

    if closed_form != direct_sum:
        raise ConsistencyCheckError(
            f"Chunk indicator mismatch: closed form {closed_form.to_int():#x}, "
            f"direct sum {direct_sum.to_int():#x}"
        )
    return closed_form


def aggregate_bitmask(bitmask: Bitmask, r: FieldElement, domain_size: int) -> Tuple[FieldElement, FieldElement]:
    """Return (sum_k chunk_k r^k, r^m) for the m chunks of the domain.

    Raises:
        InvalidDomainSizeError: If domain_size is not a multiple of 256
        LengthMismatchError: If the bitmask does not have exactly m chunks
    """
    n_chunks = chunk_count(domain_size)
    chunks = bitmask.to_field_elements()
    if len(chunks) != n_chunks:
        raise LengthMismatchError(
            f"Bitmask has {len(chunks)} chunks, domain of size {domain_size} needs {n_chunks}"
        )
    powers_of_r = powers(r, n_chunks - 1)
    r_pow_m = r * powers_of_r[-1]
    return mul_sum(chunks, powers_of_r), r_pow_m


def evaluate_constraint_polynomials(
    evaluations: AccountableEvaluations,
    apk: Point,
    seed: Point,
    lagrange: LagrangeEvaluations,
    r: FieldElement,
    bitmask: Bitmask,
    domain_size: int,
) -> List[FieldElement]:
    """All seven constraint residues at zeta.

    Args:
        evaluations: Claimed c, acc and basic register evaluations at zeta
        apk: Aggregate public key on BLS12-377 G1
        seed: Seed point h on BLS12-377 G1
        lagrange: Domain values at zeta
        r: Bitmask aggregation challenge
        bitmask: Signer bitmask
        domain_size: Size of the evaluation domain

    Returns:
        The five basic residues followed by inner_product and multipacking_mask

    Raises:
        InvalidDomainSizeError: domain_size not a positive multiple of 256
        LengthMismatchError: bitmask chunk count does not match the domain
        ConsistencyCheckError: chunk indicator evaluations disagree
    """
    one = FieldElement.one()
    two = FieldElement.two()
    zero = FieldElement.zero()

    n_chunks = chunk_count(domain_size)
    aggregated_bitmask, r_pow_m = aggregate_bitmask(bitmask, r, domain_size)

    indicator = chunk_start_indicator(lagrange.zeta_omega, n_chunks)
    two_pow_255_inv = inverse(FieldElement(0, 1 << 255))
    a = two + (r * two_pow_255_inv - two) * indicator

    b = evaluations.basic.bitmask
    c = evaluations.c
    acc = evaluations.acc

    # The shifted evaluations acc(zeta omega) and c(zeta omega) are linearized
    acc_shifted = zero
    c_shifted = zero
    inner_product = acc_shifted - acc - b * c + aggregated_bitmask * lagrange.l_last
    multipacking_mask = c_shifted - c * a - (one - r_pow_m) * lagrange.l_last

    residues = basic.evaluate_constraint_polynomials(evaluations.basic, apk, seed, lagrange)
    return residues + [inner_product, multipacking_mask]


def restore_commitment_to_linearization_polynomial(
    evaluations: AccountableEvaluations,
    phi: FieldElement,
    zeta_minus_omega_inv: FieldElement,
    commitments: AccountableCommitments,
) -> Point:
    """Basic linearization commitment + acc_comm * phi^5 + c_comm * phi^6."""
    powers_of_phi = powers(phi, C_PHI_POWER)
    base = basic.restore_commitment_to_linearization_polynomial(
        evaluations.basic, phi, zeta_minus_omega_inv, commitments.basic
    )
    acc_term = curve.mul(commitments.acc, powers_of_phi[ACC_PHI_POWER])
    c_term = curve.mul(commitments.c, powers_of_phi[C_PHI_POWER])
    return curve.add(curve.add(base, acc_term), c_term)
