"""Constraint checks of the accountable light-client proof.

This is the part of verification that needs only field arithmetic: every
constraint residue at zeta must vanish, and the linearization commitment is
restored for the opening check. Transcript reconstruction and the pairing
check belong to the outer verifier and are not done here.

Evaluator errors (bad domain size, chunk count mismatch, failed consistency
check) propagate to the caller; a non-vanishing residue is reported and makes
verify_constraints return False.
"""

from typing import List

from apk_verifier.primitives.curve import Point
from apk_verifier.primitives.field import FieldElement, is_zero
from apk_verifier.protocol import accountable
from apk_verifier.protocol.data import ProtocolEvaluationInputs

CONSTRAINT_NAMES = [
    "affine addition x",
    "affine addition y",
    "bitmask booleanity",
    "partial sums boundary x",
    "partial sums boundary y",
    "inner product",
    "multipacking mask",
]


def evaluate_constraints(inputs: ProtocolEvaluationInputs) -> List[FieldElement]:
    """The seven residues for one verification call."""
    return accountable.evaluate_constraint_polynomials(
        inputs.evaluations,
        inputs.apk,
        inputs.seed,
        inputs.lagrange,
        inputs.r,
        inputs.bitmask,
        inputs.domain_size,
    )


def restore_linearization_commitment(inputs: ProtocolEvaluationInputs) -> Point:
    return accountable.restore_commitment_to_linearization_polynomial(
        inputs.evaluations,
        inputs.phi,
        inputs.zeta_minus_omega_inv,
        inputs.commitments,
    )


def verify_constraints(inputs: ProtocolEvaluationInputs) -> bool:
    """Check that every constraint residue vanishes at zeta.

    Args:
        inputs: Challenges, domain values, bitmask, evaluations and commitments

    Returns:
        True if all residues are zero, False otherwise
    """
    print(f"Verifying constraints for {inputs.bitmask.count_ones()} of {inputs.bitmask.size} signers")
    residues = evaluate_constraints(inputs)

    # Check every residue so all failures are reported
    is_valid = True
    for name, residue in zip(CONSTRAINT_NAMES, residues):
        if not is_zero(residue):
            print(f"ERROR: {name} constraint does not vanish: {residue.to_int():#x}")
            is_valid = False
    return is_valid
