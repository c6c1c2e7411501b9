"""Protocol - constraint evaluation for the accountable light-client proof."""

from apk_verifier.protocol.accountable import (
    evaluate_constraint_polynomials,
    restore_commitment_to_linearization_polynomial,
)
from apk_verifier.protocol.data import (
    AccountableCommitments,
    AccountableEvaluations,
    BasicCommitments,
    BasicEvaluations,
    LagrangeEvaluations,
    ProtocolEvaluationInputs,
)
from apk_verifier.protocol.domain import Domain
from apk_verifier.protocol.verifier import verify_constraints

__all__ = [
    "evaluate_constraint_polynomials",
    "restore_commitment_to_linearization_polynomial",
    "verify_constraints",
    "Domain",
    # Data
    "LagrangeEvaluations",
    "BasicEvaluations",
    "AccountableEvaluations",
    "BasicCommitments",
    "AccountableCommitments",
    "ProtocolEvaluationInputs",
]
