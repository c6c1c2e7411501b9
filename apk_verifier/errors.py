"""Error kinds raised by the verifier core.

Every error is terminal for the call that raised it: the caller must reject
the proof. All kinds derive from ValueError so callers that already guard
malformed input with ``except ValueError`` keep working.
"""


class VerificationError(ValueError):
    """Base class for all verifier-core failures."""


class LengthMismatchError(VerificationError):
    """Two paired sequences have different lengths."""


class InvalidDomainSizeError(VerificationError):
    """Domain size is not a positive multiple of the bitmask chunk width."""


class ConsistencyCheckError(VerificationError):
    """Two independently derived values disagree."""


class ModexpError(VerificationError):
    """The modular-exponentiation capability rejected its input."""


class FieldDecodeError(VerificationError):
    """Byte string is not a canonical field element encoding."""


class PointNotOnCurveError(VerificationError):
    """Affine point does not satisfy the curve equation."""
