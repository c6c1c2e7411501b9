"""Verifier core for succinct accountable aggregate-signature proofs over BW6-761."""

__version__ = "0.1.0"
