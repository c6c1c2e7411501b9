"""Pytest configuration for verifier-core tests."""

import random
import sys
from pathlib import Path

import pytest

# Add the project root to the path so absolute imports work without installing
root_dir = Path(__file__).parent.parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

from apk_verifier.primitives.field import MODULUS, FieldElement  # noqa: E402
from apk_verifier.protocol.domain import scalar_field  # noqa: E402


@pytest.fixture
def rng() -> random.Random:
    return random.Random(0x377)


@pytest.fixture
def random_element(rng):
    """Factory for uniformly random reduced field elements."""
    def make() -> FieldElement:
        return FieldElement.from_int(rng.randrange(MODULUS))
    return make


@pytest.fixture(scope="session")
def GF():
    """galois GF(r), used as an independent arithmetic oracle."""
    return scalar_field()
