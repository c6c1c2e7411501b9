"""Tests for the accountable (packed bitmask) constraint evaluation."""

import dataclasses

import pytest

from apk_verifier.errors import (ConsistencyCheckError, InvalidDomainSizeError,
                                 LengthMismatchError)
from apk_verifier.primitives import curve
from apk_verifier.primitives.bitmask import Bitmask
from apk_verifier.primitives.curve import bls12_377_generator
from apk_verifier.primitives.field import FieldElement, inverse, power
from apk_verifier.primitives.polynomial import powers, sum_elements
from apk_verifier.protocol import accountable, basic
from apk_verifier.protocol.data import (AccountableCommitments,
                                        AccountableEvaluations,
                                        BasicCommitments, BasicEvaluations)
from apk_verifier.protocol.domain import Domain

DOMAIN_SIZE = 512
G = bls12_377_generator()
SEED = curve.mul(G, 11)
APK = curve.mul(G, 7)


def fe(value: int) -> FieldElement:
    return FieldElement.from_int(value)


def make_bitmask(rng, size: int = DOMAIN_SIZE) -> Bitmask:
    return Bitmask.from_bits([rng.random() < 0.6 for _ in range(size)])


def consistent_evaluations(random_element, bitmask, r, lagrange):
    """Pick c and acc so that both accountability residues vanish."""
    aggregated, r_pow_m = accountable.aggregate_bitmask(bitmask, r, DOMAIN_SIZE)
    indicator = accountable.chunk_start_indicator(lagrange.zeta_omega, DOMAIN_SIZE // 256)
    a = FieldElement.two() + (r * inverse(FieldElement(0, 1 << 255)) - FieldElement.two()) * indicator

    b = random_element()
    c = -((FieldElement.one() - r_pow_m) * lagrange.l_last) * inverse(a)
    acc = aggregated * lagrange.l_last - b * c
    basic_evals = BasicEvaluations(
        keyset=(random_element(), random_element()),
        bitmask=b,
        partial_sums=(random_element(), random_element()),
    )
    return AccountableEvaluations(c=c, acc=acc, basic=basic_evals)


@pytest.fixture
def instance(rng, random_element):
    domain = Domain(DOMAIN_SIZE)
    lagrange = domain.evaluate(random_element())
    r = random_element()
    bitmask = make_bitmask(rng)
    evals = consistent_evaluations(random_element, bitmask, r, lagrange)
    return evals, lagrange, r, bitmask


class TestChunkCount:
    """Domain size validation."""

    @pytest.mark.parametrize("size,expected", [(256, 1), (512, 2), (1 << 16, 256)])
    def test_multiples_of_256(self, size: int, expected: int) -> None:
        """Chunk count is domain_size / 256."""
        assert accountable.chunk_count(size) == expected

    @pytest.mark.parametrize("size", [0, 100, 300, -256])
    def test_invalid(self, size: int) -> None:
        """Sizes that are not positive multiples of 256 are rejected."""
        with pytest.raises(InvalidDomainSizeError):
            accountable.chunk_count(size)


class TestBitmaskAggregation:
    """Aggregation of chunks with powers of r."""

    def test_single_chunk(self, random_element) -> None:
        """One chunk aggregates to itself and r_pow_m is r."""
        bitmask = Bitmask.from_bits([True, False, True])
        r = random_element()
        aggregated, r_pow_m = accountable.aggregate_bitmask(bitmask, r, 256)
        assert aggregated == fe(5)
        assert r_pow_m == r

    def test_two_chunks(self, random_element) -> None:
        """chunk_0 + chunk_1 r, and r_pow_m = r^2."""
        bits = [False] * 512
        bits[1] = True
        bits[256 + 2] = True
        r = random_element()
        aggregated, r_pow_m = accountable.aggregate_bitmask(Bitmask.from_bits(bits), r, 512)
        assert aggregated == fe(2) + fe(4) * r
        assert r_pow_m == power(r, 2)

    def test_chunk_count_mismatch(self, rng, random_element) -> None:
        """A 512-bit bitmask does not fit a 256 domain."""
        with pytest.raises(LengthMismatchError):
            accountable.aggregate_bitmask(make_bitmask(rng, 512), random_element(), 256)


class TestChunkStartIndicator:
    """Two-way evaluation of the chunk-start indicator."""

    def test_zero_between_chunk_starts(self) -> None:
        """At a domain point that is not a chunk start both forms give zero."""
        domain = Domain(DOMAIN_SIZE)
        value = accountable.chunk_start_indicator(domain.element(5), DOMAIN_SIZE // 256)
        assert value == FieldElement.zero()

    def test_chunk_start_is_degenerate(self) -> None:
        """A chunk start makes zeta_omega^m equal 1, so the closed form cannot be used."""
        domain = Domain(DOMAIN_SIZE)
        with pytest.raises(ConsistencyCheckError):
            accountable.chunk_start_indicator(domain.element(256), DOMAIN_SIZE // 256)

    def test_closed_form_matches_sum(self, random_element) -> None:
        """Off the domain both evaluations agree and the call succeeds."""
        x = random_element()
        value = accountable.chunk_start_indicator(x, 2)
        m_pow = power(x, 2)
        expected = inverse(fe(256)) * sum_elements(powers(m_pow, 255))
        assert value == expected

    def test_degenerate_point_fails_consistency(self) -> None:
        """At zeta_omega = 1 the closed form degenerates and the check fails."""
        with pytest.raises(ConsistencyCheckError):
            accountable.chunk_start_indicator(FieldElement.one(), 2)


class TestConstraintPolynomials:
    """The full seven-residue vector."""

    def test_valid_instance_vanishes(self, instance) -> None:
        """Consistent c and acc make both accountability residues zero."""
        evals, lagrange, r, bitmask = instance
        residues = accountable.evaluate_constraint_polynomials(
            evals, APK, SEED, lagrange, r, bitmask, DOMAIN_SIZE
        )
        assert len(residues) == accountable.N_CONSTRAINTS
        assert residues[5] == FieldElement.zero()
        assert residues[6] == FieldElement.zero()

    def test_basic_residues_come_first(self, instance) -> None:
        """The first five entries are the basic residues."""
        evals, lagrange, r, bitmask = instance
        residues = accountable.evaluate_constraint_polynomials(
            evals, APK, SEED, lagrange, r, bitmask, DOMAIN_SIZE
        )
        assert residues[:5] == basic.evaluate_constraint_polynomials(evals.basic, APK, SEED, lagrange)

    def test_flipped_bit_breaks_inner_product(self, instance) -> None:
        """Claiming a different bitmask leaves a non-zero inner-product residue."""
        evals, lagrange, r, bitmask = instance
        bits = bitmask.to_bits()
        bits[3] = not bits[3]
        residues = accountable.evaluate_constraint_polynomials(
            evals, APK, SEED, lagrange, r, Bitmask.from_bits(bits), DOMAIN_SIZE
        )
        assert residues[5] != FieldElement.zero()
        assert residues[6] == FieldElement.zero()

    def test_wrong_c_breaks_multipacking(self, instance) -> None:
        """Perturbing c breaks the multipacking-mask residue."""
        evals, lagrange, r, bitmask = instance
        forged = dataclasses.replace(evals, c=evals.c + FieldElement.one())
        residues = accountable.evaluate_constraint_polynomials(
            forged, APK, SEED, lagrange, r, bitmask, DOMAIN_SIZE
        )
        assert residues[6] != FieldElement.zero()

    def test_invalid_domain_size(self, instance) -> None:
        """Domain size 300 is rejected."""
        evals, lagrange, r, bitmask = instance
        with pytest.raises(InvalidDomainSizeError):
            accountable.evaluate_constraint_polynomials(evals, APK, SEED, lagrange, r, bitmask, 300)

    def test_chunk_count_mismatch(self, instance) -> None:
        """A two-chunk bitmask against a four-chunk domain is rejected."""
        evals, lagrange, r, bitmask = instance
        with pytest.raises(LengthMismatchError):
            accountable.evaluate_constraint_polynomials(evals, APK, SEED, lagrange, r, bitmask, 1024)

    def test_inconsistent_shifted_point(self, instance) -> None:
        """A zeta_omega inside the chunk subgroup fails the consistency check."""
        evals, lagrange, r, bitmask = instance
        corrupted = dataclasses.replace(lagrange, zeta_omega=FieldElement.one())
        with pytest.raises(ConsistencyCheckError):
            accountable.evaluate_constraint_polynomials(evals, APK, SEED, corrupted, r, bitmask, DOMAIN_SIZE)


class TestLinearization:
    """Folding acc and c commitments into the linearization commitment."""

    def test_fold(self, instance, random_element) -> None:
        """Result is basic + acc * phi^5 + c * phi^6."""
        evals, lagrange, _, _ = instance
        phi = random_element()
        basic_comms = BasicCommitments(
            pks=(curve.mul(G, 1), curve.mul(G, 2)),
            bitmask=curve.mul(G, 3),
            partial_sums=(curve.mul(G, 4), curve.mul(G, 5)),
        )
        commitments = AccountableCommitments(c=curve.mul(G, 6), acc=curve.mul(G, 7), basic=basic_comms)

        restored = accountable.restore_commitment_to_linearization_polynomial(
            evals, phi, lagrange.zeta_minus_omega_inv, commitments
        )

        base = basic.restore_commitment_to_linearization_polynomial(
            evals.basic, phi, lagrange.zeta_minus_omega_inv, basic_comms
        )
        expected = base + curve.mul(G, 7 * power(phi, 5).to_int()) + curve.mul(G, 6 * power(phi, 6).to_int())
        assert restored == expected
