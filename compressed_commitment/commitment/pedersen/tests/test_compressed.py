"""
⚠️ DRAFT — requires crypto review before production use

Tests for the compressed (x-coordinate only) Pedersen commitment.

Test Coverage:
1. Output type, determinism and total order
2. Parameter round-trip through store/load
3. Subgroup validity of every output
4. Sensitivity to randomness (hiding proxy)
5. Sign ambiguity of x-only output and parity opt-in
6. Failure paths: oversized input, bad randomness, degenerate output,
   injected subgroup violation
7. Concurrent commits over shared parameters
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from ..commitment import PedersenCommitment
from ..compressed import PedersenCompressedCommitment, compress_point, y_parity
from ..parameters import PedersenParameters
from ...exceptions import (
    DegenerateCommitmentError,
    InputTooLargeError,
    InvalidRandomnessError,
    PersistenceError,
    SubgroupViolationError,
)
from ...group import BaseFieldElement, PetlibGroup, get_group
from ...layout import WindowLayout
from ...security import RandomnessSource, SeededRandomness


SECP256K1_P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
SECP256K1_GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture(scope="module")
def layout():
    return WindowLayout(num_windows=4, window_size=16)


@pytest.fixture(scope="module")
def scheme(layout):
    return PedersenCompressedCommitment.setup(
        rng=SeededRandomness(b"compressed-tests"), layout=layout
    )


@pytest.fixture(scope="module")
def group():
    return get_group("secp256k1")


# ============================================================================
# HELPERS
# ============================================================================


class SwitchableGroup(PetlibGroup):
    """Group whose subgroup test can be forced to fail after setup."""

    def __init__(self):
        super().__init__("secp256k1")
        self.reject = False

    def is_in_subgroup(self, point):
        if self.reject:
            return False
        return super().is_in_subgroup(point)


# ============================================================================
# TEST: COMMIT
# ============================================================================


class TestCommit:
    """Test the compressed commit operation."""

    def test_output_is_base_field_element(self, scheme, group):
        """Output is a base-field element of the curve."""
        output = scheme.commit(b"hello", 7)

        assert isinstance(output, BaseFieldElement)
        assert output.modulus == group.field_modulus == SECP256K1_P
        assert 0 <= output.value < SECP256K1_P
        assert len(output.to_bytes()) == 32

    def test_output_is_x_of_uncompressed_point(self, scheme, group):
        """Output equals the affine x of the primitive's point."""
        point = PedersenCommitment(scheme.parameters).commit(b"hello", 7)
        x, _ = group.to_affine(point)

        assert scheme.commit(b"hello", 7).value == x

    def test_commit_is_deterministic(self, scheme):
        """Same inputs always give the same output."""
        assert scheme.commit(b"hello", 7) == scheme.commit(b"hello", 7)

    def test_same_seed_gives_same_output(self, layout):
        """Parameters from the same seed commit identically."""
        a = PedersenCompressedCommitment.setup(
            rng=SeededRandomness(b"same-seed"), layout=layout
        )
        b = PedersenCompressedCommitment.setup(
            rng=SeededRandomness(b"same-seed"), layout=layout
        )

        assert a.parameters == b.parameters
        assert a.commit(b"hello", 7) == b.commit(b"hello", 7)

    def test_different_parameters_give_different_output(self, layout, scheme):
        """Independent parameters do not collide."""
        other = PedersenCompressedCommitment.setup(
            rng=SeededRandomness(b"other-seed"), layout=layout
        )

        assert other.commit(b"hello", 7) != scheme.commit(b"hello", 7)

    def test_different_messages_give_different_output(self, scheme):
        """Changing the message changes the output."""
        assert scheme.commit(b"hello", 7) != scheme.commit(b"hellp", 7)

    def test_max_length_message(self, scheme, layout):
        """Message at full capacity is accepted."""
        message = b"\xff" * layout.capacity_bytes

        output = scheme.commit(message, 1)

        assert isinstance(output, BaseFieldElement)

    def test_outputs_are_totally_ordered(self, scheme):
        """Outputs sort and work as dict keys."""
        outputs = [scheme.commit(bytes([i]), 11) for i in range(1, 6)]
        index = {output: i for i, output in enumerate(outputs)}

        assert sorted(outputs) == sorted(outputs, key=lambda o: o.value)
        assert index[scheme.commit(bytes([3]), 11)] == 2

    def test_commit_does_not_mutate_parameters(self, scheme):
        """Parameters are unchanged by commits."""
        before = scheme.parameters.to_bytes()

        scheme.commit(b"hello", 7)
        scheme.commit(b"world", 9)

        assert scheme.parameters.to_bytes() == before


# ============================================================================
# TEST: SUBGROUP VALIDITY
# ============================================================================


class TestSubgroupValidity:
    """Every output corresponds to a prime-order subgroup point."""

    def test_both_candidate_points_in_subgroup(self, scheme, group):
        """Both lifts of the output are valid subgroup points."""
        rng = RandomnessSource()
        for i in range(10):
            output = scheme.commit(bytes([i, i + 1]), rng.get_random_scalar(group.order))
            p, minus_p = scheme.candidate_points(output)

            assert group.is_in_subgroup(p)
            assert group.is_in_subgroup(minus_p)
            assert compress_point(group, p) == output

    def test_commitment_point_is_a_candidate(self, scheme, group):
        """The uncompressed point is one of the two lifts."""
        point = PedersenCommitment(scheme.parameters).commit(b"lift", 5)
        candidates = scheme.candidate_points(scheme.commit(b"lift", 5))

        encoded = {group.encode_point(c) for c in candidates}
        assert group.encode_point(point) in encoded

    def test_injected_subgroup_violation_raises(self, layout):
        """A point failing the subgroup test is never returned."""
        switchable = SwitchableGroup()
        scheme = PedersenCompressedCommitment.setup(
            rng=SeededRandomness(b"violation"), group=switchable, layout=layout
        )
        scheme.commit(b"ok", 3)

        switchable.reject = True
        with pytest.raises(SubgroupViolationError) as exc_info:
            scheme.commit(b"ok", 3)

        assert exc_info.value.retryable is False

    def test_compress_point_rejects_non_subgroup_point(self):
        """compress_point enforces the subgroup check itself."""
        switchable = SwitchableGroup()
        point = switchable.hash_to_point(b"some point")
        switchable.reject = True

        with pytest.raises(SubgroupViolationError):
            compress_point(switchable, point)


# ============================================================================
# TEST: DEGENERATE OUTPUT
# ============================================================================


class TestDegenerateCommitment:
    """Point at infinity is an explicit error state."""

    def test_empty_message_zero_randomness(self, scheme):
        """Empty message with zero blinding is the point at infinity."""
        with pytest.raises(DegenerateCommitmentError) as exc_info:
            scheme.commit(b"", 0)

        assert exc_info.value.retryable is False

    def test_zero_message_zero_randomness(self, scheme):
        """All-zero message with zero blinding is the point at infinity."""
        with pytest.raises(DegenerateCommitmentError):
            scheme.commit(b"\x00" * 4, 0)

    def test_compress_identity_raises(self, group):
        """Compression of the identity fails instead of returning x=0."""
        with pytest.raises(DegenerateCommitmentError):
            compress_point(group, group.identity())

    def test_zero_randomness_with_message_is_not_degenerate(self, scheme):
        """Zero blinding alone is valid (but not hiding)."""
        output = scheme.commit(b"\x01", 0)

        assert isinstance(output, BaseFieldElement)


# ============================================================================
# TEST: INPUT VALIDATION
# ============================================================================


class TestInputValidation:
    """Caller errors propagate unchanged from the primitive."""

    def test_message_too_large(self, scheme, layout):
        """Message longer than window capacity fails, no truncation."""
        message = b"x" * (layout.capacity_bytes + 1)

        with pytest.raises(InputTooLargeError):
            scheme.commit(message, 7)

    def test_negative_randomness(self, scheme):
        with pytest.raises(InvalidRandomnessError):
            scheme.commit(b"hello", -1)

    def test_randomness_equal_to_order(self, scheme, group):
        with pytest.raises(InvalidRandomnessError):
            scheme.commit(b"hello", group.order)

    def test_randomness_wrong_type(self, scheme):
        with pytest.raises(InvalidRandomnessError):
            scheme.commit(b"hello", "7")

    def test_randomness_max_value(self, scheme, group):
        """order - 1 is the largest valid scalar."""
        output = scheme.commit(b"hello", group.order - 1)

        assert isinstance(output, BaseFieldElement)

    def test_invalid_randomness_is_value_error(self, scheme):
        """InvalidRandomnessError is also a ValueError."""
        with pytest.raises(ValueError):
            scheme.commit(b"hello", -5)


# ============================================================================
# TEST: HIDING PROXY
# ============================================================================


class TestSensitivity:
    """Fresh randomness gives fresh outputs."""

    def test_distinct_randomness_distinct_outputs(self, scheme, group):
        """Many independent r give pairwise distinct outputs."""
        rng = RandomnessSource()
        outputs = {
            scheme.commit(b"fixed message", rng.get_random_scalar(group.order))
            for _ in range(32)
        }

        assert len(outputs) == 32

    def test_adjacent_randomness_distinct_outputs(self, scheme):
        assert scheme.commit(b"m", 1000) != scheme.commit(b"m", 1001)


# ============================================================================
# TEST: SIGN AMBIGUITY
# ============================================================================


class TestSignAmbiguity:
    """P and -P compress to the same output; parity tells them apart."""

    def test_point_and_negation_share_output(self, group):
        """compress_point(P) == compress_point(-P)."""
        point = group.hash_to_point(b"sign ambiguity")
        negated = group.neg(point)

        assert group.encode_point(point) != group.encode_point(negated)
        assert compress_point(group, point) == compress_point(group, negated)
        assert y_parity(group, point) != y_parity(group, negated)

    def test_generator_and_negation(self, group):
        """Known vector: G and -G both compress to G.x."""
        g = group.generator()

        assert compress_point(group, g).value == SECP256K1_GX
        assert compress_point(group, group.neg(g)).value == SECP256K1_GX
        # secp256k1 G has even y
        assert y_parity(group, g) == 0

    def test_negated_randomness_collides_on_empty_message(self, scheme, group):
        """commit(0, r) = r*R and commit(0, n-r) = -r*R share x."""
        r = 123456789
        output = scheme.commit(b"", r)
        negated_output = scheme.commit(b"", group.order - r)

        assert output == negated_output
        # sign-agnostic verification accepts both openings
        assert scheme.verify_opening(output, b"", r)
        assert scheme.verify_opening(output, b"", group.order - r)

    def test_parity_restores_binding(self, scheme, group):
        """commit_with_parity distinguishes the colliding openings."""
        r = 123456789
        x1, parity1 = scheme.commit_with_parity(b"", r)
        x2, parity2 = scheme.commit_with_parity(b"", group.order - r)

        assert x1 == x2
        assert parity1 != parity2

    def test_commit_with_parity_matches_commit(self, scheme):
        output, parity = scheme.commit_with_parity(b"hello", 7)

        assert output == scheme.commit(b"hello", 7)
        assert parity in (0, 1)


# ============================================================================
# TEST: VERIFY OPENING
# ============================================================================


class TestVerifyOpening:
    def test_valid_opening(self, scheme):
        output = scheme.commit(b"hello", 7)

        assert scheme.verify_opening(output, b"hello", 7)

    def test_wrong_message(self, scheme):
        output = scheme.commit(b"hello", 7)

        assert not scheme.verify_opening(output, b"hellp", 7)

    def test_wrong_randomness(self, scheme):
        output = scheme.commit(b"hello", 7)

        assert not scheme.verify_opening(output, b"hello", 8)

    def test_degenerate_opening_is_rejected(self, scheme):
        output = scheme.commit(b"hello", 7)

        assert not scheme.verify_opening(output, b"", 0)

    def test_foreign_field_is_rejected(self, scheme):
        output = BaseFieldElement(5, 7)

        assert not scheme.verify_opening(output, b"hello", 7)

    def test_non_field_output_raises(self, scheme):
        with pytest.raises(TypeError):
            scheme.verify_opening(1234, b"hello", 7)

    def test_oversized_opening_raises(self, scheme, layout):
        output = scheme.commit(b"hello", 7)

        with pytest.raises(InputTooLargeError):
            scheme.verify_opening(output, b"x" * (layout.capacity_bytes + 1), 7)


# ============================================================================
# TEST: PARAMETER LIFECYCLE
# ============================================================================


class TestLifecycle:
    """setup / store / load through the compressed scheme."""

    def test_store_load_round_trip(self, scheme, tmp_path):
        """load(store(p)) == p and commitments match."""
        path = tmp_path / "params.cbor"

        scheme.store(path)
        loaded = PedersenCompressedCommitment.load(path)

        assert loaded.parameters == scheme.parameters
        assert path.read_bytes() == scheme.parameters.to_bytes()
        for message, r in [(b"hello", 7), (b"", 1), (b"\x00\xff", 99)]:
            assert loaded.commit(message, r) == scheme.commit(message, r)

    def test_wire_format_matches_primitive(self, scheme, tmp_path):
        """The compressed layer stores exactly the primitive's bytes."""
        compressed_path = tmp_path / "compressed.cbor"
        primitive_path = tmp_path / "primitive.cbor"

        scheme.store(compressed_path)
        PedersenCommitment(scheme.parameters).store(primitive_path)

        assert compressed_path.read_bytes() == primitive_path.read_bytes()

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(PersistenceError):
            PedersenCompressedCommitment.load(tmp_path / "missing.cbor")

    def test_load_revalidates_subgroup(self, scheme, tmp_path):
        """Loading with a group that rejects every point fails."""
        path = tmp_path / "params.cbor"
        scheme.store(path)
        switchable = SwitchableGroup()
        switchable.reject = True

        with pytest.raises(SubgroupViolationError):
            PedersenCompressedCommitment.load(path, group=switchable)

    def test_setup_defaults(self):
        """Default setup uses secp256k1 and the default layout."""
        default = PedersenCompressedCommitment.setup()

        assert default.group.name == "secp256k1"
        assert default.parameters.layout == WindowLayout()
        assert isinstance(default.commit(b"hello", 7), BaseFieldElement)

    def test_parameters_are_shared_not_copied(self, scheme):
        wrapped = PedersenCompressedCommitment(scheme.parameters)

        assert wrapped.parameters is scheme.parameters
        assert isinstance(wrapped.parameters, PedersenParameters)


# ============================================================================
# TEST: CONCURRENCY
# ============================================================================


class TestConcurrency:
    def test_concurrent_commits_match_sequential(self, scheme):
        """Shared parameters serve concurrent commits without locking."""
        inputs = [(bytes([i]) * 3, 1000 + i) for i in range(24)]
        expected = [scheme.commit(m, r) for m, r in inputs]

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda args: scheme.commit(*args), inputs))

        assert results == expected
