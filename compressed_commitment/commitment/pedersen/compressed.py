"""
⚠️ DRAFT — requires crypto review before production use

Compressed Pedersen commitment: the public output is the affine
x-coordinate of the windowed Pedersen commitment point.

Commit pipeline:
    1. point = PedersenCommitment.commit(message, randomness)
       (InputTooLargeError / InvalidRandomnessError propagate unchanged)
    2. affine conversion; the point at infinity raises
       DegenerateCommitmentError
    3. subgroup membership check, always on; failure raises
       SubgroupViolationError
    4. return the x-coordinate as a BaseFieldElement

Sign ambiguity:
    P and -P share an x-coordinate, so the output binds (message,
    randomness) only up to the sign of the committed point. This module
    accepts that weaker guarantee for commit(). Host protocols that need
    full binding use commit_with_parity() and persist the y parity next to
    the x-coordinate. verify_opening() is sign-agnostic by construction.

Parameters and their wire format are those of the uncompressed scheme;
this layer adds no header and no metadata.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Tuple, Union

from ..exceptions import DegenerateCommitmentError, SubgroupViolationError
from ..group import BaseFieldElement
from ..interfaces import CommitmentScheme, Group
from ..layout import WindowLayout
from ..security import constant_time_compare
from .commitment import PedersenCommitment
from .parameters import PedersenParameters


def _checked_affine(group: Group, point: Any) -> Tuple[int, int]:
    if group.is_identity(point):
        raise DegenerateCommitmentError(
            "Commitment is the point at infinity and has no x-coordinate"
        )
    if not group.is_in_subgroup(point):
        raise SubgroupViolationError(
            "Commitment point is not in the prime-order subgroup"
        )
    return group.to_affine(point)


def compress_point(group: Group, point: Any) -> BaseFieldElement:
    """
    Project a subgroup point to its affine x-coordinate.

    compress_point(group, P) == compress_point(group, -P) for every P.

    Raises:
        DegenerateCommitmentError: If point is the point at infinity
        SubgroupViolationError: If point is not in the prime-order subgroup
    """
    x, _ = _checked_affine(group, point)
    return BaseFieldElement(x, group.field_modulus)


def y_parity(group: Group, point: Any) -> int:
    """Parity (0 even, 1 odd) of the affine y-coordinate of point."""
    _, y = _checked_affine(group, point)
    return y & 1


class PedersenCompressedCommitment(CommitmentScheme):
    """
    Pedersen commitment whose output is a single base-field element.

    Example:
        >>> scheme = PedersenCompressedCommitment.setup(layout=WindowLayout(4, 16))
        >>> output = scheme.commit(b"hello", 7)
        >>> assert scheme.verify_opening(output, b"hello", 7)
    """

    def __init__(self, parameters: PedersenParameters):
        self._inner = PedersenCommitment(parameters)

    @classmethod
    def setup(
        cls,
        rng: Optional[Any] = None,
        group: Optional[Group] = None,
        layout: Optional[WindowLayout] = None,
    ) -> "PedersenCompressedCommitment":
        """
        Generate parameters from rng.

        Args:
            rng: Source with get_random_bytes(n) (default: RandomnessSource)
            group: Group capability (default: cached secp256k1 group)
            layout: Window layout (default: WindowLayout())
        """
        return cls(PedersenParameters.generate(group=group, layout=layout, rng=rng))

    @property
    def parameters(self) -> PedersenParameters:
        return self._inner.parameters

    @property
    def group(self) -> Group:
        return self._inner.parameters.group

    def commit(self, message: bytes, randomness: int) -> BaseFieldElement:
        """
        Commit to message and return the affine x-coordinate.

        Raises:
            InputTooLargeError: If message exceeds the window capacity
            InvalidRandomnessError: If randomness is not in [0, order)
            DegenerateCommitmentError: If the point is at infinity
            SubgroupViolationError: If the point is outside the subgroup
        """
        point = self._inner.commit(message, randomness)
        return compress_point(self.group, point)

    def commit_with_parity(
        self, message: bytes, randomness: int
    ) -> Tuple[BaseFieldElement, int]:
        """
        Commit and also return the y parity of the commitment point.

        Storing (x, parity) restores binding to a unique point.
        """
        point = self._inner.commit(message, randomness)
        return compress_point(self.group, point), y_parity(self.group, point)

    def verify_opening(
        self, output: BaseFieldElement, message: bytes, randomness: int
    ) -> bool:
        """
        Check that (message, randomness) opens output.

        Sign-agnostic: an opening of -P also verifies against the output of
        P. Comparison is constant-time.

        Raises:
            InputTooLargeError / InvalidRandomnessError for malformed openings
        """
        if not isinstance(output, BaseFieldElement):
            raise TypeError(f"output must be BaseFieldElement, got {type(output)}")
        if output.modulus != self.group.field_modulus:
            return False
        try:
            expected = self.commit(message, randomness)
        except DegenerateCommitmentError:
            return False
        return constant_time_compare(expected.to_bytes(), output.to_bytes())

    def candidate_points(self, output: BaseFieldElement) -> Tuple[Any, Any]:
        """
        Reconstruct the two points (P, -P) with x-coordinate output.

        Raises:
            ValueError: If output is not the x-coordinate of a curve point
        """
        return self.group.lift_x(output.value)

    def store(self, destination: Union[str, Path]) -> None:
        """
        Persist parameters in the primitive's wire format.

        Raises:
            PersistenceError: If the destination cannot be written
        """
        self._inner.store(destination)

    @classmethod
    def load(
        cls, source: Union[str, Path], group: Optional[Group] = None
    ) -> "PedersenCompressedCommitment":
        """
        Load parameters and re-validate every base point.

        Raises:
            PersistenceError: If the source cannot be read or parsed
            SubgroupViolationError: If a base point is invalid
        """
        return cls(PedersenParameters.load(source, group=group))
