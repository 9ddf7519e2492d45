"""
⚠️ DRAFT — requires crypto review before production use

Windowed Pedersen commitment (uncompressed output).

Mathematical Definition:
    C = sum_{w, i : bit(m, w, i) = 1} B[w][i] + r * R

    where B[w][i] are the window bases, R is the random base, m is the
    message split into windows by the WindowLayout and r is the blinding
    scalar in [0, order).

Security Properties:
    - Binding: finding two openings of C yields a discrete-log relation
      between the bases
    - Hiding: r * R is uniform in the subgroup for uniform r
    - Deterministic: same parameters, message and r give the same point
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from ..exceptions import InvalidRandomnessError
from ..interfaces import CommitmentScheme, Group
from ..layout import WindowLayout
from .parameters import PedersenParameters


def check_randomness(randomness: int, order: int) -> None:
    """
    Raises:
        InvalidRandomnessError: If randomness is not an int in [0, order)
    """
    if isinstance(randomness, bool) or not isinstance(randomness, int):
        raise InvalidRandomnessError(
            f"Randomness must be an integer, got {type(randomness)}"
        )
    if randomness < 0:
        raise InvalidRandomnessError("Randomness must be non-negative")
    if randomness >= order:
        raise InvalidRandomnessError(
            f"Randomness must be less than group order ({order})"
        )


class PedersenCommitment(CommitmentScheme):
    """
    Windowed Pedersen commitment returning a full group element.

    Example:
        >>> scheme = PedersenCommitment.setup(layout=WindowLayout(4, 16))
        >>> point = scheme.commit(b"hello", 7)
        >>> assert scheme.parameters.group.is_in_subgroup(point)
    """

    def __init__(self, parameters: PedersenParameters):
        if not isinstance(parameters, PedersenParameters):
            raise TypeError(
                f"parameters must be PedersenParameters, got {type(parameters)}"
            )
        self._parameters = parameters

    @classmethod
    def setup(
        cls,
        rng: Optional[Any] = None,
        group: Optional[Group] = None,
        layout: Optional[WindowLayout] = None,
    ) -> "PedersenCommitment":
        return cls(PedersenParameters.generate(group=group, layout=layout, rng=rng))

    @property
    def parameters(self) -> PedersenParameters:
        return self._parameters

    def commit(self, message: bytes, randomness: int) -> Any:
        """
        Commit to message with blinding scalar randomness.

        Args:
            message: Bytes, at most layout.capacity_bytes long
            randomness: Scalar in [0, group order)

        Returns:
            Group element (may be the point at infinity for degenerate
            inputs such as an all-zero message with zero randomness)

        Raises:
            InputTooLargeError: If message exceeds the window capacity
            InvalidRandomnessError: If randomness is out of range
        """
        params = self._parameters
        group = params.group

        # Input errors fire before any curve arithmetic.
        params.layout.check_message(message)
        check_randomness(randomness, group.order)

        output = group.identity()
        for window_bits, window_bases in zip(
            params.layout.message_windows(message), params.bases
        ):
            for bit, base in zip(window_bits, window_bases):
                if bit:
                    output = group.add(output, base)

        if randomness:
            output = group.add(
                output, group.scalar_mul(randomness, params.random_base)
            )

        return output

    def store(self, destination: Union[str, Path]) -> None:
        self._parameters.store(destination)

    @classmethod
    def load(
        cls, source: Union[str, Path], group: Optional[Group] = None
    ) -> "PedersenCommitment":
        return cls(PedersenParameters.load(source, group=group))
