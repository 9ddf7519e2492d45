"""
Capability interfaces for commitment schemes.

``Group`` describes the curve arithmetic a scheme needs; ``CommitmentScheme``
is the surface shared by the uncompressed and the compressed Pedersen
schemes. Layouts are plain values (see layout.WindowLayout).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Tuple, Union


class Group(ABC):
    """Elliptic-curve group capability."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Curve name."""

    @property
    @abstractmethod
    def order(self) -> int:
        """Order of the prime-order subgroup."""

    @property
    @abstractmethod
    def cofactor(self) -> int:
        """Curve cofactor."""

    @property
    @abstractmethod
    def field_modulus(self) -> int:
        """Base-field prime p."""

    @property
    @abstractmethod
    def field_bytes(self) -> int:
        """Byte width of a base-field element."""

    @abstractmethod
    def identity(self) -> Any:
        """Point at infinity."""

    @abstractmethod
    def add(self, a: Any, b: Any) -> Any:
        ...

    @abstractmethod
    def neg(self, point: Any) -> Any:
        ...

    @abstractmethod
    def scalar_mul(self, scalar: int, point: Any) -> Any:
        ...

    @abstractmethod
    def hash_to_point(self, data: bytes) -> Any:
        """Deterministically map bytes to a subgroup point."""

    @abstractmethod
    def is_identity(self, point: Any) -> bool:
        ...

    @abstractmethod
    def is_on_curve(self, point: Any) -> bool:
        ...

    @abstractmethod
    def is_in_subgroup(self, point: Any) -> bool:
        """True if point is on the curve and has order dividing ``order``."""

    @abstractmethod
    def to_affine(self, point: Any) -> Tuple[int, int]:
        """
        Return the affine (x, y) of point.

        Raises:
            ValueError: If point is the point at infinity
        """

    @abstractmethod
    def encode_point(self, point: Any) -> bytes:
        ...

    @abstractmethod
    def decode_point(self, data: bytes) -> Any:
        """
        Decode a point encoding.

        Raises:
            ValueError: If data is not a valid encoding of a curve point
        """

    @abstractmethod
    def lift_x(self, x: int) -> Tuple[Any, Any]:
        """
        Return the two points (P, -P) with affine x-coordinate x.

        Raises:
            ValueError: If no curve point has this x-coordinate
        """


class CommitmentScheme(ABC):
    """
    Commitment scheme over public parameters.

    Implementations hold only public parameters; they are immutable after
    setup/load and safe to share across threads.
    """

    @classmethod
    @abstractmethod
    def setup(cls, rng: Optional[Any] = None, **kwargs: Any) -> "CommitmentScheme":
        """Generate fresh public parameters."""

    @abstractmethod
    def commit(self, message: bytes, randomness: int) -> Any:
        """Commit to message under the blinding scalar randomness."""

    @property
    @abstractmethod
    def parameters(self) -> Any:
        """Public parameters."""

    @abstractmethod
    def store(self, destination: Union[str, Path]) -> None:
        """Persist public parameters."""

    @classmethod
    @abstractmethod
    def load(cls, source: Union[str, Path]) -> "CommitmentScheme":
        """Load public parameters written by store()."""
