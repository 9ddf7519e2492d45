"""
⚠️ DRAFT — requires crypto review before production use

Public parameters of the windowed Pedersen commitment.

Parameters:
    bases[w][i]  - base point for bit i of message window w
    random_base  - base point for the blinding scalar

Every base point is hash_to_curve(entropy) with 32 bytes of entropy drawn
from the supplied random source, so nobody knows a discrete-log relation
between any two bases.

Wire format (CBOR, canonical encoding):
    {
        "v": PARAMETERS_VERSION,
        "curve": curve name,
        "num_windows": int,
        "window_size": int,
        "bases": [[point, ...], ...],   # num_windows x window_size
        "random_base": point,
    }
    where each point is a SEC1 compressed encoding.

Parameters are validated on construction, including after a load: every
base must be a non-identity, pairwise distinct point of the prime-order
subgroup.
"""

from __future__ import annotations

import contextlib
import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple, Union

try:
    import cbor2
except ImportError:
    raise ImportError(
        "cbor2 is required for parameter serialization. "
        "Install with: pip install cbor2"
    )

from ..config import (
    BASE_SEED_BYTES,
    DOMAIN_SEPARATORS,
    MAX_PARAMETERS_BYTES,
    PARAMETERS_VERSION,
    SUPPORTED_CURVES,
)
from ..exceptions import (
    CommitmentError,
    ConfigurationError,
    PersistenceError,
    SubgroupViolationError,
)
from ..group import get_group
from ..interfaces import Group
from ..layout import WindowLayout
from ..security import RandomnessSource, hash_to_curve

logger = logging.getLogger(__name__)


class PedersenParameters:
    """
    Immutable public parameters of a windowed Pedersen commitment.

    Equality is byte equality of the canonical serialization, so
    ``PedersenParameters.from_bytes(p.to_bytes()) == p``.

    Example:
        >>> params = PedersenParameters.generate(layout=WindowLayout(4, 16))
        >>> restored = PedersenParameters.from_bytes(params.to_bytes())
        >>> assert restored == params
    """

    __slots__ = ("_group", "_layout", "_bases", "_random_base", "_encoded")

    def __init__(
        self,
        group: Group,
        layout: WindowLayout,
        bases: Sequence[Sequence[Any]],
        random_base: Any,
    ):
        self._group = group
        self._layout = layout
        self._bases: Tuple[Tuple[Any, ...], ...] = tuple(
            tuple(window) for window in bases
        )
        self._random_base = random_base

        self._check_shape()
        self.validate()
        self._encoded = self._encode()

    # ========================================================================
    # GENERATION
    # ========================================================================

    @classmethod
    def generate(
        cls,
        group: Optional[Group] = None,
        layout: Optional[WindowLayout] = None,
        rng: Optional[Any] = None,
    ) -> "PedersenParameters":
        """
        Generate fresh parameters.

        Args:
            group: Group capability (default: cached secp256k1 group)
            layout: Window layout (default: WindowLayout())
            rng: Source with get_random_bytes(n) (default: RandomnessSource)

        Returns:
            PedersenParameters
        """
        group = group or get_group()
        layout = layout or WindowLayout()
        rng = rng or RandomnessSource()

        bases = [
            [
                hash_to_curve(
                    rng.get_random_bytes(BASE_SEED_BYTES),
                    DOMAIN_SEPARATORS["window_base"],
                    group,
                )
                for _ in range(layout.window_size)
            ]
            for _ in range(layout.num_windows)
        ]
        random_base = hash_to_curve(
            rng.get_random_bytes(BASE_SEED_BYTES),
            DOMAIN_SEPARATORS["random_base"],
            group,
        )

        params = cls(group, layout, bases, random_base)
        logger.debug(
            "generated pedersen parameters curve=%s layout=%dx%d fingerprint=%s",
            group.name,
            layout.num_windows,
            layout.window_size,
            params.fingerprint(),
        )
        return params

    # ========================================================================
    # ACCESSORS
    # ========================================================================

    @property
    def group(self) -> Group:
        return self._group

    @property
    def layout(self) -> WindowLayout:
        return self._layout

    @property
    def bases(self) -> Tuple[Tuple[Any, ...], ...]:
        return self._bases

    @property
    def random_base(self) -> Any:
        return self._random_base

    def fingerprint(self) -> str:
        """SHA-256 hex digest of the serialized parameters."""
        return hashlib.sha256(self._encoded).hexdigest()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PedersenParameters):
            return NotImplemented
        return self._encoded == other._encoded

    def __hash__(self) -> int:
        return hash(self._encoded)

    def __repr__(self) -> str:
        return (
            f"PedersenParameters(curve={self._group.name!r}, "
            f"num_windows={self._layout.num_windows}, "
            f"window_size={self._layout.window_size}, "
            f"fingerprint={self.fingerprint()[:16]})"
        )

    # ========================================================================
    # VALIDATION
    # ========================================================================

    def _check_shape(self) -> None:
        if len(self._bases) != self._layout.num_windows:
            raise ValueError(
                f"Expected {self._layout.num_windows} windows, "
                f"got {len(self._bases)}"
            )
        for index, window in enumerate(self._bases):
            if len(window) != self._layout.window_size:
                raise ValueError(
                    f"Window {index} has {len(window)} bases, "
                    f"expected {self._layout.window_size}"
                )

    def validate(self) -> None:
        """
        Check every base point.

        Raises:
            SubgroupViolationError: If a base is the identity, outside the
                prime-order subgroup, or duplicates another base
        """
        seen = set()
        points = [p for window in self._bases for p in window]
        points.append(self._random_base)

        for index, point in enumerate(points):
            if self._group.is_identity(point):
                raise SubgroupViolationError(
                    f"Base point {index} is the point at infinity"
                )
            if not self._group.is_in_subgroup(point):
                raise SubgroupViolationError(
                    f"Base point {index} is not in the prime-order subgroup"
                )
            encoded = self._group.encode_point(point)
            if encoded in seen:
                raise SubgroupViolationError(f"Base point {index} is duplicated")
            seen.add(encoded)

    # ========================================================================
    # SERIALIZATION (CBOR)
    # ========================================================================

    def _encode(self) -> bytes:
        encode = self._group.encode_point
        document = {
            "v": PARAMETERS_VERSION,
            "curve": self._group.name,
            "num_windows": self._layout.num_windows,
            "window_size": self._layout.window_size,
            "bases": [[encode(p) for p in window] for window in self._bases],
            "random_base": encode(self._random_base),
        }
        return cbor2.dumps(document, canonical=True)

    def to_bytes(self) -> bytes:
        return self._encoded

    @classmethod
    def from_bytes(
        cls, data: bytes, group: Optional[Group] = None
    ) -> "PedersenParameters":
        """
        Deserialize and re-validate parameters.

        Args:
            data: CBOR document produced by to_bytes()
            group: Optional group capability; must match the document curve

        Raises:
            PersistenceError: If the document is malformed
            SubgroupViolationError: If a decoded base point is invalid
        """
        if not isinstance(data, (bytes, bytearray)):
            raise PersistenceError(f"Parameters must be bytes, got {type(data)}")
        if len(data) > MAX_PARAMETERS_BYTES:
            raise PersistenceError(
                f"Parameters exceed {MAX_PARAMETERS_BYTES} bytes"
            )

        try:
            document = cbor2.loads(bytes(data))
        except Exception as exc:
            raise PersistenceError(f"Failed to decode parameters: {exc}") from exc

        if not isinstance(document, dict):
            raise PersistenceError("Invalid parameters format: expected a map")

        version = document.get("v")
        if version != PARAMETERS_VERSION:
            raise PersistenceError(
                f"Unsupported parameters version: {version} "
                f"(expected {PARAMETERS_VERSION})"
            )

        curve = document.get("curve")
        if curve not in SUPPORTED_CURVES:
            raise PersistenceError(f"Unsupported curve in parameters: {curve!r}")
        if group is None:
            group = get_group(curve)
        elif group.name != curve:
            raise PersistenceError(
                f"Parameters are for {curve}, expected {group.name}"
            )

        try:
            layout = WindowLayout(
                num_windows=document.get("num_windows"),
                window_size=document.get("window_size"),
            )
        except ConfigurationError as exc:
            raise PersistenceError(f"Invalid layout in parameters: {exc}") from exc

        raw_bases = document.get("bases")
        raw_random_base = document.get("random_base")
        if not isinstance(raw_bases, list) or not all(
            isinstance(window, list) for window in raw_bases
        ):
            raise PersistenceError("Invalid parameters format: bases")

        try:
            bases = [
                [group.decode_point(raw) for raw in window] for window in raw_bases
            ]
            random_base = group.decode_point(raw_random_base)
        except ValueError as exc:
            raise PersistenceError(f"Invalid base point encoding: {exc}") from exc

        try:
            params = cls(group, layout, bases, random_base)
        except SubgroupViolationError:
            raise
        except ValueError as exc:
            raise PersistenceError(f"Invalid parameters shape: {exc}") from exc

        if params.to_bytes() != bytes(data):
            raise PersistenceError("Parameters are not canonically encoded")

        return params

    # ========================================================================
    # PERSISTENCE
    # ========================================================================

    def store(self, destination: Union[str, Path]) -> None:
        """
        Write parameters to destination, all-or-nothing.

        Bytes go to a temporary file in the destination directory, which
        replaces the destination only once fully written. The temporary
        file is removed on every failure path.

        Raises:
            PersistenceError: If the destination cannot be written
        """
        path = Path(destination)
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
            )
        except OSError as exc:
            raise PersistenceError(f"Cannot write parameters to {path}: {exc}") from exc

        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(self._encoded)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except OSError as exc:
            raise PersistenceError(f"Cannot write parameters to {path}: {exc}") from exc
        finally:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)

        logger.debug(
            "stored pedersen parameters path=%s fingerprint=%s",
            path,
            self.fingerprint(),
        )

    @classmethod
    def load(
        cls, source: Union[str, Path], group: Optional[Group] = None
    ) -> "PedersenParameters":
        """
        Read and re-validate parameters written by store().

        Raises:
            PersistenceError: If the source cannot be read or parsed
            SubgroupViolationError: If a base point is invalid
        """
        path = Path(source)
        try:
            with path.open("rb") as handle:
                data = handle.read(MAX_PARAMETERS_BYTES + 1)
        except OSError as exc:
            raise PersistenceError(f"Cannot read parameters from {path}: {exc}") from exc

        try:
            params = cls.from_bytes(data, group=group)
        except CommitmentError as exc:
            logger.warning(
                "rejected pedersen parameters path=%s reason=%s",
                path,
                type(exc).__name__,
            )
            raise

        logger.debug(
            "loaded pedersen parameters path=%s fingerprint=%s",
            path,
            params.fingerprint(),
        )
        return params
