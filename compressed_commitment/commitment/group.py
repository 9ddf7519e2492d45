"""
⚠️ DRAFT — requires crypto review before production use

Elliptic-curve group capability backed by petlib.

Implementation Details:
    - Curves: OpenSSL named curves via petlib.ec.EcGroup (see
      config.SUPPORTED_CURVES)
    - Points: petlib EcPt, projective internally; affine coordinates are
      only materialized by to_affine()
    - Subgroup membership: on-curve check plus order * P == O, always on
    - Encoding: SEC1 compressed (petlib EcPt.export), b"\\x00" for infinity
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, Tuple

try:
    from petlib.ec import EcGroup, EcPt
    from petlib.bn import Bn
except ImportError:
    raise ImportError(
        "petlib is required for elliptic-curve operations. "
        "Install with: pip install petlib"
    )

from .config import CURVE_NAME, SUPPORTED_CURVES
from .exceptions import ConfigurationError
from .interfaces import Group

_INFINITY_ENCODING = b"\x00"

# petlib runs every operation on one module-level BN_CTX and cffi releases
# the GIL during OpenSSL calls, so arithmetic is serialized.
_PETLIB_LOCK = threading.RLock()


def _to_bn(value: int) -> Bn:
    # from_binary handles the full scalar range reliably
    length = max(1, (value.bit_length() + 7) // 8)
    return Bn.from_binary(value.to_bytes(length, byteorder="big"))


# ============================================================================
# BASE-FIELD ELEMENT
# ============================================================================


@dataclass(frozen=True, order=True)
class BaseFieldElement:
    """
    Element of the curve's base field.

    Compared by value and totally ordered, so it can be used as a map key
    or in sorted storage.

    Attributes:
        value: Integer representative in [0, modulus)
        modulus: Base-field prime
    """

    value: int
    modulus: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"value must be an integer, got {type(self.value)}")
        if not 0 <= self.value < self.modulus:
            raise ValueError("value must be in [0, modulus)")

    @property
    def byte_length(self) -> int:
        return (self.modulus.bit_length() + 7) // 8

    def to_bytes(self) -> bytes:
        """Fixed-width big-endian encoding."""
        return self.value.to_bytes(self.byte_length, "big")

    @classmethod
    def from_bytes(cls, data: bytes, modulus: int) -> "BaseFieldElement":
        expected = (modulus.bit_length() + 7) // 8
        if len(data) != expected:
            raise ValueError(
                f"Field element must be {expected} bytes, got {len(data)}"
            )
        return cls(int.from_bytes(data, "big"), modulus)

    def hex(self) -> str:
        return self.to_bytes().hex()

    def __int__(self) -> int:
        return self.value


# ============================================================================
# PETLIB GROUP
# ============================================================================


class PetlibGroup(Group):
    """
    Group capability over a petlib named curve.

    Example:
        >>> group = PetlibGroup("secp256k1")
        >>> P = group.hash_to_point(b"example")
        >>> assert group.is_in_subgroup(P)
        >>> x, y = group.to_affine(P)
    """

    def __init__(self, curve_name: str = CURVE_NAME):
        if curve_name not in SUPPORTED_CURVES:
            raise ConfigurationError(
                f"Unsupported curve {curve_name!r}. "
                f"Valid options: {', '.join(SUPPORTED_CURVES)}"
            )
        nid, cofactor = SUPPORTED_CURVES[curve_name]
        self._name = curve_name
        self._group = EcGroup(nid)
        self._cofactor = cofactor
        self._order_bn = self._group.order()
        self._order = int(self._order_bn)
        self._field_modulus = int(self._group.parameters()["p"])
        self._field_bytes = (self._field_modulus.bit_length() + 7) // 8

    def __repr__(self) -> str:
        return f"PetlibGroup({self._name!r})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def order(self) -> int:
        return self._order

    @property
    def cofactor(self) -> int:
        return self._cofactor

    @property
    def field_modulus(self) -> int:
        return self._field_modulus

    @property
    def field_bytes(self) -> int:
        return self._field_bytes

    @property
    def ec_group(self) -> EcGroup:
        """Underlying petlib group."""
        return self._group

    def generator(self) -> EcPt:
        return self._group.generator()

    def identity(self) -> EcPt:
        return self._group.infinite()

    def add(self, a: EcPt, b: EcPt) -> EcPt:
        with _PETLIB_LOCK:
            return a.pt_add(b)

    def neg(self, point: EcPt) -> EcPt:
        with _PETLIB_LOCK:
            return point.pt_neg()

    def scalar_mul(self, scalar: int, point: EcPt) -> EcPt:
        if scalar < 0:
            return self.neg(self.scalar_mul(-scalar, point))
        with _PETLIB_LOCK:
            return point.pt_mul(_to_bn(scalar))

    def hash_to_point(self, data: bytes) -> EcPt:
        with _PETLIB_LOCK:
            point = self._group.hash_to_point(data)
        if self._cofactor != 1:
            point = self.scalar_mul(self._cofactor, point)
        return point

    def is_identity(self, point: EcPt) -> bool:
        return bool(point.is_infinite())

    def is_on_curve(self, point: EcPt) -> bool:
        if not isinstance(point, EcPt):
            return False
        with _PETLIB_LOCK:
            return bool(self._group.check_point(point))

    def is_in_subgroup(self, point: EcPt) -> bool:
        if not isinstance(point, EcPt):
            return False
        if self.is_identity(point):
            return True
        if not self.is_on_curve(point):
            return False
        with _PETLIB_LOCK:
            return bool(point.pt_mul(self._order_bn).is_infinite())

    def to_affine(self, point: EcPt) -> Tuple[int, int]:
        if self.is_identity(point):
            raise ValueError("Point at infinity has no affine representation")
        with _PETLIB_LOCK:
            x, y = point.get_affine()
        return int(x), int(y)

    def encode_point(self, point: EcPt) -> bytes:
        if self.is_identity(point):
            return _INFINITY_ENCODING
        with _PETLIB_LOCK:
            return point.export()

    def decode_point(self, data: bytes) -> EcPt:
        if not isinstance(data, (bytes, bytearray)):
            raise ValueError(f"Point encoding must be bytes, got {type(data)}")
        data = bytes(data)
        if data == _INFINITY_ENCODING:
            return self.identity()
        if len(data) != 1 + self._field_bytes or data[0] not in (0x02, 0x03):
            raise ValueError("Point encoding must be SEC1 compressed")
        try:
            with _PETLIB_LOCK:
                point = EcPt.from_binary(data, self._group)
        except Exception as exc:
            raise ValueError(f"Invalid point encoding: {exc}") from exc
        if not self.is_on_curve(point):
            raise ValueError("Decoded point is not on the curve")
        return point

    def lift_x(self, x: int) -> Tuple[EcPt, EcPt]:
        if not 0 <= x < self._field_modulus:
            raise ValueError("x is not a base-field element")
        point = self.decode_point(b"\x02" + x.to_bytes(self._field_bytes, "big"))
        return point, self.neg(point)


# ============================================================================
# MODULE-LEVEL CACHE
# ============================================================================

_GROUP_CACHE: Dict[str, PetlibGroup] = {}
_CACHE_LOCK = threading.Lock()


def get_group(curve_name: str = CURVE_NAME) -> PetlibGroup:
    """
    Get a cached group instance (initialize if needed).

    Thread-safe using double-checked locking pattern.
    """
    group = _GROUP_CACHE.get(curve_name)
    if group is not None:
        return group

    with _CACHE_LOCK:
        group = _GROUP_CACHE.get(curve_name)
        if group is None:
            group = PetlibGroup(curve_name)
            _GROUP_CACHE[curve_name] = group

    return group


def clear_group_cache():
    """Clear cached groups. Thread-safe."""
    with _CACHE_LOCK:
        _GROUP_CACHE.clear()
