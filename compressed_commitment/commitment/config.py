"""
⚠️ DRAFT — requires crypto review before production use

Cryptographic configuration for compressed Pedersen commitments.

Static constants describe the supported curves, the default window layout
and the parameter wire format. Deployment settings (curve and layout) can
be overridden through environment variables or a YAML file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Final, Optional, Union

import yaml

from .exceptions import ConfigurationError

# ============================================================================
# CURVE SELECTION
# ============================================================================

# IMPLEMENTATION: petlib (OpenSSL EC_GROUP) named curves.
# All supported curves have cofactor 1, but the subgroup check in
# group.PetlibGroup does not rely on that and tests order * P == O.

CURVE_NAME = "secp256k1"
CURVE_LIBRARY = "petlib"

# curve name -> (OpenSSL NID, cofactor)
SUPPORTED_CURVES: Final[Dict[str, tuple]] = {
    "secp256k1": (714, 1),
    "P-256": (415, 1),
    "P-384": (715, 1),
    "P-521": (716, 1),
}

# ============================================================================
# WINDOW LAYOUT
# ============================================================================

# 8 windows of 32 bits: messages up to 32 bytes
DEFAULT_NUM_WINDOWS = 8
DEFAULT_WINDOW_SIZE = 32

MAX_LAYOUT_BITS = 8 * 1024

# ============================================================================
# BASE POINT DERIVATION
# ============================================================================

DOMAIN_SEPARATOR_PREFIX = b"COMPRESSED_PEDERSEN_V1_"

DOMAIN_SEPARATORS = {
    "window_base": DOMAIN_SEPARATOR_PREFIX + b"WINDOW_BASE",
    "random_base": DOMAIN_SEPARATOR_PREFIX + b"RANDOM_BASE",
    "seeded_rng": DOMAIN_SEPARATOR_PREFIX + b"SEEDED_RNG",
}

# Entropy drawn from the random source per base point
BASE_SEED_BYTES = 32

# ============================================================================
# PARAMETER SERIALIZATION
# ============================================================================

PARAMETERS_FORMAT = "CBOR"
PARAMETERS_VERSION = 1

MAX_PARAMETERS_BYTES = 4 * 1024 * 1024

# ============================================================================
# ENVIRONMENT OVERRIDES
# ============================================================================

ENV_CURVE: Final[str] = "COMPRESSED_COMMITMENT_CURVE"
ENV_NUM_WINDOWS: Final[str] = "COMPRESSED_COMMITMENT_NUM_WINDOWS"
ENV_WINDOW_SIZE: Final[str] = "COMPRESSED_COMMITMENT_WINDOW_SIZE"

_CONFIG_FILE_KEYS: Final[tuple] = ("curve", "num_windows", "window_size")


@dataclass(frozen=True)
class CommitmentSettings:
    """
    Deployment settings for a commitment scheme.

    Attributes:
        curve: Curve name (key of SUPPORTED_CURVES)
        num_windows: Number of message windows
        window_size: Bits per window
    """

    curve: str = CURVE_NAME
    num_windows: int = DEFAULT_NUM_WINDOWS
    window_size: int = DEFAULT_WINDOW_SIZE

    def __post_init__(self):
        if self.curve not in SUPPORTED_CURVES:
            raise ConfigurationError(
                f"Unsupported curve {self.curve!r}. "
                f"Valid options: {', '.join(SUPPORTED_CURVES)}"
            )
        for name in ("num_windows", "window_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer")
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive, got {value}")
        if self.num_windows * self.window_size > MAX_LAYOUT_BITS:
            raise ConfigurationError(
                f"Layout capacity exceeds {MAX_LAYOUT_BITS} bits"
            )


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def resolve_settings(
    curve: Optional[str] = None,
    num_windows: Optional[int] = None,
    window_size: Optional[int] = None,
) -> CommitmentSettings:
    """
    Resolve settings in precedence order: argument > environment > default.

    Raises:
        ConfigurationError: If any resolved value is invalid
    """
    if curve is None:
        curve = os.getenv(ENV_CURVE) or CURVE_NAME
    if num_windows is None:
        num_windows = _env_int(ENV_NUM_WINDOWS)
    if num_windows is None:
        num_windows = DEFAULT_NUM_WINDOWS
    if window_size is None:
        window_size = _env_int(ENV_WINDOW_SIZE)
    if window_size is None:
        window_size = DEFAULT_WINDOW_SIZE

    return CommitmentSettings(
        curve=curve, num_windows=num_windows, window_size=window_size
    )


def load_config_file(path: Union[str, Path]) -> CommitmentSettings:
    """
    Load deployment settings from a YAML file.

    Missing keys fall back to resolve_settings(); unknown keys are rejected.

    Args:
        path: YAML file path

    Returns:
        CommitmentSettings

    Raises:
        ConfigurationError: If the file is unreadable, malformed or invalid
    """
    try:
        with Path(path).open("r", encoding="utf-8") as handle:
            data: Any = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Malformed config file {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError("Config file must contain a mapping")

    unknown = sorted(set(data) - set(_CONFIG_FILE_KEYS))
    if unknown:
        raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}")

    return resolve_settings(
        curve=data.get("curve"),
        num_windows=data.get("num_windows"),
        window_size=data.get("window_size"),
    )


# ============================================================================
# VALIDATION
# ============================================================================


def validate_config() -> bool:
    """
    Validate configuration parameters.

    Returns:
        True if configuration is valid

    Raises:
        AssertionError: If configuration is invalid
    """
    assert CURVE_NAME in SUPPORTED_CURVES, "Invalid curve"
    assert CURVE_LIBRARY == "petlib", "Invalid library"
    assert DEFAULT_NUM_WINDOWS > 0 and DEFAULT_WINDOW_SIZE > 0, "Invalid layout"
    assert DEFAULT_NUM_WINDOWS * DEFAULT_WINDOW_SIZE <= MAX_LAYOUT_BITS
    assert PARAMETERS_FORMAT == "CBOR", "Invalid serialization format"
    assert BASE_SEED_BYTES >= 32, "Base seed too small"

    for name, (nid, cofactor) in SUPPORTED_CURVES.items():
        assert isinstance(nid, int) and nid > 0, f"Invalid NID for {name}"
        assert cofactor >= 1, f"Invalid cofactor for {name}"

    return True


# Auto-validate on import
validate_config()
