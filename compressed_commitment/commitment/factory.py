"""
Commitment scheme factory.

Resolves a scheme class by name with lazy imports. Resolution order:
explicit ``prefer`` argument > COMMITMENT_SCHEME environment variable >
default ("pedersen_compressed").
"""

from __future__ import annotations

import importlib
import os
from typing import Final

from .exceptions import ConfigurationError
from .interfaces import CommitmentScheme

SCHEME_REGISTRY: Final[dict[str, str]] = {
    "pedersen": (
        "compressed_commitment.commitment.pedersen.commitment.PedersenCommitment"
    ),
    "pedersen_compressed": (
        "compressed_commitment.commitment.pedersen.compressed."
        "PedersenCompressedCommitment"
    ),
}

_DEFAULT_SCHEME: Final[str] = "pedersen_compressed"
_ENV_VAR_NAME: Final[str] = "COMMITMENT_SCHEME"


def _format_valid_options() -> str:
    return ", ".join(sorted(SCHEME_REGISTRY.keys()))


def _normalize_scheme_name(value: str | None, *, source: str) -> str | None:
    if value is None or value == "":
        return None

    if not isinstance(value, str) or value not in SCHEME_REGISTRY:
        raise ConfigurationError(
            f"Invalid scheme name from {source}: {value!r}. "
            f"Valid options: {_format_valid_options()}"
        )

    return value


def resolve_scheme_name(prefer: str | None = None) -> str:
    resolved = _normalize_scheme_name(prefer, source="prefer")
    if resolved is not None:
        return resolved

    resolved = _normalize_scheme_name(os.getenv(_ENV_VAR_NAME), source="environment")
    if resolved is not None:
        return resolved

    return _DEFAULT_SCHEME


def get_commitment_scheme(prefer: str | None = None) -> type[CommitmentScheme]:
    """
    Return the commitment scheme class selected by name.

    Args:
        prefer: Optional scheme name.

    Returns:
        CommitmentScheme subclass (call .setup() or .load() on it).

    Raises:
        ConfigurationError: If a scheme name is invalid.
        ImportError: If the scheme class cannot be imported.
        TypeError: If the class does not implement CommitmentScheme.
    """
    scheme_name = resolve_scheme_name(prefer)
    import_path = SCHEME_REGISTRY[scheme_name]
    module_path, _, class_name = import_path.rpartition(".")

    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as exc:
        raise ImportError(
            f"Unable to import scheme module {module_path!r} for {scheme_name!r}"
        ) from exc

    try:
        scheme_cls = getattr(module, class_name)
    except AttributeError as exc:
        raise ImportError(
            f"Scheme class {class_name!r} not found in module {module_path!r}"
        ) from exc

    if not isinstance(scheme_cls, type) or not issubclass(
        scheme_cls, CommitmentScheme
    ):
        raise TypeError(
            f"Scheme reference {import_path!r} does not implement CommitmentScheme"
        )

    return scheme_cls
