"""Public API for compressed_commitment.commitment."""
from __future__ import annotations

from importlib import import_module

from .exceptions import (
    CommitmentError,
    ConfigurationError,
    DegenerateCommitmentError,
    InputTooLargeError,
    InvalidRandomnessError,
    PersistenceError,
    SubgroupViolationError,
)
from .factory import get_commitment_scheme
from .interfaces import CommitmentScheme, Group
from .layout import WindowLayout

__all__ = [
    "CommitmentError",
    "ConfigurationError",
    "DegenerateCommitmentError",
    "InputTooLargeError",
    "InvalidRandomnessError",
    "PersistenceError",
    "SubgroupViolationError",
    "CommitmentScheme",
    "Group",
    "WindowLayout",
    "get_commitment_scheme",
    "BaseFieldElement",
    "PetlibGroup",
    "PedersenCommitment",
    "PedersenCompressedCommitment",
    "PedersenParameters",
]

# petlib-backed names are imported on first use
_LAZY_EXPORTS = {
    "BaseFieldElement": "group",
    "PetlibGroup": "group",
    "PedersenCommitment": "pedersen.commitment",
    "PedersenCompressedCommitment": "pedersen.compressed",
    "PedersenParameters": "pedersen.parameters",
}


def __getattr__(name: str):
    if name in _LAZY_EXPORTS:
        module = import_module(f"{__name__}.{_LAZY_EXPORTS[name]}")
        value = getattr(module, name)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
