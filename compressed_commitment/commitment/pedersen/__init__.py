"""Windowed Pedersen commitments, uncompressed and x-only."""

from .commitment import PedersenCommitment
from .compressed import PedersenCompressedCommitment, compress_point, y_parity
from .parameters import PedersenParameters

__all__ = [
    "PedersenCommitment",
    "PedersenCompressedCommitment",
    "PedersenParameters",
    "compress_point",
    "y_parity",
]
