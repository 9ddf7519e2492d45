"""
Window layout for windowed Pedersen commitments.

A layout splits the message bit string into ``num_windows`` windows of
``window_size`` bits. Bits are taken least-significant first within each
byte, and the bit string is zero padded up to the layout capacity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List

from .config import DEFAULT_NUM_WINDOWS, DEFAULT_WINDOW_SIZE, MAX_LAYOUT_BITS
from .exceptions import ConfigurationError, InputTooLargeError


@dataclass(frozen=True)
class WindowLayout:
    num_windows: int = DEFAULT_NUM_WINDOWS
    window_size: int = DEFAULT_WINDOW_SIZE

    def __post_init__(self):
        for name in ("num_windows", "window_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer")
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive, got {value}")
        if self.capacity_bits > MAX_LAYOUT_BITS:
            raise ConfigurationError(
                f"Layout capacity exceeds {MAX_LAYOUT_BITS} bits"
            )

    @property
    def capacity_bits(self) -> int:
        return self.num_windows * self.window_size

    @property
    def capacity_bytes(self) -> int:
        """Longest message (in whole bytes) the layout accepts."""
        return self.capacity_bits // 8

    def check_message(self, message: bytes) -> None:
        """
        Raises:
            TypeError: If message is not bytes
            InputTooLargeError: If message exceeds layout capacity
        """
        if not isinstance(message, (bytes, bytearray)):
            raise TypeError(f"message must be bytes, got {type(message)}")
        if len(message) * 8 > self.capacity_bits:
            raise InputTooLargeError(
                f"Message of {len(message)} bytes exceeds window capacity "
                f"of {self.capacity_bits} bits"
            )

    def message_windows(self, message: bytes) -> Iterator[List[bool]]:
        """Yield the message bits of each window, padded with False."""
        self.check_message(message)
        bits = [
            bool((byte >> i) & 1) for byte in bytes(message) for i in range(8)
        ]
        bits.extend([False] * (self.capacity_bits - len(bits)))
        for start in range(0, self.capacity_bits, self.window_size):
            yield bits[start:start + self.window_size]
