"""
⚠️ DRAFT — requires crypto review before production use

Security utilities for cryptographic operations.

Randomness sources used by parameter generation, domain-separated
hash-to-curve and constant-time comparison.
"""

import os
import secrets
import hashlib
import hmac

from .config import DOMAIN_SEPARATORS


# ============================================================================
# RANDOMNESS SOURCE (Fork-Safe)
# ============================================================================


class RandomnessSource:
    """
    Cryptographically secure randomness with fork detection.

    Prevents catastrophic randomness reuse if process forks.

    Example:
        >>> rng = RandomnessSource()
        >>> seed = rng.get_random_bytes(32)
        >>> # After fork, RNG automatically reinitializes
    """

    def __init__(self):
        """Initialize randomness source with fork detection."""
        self._pid = os.getpid()
        self._rng = secrets.SystemRandom()

    def get_random_scalar(self, max_value: int) -> int:
        """
        Get random scalar in [0, max_value).

        Args:
            max_value: Upper bound (exclusive)

        Returns:
            Random scalar in [0, max_value)
        """
        if os.getpid() != self._pid:
            self.__init__()
        return self._rng.randrange(0, max_value)

    def get_random_bytes(self, n: int) -> bytes:
        """
        Get n cryptographically secure random bytes.

        Args:
            n: Number of bytes to generate

        Returns:
            n random bytes
        """
        if os.getpid() != self._pid:
            self.__init__()
        return secrets.token_bytes(n)

    def get_random_scalar_mod_order(self, order: int) -> int:
        """Get random scalar in [0, order)."""
        return self.get_random_scalar(order)


class SeededRandomness:
    """
    Deterministic randomness derived from a seed.

    ⚠️ NOT FOR PRODUCTION: anyone holding the seed can regenerate every
    value. Used for conformance vectors and reproducible test parameters.

    Output stream is SHA-256(domain || len(seed) || seed || counter) blocks.

    Example:
        >>> a = SeededRandomness(b"seed").get_random_bytes(64)
        >>> b = SeededRandomness(b"seed").get_random_bytes(64)
        >>> assert a == b
    """

    def __init__(self, seed: bytes):
        if not isinstance(seed, bytes):
            raise TypeError(f"seed must be bytes, got {type(seed)}")
        if not seed:
            raise ValueError("seed cannot be empty")
        self._prefix = (
            DOMAIN_SEPARATORS["seeded_rng"]
            + len(seed).to_bytes(4, "big")
            + seed
        )
        self._counter = 0
        self._buffer = b""

    def _next_block(self) -> bytes:
        block = hashlib.sha256(
            self._prefix + self._counter.to_bytes(8, "big")
        ).digest()
        self._counter += 1
        return block

    def get_random_bytes(self, n: int) -> bytes:
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        while len(self._buffer) < n:
            self._buffer += self._next_block()
        out, self._buffer = self._buffer[:n], self._buffer[n:]
        return out

    def get_random_scalar(self, max_value: int) -> int:
        """Rejection-sample a scalar in [0, max_value)."""
        if max_value <= 0:
            raise ValueError(f"max_value must be positive, got {max_value}")
        n_bytes = (max_value.bit_length() + 7) // 8
        mask = (1 << max_value.bit_length()) - 1
        while True:
            candidate = int.from_bytes(self.get_random_bytes(n_bytes), "big") & mask
            if candidate < max_value:
                return candidate

    def get_random_scalar_mod_order(self, order: int) -> int:
        return self.get_random_scalar(order)


# ============================================================================
# HASH-TO-CURVE
# ============================================================================


def hash_to_curve(seed: bytes, domain_separator: bytes, group):
    """
    Hash seed bytes to a point of the prime-order subgroup.

    ⚠️ SECURITY WARNING: NOT RFC 9380 COMPLIANT

    Delegates to the group capability (petlib hash_to_point, which uses
    try-and-increment), with length-prefixed domain separation.

    Args:
        seed: Seed data to hash (must be non-empty)
        domain_separator: Domain separator for context (must be non-empty)
        group: Group capability (interfaces.Group)

    Returns:
        Point of the prime-order subgroup

    Raises:
        TypeError: If inputs are not bytes
        ValueError: If inputs are empty
    """
    if not isinstance(seed, bytes):
        raise TypeError(f"seed must be bytes, got {type(seed)}")
    if not isinstance(domain_separator, bytes):
        raise TypeError(
            f"domain_separator must be bytes, got {type(domain_separator)}"
        )
    if not seed:
        raise ValueError("Seed cannot be empty")
    if not domain_separator:
        raise ValueError("Domain separator cannot be empty")

    combined = len(domain_separator).to_bytes(4, "big") + domain_separator + seed
    return group.hash_to_point(combined)


# ============================================================================
# CONSTANT-TIME OPERATIONS
# ============================================================================


def constant_time_compare(a: bytes, b: bytes) -> bool:
    """
    Constant-time comparison to prevent timing attacks.

    Uses hmac.compare_digest which takes constant time regardless of
    where the inputs differ.
    """
    return hmac.compare_digest(a, b)
