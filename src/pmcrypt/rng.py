# src/pmcrypt/rng.py
"""
CSPRNG access for the native backend.

Policy:
- All randomness used by NativeCryptoService comes from the OS-backed CSPRNG.
- Lengths are checked here so that bad requests fail before touching the OS.

References:
- os.urandom is explicitly suitable for cryptographic use.
"""

from __future__ import annotations

import os

__all__ = ["MAX_RANDOM_BYTES", "random_bytes"]

# Same per-call ceiling as WebCrypto get_random_values, so both backends agree
MAX_RANDOM_BYTES = 65536


def random_bytes(n: int) -> bytes:
    """
    Return n cryptographically secure random bytes from the OS CSPRNG.

    Raises:
        TypeError: if n is not an int
        ValueError: if n is negative or larger than MAX_RANDOM_BYTES
    """
    if not isinstance(n, int) or isinstance(n, bool):
        raise TypeError("n must be int")
    if n < 0:
        raise ValueError("n must be non-negative")
    if n > MAX_RANDOM_BYTES:
        raise ValueError(f"n must not exceed {MAX_RANDOM_BYTES}")
    return os.urandom(n)
