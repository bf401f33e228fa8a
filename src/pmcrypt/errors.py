# src/pmcrypt/errors.py
"""
Error taxonomy shared by every backend.

All crypto failures cross the public API as CryptoError with a stable
(category, code) pair. Messages coming from the underlying library go through
sanitize_error_message() first so that key or password fragments echoed back by
a primitive never reach callers or logs.
"""

from __future__ import annotations

from typing import Tuple

__all__ = [
    "ERROR_CATEGORIES",
    "CryptoError",
    "create_crypto_error",
    "sanitize_error_message",
]

ERROR_CATEGORIES: Tuple[str, ...] = (
    "key_derivation",
    "encryption",
    "decryption",
    "validation",
    "initialization",
)

GENERIC_FAILURE_MESSAGE = "Cryptographic operation failed"
UNKNOWN_ERROR_MESSAGE = "Unknown cryptographic error"
_SENSITIVE_MARKERS = ("key", "password", "secret")


class CryptoError(Exception):
    """A categorized cryptographic failure with a stable code."""

    def __init__(self, message: str, code: str, category: str):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category

    def __repr__(self) -> str:
        return f"CryptoError(category={self.category!r}, code={self.code!r}, message={self.message!r})"


def create_crypto_error(category: str, code: str, message: str) -> CryptoError:
    if category not in ERROR_CATEGORIES:
        raise ValueError(f"unknown error category: {category!r}")
    return CryptoError(message, code, category)


def sanitize_error_message(error: object) -> str:
    """
    Return a message that is safe to surface for a lower-level failure.

    Exceptions whose message mentions a key, password or secret collapse to a
    fixed string; other exception messages pass through unchanged. Anything
    that is not an exception yields a fixed "unknown" message.
    """
    if isinstance(error, BaseException):
        # args[0] keeps KeyError and friends from adding repr quotes
        message = error.args[0] if error.args and isinstance(error.args[0], str) else str(error)
        lowered = message.lower()
        if any(marker in lowered for marker in _SENSITIVE_MARKERS):
            return GENERIC_FAILURE_MESSAGE
        return message
    return UNKNOWN_ERROR_MESSAGE
