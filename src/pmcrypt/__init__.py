"""
AES-256-GCM encryption and PBKDF2 key derivation behind one contract.

This package provides:
- CryptoService: derive_key / encrypt / decrypt / generate_salt / generate_iv.
- NativeCryptoService: backend over OpenSSL via `cryptography`.
- WebCryptoService: backend over a WebCrypto-style asynchronous API.
- DefaultCryptoServiceFactory: picks a backend by environment or performance.

Derived keys are returned as immutable `bytes`; Python cannot guarantee that
copies are wiped from memory, so key zeroing is not part of this contract.
"""

from .errors import CryptoError, create_crypto_error, sanitize_error_message
from .models import (
    AUTH_TAG_LENGTH,
    DEFAULT_ITERATIONS,
    DEFAULT_IV_LENGTH,
    DEFAULT_KEY_DERIVATION_PARAMS,
    DEFAULT_SALT_LENGTH,
    KEY_LENGTH,
    CryptoService,
    EncryptedData,
    KeyDerivationParams,
)
from .native_backend import NativeCryptoService
from .webcrypto_backend import WebCryptoService
from .factory import (
    DefaultCryptoServiceFactory,
    RuntimeHost,
    create_default_service,
    crypto_service_factory,
    detect_runtime_host,
)
from .kdf_shim import derive_key_pbkdf2

__version__ = "0.2.0"

__all__ = [
    "CryptoError",
    "create_crypto_error",
    "sanitize_error_message",
    "AUTH_TAG_LENGTH",
    "DEFAULT_ITERATIONS",
    "DEFAULT_IV_LENGTH",
    "DEFAULT_KEY_DERIVATION_PARAMS",
    "DEFAULT_SALT_LENGTH",
    "KEY_LENGTH",
    "CryptoService",
    "EncryptedData",
    "KeyDerivationParams",
    "NativeCryptoService",
    "WebCryptoService",
    "DefaultCryptoServiceFactory",
    "RuntimeHost",
    "create_default_service",
    "crypto_service_factory",
    "detect_runtime_host",
    "derive_key_pbkdf2",
]
