# src/pmcrypt/models.py
"""
Shared data model and the CryptoService contract.

Both backends implement CryptoService with identical validation, error codes
and outputs; callers only ever see this interface.
"""

from __future__ import annotations

import base64
import binascii
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Literal, Mapping, Optional, Union

from pmcrypt.errors import create_crypto_error

BytesLike = Union[bytes, bytearray, memoryview]

CryptoEnvironment = Literal["node", "browser", "worker"]
PerformanceLevel = Literal["high", "medium", "low"]
HashFunction = Literal["sha256", "sha512"]

# Contract constants (AES-256-GCM + PBKDF2)
KEY_LENGTH = 32
DEFAULT_ITERATIONS = 600_000
DEFAULT_SALT_LENGTH = 32
DEFAULT_IV_LENGTH = 12
AUTH_TAG_LENGTH = 16


@dataclass(frozen=True)
class KeyDerivationParams:
    iterations: int
    key_length: int
    algorithm: Literal["pbkdf2"] = "pbkdf2"
    hash_function: HashFunction = "sha256"


DEFAULT_KEY_DERIVATION_PARAMS = KeyDerivationParams(
    iterations=DEFAULT_ITERATIONS,
    key_length=KEY_LENGTH,
    algorithm="pbkdf2",
    hash_function="sha256",
)


@dataclass(frozen=True)
class EncryptedData:
    """
    Output of encrypt(): four independent byte fields.

    `salt` is generated fresh by each encrypt() call and is unrelated to any
    salt the caller used for key derivation.
    """

    data: bytes
    iv: bytes
    salt: bytes
    auth_tag: bytes

    def to_dict(self) -> Dict[str, str]:
        """Structured record with each field base64-encoded (no concatenation)."""
        return {
            "data": base64.b64encode(self.data).decode("ascii"),
            "iv": base64.b64encode(self.iv).decode("ascii"),
            "salt": base64.b64encode(self.salt).decode("ascii"),
            "auth_tag": base64.b64encode(self.auth_tag).decode("ascii"),
        }

    @classmethod
    def from_dict(cls, record: Mapping[str, str]) -> "EncryptedData":
        fields = {}
        for name in ("data", "iv", "salt", "auth_tag"):
            value = record.get(name) if isinstance(record, Mapping) else None
            if not isinstance(value, str):
                raise create_crypto_error("validation", "INVALID_RECORD", f"Record field '{name}' is missing")
            try:
                fields[name] = base64.b64decode(value, validate=True)
            except (binascii.Error, ValueError):
                raise create_crypto_error(
                    "validation", "INVALID_RECORD", f"Record field '{name}' is not valid base64"
                ) from None
        return cls(**fields)


class CryptoService(ABC):
    """Authenticated encryption and password-based key derivation."""

    backend_name: str = ""

    @abstractmethod
    async def derive_key(self, password: str, salt: BytesLike, params: KeyDerivationParams) -> bytes:
        ...

    @abstractmethod
    async def encrypt(self, data: BytesLike, key: BytesLike) -> EncryptedData:
        ...

    @abstractmethod
    async def decrypt(self, encrypted_data: EncryptedData, key: BytesLike) -> Optional[bytes]:
        ...

    @abstractmethod
    def generate_salt(self, length: int = DEFAULT_SALT_LENGTH) -> bytes:
        ...

    @abstractmethod
    def generate_iv(self, length: int = DEFAULT_IV_LENGTH) -> bytes:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(backend={self.backend_name!r})"
