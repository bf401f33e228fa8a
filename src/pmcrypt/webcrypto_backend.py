# src/pmcrypt/webcrypto_backend.py
"""
Backend B: CryptoService written against a WebCrypto-style `crypto` object.

The portable API returns AES-GCM output as ciphertext || tag and expects the
same layout on decrypt, so this backend splits and recombines the tag to keep
EncryptedData identical to Backend A.
"""

from __future__ import annotations

from typing import Optional

from pmcrypt.debug_utils import log_debug, log_exception
from pmcrypt.errors import CryptoError, create_crypto_error, sanitize_error_message
from pmcrypt.models import (
    AUTH_TAG_LENGTH,
    DEFAULT_IV_LENGTH,
    DEFAULT_SALT_LENGTH,
    BytesLike,
    CryptoService,
    EncryptedData,
    KeyDerivationParams,
)
from pmcrypt.subtle import MAX_RANDOM_VALUES_BYTES, WebCrypto
from pmcrypt.validation import (
    check_decryption_inputs,
    check_derivation_inputs,
    check_encryption_inputs,
)

__all__ = ["WebCryptoService"]

CIPHER_ALGORITHM = "AES-GCM"
TAG_LENGTH_BITS = AUTH_TAG_LENGTH * 8


class WebCryptoService(CryptoService):
    backend_name = "webcrypto"

    def __init__(self, crypto=None):
        self.crypto = crypto if crypto is not None else WebCrypto()

    async def _import_aes_key(self, key: BytesLike, usage: str):
        return await self.crypto.subtle.import_key(
            "raw", bytes(key), {"name": CIPHER_ALGORITHM, "length": 256}, False, [usage]
        )

    async def derive_key(self, password: str, salt: BytesLike, params: KeyDerivationParams) -> bytes:
        try:
            check_derivation_inputs(password, salt)

            password_buffer = bytearray(password.encode("utf-8"))
            try:
                key_material = await self.crypto.subtle.import_key(
                    "raw", password_buffer, "PBKDF2", False, ["deriveBits"]
                )
            finally:
                # Best effort only; the str itself cannot be wiped
                password_buffer[:] = bytes(len(password_buffer))

            hash_algorithm = "SHA-512" if params.hash_function == "sha512" else "SHA-256"
            derived = await self.crypto.subtle.derive_bits(
                {
                    "name": "PBKDF2",
                    "salt": bytes(salt),
                    "iterations": params.iterations,
                    "hash": hash_algorithm,
                },
                key_material,
                params.key_length * 8,
            )
            log_debug("PBKDF2 complete.", backend=self.backend_name, key_length=len(derived))
            return bytes(derived)
        except CryptoError:
            raise
        except Exception as e:
            log_exception("PBKDF2 failed.", e, backend=self.backend_name)
            raise create_crypto_error("key_derivation", "DERIVATION_FAILED", sanitize_error_message(e)) from None

    async def encrypt(self, data: BytesLike, key: BytesLike) -> EncryptedData:
        try:
            check_encryption_inputs(data, key)
            iv = self.generate_iv()
            salt = self.generate_salt()

            crypto_key = await self._import_aes_key(key, "encrypt")
            combined = await self.crypto.subtle.encrypt(
                {"name": CIPHER_ALGORITHM, "iv": iv, "tagLength": TAG_LENGTH_BITS},
                crypto_key,
                bytes(data),
            )
            combined = bytes(combined)
            if len(combined) < AUTH_TAG_LENGTH:
                raise ValueError("cipher output shorter than the authentication tag")

            return EncryptedData(
                data=combined[:-AUTH_TAG_LENGTH],
                iv=iv,
                salt=salt,
                auth_tag=combined[-AUTH_TAG_LENGTH:],
            )
        except CryptoError:
            raise
        except Exception as e:
            log_exception("AES-256-GCM encryption failed.", e, backend=self.backend_name)
            raise create_crypto_error("encryption", "ENCRYPTION_FAILED", sanitize_error_message(e)) from None

    async def decrypt(self, encrypted_data: EncryptedData, key: BytesLike) -> Optional[bytes]:
        try:
            check_decryption_inputs(encrypted_data, key)
            crypto_key = await self._import_aes_key(key, "decrypt")

            ct_len = len(encrypted_data.data)
            combined = bytearray(ct_len + AUTH_TAG_LENGTH)
            combined[:ct_len] = encrypted_data.data
            combined[ct_len:] = encrypted_data.auth_tag

            plaintext = await self.crypto.subtle.decrypt(
                {"name": CIPHER_ALGORITHM, "iv": bytes(encrypted_data.iv), "tagLength": TAG_LENGTH_BITS},
                crypto_key,
                bytes(combined),
            )
            return bytes(plaintext)
        except CryptoError:
            raise
        except Exception:
            # Authentication failures collapse to None, same as Backend A
            log_debug("AES-256-GCM decryption rejected.", backend=self.backend_name)
            return None

    def _random(self, length: int) -> bytes:
        # Checked before allocating so huge requests never reach memory
        if not isinstance(length, int) or isinstance(length, bool):
            raise TypeError("length must be int")
        if not 0 <= length <= MAX_RANDOM_VALUES_BYTES:
            raise ValueError(f"length must be between 0 and {MAX_RANDOM_VALUES_BYTES}")
        buffer = bytearray(length)
        self.crypto.get_random_values(buffer)
        return bytes(buffer)

    def generate_salt(self, length: int = DEFAULT_SALT_LENGTH) -> bytes:
        try:
            return self._random(length)
        except Exception as e:
            raise create_crypto_error(
                "initialization", "SALT_GENERATION_FAILED", sanitize_error_message(e)
            ) from None

    def generate_iv(self, length: int = DEFAULT_IV_LENGTH) -> bytes:
        try:
            return self._random(length)
        except Exception as e:
            raise create_crypto_error(
                "initialization", "IV_GENERATION_FAILED", sanitize_error_message(e)
            ) from None
