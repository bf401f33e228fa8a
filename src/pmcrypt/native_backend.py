# src/pmcrypt/native_backend.py
"""
Backend A: CryptoService over the OpenSSL-backed `cryptography` primitives.

AES-256-GCM uses the Cipher/modes.GCM interface (ciphertext and tag handled
separately); PBKDF2 runs in the loop's default executor so derive_key() does
not block the event loop.
"""

from __future__ import annotations

import asyncio
import functools
from typing import Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from pmcrypt import rng
from pmcrypt.debug_utils import log_debug, log_exception
from pmcrypt.errors import CryptoError, create_crypto_error, sanitize_error_message
from pmcrypt.models import (
    DEFAULT_IV_LENGTH,
    DEFAULT_SALT_LENGTH,
    BytesLike,
    CryptoService,
    EncryptedData,
    KeyDerivationParams,
)
from pmcrypt.validation import (
    check_decryption_inputs,
    check_derivation_inputs,
    check_encryption_inputs,
)

__all__ = ["NativeCryptoService"]


def _hash_algorithm(name: str) -> hashes.HashAlgorithm:
    return hashes.SHA512() if name == "sha512" else hashes.SHA256()


def _pbkdf2(password: bytes, salt: bytes, iterations: int, length: int, hash_name: str) -> bytes:
    if iterations < 1:
        raise ValueError("Iteration count must be at least 1")
    if length < 1:
        raise ValueError("Derived length must be at least 1 byte")
    kdf = PBKDF2HMAC(
        algorithm=_hash_algorithm(hash_name),
        length=length,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password)


class NativeCryptoService(CryptoService):
    backend_name = "native"

    async def derive_key(self, password: str, salt: BytesLike, params: KeyDerivationParams) -> bytes:
        try:
            check_derivation_inputs(password, salt)
            loop = asyncio.get_running_loop()
            derived = await loop.run_in_executor(
                None,
                functools.partial(
                    _pbkdf2,
                    password.encode("utf-8"),
                    bytes(salt),
                    params.iterations,
                    params.key_length,
                    params.hash_function,
                ),
            )
            log_debug("PBKDF2 complete.", backend=self.backend_name, key_length=len(derived))
            return derived
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

            enc = Cipher(algorithms.AES(bytes(key)), modes.GCM(iv)).encryptor()
            ct = enc.update(bytes(data)) + enc.finalize()

            return EncryptedData(data=ct, iv=iv, salt=salt, auth_tag=enc.tag)
        except CryptoError:
            raise
        except Exception as e:
            log_exception("AES-256-GCM encryption failed.", e, backend=self.backend_name)
            raise create_crypto_error("encryption", "ENCRYPTION_FAILED", sanitize_error_message(e)) from None

    async def decrypt(self, encrypted_data: EncryptedData, key: BytesLike) -> Optional[bytes]:
        try:
            check_decryption_inputs(encrypted_data, key)
            dec = Cipher(
                algorithms.AES(bytes(key)),
                modes.GCM(bytes(encrypted_data.iv), bytes(encrypted_data.auth_tag)),
            ).decryptor()
            return dec.update(bytes(encrypted_data.data)) + dec.finalize()
        except CryptoError:
            raise
        except Exception:
            # Wrong key, tampered ciphertext and tampered tag are indistinguishable
            log_debug("AES-256-GCM decryption rejected.", backend=self.backend_name)
            return None

    def generate_salt(self, length: int = DEFAULT_SALT_LENGTH) -> bytes:
        try:
            return rng.random_bytes(length)
        except Exception as e:
            raise create_crypto_error(
                "initialization", "SALT_GENERATION_FAILED", sanitize_error_message(e)
            ) from None

    def generate_iv(self, length: int = DEFAULT_IV_LENGTH) -> bytes:
        try:
            return rng.random_bytes(length)
        except Exception as e:
            raise create_crypto_error(
                "initialization", "IV_GENERATION_FAILED", sanitize_error_message(e)
            ) from None
