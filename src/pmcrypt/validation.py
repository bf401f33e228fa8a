# src/pmcrypt/validation.py
# Input checks shared by both backends. Each raises a `validation` CryptoError
# with a static message and always runs before any primitive is called.
from __future__ import annotations

from pmcrypt.errors import create_crypto_error
from pmcrypt.models import AUTH_TAG_LENGTH, DEFAULT_IV_LENGTH, KEY_LENGTH, EncryptedData


def check_derivation_inputs(password, salt) -> None:
    if not password:
        raise create_crypto_error("validation", "EMPTY_PASSWORD", "Password cannot be empty")
    if len(salt) == 0:
        raise create_crypto_error("validation", "EMPTY_SALT", "Salt cannot be empty")


def check_key(key) -> None:
    if len(key) != KEY_LENGTH:
        raise create_crypto_error("validation", "INVALID_KEY_LENGTH", "Key must be 32 bytes for AES-256")


def check_encryption_inputs(data, key) -> None:
    if len(data) == 0:
        raise create_crypto_error("validation", "EMPTY_DATA", "Data cannot be empty")
    check_key(key)


def check_decryption_inputs(encrypted_data: EncryptedData, key) -> None:
    check_key(key)
    if len(encrypted_data.data) == 0:
        raise create_crypto_error("validation", "EMPTY_ENCRYPTED_DATA", "Encrypted data cannot be empty")
    if len(encrypted_data.iv) != DEFAULT_IV_LENGTH:
        raise create_crypto_error("validation", "INVALID_IV_LENGTH", "IV must be 12 bytes for AES-256-GCM")
    if len(encrypted_data.auth_tag) != AUTH_TAG_LENGTH:
        raise create_crypto_error(
            "validation", "INVALID_AUTH_TAG_LENGTH", "Auth tag must be 16 bytes for AES-256-GCM"
        )
