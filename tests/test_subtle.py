# tests/test_subtle.py
import asyncio
import secrets

import pytest

from pmcrypt.subtle import (
    MAX_RANDOM_VALUES_BYTES,
    DataError,
    InvalidAccessError,
    KeyUsageError,
    NotSupportedError,
    OperationError,
    QuotaExceededError,
    WebCrypto,
)

AES = {"name": "AES-GCM", "length": 256}


def test_get_random_values_fills_in_place():
    crypto = WebCrypto()
    buf = bytearray(32)
    out = crypto.get_random_values(buf)
    assert out is buf and len(buf) == 32 and buf != bytearray(32)


def test_get_random_values_policy():
    crypto = WebCrypto()
    with pytest.raises(TypeError):
        crypto.get_random_values(b"\x00" * 8)
    with pytest.raises(QuotaExceededError):
        crypto.get_random_values(bytearray(MAX_RANDOM_VALUES_BYTES + 1))


def test_aes_gcm_output_carries_tag():
    subtle = WebCrypto().subtle
    key = asyncio.run(subtle.import_key("raw", secrets.token_bytes(32), AES, False, ["encrypt", "decrypt"]))
    iv = secrets.token_bytes(12)
    ct = asyncio.run(subtle.encrypt({"name": "AES-GCM", "iv": iv, "tagLength": 128}, key, b"hello"))
    assert len(ct) == 5 + 16
    assert asyncio.run(subtle.decrypt({"name": "AES-GCM", "iv": iv}, key, ct)) == b"hello"


def test_decrypt_authentication_failure_is_operation_error():
    subtle = WebCrypto().subtle
    key = asyncio.run(subtle.import_key("raw", secrets.token_bytes(32), AES, False, ["encrypt", "decrypt"]))
    iv = secrets.token_bytes(12)
    ct = bytearray(asyncio.run(subtle.encrypt({"name": "AES-GCM", "iv": iv}, key, b"hello")))
    ct[0] ^= 1
    with pytest.raises(OperationError):
        asyncio.run(subtle.decrypt({"name": "AES-GCM", "iv": iv}, key, bytes(ct)))


def test_key_usages_are_enforced():
    subtle = WebCrypto().subtle
    key = asyncio.run(subtle.import_key("raw", secrets.token_bytes(32), AES, False, ["encrypt"]))
    with pytest.raises(InvalidAccessError):
        asyncio.run(subtle.decrypt({"name": "AES-GCM", "iv": b"\x00" * 12}, key, b"\x00" * 32))


def test_import_key_rejections():
    subtle = WebCrypto().subtle
    with pytest.raises(NotSupportedError):
        asyncio.run(subtle.import_key("jwk", b"k", "PBKDF2", False, ["deriveBits"]))
    with pytest.raises(DataError):
        asyncio.run(subtle.import_key("raw", b"k" * 31, AES, False, ["encrypt"]))
    with pytest.raises(KeyUsageError):
        asyncio.run(subtle.import_key("raw", b"pw", "PBKDF2", False, ["encrypt"]))
    with pytest.raises(NotSupportedError):
        asyncio.run(subtle.import_key("raw", b"pw", "HKDF", False, ["deriveBits"]))


def test_derive_bits_known_vector_and_checks():
    subtle = WebCrypto().subtle
    base = asyncio.run(subtle.import_key("raw", b"password", "PBKDF2", False, ["deriveBits"]))
    algo = {"name": "PBKDF2", "salt": b"salt", "iterations": 1, "hash": "SHA-256"}
    assert asyncio.run(subtle.derive_bits(algo, base, 160)).hex() == "120fb6cffcf8b32c43e7225256c4f837a86548c9"
    with pytest.raises(OperationError):
        asyncio.run(subtle.derive_bits({**algo, "iterations": 0}, base, 256))
    with pytest.raises(OperationError):
        asyncio.run(subtle.derive_bits(algo, base, 12))
    with pytest.raises(NotSupportedError):
        asyncio.run(subtle.derive_bits({**algo, "hash": "SHA-1"}, base, 256))


def test_crypto_key_repr_hides_material():
    subtle = WebCrypto().subtle
    raw = b"\xaa" * 32
    key = asyncio.run(subtle.import_key("raw", raw, AES, False, ["encrypt"]))
    assert raw.hex() not in repr(key)
    assert "\\xaa" not in repr(key)
