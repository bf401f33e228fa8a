# src/pmcrypt/subtle.py
"""
WebCrypto-style asynchronous crypto surface.

Mirrors the shape of the W3C Web Cryptography API (`crypto.subtle` plus
`crypto.get_random_values`) on top of `cryptography`, so Backend B can be
written against the portable API and run unchanged wherever such an object is
provided. Blocking primitive calls run in the loop's default executor.

Usage:
    crypto = WebCrypto()
    key = await crypto.subtle.import_key("raw", raw, {"name": "AES-GCM", "length": 256}, False, ["encrypt"])
    ct_and_tag = await crypto.subtle.encrypt({"name": "AES-GCM", "iv": iv, "tagLength": 128}, key, data)
"""
from __future__ import annotations

import asyncio
import functools
import os
from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

__all__ = [
    "SubtleCryptoError",
    "NotSupportedError",
    "InvalidAccessError",
    "DataError",
    "OperationError",
    "QuotaExceededError",
    "KeyUsageError",
    "CryptoKey",
    "SubtleCrypto",
    "WebCrypto",
]

# get_random_values() refuses larger requests, as browsers do
MAX_RANDOM_VALUES_BYTES = 65536

AlgorithmIdentifier = Union[str, Mapping[str, Any]]


class SubtleCryptoError(Exception):
    name = "Error"


class NotSupportedError(SubtleCryptoError):
    name = "NotSupportedError"


class InvalidAccessError(SubtleCryptoError):
    name = "InvalidAccessError"


class DataError(SubtleCryptoError):
    name = "DataError"


class OperationError(SubtleCryptoError):
    name = "OperationError"


class QuotaExceededError(SubtleCryptoError):
    name = "QuotaExceededError"


class KeyUsageError(SubtleCryptoError):
    name = "SyntaxError"


_HASHES = {"SHA-256": hashes.SHA256, "SHA-512": hashes.SHA512}


@dataclass(frozen=True, repr=False)
class CryptoKey:
    algorithm: str
    usages: FrozenSet[str]
    extractable: bool
    _material: bytes

    def __repr__(self) -> str:
        # Never render key material
        return f"CryptoKey(algorithm={self.algorithm!r}, usages={sorted(self.usages)!r})"


def _algorithm_name(algorithm: AlgorithmIdentifier) -> str:
    if isinstance(algorithm, str):
        return algorithm.upper()
    if isinstance(algorithm, Mapping) and isinstance(algorithm.get("name"), str):
        return algorithm["name"].upper()
    raise TypeError("algorithm must be a name or a mapping with a 'name' entry")


def _require(key: CryptoKey, algorithm: str, usage: str) -> None:
    if not isinstance(key, CryptoKey):
        raise TypeError("key must be a CryptoKey")
    if key.algorithm != algorithm:
        raise InvalidAccessError(f"{algorithm} cannot use a {key.algorithm} key")
    if usage not in key.usages:
        raise InvalidAccessError(f"CryptoKey does not permit '{usage}'")


def _pbkdf2_bits(material: bytes, salt: bytes, iterations: int, hash_name: str, length_bits: int) -> bytes:
    kdf = PBKDF2HMAC(algorithm=_HASHES[hash_name](), length=length_bits // 8, salt=salt, iterations=iterations)
    return kdf.derive(material)


class SubtleCrypto:
    """Asynchronous import/derive/encrypt/decrypt operations."""

    async def _run(self, fn, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(fn, *args))

    async def import_key(
        self,
        fmt: str,
        key_data: Union[bytes, bytearray, memoryview],
        algorithm: AlgorithmIdentifier,
        extractable: bool,
        usages: Iterable[str],
    ) -> CryptoKey:
        if fmt != "raw":
            raise NotSupportedError(f"Unsupported key format: {fmt}")
        name = _algorithm_name(algorithm)
        usages = frozenset(usages)
        material = bytes(key_data)

        if name == "PBKDF2":
            if extractable:
                raise KeyUsageError("PBKDF2 key material cannot be extractable")
            if not usages or not usages <= {"deriveBits", "deriveKey"}:
                raise KeyUsageError("PBKDF2 keys only support deriveBits/deriveKey")
        elif name == "AES-GCM":
            declared = algorithm.get("length") if isinstance(algorithm, Mapping) else None
            if len(material) not in (16, 24, 32):
                raise DataError("AES key data must be 128, 192 or 256 bits")
            if declared is not None and declared != len(material) * 8:
                raise DataError("AES key data does not match the declared length")
            if not usages or not usages <= {"encrypt", "decrypt"}:
                raise KeyUsageError("AES-GCM keys only support encrypt/decrypt")
        else:
            raise NotSupportedError(f"Unsupported algorithm: {name}")

        return CryptoKey(algorithm=name, usages=usages, extractable=bool(extractable), _material=material)

    async def derive_bits(self, algorithm: Mapping[str, Any], base_key: CryptoKey, length: int) -> bytes:
        name = _algorithm_name(algorithm)
        if name != "PBKDF2":
            raise NotSupportedError(f"Unsupported derivation algorithm: {name}")
        _require(base_key, "PBKDF2", "deriveBits")

        hash_name = _algorithm_name(algorithm.get("hash", ""))
        if hash_name not in _HASHES:
            raise NotSupportedError(f"Unsupported hash: {hash_name}")
        iterations = algorithm.get("iterations")
        if not isinstance(iterations, int) or iterations < 1:
            raise OperationError("PBKDF2 iterations must be a positive integer")
        if not isinstance(length, int) or length <= 0 or length % 8:
            raise OperationError("length must be a positive multiple of 8")

        salt = bytes(algorithm.get("salt", b""))
        return await self._run(_pbkdf2_bits, base_key._material, salt, iterations, hash_name, length)

    @staticmethod
    def _gcm_params(algorithm: Mapping[str, Any]):
        if _algorithm_name(algorithm) != "AES-GCM":
            raise NotSupportedError("Only AES-GCM is supported")
        iv = bytes(algorithm.get("iv", b""))
        if not iv:
            raise OperationError("AES-GCM requires a non-empty iv")
        tag_length = algorithm.get("tagLength", 128)
        if tag_length != 128:
            # `cryptography`'s AEAD interface produces full-length tags only
            raise OperationError(f"Unsupported tagLength: {tag_length}")
        aad = algorithm.get("additionalData")
        return iv, (bytes(aad) if aad is not None else None)

    async def encrypt(self, algorithm: Mapping[str, Any], key: CryptoKey, data) -> bytes:
        iv, aad = self._gcm_params(algorithm)
        _require(key, "AES-GCM", "encrypt")
        return await self._run(AESGCM(key._material).encrypt, iv, bytes(data), aad)

    async def decrypt(self, algorithm: Mapping[str, Any], key: CryptoKey, data) -> bytes:
        iv, aad = self._gcm_params(algorithm)
        _require(key, "AES-GCM", "decrypt")
        try:
            return await self._run(AESGCM(key._material).decrypt, iv, bytes(data), aad)
        except Exception as e:
            raise OperationError("The operation failed for an operation-specific reason") from e


class WebCrypto:
    """The `crypto` global: a `subtle` namespace plus random fill."""

    def __init__(self, subtle: Optional[SubtleCrypto] = None):
        self.subtle = subtle if subtle is not None else SubtleCrypto()

    def get_random_values(self, buffer: bytearray) -> bytearray:
        if not isinstance(buffer, bytearray):
            raise TypeError("get_random_values expects a bytearray")
        if len(buffer) > MAX_RANDOM_VALUES_BYTES:
            raise QuotaExceededError(
                f"requested {len(buffer)} bytes exceeds the {MAX_RANDOM_VALUES_BYTES}-byte quota"
            )
        buffer[:] = os.urandom(len(buffer))
        return buffer
