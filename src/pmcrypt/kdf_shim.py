# src/pmcrypt/kdf_shim.py
# Purpose: Test-friendly shim for PBKDF2 derivation, leaving production defaults intact.
#          When PMCRYPT_PBKDF2_TEST=1 and the default parameters are requested, we lighten them.
from __future__ import annotations

from dataclasses import replace

from pmcrypt import config
from pmcrypt.models import DEFAULT_KEY_DERIVATION_PARAMS, BytesLike, CryptoService, KeyDerivationParams

TEST_ITERATIONS = 1000


def effective_params(params: KeyDerivationParams = DEFAULT_KEY_DERIVATION_PARAMS) -> KeyDerivationParams:
    if config.pbkdf2_test_mode() and params == DEFAULT_KEY_DERIVATION_PARAMS:
        return replace(params, iterations=TEST_ITERATIONS)
    return params


async def derive_key_pbkdf2(
    service: CryptoService,
    password: str,
    salt: BytesLike,
    params: KeyDerivationParams = DEFAULT_KEY_DERIVATION_PARAMS,
) -> bytes:
    """
    Derive a key through `service`. In test mode (PMCRYPT_PBKDF2_TEST=1), if the
    caller requests the production defaults (600000 iterations), automatically
    downshift to TEST_ITERATIONS to speed up CI/dev while keeping production
    parameters unchanged.
    """
    return await service.derive_key(password, salt, effective_params(params))
