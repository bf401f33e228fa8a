# src/pmcrypt/factory.py
"""
Backend selection by runtime capability.

Capabilities are read from an injected RuntimeHost rather than from process
globals, so callers (and tests) can describe any host. Probing never raises:
anything that fails while reading the host counts as "capability absent".
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pmcrypt import config
from pmcrypt.debug_utils import log_debug, log_error
from pmcrypt.errors import create_crypto_error
from pmcrypt.models import CryptoService
from pmcrypt.native_backend import NativeCryptoService
from pmcrypt.subtle import WebCrypto
from pmcrypt.webcrypto_backend import WebCryptoService

__all__ = [
    "RuntimeHost",
    "detect_runtime_host",
    "DefaultCryptoServiceFactory",
    "crypto_service_factory",
    "create_default_service",
]


@dataclass(frozen=True)
class RuntimeHost:
    """
    versions: runtime version descriptor; the native backend needs a string
              under "openssl" (the library `cryptography` is linked against).
    crypto:   WebCrypto-style object exposing `subtle` and `get_random_values`.
    """

    versions: Optional[Mapping[str, Any]] = None
    crypto: Any = None


def _openssl_version() -> Optional[str]:
    try:
        from cryptography.hazmat.backends.openssl.backend import backend

        return backend.openssl_version_text()
    except Exception:
        return None


def detect_runtime_host() -> RuntimeHost:
    versions = {"python": platform.python_version()}
    openssl = _openssl_version()
    if openssl is not None:
        versions["openssl"] = openssl
    return RuntimeHost(versions=versions, crypto=WebCrypto())


class DefaultCryptoServiceFactory:
    def __init__(self, host: Optional[RuntimeHost] = None):
        self._host = host

    def _current_host(self) -> RuntimeHost:
        return self._host if self._host is not None else detect_runtime_host()

    @staticmethod
    def _is_native_available(host: RuntimeHost) -> bool:
        try:
            versions = host.versions
            return isinstance(versions, Mapping) and isinstance(versions.get("openssl"), str)
        except Exception:
            return False

    @staticmethod
    def _is_webcrypto_available(host: RuntimeHost) -> bool:
        try:
            crypto = host.crypto
            if crypto is None:
                return False
            return getattr(crypto, "subtle", None) is not None and callable(
                getattr(crypto, "get_random_values", None)
            )
        except Exception:
            return False

    def _native(self) -> CryptoService:
        service = NativeCryptoService()
        log_debug("Selected crypto backend.", level="INFO", component="FACTORY", backend=service.backend_name)
        return service

    def _webcrypto(self, host: RuntimeHost) -> CryptoService:
        service = WebCryptoService(crypto=host.crypto)
        log_debug("Selected crypto backend.", level="INFO", component="FACTORY", backend=service.backend_name)
        return service

    def create_for_environment(self, env: str) -> CryptoService:
        host = self._current_host()
        if env == "node":
            if not self._is_native_available(host):
                log_error("Native crypto runtime not detected.", component="FACTORY", env=env)
                raise create_crypto_error(
                    "initialization", "ENVIRONMENT_MISMATCH", "Native crypto runtime not detected"
                )
            return self._native()
        if env in ("browser", "worker"):
            if not self._is_webcrypto_available(host):
                log_error("WebCrypto API not available.", component="FACTORY", env=env)
                raise create_crypto_error(
                    "initialization", "WEBCRYPTO_UNAVAILABLE", "WebCrypto API not available in this environment"
                )
            return self._webcrypto(host)
        raise create_crypto_error("initialization", "UNKNOWN_ENVIRONMENT", f"Unknown environment: {env}")

    def create_for_performance(self, level: str) -> CryptoService:
        host = self._current_host()
        if level == "high":
            # Native primitives first, portable API as fallback
            order = ("native", "webcrypto")
        elif level in ("medium", "low"):
            order = ("webcrypto", "native")
        else:
            raise create_crypto_error(
                "initialization", "UNKNOWN_PERFORMANCE_LEVEL", f"Unknown performance level: {level}"
            )

        for candidate in order:
            if candidate == "native" and self._is_native_available(host):
                return self._native()
            if candidate == "webcrypto" and self._is_webcrypto_available(host):
                return self._webcrypto(host)
        log_error("No crypto backend available.", component="FACTORY", level=level)
        raise create_crypto_error(
            "initialization", "NO_CRYPTO_AVAILABLE", "No suitable crypto implementation available"
        )


crypto_service_factory = DefaultCryptoServiceFactory()


def create_default_service(factory: Optional[DefaultCryptoServiceFactory] = None) -> CryptoService:
    """Pick a backend from CRYPTO_BACKEND, else from CRYPTO_PERFORMANCE."""
    factory = factory or crypto_service_factory
    env = config.pinned_environment()
    if env is not None:
        return factory.create_for_environment(env)
    return factory.create_for_performance(config.performance())
