# src/pmcrypt/config.py
# Environment-driven settings, read at call time:
#   CRYPTO_BACKEND=node|browser|worker|auto   pin a backend by environment
#   CRYPTO_PERFORMANCE=high|medium|low        used when CRYPTO_BACKEND=auto
#   PMCRYPT_PBKDF2_TEST=1                     lighten default KDF cost in tests
#   PMCRYPT_LOG_LEVEL=DEBUG|INFO|WARNING|...  package logger level
from __future__ import annotations

import os
from typing import Optional

AUTO = "auto"


def backend() -> str:
    return os.environ.get("CRYPTO_BACKEND", AUTO).strip().lower() or AUTO


def performance() -> str:
    return os.environ.get("CRYPTO_PERFORMANCE", "high").strip().lower() or "high"


def pbkdf2_test_mode() -> bool:
    return os.environ.get("PMCRYPT_PBKDF2_TEST", "0") == "1"


def log_level() -> str:
    return os.environ.get("PMCRYPT_LOG_LEVEL", "WARNING")


def pinned_environment() -> Optional[str]:
    """Environment named by CRYPTO_BACKEND, or None when selection is automatic."""
    value = backend()
    return None if value == AUTO else value
