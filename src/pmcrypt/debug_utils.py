# src/pmcrypt/debug_utils.py
# Thin logging helpers used across the package. Messages must never carry key
# material, passwords, plaintext or raw library error text.
from __future__ import annotations

import logging
from typing import Any, Optional

from pmcrypt import config

LOGGER_NAME = "pmcrypt"

logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())


def _level(name: str, default: int) -> int:
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else default


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Apply PMCRYPT_LOG_LEVEL (or an explicit level name) to the package logger."""
    logger.setLevel(_level(level or config.log_level(), logging.WARNING))
    return logger


def _format(message: str, component: str, fields: dict) -> str:
    extra = " ".join(f"{k}={v}" for k, v in fields.items())
    return f"[{component}] {message}" + (f" {extra}" if extra else "")


def log_debug(message: str, level: str = "DEBUG", component: str = "CRYPTO", **fields: Any) -> None:
    lvl = _level(level, logging.DEBUG)
    if logger.isEnabledFor(lvl):
        logger.log(lvl, _format(message, component, fields))


def log_error(message: str, component: str = "CRYPTO", **fields: Any) -> None:
    logger.error(_format(message, component, fields))


def log_exception(message: str, exc: BaseException, component: str = "CRYPTO", **fields: Any) -> None:
    # Only the exception type is recorded; its message may echo inputs.
    fields["error_type"] = type(exc).__name__
    logger.error(_format(message, component, fields))
