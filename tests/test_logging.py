# tests/test_logging.py
import asyncio
import logging
import secrets

import pytest

from pmcrypt import (
    CryptoError,
    DefaultCryptoServiceFactory,
    KeyDerivationParams,
    NativeCryptoService,
    RuntimeHost,
    WebCryptoService,
)
from pmcrypt.debug_utils import LOGGER_NAME, configure_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger(LOGGER_NAME)
    previous = logger.level
    try:
        yield logger
    finally:
        logger.setLevel(previous)


def test_configure_logging_reads_environment(monkeypatch, package_logger):
    monkeypatch.setenv("PMCRYPT_LOG_LEVEL", "debug")
    assert configure_logging().level == logging.DEBUG
    assert configure_logging("ERROR").level == logging.ERROR
    assert configure_logging("nonsense").level == logging.WARNING


def test_logs_never_contain_secrets(caplog, package_logger):
    configure_logging("DEBUG")
    password = "correct-horse-battery"
    key = secrets.token_bytes(32)
    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        for service in (NativeCryptoService(), WebCryptoService()):
            asyncio.run(service.derive_key(password, b"salt", KeyDerivationParams(iterations=5, key_length=32)))
            enc = asyncio.run(service.encrypt(b"plaintext-marker", key))
            asyncio.run(service.decrypt(enc, secrets.token_bytes(32)))
    text = caplog.text
    assert "PBKDF2 complete" in text
    assert "decryption rejected" in text
    assert password not in text
    assert "plaintext-marker" not in text
    assert key.hex() not in text


def test_factory_failures_logged_at_error_level(caplog):
    factory = DefaultCryptoServiceFactory(RuntimeHost(versions=None, crypto=None))
    with caplog.at_level(logging.ERROR, logger=LOGGER_NAME):
        with pytest.raises(CryptoError):
            factory.create_for_performance("high")
        with pytest.raises(CryptoError):
            factory.create_for_environment("node")
    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
    assert any("No crypto backend available." in m and "level=high" in m for m in messages)
    assert any("Native crypto runtime not detected." in m and "env=node" in m for m in messages)
