"""Shared test fixtures for appleauth."""

import os

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from appleauth.crypto.types import ServiceIdentity

APPLICATION_ID = "com.example.app"
TEAM_ID = "TEAM123456"
KEY_ID = "KEY1234567"


def pkcs8_pem(key: ec.EllipticCurvePrivateKey) -> bytes:
    """Serialize a private key the way Apple ships ``.p8`` files."""
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep APPLE_AUTH_* variables from the host out of settings tests."""
    for name in list(os.environ):
        if name.startswith("APPLE_AUTH_"):
            monkeypatch.delenv(name)


@pytest.fixture
def signing_key() -> ec.EllipticCurvePrivateKey:
    """A fresh P-256 key standing in for an Apple ``.p8`` key."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def private_key_pem(signing_key: ec.EllipticCurvePrivateKey) -> bytes:
    """The fixture key as PEM wrapped PKCS8 bytes."""
    return pkcs8_pem(signing_key)


@pytest.fixture
def identity(private_key_pem: bytes) -> ServiceIdentity:
    """A service identity signing with the fixture key."""
    return ServiceIdentity(
        application_id=APPLICATION_ID,
        team_id=TEAM_ID,
        key_id=KEY_ID,
        signing_key_bytes=private_key_pem,
    )
