"""Pytest configuration and shared fixtures for all tests.

This module provides shared test fixtures including:
- Throwaway RSA key pairs standing in for the issuer's sandbox and
  production keys
- A PublicKeyConfiguration built from those keys
- Isolation from CARD_SECRETS_* variables in the developer's shell
"""

import os

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from card_secrets.domain.session import PublicKeyConfiguration


def _public_pem(private_key: rsa.RSAPrivateKey) -> str:
    return (
        private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode("ascii")
    )


@pytest.fixture(scope="session")
def sandbox_private_key() -> rsa.RSAPrivateKey:
    """Private half of the test sandbox key (held by the issuer in reality)."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def production_private_key() -> rsa.RSAPrivateKey:
    """Private half of the test production key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def sandbox_public_pem(sandbox_private_key: rsa.RSAPrivateKey) -> str:
    return _public_pem(sandbox_private_key)


@pytest.fixture(scope="session")
def production_public_pem(production_private_key: rsa.RSAPrivateKey) -> str:
    return _public_pem(production_private_key)


@pytest.fixture(scope="session")
def public_keys(sandbox_public_pem: str, production_public_pem: str) -> PublicKeyConfiguration:
    """Public key configuration built from the test key pairs."""
    return PublicKeyConfiguration(
        sandbox_pem=sandbox_public_pem,
        production_pem=production_public_pem,
    )


@pytest.fixture(autouse=True)
def isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep CARD_SECRETS_* variables and a stray .env out of every test."""
    for name in list(os.environ):
        if name.upper().startswith("CARD_SECRETS_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
