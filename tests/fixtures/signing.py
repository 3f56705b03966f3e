# tests/fixtures/signing.py

"""
🔏 Signing fixtures:
- A throwaway RSA key pair (session-scoped; key generation is slow)
- Settings objects with / without signing credentials
"""

from __future__ import annotations

import base64
from typing import Tuple

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from app.core.config import Settings
from app.services.signing import PlaybackSigner

__all__ = ["rsa_keypair", "signing_settings", "unsigned_settings", "signer"]


@pytest.fixture(scope="session")
def rsa_keypair() -> Tuple[str, str]:
    """Return (private_pem, public_pem)."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


@pytest.fixture()
def signing_settings(rsa_keypair) -> Settings:
    private_pem, _ = rsa_keypair
    # Mux hands out the key base64-encoded; exercise that path.
    encoded = base64.b64encode(private_pem.encode()).decode()
    return Settings(
        MUX_SIGNING_KEY_ID="test-signing-key",
        MUX_SIGNING_PRIVATE_KEY=encoded,
        MUX_SIGNED_URL_TTL_SECONDS=600,
    )


@pytest.fixture()
def unsigned_settings() -> Settings:
    return Settings(MUX_SIGNING_KEY_ID=None, MUX_SIGNING_PRIVATE_KEY=None)


@pytest.fixture()
def signer(signing_settings) -> PlaybackSigner:
    return PlaybackSigner(signing_settings)
