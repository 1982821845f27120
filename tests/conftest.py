"""Shared fixtures: a gateway RSA key pair and a request signer."""

import base64

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from gateway_verifier.canonical import build_canonical_string
from gateway_verifier.config import Whitelist
from gateway_verifier.crypto import compute_request_hash
from gateway_verifier.headers import HeaderNames, normalize_headers

from .support import NOW_MS


def _public_pem(private_key) -> str:
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


@pytest.fixture(scope="session")
def private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def public_key_pem(private_key):
    return _public_pem(private_key)


@pytest.fixture(scope="session")
def other_public_key_pem():
    """A valid RSA key that did not sign anything."""
    return _public_pem(rsa.generate_private_key(public_exponent=65537, key_size=2048))


def rsa_sign(private_key, message: str) -> str:
    """Base64 RSA-SHA256 signature, as produced by the gateway."""
    signature = private_key.sign(
        message.encode("utf-8"),
        padding.PKCS1v15(),
        hashes.SHA256(),
    )
    return base64.b64encode(signature).decode("ascii")


@pytest.fixture
def sign_hash(private_key):
    """Sign arbitrary text with the gateway key."""
    return lambda message: rsa_sign(private_key, message)


@pytest.fixture
def gateway_sign(private_key):
    """
    Sign a request the way the gateway does.

    Returns the request headers with the time, hash and signature headers added.
    """
    def _sign(
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        signed_at_ms: int = NOW_MS - 1000,
        policy=Whitelist(),
        names: HeaderNames = HeaderNames(),
    ) -> dict[str, str]:
        signed = normalize_headers(headers or {})
        signed[names.time] = str(signed_at_ms)
        canonical = build_canonical_string(method, url, signed, policy, names)
        request_hash = compute_request_hash(canonical)
        signed[names.hash] = request_hash
        signed[names.signature] = rsa_sign(private_key, request_hash)
        return signed

    return _sign
