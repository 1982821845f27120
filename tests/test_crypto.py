"""Tests for RSA signature verification."""

import base64

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from gateway_verifier.crypto import compute_request_hash, verify_signature


REQUEST_HASH = compute_request_hash("GET:::/orders:::{}")


def test_valid_signature(sign_hash, public_key_pem):
    """Signature of the hash text verifies with the matching key."""
    signature = sign_hash(REQUEST_HASH)
    assert verify_signature(REQUEST_HASH, signature, public_key_pem) is True


def test_wrong_key(sign_hash, other_public_key_pem):
    """Signature does not verify under an unrelated key."""
    signature = sign_hash(REQUEST_HASH)
    assert verify_signature(REQUEST_HASH, signature, other_public_key_pem) is False


def test_signature_over_other_hash(sign_hash, public_key_pem):
    """Signature over a different hash is rejected."""
    signature = sign_hash(compute_request_hash("POST:::/orders:::{}"))
    assert verify_signature(REQUEST_HASH, signature, public_key_pem) is False


def test_garbage_signature(public_key_pem):
    """Undecodable signatures count as invalid instead of raising."""
    assert verify_signature(REQUEST_HASH, "not base64!!", public_key_pem) is False
    assert verify_signature(REQUEST_HASH, base64.b64encode(b"short").decode(), public_key_pem) is False


def test_malformed_key(sign_hash):
    """A malformed PEM key counts as invalid instead of raising."""
    signature = sign_hash(REQUEST_HASH)
    assert verify_signature(REQUEST_HASH, signature, "-----BEGIN PUBLIC KEY-----\nnope\n") is False


def test_non_rsa_key(sign_hash):
    """Only RSA keys are accepted."""
    ed_pem = ed25519.Ed25519PrivateKey.generate().public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    signature = sign_hash(REQUEST_HASH)
    assert verify_signature(REQUEST_HASH, signature, ed_pem) is False
