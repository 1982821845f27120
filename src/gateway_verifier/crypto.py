"""
Request hashing and RSA signature verification.
"""

import base64
import hashlib
import logging

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.serialization import load_pem_public_key

logger = logging.getLogger(__name__)


def compute_request_hash(canonical: str) -> str:
    """SHA-256 digest of the canonical string, base64 encoded."""
    digest = hashlib.sha256(canonical.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(request_hash: str, signature_b64: str, public_key_pem: str) -> bool:
    """
    Verify the gateway's RSA-SHA256 signature over the request hash.

    The gateway signs the base64 hash text itself, not the raw digest bytes.

    Args:
        request_hash: Base64 request hash as computed by compute_request_hash
        signature_b64: Base64 signature from the signature header
        public_key_pem: PEM-encoded RSA public key

    Returns:
        True if the signature is valid. Malformed keys or signatures count
        as invalid.
    """
    try:
        public_key = load_pem_public_key(public_key_pem.encode("utf-8"))
        if not isinstance(public_key, rsa.RSAPublicKey):
            logger.warning("Gateway public key is not an RSA key")
            return False

        public_key.verify(
            base64.b64decode(signature_b64),
            request_hash.encode("utf-8"),
            padding.PKCS1v15(),
            hashes.SHA256(),
        )
        return True
    except Exception as e:
        logger.debug(f"Signature verification failed: {e!r}")
        return False
