"""
API gateway request verification for Python backends.

Verify that requests were forwarded and signed by the trusted API gateway.
"""

from .config import AllExceptBlacklist, VerifierConfig, Whitelist
from .errors import (
    ConfigurationError,
    ExpiredRequestError,
    GatewayVerificationError,
    InvalidRequestHashError,
    InvalidSignatureError,
    KeyUnavailableError,
    MissingRequestHashError,
    MissingSignatureError,
)
from .headers import HeaderNames, has_gateway_headers, normalize_headers
from .keys import KeyProvider
from .models import BufferedResponse, GatewayState, RequestView, VerificationResult
from .verifier import GatewayVerifier
from .middleware.wsgi import GatewayVerificationWSGIMiddleware

__version__ = "0.1.0"

__all__ = [
    "AllExceptBlacklist",
    "BufferedResponse",
    "ConfigurationError",
    "ExpiredRequestError",
    "GatewayState",
    "GatewayVerificationError",
    "GatewayVerificationWSGIMiddleware",
    "GatewayVerifier",
    "HeaderNames",
    "InvalidRequestHashError",
    "InvalidSignatureError",
    "KeyProvider",
    "KeyUnavailableError",
    "MissingRequestHashError",
    "MissingSignatureError",
    "RequestView",
    "VerificationResult",
    "VerifierConfig",
    "Whitelist",
    "has_gateway_headers",
    "normalize_headers",
]

# ASGI middleware import - optional, requires starlette
try:
    from .middleware.asgi import GatewayVerificationASGIMiddleware
    __all__.append("GatewayVerificationASGIMiddleware")
except ImportError:
    pass
