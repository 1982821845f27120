"""
Gateway verification middleware for ASGI and WSGI frameworks.

Re-exports middleware classes for convenient imports:
    from gateway_verifier.middleware import GatewayVerificationASGIMiddleware
    from gateway_verifier.middleware import GatewayVerificationWSGIMiddleware
"""

from .wsgi import GatewayVerificationWSGIMiddleware

__all__: list[str] = ["GatewayVerificationWSGIMiddleware"]

# ASGI middleware (FastAPI, Starlette)
try:
    from .asgi import GatewayVerificationASGIMiddleware
    __all__.append("GatewayVerificationASGIMiddleware")
except ImportError:
    pass
