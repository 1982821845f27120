"""
ASGI middleware for gateway verification (FastAPI/Starlette).
"""

import logging
from typing import Any, Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..config import VerifierConfig
from ..headers import has_gateway_headers, normalize_headers
from ..models import BufferedResponse, GatewayState, RequestView
from ..verifier import GatewayVerifier

logger = logging.getLogger(__name__)


def _request_target(request: Request) -> str:
    """Path plus query string, as received from the gateway."""
    raw_path = request.scope.get("raw_path")
    path = raw_path.split(b"?", 1)[0].decode("latin-1") if raw_path else request.url.path
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"{path}?{query}" if query else path


class GatewayVerificationASGIMiddleware(BaseHTTPMiddleware):
    """
    ASGI middleware that rejects requests not signed by the API gateway.

    Failed verifications are answered with the verifier's JSON error
    response; the wrapped app is not called. Passing requests get
    `request.state.gateway` set to a GatewayState.

    Args:
        app: ASGI application
        config: Verifier configuration (ignored if `verifier` is given)
        verifier: Pre-built GatewayVerifier, e.g. to share its key cache
        exempt_paths: Paths served without verification (health checks etc.)

    Example (FastAPI):
        >>> from fastapi import FastAPI
        >>> from gateway_verifier import GatewayVerificationASGIMiddleware, VerifierConfig
        >>>
        >>> app = FastAPI()
        >>> app.add_middleware(
        ...     GatewayVerificationASGIMiddleware,
        ...     config=VerifierConfig(public_key_endpoint="https://gateway.internal/key"),
        ...     exempt_paths=["/health"],
        ... )
    """

    def __init__(
        self,
        app: Any,
        config: VerifierConfig | None = None,
        verifier: GatewayVerifier | None = None,
        exempt_paths: Iterable[str] = (),
    ):
        super().__init__(app)
        if verifier is None:
            if config is None:
                raise TypeError("Either config or verifier is required")
            verifier = GatewayVerifier(config)
        self.verifier = verifier
        self.exempt_paths = frozenset(exempt_paths)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        if request.url.path in self.exempt_paths:
            request.state.gateway = GatewayState(verified=False, exempt=True)
            return await call_next(request)

        view = RequestView(
            method=request.method,
            url=_request_target(request),
            headers=normalize_headers(request.headers.items()),
        )
        if not has_gateway_headers(view.headers, self.verifier.config.headers):
            logger.debug(f"Request without gateway signing headers: {view.method} {view.url}")
        sink = BufferedResponse()

        if not await self.verifier.verify(view, sink):
            return Response(
                content=sink.body,
                status_code=sink.status_code,
                headers=sink.headers,
            )

        request.state.gateway = GatewayState(
            verified=True,
            bypassed=self.verifier.config.bypass,
        )
        response = await call_next(request)
        for name, value in sink.headers.items():
            response.headers[name] = value
        return response
