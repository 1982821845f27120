"""
WSGI middleware for gateway verification (Flask).
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Callable, Iterable

from ..config import VerifierConfig
from ..headers import has_gateway_headers
from ..models import BufferedResponse, GatewayState, RequestView
from ..verifier import GatewayVerifier

ENVIRON_KEY = "gateway_verifier.state"

logger = logging.getLogger(__name__)


def _extract_headers(environ: dict[str, Any]) -> dict[str, str]:
    """Extract HTTP headers from WSGI environ."""
    headers: dict[str, str] = {}
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            # HTTP_X_MICRO_API_GATEWAY_SIGNATURE -> x-micro-api-gateway-signature
            header_name = key[5:].replace("_", "-").lower()
            headers[header_name] = value
        elif key == "CONTENT_TYPE":
            headers["content-type"] = value
        elif key == "CONTENT_LENGTH":
            headers["content-length"] = value
    return headers


def _request_target(environ: dict[str, Any]) -> str:
    """Build path plus query string from WSGI environ."""
    path = environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", "/")
    query = environ.get("QUERY_STRING", "")
    return f"{path}?{query}" if query else path


def _status_line(status_code: int) -> str:
    try:
        return f"{status_code} {HTTPStatus(status_code).phrase}"
    except ValueError:
        return str(status_code)


class GatewayVerificationWSGIMiddleware:
    """
    WSGI middleware that rejects requests not signed by the API gateway.

    Uses the synchronous verification path. Passing requests get
    `environ["gateway_verifier.state"]` set to a GatewayState.

    Args:
        app: WSGI application
        config: Verifier configuration (ignored if `verifier` is given)
        verifier: Pre-built GatewayVerifier, e.g. to share its key cache
        exempt_paths: Paths served without verification (health checks etc.)

    Example (Flask):
        >>> from flask import Flask
        >>> from gateway_verifier.middleware.wsgi import GatewayVerificationWSGIMiddleware
        >>>
        >>> app = Flask(__name__)
        >>> app.wsgi_app = GatewayVerificationWSGIMiddleware(
        ...     app.wsgi_app,
        ...     config=VerifierConfig(public_key=GATEWAY_PUBLIC_KEY),
        ... )
    """

    def __init__(
        self,
        app: Callable[..., Iterable[bytes]],
        config: VerifierConfig | None = None,
        verifier: GatewayVerifier | None = None,
        exempt_paths: Iterable[str] = (),
    ):
        if verifier is None:
            if config is None:
                raise TypeError("Either config or verifier is required")
            verifier = GatewayVerifier(config)
        self.app = app
        self.verifier = verifier
        self.exempt_paths = frozenset(exempt_paths)

    def __call__(
        self,
        environ: dict[str, Any],
        start_response: Callable[..., Any],
    ) -> Iterable[bytes]:
        if environ.get("PATH_INFO", "/") in self.exempt_paths:
            environ[ENVIRON_KEY] = GatewayState(verified=False, exempt=True)
            return self.app(environ, start_response)

        view = RequestView(
            method=environ.get("REQUEST_METHOD", "GET"),
            url=_request_target(environ),
            headers=_extract_headers(environ),
        )
        if not has_gateway_headers(view.headers, self.verifier.config.headers):
            logger.debug(f"Request without gateway signing headers: {view.method} {view.url}")
        sink = BufferedResponse()

        if not self.verifier.verify_sync(view, sink):
            return self._error_response(start_response, sink)

        environ[ENVIRON_KEY] = GatewayState(
            verified=True,
            bypassed=self.verifier.config.bypass,
        )

        if not sink.headers:
            return self.app(environ, start_response)

        # Carry headers set by the verifier (bypass disclosure) onto the response
        def custom_start_response(
            status: str,
            response_headers: list[tuple[str, str]],
            exc_info: Any = None,
        ) -> Any:
            response_headers.extend(sink.headers.items())
            return start_response(status, response_headers, exc_info)

        return self.app(environ, custom_start_response)

    def _error_response(
        self,
        start_response: Callable[..., Any],
        sink: BufferedResponse,
    ) -> Iterable[bytes]:
        """Return the verifier's error response."""
        headers = list(sink.headers.items())
        headers.append(("content-length", str(len(sink.body))))
        start_response(_status_line(sink.status_code), headers)
        return [sink.body]
