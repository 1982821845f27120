"""
Data models for gateway request verification.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Mapping, Protocol

from .errors import GatewayVerificationError
from .headers import normalize_headers


@dataclass
class RequestView:
    """
    Read-only view of an inbound request.

    Attributes:
        method: HTTP method (GET, POST, etc.)
        url: Request target as the gateway forwarded it (path plus query string)
        headers: Request headers; names are lower-cased on construction
    """
    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.headers = normalize_headers(self.headers)


@dataclass(frozen=True)
class CachedKey:
    """
    A public key fetched from the key endpoint.

    Attributes:
        value: PEM-encoded public key text
        fetched_at: Unix epoch seconds of the successful fetch
    """
    value: str
    fetched_at: float


@dataclass
class VerificationResult:
    """
    Outcome of verifying one request.

    Attributes:
        verified: Whether the request may proceed
        error: Machine-readable error kind if verification failed
        message: Human-readable explanation if verification failed
        status_code: HTTP status to answer with if verification failed
        bypassed: True when verification was skipped by configuration
    """
    verified: bool
    error: str | None = None
    message: str | None = None
    status_code: int | None = None
    bypassed: bool = False

    @classmethod
    def success(cls) -> VerificationResult:
        return cls(verified=True)

    @classmethod
    def skipped(cls) -> VerificationResult:
        return cls(verified=True, bypassed=True)

    @classmethod
    def from_error(cls, exc: GatewayVerificationError) -> VerificationResult:
        return cls(
            verified=False,
            error=exc.kind,
            message=exc.message,
            status_code=exc.status_code,
        )

    def to_body(self) -> bytes:
        """JSON error body written on failure."""
        return json.dumps({"error": self.error, "message": self.message}).encode("utf-8")


class ResponseSink(Protocol):
    """What the verifier needs from a host framework's response object."""

    status_code: int

    def set_header(self, name: str, value: str) -> None: ...

    def end(self, body: bytes) -> None: ...


@dataclass
class BufferedResponse:
    """
    In-memory ResponseSink used by the framework adapters.

    The verifier writes into it; the adapter then turns it into a real
    framework response if `ended` is set.
    """
    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    ended: bool = False

    def set_header(self, name: str, value: str) -> None:
        self.headers[name.lower()] = value

    def end(self, body: bytes) -> None:
        self.body = body
        self.ended = True


@dataclass
class GatewayState:
    """
    Verification state attached to requests by the middleware.

    Attributes:
        verified: Whether the request passed (or bypassed) verification
        bypassed: Whether verification was skipped by configuration
        exempt: Whether the path is exempt from verification
    """
    verified: bool
    bypassed: bool = False
    exempt: bool = False
