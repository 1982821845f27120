"""
Verifier configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

import httpx

from .errors import ConfigurationError
from .headers import HeaderNames


@dataclass(frozen=True)
class Whitelist:
    """Sign only these headers, and only when present on the request."""
    names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", tuple(n.lower() for n in self.names))


@dataclass(frozen=True)
class AllExceptBlacklist:
    """
    Sign every request header except the hash and signature headers,
    transport framing headers, and any names listed here.
    """
    names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", tuple(n.lower() for n in self.names))


HeaderPolicy = Whitelist | AllExceptBlacklist


def _check_endpoint(endpoint: str) -> None:
    """Reject key endpoints httpx could never fetch."""
    try:
        url = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConfigurationError(f"Invalid public key endpoint {endpoint!r}: {e}") from e

    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(
            f"Public key endpoint must be an absolute http(s) URL, got {endpoint!r}"
        )


@dataclass
class VerifierConfig:
    """
    Configuration for GatewayVerifier.

    Exactly one of `public_key` or `public_key_endpoint` must be given.

    Args:
        headers: Names of the time, hash and signature headers
        header_policy: Which request headers are covered by the request hash
        public_key: PEM-encoded RSA public key trusted as the gateway's key
        public_key_endpoint: URL serving the gateway's PEM public key
        grace_period: Cache lifetime of a fetched key, and the maximum age
            of a request's signing time. Default: 5 minutes
        bypass: Skip all verification. Local development only.
        disclose_bypass: When bypassing, mark the response with
            `x-gateway-verification: bypassed`
        fetch_timeout_s: Key endpoint request timeout in seconds. Default: 5.0

    Raises:
        ConfigurationError: If no key source (or both) is configured, or the
            grace period is not positive

    Example:
        >>> config = VerifierConfig(
        ...     public_key_endpoint="https://gateway.internal/public-key",
        ...     header_policy=Whitelist(("content-type", "x-user-id")),
        ... )
    """
    headers: HeaderNames = field(default_factory=HeaderNames)
    header_policy: HeaderPolicy = field(default_factory=Whitelist)
    public_key: str | bytes | None = None
    public_key_endpoint: str | None = None
    grace_period: timedelta = timedelta(minutes=5)
    bypass: bool = False
    disclose_bypass: bool = False
    fetch_timeout_s: float = 5.0

    def __post_init__(self) -> None:
        if isinstance(self.public_key, bytes):
            self.public_key = self.public_key.decode("ascii")

        if not (self.public_key or self.public_key_endpoint):
            raise ConfigurationError(
                "You must specify a public key or public key endpoint!"
            )
        if self.public_key and self.public_key_endpoint:
            raise ConfigurationError(
                "Specify either a public key or a public key endpoint, not both."
            )
        if self.public_key_endpoint:
            _check_endpoint(self.public_key_endpoint)
        if not isinstance(self.header_policy, (Whitelist, AllExceptBlacklist)):
            raise ConfigurationError(
                "header_policy must be a Whitelist or an AllExceptBlacklist"
            )
        if self.grace_period <= timedelta(0):
            raise ConfigurationError("grace_period must be a positive duration")

    @property
    def grace_period_ms(self) -> int:
        return self.grace_period // timedelta(milliseconds=1)
