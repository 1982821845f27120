"""
Gateway request verification.
"""

import hmac
import logging
import time
from typing import Callable

from .canonical import build_canonical_string
from .config import VerifierConfig
from .crypto import compute_request_hash, verify_signature
from .errors import (
    ExpiredRequestError,
    GatewayVerificationError,
    InvalidRequestHashError,
    InvalidSignatureError,
    KeyUnavailableError,
    MissingRequestHashError,
    MissingSignatureError,
)
from .freshness import is_fresh, parse_signature_time
from .keys import KeyProvider
from .models import RequestView, ResponseSink, VerificationResult

logger = logging.getLogger(__name__)

# Set on bypassed responses when VerifierConfig.disclose_bypass is enabled
BYPASS_HEADER = "x-gateway-verification"


class GatewayVerifier:
    """
    Verifies that requests were signed by the trusted API gateway.

    Checks run in a fixed order and stop at the first failure: key
    acquisition, presence of the hash and signature headers, signing-time
    freshness, request hash match, and finally the RSA signature over the
    hash. A failure writes a JSON error response and yields False; success
    leaves the response untouched and yields True.

    Args:
        config: Verifier configuration
        key_provider: Source of the trusted key. Default: KeyProvider(config)
        clock: Returns the current time in epoch seconds. Default: time.time

    Example:
        >>> verifier = GatewayVerifier(VerifierConfig(public_key=PEM))
        >>> if not await verifier.verify(request_view, response):
        ...     return  # error response already written
    """

    def __init__(
        self,
        config: VerifierConfig,
        key_provider: KeyProvider | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.clock = clock
        self.key_provider = key_provider or KeyProvider(config, clock=clock)

        if config.bypass:
            logger.warning(
                "!!! API GATEWAY VERIFICATION WILL BE SKIPPED (bypass enabled in VerifierConfig) !!!"
            )

    async def verify(self, request: RequestView, response: ResponseSink) -> bool:
        """
        Verify a request, writing an error response on failure.

        The caller must not write to the response again when this returns False.
        """
        result = await self.check(request)
        return self._respond(result, response)

    def verify_sync(self, request: RequestView, response: ResponseSink) -> bool:
        """Synchronous variant of verify() for WSGI hosts."""
        result = self.check_sync(request)
        return self._respond(result, response)

    async def check(self, request: RequestView) -> VerificationResult:
        """Run verification and return the outcome without touching any response."""
        if self.config.bypass:
            return VerificationResult.skipped()

        try:
            public_key = await self.key_provider.get_key()
            self._check_request(request, public_key)
        except GatewayVerificationError as e:
            return self._failed(request, e)

        return VerificationResult.success()

    def check_sync(self, request: RequestView) -> VerificationResult:
        """Synchronous variant of check()."""
        if self.config.bypass:
            return VerificationResult.skipped()

        try:
            public_key = self.key_provider.get_key_sync()
            self._check_request(request, public_key)
        except GatewayVerificationError as e:
            return self._failed(request, e)

        return VerificationResult.success()

    def _check_request(self, request: RequestView, public_key: str | None) -> None:
        if not public_key:
            raise KeyUnavailableError()

        names = self.config.headers

        incoming_hash = request.headers.get(names.hash)
        if not isinstance(incoming_hash, str) or not incoming_hash:
            raise MissingRequestHashError()

        incoming_signature = request.headers.get(names.signature)
        if not isinstance(incoming_signature, str) or not incoming_signature:
            raise MissingSignatureError()

        canonical = build_canonical_string(
            request.method,
            request.url,
            request.headers,
            self.config.header_policy,
            names,
        )
        request_hash = compute_request_hash(canonical)
        logger.debug(f"VERIFY REQ: {canonical}")
        logger.debug(f"VERIFY HASH: {request_hash}")

        declared_ms = parse_signature_time(request.headers.get(names.time))
        now_ms = int(self.clock() * 1000)
        if declared_ms is None or not is_fresh(declared_ms, now_ms, self.config.grace_period_ms):
            raise ExpiredRequestError()

        if not hmac.compare_digest(request_hash.encode("utf-8"), incoming_hash.encode("utf-8")):
            raise InvalidRequestHashError()

        if not verify_signature(request_hash, incoming_signature, public_key):
            raise InvalidSignatureError()

    def _failed(self, request: RequestView, exc: GatewayVerificationError) -> VerificationResult:
        logger.info(f"Gateway verification failed for {request.method} {request.url}: {exc.kind}")
        return VerificationResult.from_error(exc)

    def _respond(self, result: VerificationResult, response: ResponseSink) -> bool:
        if result.verified:
            if result.bypassed and self.config.disclose_bypass:
                response.set_header(BYPASS_HEADER, "bypassed")
            return True

        response.status_code = result.status_code
        response.set_header("content-type", "application/json")
        response.end(result.to_body())
        return False
