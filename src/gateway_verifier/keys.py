"""
Trusted public key acquisition for gateway verification.
"""

import logging
import time
from typing import Callable

import httpx

from .config import VerifierConfig
from .models import CachedKey

logger = logging.getLogger(__name__)


class KeyProvider:
    """
    Supplies the gateway public key the verifier trusts.

    With a static key configured, that key is always returned. Otherwise the
    key is fetched from the configured endpoint and cached for the grace
    period. A failed fetch clears the cache, so verification fails closed
    until a later fetch succeeds. There is no retry or backoff; every call
    after a failure attempts a new fetch.

    Concurrent refreshes on a cache miss are not de-duplicated. Each fetch
    returns the same key, so the last writer simply wins.

    Args:
        config: Verifier configuration
        clock: Returns the current time in epoch seconds. Default: time.time

    Example:
        >>> provider = KeyProvider(VerifierConfig(public_key_endpoint="http://gw/key"))
        >>> key = await provider.get_key()
        >>> if key is None:
        ...     print("gateway key unavailable")
    """

    def __init__(
        self,
        config: VerifierConfig,
        clock: Callable[[], float] = time.time,
    ):
        self.static_key = config.public_key
        self.endpoint = config.public_key_endpoint
        self.grace_period_s = config.grace_period.total_seconds()
        self.timeout_s = config.fetch_timeout_s
        self.clock = clock
        self.cached: CachedKey | None = None

    async def get_key(self) -> str | None:
        """
        Return the trusted public key, fetching it asynchronously if needed.

        Returns:
            PEM public key text, or None if it could not be obtained
        """
        if self.static_key:
            return self.static_key

        now = self.clock()
        if self._is_cache_valid(now):
            return self.cached.value

        self.cached = None
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                response = await client.get(self.endpoint)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Failed to fetch api gateway public key: {e}")
            return None

        return self._store(response, now)

    def get_key_sync(self) -> str | None:
        """
        Return the trusted public key, fetching it synchronously if needed.

        Shares the cache with get_key().

        Returns:
            PEM public key text, or None if it could not be obtained
        """
        if self.static_key:
            return self.static_key

        now = self.clock()
        if self._is_cache_valid(now):
            return self.cached.value

        self.cached = None
        try:
            with httpx.Client(timeout=self.timeout_s) as client:
                response = client.get(self.endpoint)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Failed to fetch api gateway public key: {e}")
            return None

        return self._store(response, now)

    def invalidate(self) -> None:
        """Drop the cached key so the next call fetches again."""
        self.cached = None

    def _is_cache_valid(self, now: float) -> bool:
        if self.cached is None:
            return False
        return now - self.cached.fetched_at <= self.grace_period_s

    def _store(self, response: httpx.Response, now: float) -> str | None:
        """Cache the key from a fetch response, or leave the cache empty on failure."""
        if not response.is_success:
            logger.warning(
                f"Failed to fetch api gateway public key. "
                f"(HTTP response code: {response.status_code})"
            )
            return None

        key = response.text
        if not key.strip():
            logger.warning("Api gateway public key endpoint returned an empty body")
            return None

        self.cached = CachedKey(value=key, fetched_at=now)
        return key
