"""Tests for VerifierConfig validation."""

from datetime import timedelta

import pytest

from gateway_verifier import (
    AllExceptBlacklist,
    ConfigurationError,
    HeaderNames,
    VerifierConfig,
    Whitelist,
)


class TestVerifierConfig:
    """Tests for VerifierConfig."""

    def test_defaults(self):
        """Defaults match the gateway's header names and a 5 minute grace period."""
        config = VerifierConfig(public_key="PEM")
        assert config.headers.time == "x-micro-api-gateway-signature-time"
        assert config.headers.hash == "x-micro-api-gateway-request-hash"
        assert config.headers.signature == "x-micro-api-gateway-signature"
        assert config.header_policy == Whitelist()
        assert config.grace_period_ms == 300_000
        assert config.bypass is False
        assert config.disclose_bypass is False

    def test_missing_key_source(self):
        """A key source is required."""
        with pytest.raises(ConfigurationError, match="public key"):
            VerifierConfig()

    def test_missing_key_source_even_with_bypass(self):
        """Bypass does not relax the key source requirement."""
        with pytest.raises(ConfigurationError):
            VerifierConfig(bypass=True)

    def test_both_key_sources(self):
        """Static key and endpoint are mutually exclusive."""
        with pytest.raises(ConfigurationError, match="not both"):
            VerifierConfig(public_key="PEM", public_key_endpoint="http://gateway.test/key")

    @pytest.mark.parametrize(
        "endpoint",
        [
            "http://[::1/key",
            "http://gate\x00way/key",
            "gateway.test/key",
            "ftp://gateway.test/key",
        ],
    )
    def test_invalid_endpoint(self, endpoint):
        """Endpoints httpx cannot fetch are rejected at construction."""
        with pytest.raises(ConfigurationError, match="endpoint"):
            VerifierConfig(public_key_endpoint=endpoint)

    def test_endpoint_only(self):
        config = VerifierConfig(public_key_endpoint="http://gateway.test/key")
        assert config.public_key is None

    def test_bytes_key_decoded(self):
        config = VerifierConfig(public_key=b"-----BEGIN PUBLIC KEY-----")
        assert config.public_key == "-----BEGIN PUBLIC KEY-----"

    @pytest.mark.parametrize("grace", [timedelta(0), timedelta(seconds=-1)])
    def test_non_positive_grace_period(self, grace):
        with pytest.raises(ConfigurationError, match="grace_period"):
            VerifierConfig(public_key="PEM", grace_period=grace)

    def test_grace_period_ms(self):
        config = VerifierConfig(public_key="PEM", grace_period=timedelta(seconds=1, milliseconds=500))
        assert config.grace_period_ms == 1500

    def test_invalid_header_policy(self):
        """Header policy must be one of the two tagged choices."""
        with pytest.raises(ConfigurationError, match="header_policy"):
            VerifierConfig(public_key="PEM", header_policy=("host",))

    def test_blacklist_policy(self):
        config = VerifierConfig(public_key="PEM", header_policy=AllExceptBlacklist(("X-Trace",)))
        assert config.header_policy.names == ("x-trace",)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            VerifierConfig()


class TestHeaderNames:
    """Tests for HeaderNames."""

    def test_lowercased(self):
        names = HeaderNames(time="X-Time", hash="X-Hash", signature="X-Sig")
        assert (names.time, names.hash, names.signature) == ("x-time", "x-hash", "x-sig")
