"""
Exceptions raised while configuring or running gateway verification.
"""


class ConfigurationError(ValueError):
    """Raised at construction time when the verifier is misconfigured."""


class GatewayVerificationError(Exception):
    """
    Base class for verification failures.

    Each subclass maps to one machine-readable error kind and HTTP status.
    The verifier catches these and renders them as JSON error responses;
    they never reach the host framework.
    """

    kind = "verification failed"
    status_code = 400
    default_message = "The request could not be verified."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class KeyUnavailableError(GatewayVerificationError):
    kind = "missing public key"
    status_code = 500
    default_message = "Could not obtain public key from provided endpoint."


class MissingRequestHashError(GatewayVerificationError):
    kind = "missing or malformed request hash"
    default_message = "The request does not have a proper request hash header."


class MissingSignatureError(GatewayVerificationError):
    kind = "missing or malformed request hash signature"
    default_message = "The request does not have a proper request hash signature header."


class ExpiredRequestError(GatewayVerificationError):
    kind = "expired request"
    default_message = "The request from the API gateway has expired."


class InvalidRequestHashError(GatewayVerificationError):
    kind = "invalid request hash"
    default_message = "The request from the API gateway has an invalid request hash."


class InvalidSignatureError(GatewayVerificationError):
    kind = "invalid request hash signature"
    default_message = "The request hash from the API gateway could not be verified."
