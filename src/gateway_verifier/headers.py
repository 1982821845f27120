"""
Header name bindings and normalization helpers.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping


# Header names the gateway uses unless configured otherwise
DEFAULT_TIME_HEADER = "x-micro-api-gateway-signature-time"
DEFAULT_HASH_HEADER = "x-micro-api-gateway-request-hash"
DEFAULT_SIGNATURE_HEADER = "x-micro-api-gateway-signature"

# Transport framing headers a gateway or proxy may add after signing
FRAMING_HEADERS = frozenset({
    "connection",
    "transfer-encoding",
})


@dataclass(frozen=True)
class HeaderNames:
    """
    Which request headers carry the signing time, request hash and signature.

    Names are lower-cased on construction so lookups against normalized
    request headers always match.
    """
    time: str = DEFAULT_TIME_HEADER
    hash: str = DEFAULT_HASH_HEADER
    signature: str = DEFAULT_SIGNATURE_HEADER

    def __post_init__(self) -> None:
        object.__setattr__(self, "time", self.time.lower())
        object.__setattr__(self, "hash", self.hash.lower())
        object.__setattr__(self, "signature", self.signature.lower())


def normalize_headers(
    headers: Mapping[str, str] | Iterable[tuple[str, str]],
) -> dict[str, str]:
    """
    Lower-case header names, joining repeated headers with ", ".

    Accepts either a mapping or a sequence of (name, value) pairs, such as
    Starlette's `request.headers.items()` or a WSGI header list.

    Examples:
        >>> normalize_headers({"Host": "example.com"})
        {'host': 'example.com'}
        >>> normalize_headers([("Accept", "a"), ("accept", "b")])
        {'accept': 'a, b'}
    """
    items = headers.items() if isinstance(headers, Mapping) else headers

    result: dict[str, str] = {}
    for name, value in items:
        key = name.lower()
        if key in result:
            result[key] = f"{result[key]}, {value}"
        else:
            result[key] = value
    return result


def has_gateway_headers(headers: Mapping[str, str], names: HeaderNames) -> bool:
    """Check if a request carries any of the gateway signing headers."""
    normalized = {k.lower() for k in headers}
    return any(h in normalized for h in (names.time, names.hash, names.signature))
