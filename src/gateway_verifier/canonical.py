"""
Canonical request strings.

The gateway signs a digest of

    METHOD:::URL:::{"header":"value",...}

where the header object is serialized with sorted keys and compact
separators. Both sides must produce this string byte for byte.
"""

import json
from typing import Mapping

from .config import AllExceptBlacklist, HeaderPolicy, Whitelist
from .headers import FRAMING_HEADERS, HeaderNames

SEPARATOR = ":::"


def select_headers(
    headers: Mapping[str, str],
    policy: HeaderPolicy,
    names: HeaderNames,
) -> dict[str, str]:
    """
    Pick the request headers covered by the request hash.

    Args:
        headers: Request headers with lower-cased names
        policy: Whitelist or AllExceptBlacklist
        names: Configured protocol header names

    Returns:
        Covered headers. Whitelisted headers absent from the request are
        omitted, not set to an empty string.

    Examples:
        >>> select_headers({"a": "1", "b": "2"}, Whitelist(("a", "c")), HeaderNames())
        {'a': '1'}
    """
    if isinstance(policy, Whitelist):
        return {name: headers[name] for name in policy.names if name in headers}

    if isinstance(policy, AllExceptBlacklist):
        excluded = FRAMING_HEADERS | {names.hash, names.signature} | set(policy.names)
        return {k: v for k, v in headers.items() if k not in excluded}

    raise TypeError(f"Unsupported header policy: {policy!r}")


def serialize_headers(headers: Mapping[str, str]) -> str:
    """Deterministic JSON form of the covered headers, independent of insertion order."""
    return json.dumps(
        dict(headers),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def build_canonical_string(
    method: str,
    url: str,
    headers: Mapping[str, str],
    policy: HeaderPolicy,
    names: HeaderNames,
) -> str:
    """
    Build the string the gateway hashed and signed.

    Examples:
        >>> build_canonical_string("GET", "/orders", {}, Whitelist(), HeaderNames())
        'GET:::/orders:::{}'
    """
    covered = select_headers(headers, policy, names)
    return SEPARATOR.join([method, url, serialize_headers(covered)])
