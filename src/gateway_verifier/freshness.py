"""
Signing-time freshness checks.
"""

import re

# Leading integer, read the way the gateway's JavaScript parseInt reads it
_LEADING_INT_RE = re.compile(r"\s*([+-]?[0-9]+)", re.ASCII)


def parse_signature_time(value: str | None) -> int | None:
    """
    Parse the time header (milliseconds since epoch).

    Only ASCII digits count; anything after the leading integer is ignored.
    Returns None if the header is absent or does not start with an integer.

    Examples:
        >>> parse_signature_time(" 1700000000000")
        1700000000000
        >>> parse_signature_time("123abc")
        123
        >>> parse_signature_time("1_700")
        1
    """
    if value is None:
        return None
    match = _LEADING_INT_RE.match(value)
    if not match:
        return None
    return int(match.group(1))


def signature_age_ms(declared_ms: int, now_ms: int) -> int:
    """Milliseconds elapsed since the gateway signed the request. Negative if future-dated."""
    return now_ms - declared_ms


def is_fresh(declared_ms: int, now_ms: int, grace_period_ms: int) -> bool:
    """
    Check the declared signing time against the grace period.

    An age equal to the grace period is still accepted. There is no lower
    bound, so future-dated timestamps are accepted as well.
    """
    return signature_age_ms(declared_ms, now_ms) <= grace_period_ms
