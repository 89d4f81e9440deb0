"""
Form-style percent encoding used for canonical query strings

ASCII alphanumerics and ``space . - * _`` pass through (space becomes ``+``);
every other character is emitted as the ``%XX`` escapes of its UTF-8 bytes.
This is not the RFC 3986 unreserved set AWS documents (``~`` is escaped here
and space is not ``%20``), and existing signatures depend on it.
"""

import re

from .types import SigningError, SigningErrorCodes


HEX_DIGITS = "0123456789ABCDEF"

_UNSAFE_RUN = re.compile(r"[^A-Za-z0-9 .\-*_]+")


def _encode_others(match: "re.Match") -> str:
    # Lone surrogates have no UTF-8 form and are sent as '?'
    data = match.group(0).encode('utf-8', errors='replace')
    return ''.join(f"%{HEX_DIGITS[b >> 4]}{HEX_DIGITS[b & 0xF]}" for b in data)


def encode(value: str) -> str:
    """
    Percent-encode a query key or value.

    Args:
        value: String to encode

    Returns:
        str: Encoded string

    Raises:
        SigningError: If value is None or not a string
    """
    if value is None:
        raise SigningError(
            "Cannot encode a missing value",
            SigningErrorCodes.INVALID_INPUT
        )

    if not isinstance(value, str):
        raise SigningError(
            f"Value to encode must be a string, got {type(value)}",
            SigningErrorCodes.INVALID_INPUT,
            {"value_type": str(type(value))}
        )

    # Escapes never contain spaces, so the rewrite only touches safe runs
    return _UNSAFE_RUN.sub(_encode_others, value).replace(' ', '+')
