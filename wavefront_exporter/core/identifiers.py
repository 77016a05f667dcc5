"""Conversion of hex trace/span ids into Wavefront UUIDs.

Wavefront identifies traces and spans by UUID. OpenTelemetry ids are hex
strings (32 characters for traces, 16 for spans), so each id is split into
two 64-bit halves which become the most and least significant bits of the
UUID.
"""

from __future__ import annotations

from uuid import UUID

from .errors import InvalidIdentifier

MAX_HEX_DIGITS = 16

_UINT64_MASK = (1 << 64) - 1
_INT64_SIGN_BIT = 1 << 63


def _to_signed64(value: int) -> int:
    """Reinterpret an unsigned 64-bit value as two's-complement signed."""
    if value & _INT64_SIGN_BIT:
        return value - (1 << 64)
    return value


def _parse_unsigned(s: str, identifier: str) -> int:
    try:
        return int(s, 16)
    except ValueError:
        raise InvalidIdentifier(identifier, "not a hexadecimal string") from None


def parse_hex(s: str) -> int:
    """
    Parse up to 16 hex digits into a signed 64-bit integer.

    A full-width value with the top bit set is assembled from two 32-bit
    halves, giving the same bits as an unsigned parse. ``"ffffffffffffffff"``
    is therefore ``-1``.

    Raises:
        InvalidIdentifier: if ``s`` is empty, too long or not hex
    """
    length = len(s)
    if length > MAX_HEX_DIGITS:
        raise InvalidIdentifier(s, f"too many characters ({length} > {MAX_HEX_DIGITS})")
    if length == 0:
        raise InvalidIdentifier(s, "empty string")
    if not all(c in "0123456789abcdefABCDEF" for c in s):
        raise InvalidIdentifier(s, "not a hexadecimal string")

    if length == MAX_HEX_DIGITS and s[0] > "7":
        high = _parse_unsigned(s[:8], s)
        low = _parse_unsigned(s[8:], s)
        return _to_signed64((high << 32) | low)

    return _parse_unsigned(s, s)


def make_uuid(s: str) -> UUID:
    """
    Build a deterministic UUID from a 1-32 character hex id.

    Ids of up to 16 characters fill the low 64 bits only; longer ids are split
    at the 16th character into high and low halves.
    """
    if len(s) <= MAX_HEX_DIGITS:
        high, low = 0, parse_hex(s)
    else:
        high, low = parse_hex(s[:MAX_HEX_DIGITS]), parse_hex(s[MAX_HEX_DIGITS:])
    return UUID(int=((high & _UINT64_MASK) << 64) | (low & _UINT64_MASK))
