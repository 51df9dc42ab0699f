"""Decoding utilities: byte coercion and address comparison."""

from __future__ import annotations

from eth_utils import is_hex_address, to_bytes

from fluidstate.errors import DecodeError


def to_raw_bytes(value: bytes | bytearray | str) -> bytes:
    """Return raw bytes for bytes or a (0x-prefixed) hex string."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    try:
        return to_bytes(hexstr=value)
    except (ValueError, TypeError) as e:
        raise DecodeError(f"not a hex string: {value!r}") from e


def same_address(a: str, b: str) -> bool:
    """Case-insensitive address equality; False if either is not an address."""
    if not (is_hex_address(a) and is_hex_address(b)):
        return False
    return a.lower() == b.lower()
