from __future__ import annotations

import struct
from typing import Tuple

from .exceptions import InvalidKeyLength

KEY_SIZE = 16

_MAX_HALF = 1 << 64


def check_halves(k0: int, k1: int) -> None:
    for name, half in (("k0", k0), ("k1", k1)):
        if isinstance(half, bool) or not isinstance(half, int):
            raise TypeError(f"{name} must be an int")
        if not 0 <= half < _MAX_HALF:
            raise ValueError(f"{name} must be an unsigned 64-bit integer")


def split_key(key: bytes) -> Tuple[int, int]:
    """
    Split a 16-byte key into its little-endian 64-bit halves (k0, k1).

    Raises:
        TypeError: If key is not bytes-like
        InvalidKeyLength: If key is not exactly 16 bytes
    """
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise TypeError("key must be bytes-like")
    key_bytes = bytes(key)
    if len(key_bytes) != KEY_SIZE:
        raise InvalidKeyLength(len(key_bytes), KEY_SIZE)
    return struct.unpack("<QQ", key_bytes)


def join_key(k0: int, k1: int) -> bytes:
    """Inverse of split_key."""
    check_halves(k0, k1)
    return struct.pack("<QQ", k0, k1)


__all__ = ["KEY_SIZE", "split_key", "join_key", "check_halves"]
