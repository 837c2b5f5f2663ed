from __future__ import annotations

import struct
from typing import Callable, Dict, List, Tuple

from .keys import check_halves
from .siphash import SipHash24, _byte_view

_MASK_64 = 0xFFFFFFFFFFFFFFFF

Hash64 = Callable[[int, int, bytes], int]
Hash128 = Callable[[int, int, bytes], Tuple[int, int]]


def _generic_hash(k0: int, k1: int, data: bytes) -> int:
    return SipHash24.from_halves(k0, k1).update(data).intdigest()


def _generic_hash128(k0: int, k1: int, data: bytes) -> Tuple[int, int]:
    return SipHash24.from_halves(k0, k1).update(data).intdigest128()


def _rounds(v0, v1, v2, v3, n):
    for _ in range(n):
        v0 = (v0 + v1) & _MASK_64
        v1 = ((v1 << 13) | (v1 >> 51)) & _MASK_64
        v1 ^= v0
        v0 = ((v0 << 32) | (v0 >> 32)) & _MASK_64
        v2 = (v2 + v3) & _MASK_64
        v3 = ((v3 << 16) | (v3 >> 48)) & _MASK_64
        v3 ^= v2
        v0 = (v0 + v3) & _MASK_64
        v3 = ((v3 << 21) | (v3 >> 43)) & _MASK_64
        v3 ^= v0
        v2 = (v2 + v1) & _MASK_64
        v1 = ((v1 << 17) | (v1 >> 47)) & _MASK_64
        v1 ^= v2
        v2 = ((v2 << 32) | (v2 >> 32)) & _MASK_64
    return v0, v1, v2, v3


def _unrolled_core(k0: int, k1: int, data: bytes):
    """
    Absorb the whole message and run the finalization rounds.

    Returns the four state words after the d rounds, so the 128-bit
    variant can keep going from there.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("data must be bytes-like")
    check_halves(k0, k1)

    v0 = 0x736F6D6570736575 ^ k0
    v1 = 0x646F72616E646F6D ^ k1
    v2 = 0x6C7967656E657261 ^ k0
    v3 = 0x7465646279746573 ^ k1

    view = _byte_view(data)
    size = len(view)
    end = size & ~7

    for (m,) in struct.iter_unpack("<Q", view[:end]):
        v3 ^= m
        # Two compression rounds, written out.
        v0 = (v0 + v1) & _MASK_64
        v1 = ((v1 << 13) | (v1 >> 51)) & _MASK_64
        v1 ^= v0
        v0 = ((v0 << 32) | (v0 >> 32)) & _MASK_64
        v2 = (v2 + v3) & _MASK_64
        v3 = ((v3 << 16) | (v3 >> 48)) & _MASK_64
        v3 ^= v2
        v0 = (v0 + v3) & _MASK_64
        v3 = ((v3 << 21) | (v3 >> 43)) & _MASK_64
        v3 ^= v0
        v2 = (v2 + v1) & _MASK_64
        v1 = ((v1 << 17) | (v1 >> 47)) & _MASK_64
        v1 ^= v2
        v2 = ((v2 << 32) | (v2 >> 32)) & _MASK_64

        v0 = (v0 + v1) & _MASK_64
        v1 = ((v1 << 13) | (v1 >> 51)) & _MASK_64
        v1 ^= v0
        v0 = ((v0 << 32) | (v0 >> 32)) & _MASK_64
        v2 = (v2 + v3) & _MASK_64
        v3 = ((v3 << 16) | (v3 >> 48)) & _MASK_64
        v3 ^= v2
        v0 = (v0 + v3) & _MASK_64
        v3 = ((v3 << 21) | (v3 >> 43)) & _MASK_64
        v3 ^= v0
        v2 = (v2 + v1) & _MASK_64
        v1 = ((v1 << 17) | (v1 >> 47)) & _MASK_64
        v1 ^= v2
        v2 = ((v2 << 32) | (v2 >> 32)) & _MASK_64
        v0 ^= m

    b = ((size & 0xFF) << 56) | int.from_bytes(view[end:], "little")
    v3 ^= b
    v0, v1, v2, v3 = _rounds(v0, v1, v2, v3, 2)
    v0 ^= b

    v2 ^= 0xFF
    return _rounds(v0, v1, v2, v3, 4)


def _unrolled_hash(k0: int, k1: int, data: bytes) -> int:
    v0, v1, v2, v3 = _unrolled_core(k0, k1, data)
    return v0 ^ v1 ^ v2 ^ v3


def _unrolled_hash128(k0: int, k1: int, data: bytes) -> Tuple[int, int]:
    v0, v1, v2, v3 = _unrolled_core(k0, k1, data)
    low = v0 ^ v1 ^ v2 ^ v3
    v1 ^= 0xDD
    v0, v1, v2, v3 = _rounds(v0, v1, v2, v3, 4)
    return low, v0 ^ v1 ^ v2 ^ v3


# name -> (64-bit function, 128-bit function)
BACKENDS: Dict[str, Tuple[Hash64, Hash128]] = {
    "generic": (_generic_hash, _generic_hash128),
    "unrolled": (_unrolled_hash, _unrolled_hash128),
}


def get_backend(name: str) -> Tuple[Hash64, Hash128]:
    if not isinstance(name, str):
        raise TypeError(f"backend name must be a str, got {type(name)!r}")
    try:
        return BACKENDS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported backend: {name!r} (choose from {', '.join(sorted(BACKENDS))})"
        ) from None


def available_backends() -> List[str]:
    return sorted(BACKENDS)


__all__ = ["BACKENDS", "available_backends", "get_backend"]
