from __future__ import annotations

import struct
from typing import Tuple

from .keys import KEY_SIZE, check_halves, split_key

_MASK_64 = 0xFFFFFFFFFFFFFFFF

BLOCK_SIZE = 8
DIGEST_SIZE = 8

C_ROUNDS = 2
D_ROUNDS = 4

_INIT_V0 = 0x736F6D6570736575
_INIT_V1 = 0x646F72616E646F6D
_INIT_V2 = 0x6C7967656E657261
_INIT_V3 = 0x7465646279746573

_BYTES_LIKE = (bytes, bytearray, memoryview)


def _rotl(x: int, b: int) -> int:
    """Rotate left for 64-bit values."""
    return ((x << b) | (x >> (64 - b))) & _MASK_64


def _byte_view(data) -> memoryview:
    """Flat unsigned-byte view of data, copying only strided buffers."""
    view = memoryview(data)
    if not view.c_contiguous:
        view = memoryview(view.tobytes())
    return view.cast("B")


class SipHash24:
    """
    Pure-Python SipHash-2-4 implementation with a streaming API.

    The interface mirrors hashlib-style objects. Reading a digest never
    touches the live state, so callers may keep writing after a digest()
    and read again later.

    The 128-bit digests (digest128() and friends) are experimental: the
    SipHash authors give them weaker security assurances than the 64-bit
    output.
    """

    name = "siphash24"
    digest_size = DIGEST_SIZE
    block_size = BLOCK_SIZE

    def __init__(self, key: bytes, data: bytes = b""):
        self._k0, self._k1 = split_key(key)
        self._buf = bytearray(BLOCK_SIZE)
        self.reset()
        if data:
            self.write(data)

    @classmethod
    def from_halves(cls, k0: int, k1: int) -> "SipHash24":
        """Build a state from the two little-endian 64-bit key halves."""
        check_halves(k0, k1)
        state = cls.__new__(cls)
        state._k0 = k0
        state._k1 = k1
        state._buf = bytearray(BLOCK_SIZE)
        state.reset()
        return state

    def reset(self) -> None:
        """Return to the freshly keyed state, keeping the key."""
        self._v0 = _INIT_V0 ^ self._k0
        self._v1 = _INIT_V1 ^ self._k1
        self._v2 = _INIT_V2 ^ self._k0
        self._v3 = _INIT_V3 ^ self._k1
        self._count = 0
        self._nbuf = 0

    @property
    def byte_count(self) -> int:
        """Total bytes written since the last reset, mod 256."""
        return (self._count + self._nbuf) & 0xFF

    def copy(self) -> "SipHash24":
        dup = self.__class__.__new__(self.__class__)
        dup._k0 = self._k0
        dup._k1 = self._k1
        dup._v0 = self._v0
        dup._v1 = self._v1
        dup._v2 = self._v2
        dup._v3 = self._v3
        dup._count = self._count
        dup._buf = bytearray(self._buf)
        dup._nbuf = self._nbuf
        return dup

    def write(self, data: bytes) -> int:
        """
        Absorb data and return the number of bytes consumed.

        Writing a message in pieces gives the same digest as writing it
        in one call. Only complete 8-byte blocks reach the mixing rounds;
        a trailing partial block waits in the scratch buffer.
        """
        if not isinstance(data, _BYTES_LIKE):
            raise TypeError("data must be bytes-like")

        view = _byte_view(data)
        size = len(view)
        pos = 0

        if self._nbuf:
            take = min(BLOCK_SIZE - self._nbuf, size)
            self._buf[self._nbuf : self._nbuf + take] = view[:take]
            self._nbuf += take
            pos = take
            if self._nbuf == BLOCK_SIZE:
                self._compress(struct.unpack("<Q", self._buf)[0])
                self._nbuf = 0

        end = pos + ((size - pos) & ~(BLOCK_SIZE - 1))
        for (m,) in struct.iter_unpack("<Q", view[pos:end]):
            self._compress(m)

        tail = size - end
        if tail:
            self._buf[:tail] = view[end:]
            self._nbuf = tail
        return size

    def update(self, data: bytes) -> "SipHash24":
        self.write(data)
        return self

    def digest(self) -> bytes:
        return struct.pack("<Q", self.intdigest())

    def hexdigest(self) -> str:
        return self.digest().hex()

    def intdigest(self) -> int:
        return self.copy()._finalize()

    sum64 = intdigest

    def intdigest128(self) -> Tuple[int, int]:
        """
        Return the experimental 128-bit digest as (low, high) words.

        The low word is the regular 64-bit digest.
        """
        final = self.copy()
        low = final._finalize()
        final._v1 ^= 0xDD
        for _ in range(D_ROUNDS):
            final._sip_round()
        high = (final._v0 ^ final._v1 ^ final._v2 ^ final._v3) & _MASK_64
        return low, high

    def digest128(self) -> bytes:
        return struct.pack("<QQ", *self.intdigest128())

    def hexdigest128(self) -> str:
        return self.digest128().hex()

    # Internal helpers -------------------------------------------------
    def _compress(self, m: int) -> None:
        self._v3 ^= m
        for _ in range(C_ROUNDS):
            self._sip_round()
        self._v0 ^= m
        self._count = (self._count + BLOCK_SIZE) & 0xFF

    def _sip_round(self) -> None:
        v0, v1, v2, v3 = self._v0, self._v1, self._v2, self._v3

        v0 = (v0 + v1) & _MASK_64
        v1 = _rotl(v1, 13)
        v1 ^= v0
        v0 = _rotl(v0, 32)

        v2 = (v2 + v3) & _MASK_64
        v3 = _rotl(v3, 16)
        v3 ^= v2

        v0 = (v0 + v3) & _MASK_64
        v3 = _rotl(v3, 21)
        v3 ^= v0

        v2 = (v2 + v1) & _MASK_64
        v1 = _rotl(v1, 17)
        v1 ^= v2
        v2 = _rotl(v2, 32)

        self._v0, self._v1, self._v2, self._v3 = v0, v1, v2, v3

    def _finalize(self) -> int:
        # Runs on a copy. The length byte uses the total count taken
        # before the padding block is absorbed.
        self._count = (self._count + self._nbuf) & 0xFF
        b = self._count << 56
        for idx in range(self._nbuf):
            b |= self._buf[idx] << (8 * idx)
        self._nbuf = 0

        self._compress(b)
        self._v2 ^= 0xFF
        for _ in range(D_ROUNDS):
            self._sip_round()

        return (self._v0 ^ self._v1 ^ self._v2 ^ self._v3) & _MASK_64


def siphash24(key: bytes, data: bytes = b"") -> SipHash24:
    """Convenience constructor matching hashlib-style usage."""
    return SipHash24(key, data)


__all__ = ["SipHash24", "siphash24", "BLOCK_SIZE", "DIGEST_SIZE", "KEY_SIZE"]
