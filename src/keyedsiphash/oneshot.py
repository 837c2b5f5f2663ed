from __future__ import annotations

import logging
import os
import struct
from typing import Optional, Tuple

from .backends import available_backends, get_backend
from .keys import split_key

logger = logging.getLogger(__name__)

ENV_BACKEND = "KEYEDSIPHASH_BACKEND"
DEFAULT_BACKEND = "unrolled"

_default_backend = DEFAULT_BACKEND


def get_default_backend() -> str:
    return _default_backend


def set_default_backend(name: str) -> None:
    """
    Select the backend used by siphash() and siphash128() when none is given.

    Raises:
        TypeError: If name is not a str
        ValueError: If name is not a registered backend
    """
    global _default_backend
    get_backend(name)
    _default_backend = name.lower()
    logger.debug("one-shot SipHash backend set to %s", _default_backend)


def _configure_from_env() -> None:
    name = os.environ.get(ENV_BACKEND)
    if not name:
        return
    try:
        set_default_backend(name)
    except ValueError:
        logger.warning(
            "ignoring %s=%r, expected one of %s; using %s",
            ENV_BACKEND,
            name,
            ", ".join(available_backends()),
            _default_backend,
        )


def siphash(k0: int, k1: int, data: bytes, backend: Optional[str] = None) -> int:
    """
    Return the 64-bit SipHash-2-4 of data under the key halves k0 and k1.

    Same result as SipHash24.from_halves(k0, k1).update(data).intdigest().

    Args:
        k0: Low 64 bits of the key (first 8 key bytes, little-endian)
        k1: High 64 bits of the key (last 8 key bytes, little-endian)
        data: Message bytes
        backend: Backend name, defaults to get_default_backend()

    Raises:
        TypeError: If data is not bytes-like or a key half is not an int
        ValueError: If a key half is out of range or backend is unknown
    """
    hash64, _ = get_backend(_default_backend if backend is None else backend)
    return hash64(k0, k1, data)


def siphash128(
    k0: int, k1: int, data: bytes, backend: Optional[str] = None
) -> Tuple[int, int]:
    """
    Return the 128-bit SipHash-2-4 of data as (low, high) 64-bit words.

    Note that 128-bit SipHash is considered experimental by the SipHash
    authors. The low word equals siphash(k0, k1, data).
    """
    _, hash128 = get_backend(_default_backend if backend is None else backend)
    return hash128(k0, k1, data)


def siphash_bytes(key: bytes, data: bytes) -> bytes:
    """Hash data under a 16-byte key and return the 8-byte little-endian digest."""
    k0, k1 = split_key(key)
    return struct.pack("<Q", siphash(k0, k1, data))


_configure_from_env()


__all__ = [
    "siphash",
    "siphash128",
    "siphash_bytes",
    "get_default_backend",
    "set_default_backend",
]
