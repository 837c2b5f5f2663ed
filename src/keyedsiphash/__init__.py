"""
Keyed SipHash-2-4 for Python: streaming states, one-shot functions and
columnar helpers.
"""

from .exceptions import InvalidKeyLength
from .keys import KEY_SIZE, join_key, split_key
from .siphash import BLOCK_SIZE, DIGEST_SIZE, SipHash24, siphash24
from .backends import available_backends
from .oneshot import (
    get_default_backend,
    set_default_backend,
    siphash,
    siphash128,
    siphash_bytes,
)
from .vectorized import (
    hash_arrow_array,
    hash_pandas_series,
    hash_polars_series,
)

__all__ = [
    "BLOCK_SIZE",
    "DIGEST_SIZE",
    "KEY_SIZE",
    "InvalidKeyLength",
    "SipHash24",
    "siphash24",
    "siphash",
    "siphash128",
    "siphash_bytes",
    "split_key",
    "join_key",
    "available_backends",
    "get_default_backend",
    "set_default_backend",
    "hash_arrow_array",
    "hash_pandas_series",
    "hash_polars_series",
]
