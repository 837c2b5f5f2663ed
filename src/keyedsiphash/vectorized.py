from __future__ import annotations

from typing import Any, Callable

from .keys import split_key
from .oneshot import siphash


def _value_hasher(key: bytes) -> Callable[[Any], int]:
    k0, k1 = split_key(key)

    def hash_value(value: Any) -> int:
        if isinstance(value, str):
            value = value.encode("utf-8")
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"Unsupported value for column hashing: {type(value)!r}"
            )
        return siphash(k0, k1, value)

    return hash_value


def hash_pandas_series(series: Any, key: bytes):
    """
    Hash a pandas Series of bytes or str values into a uint64 Series.
    """
    try:
        import pandas as pd  # type: ignore
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise ImportError(
            "Install pandas to use hash_pandas_series: pip install pandas"
        ) from exc

    hash_value = _value_hasher(key)
    hashes = [hash_value(val) for val in series]
    return pd.Series(hashes, index=getattr(series, "index", None), dtype="uint64")


def hash_arrow_array(array: Any, key: bytes):
    """
    Hash a pyarrow Array (or values coercible to one) into a uint64 Array.
    """
    try:
        import pyarrow as pa  # type: ignore
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise ImportError(
            "Install pyarrow to use hash_arrow_array: pip install pyarrow"
        ) from exc

    arr = array if hasattr(array, "to_pylist") else pa.array(array)
    hash_value = _value_hasher(key)
    hashes = [
        hash_value(val.as_py() if hasattr(val, "as_py") else val) for val in arr
    ]
    return pa.array(hashes, type=pa.uint64())


def hash_polars_series(series: Any, key: bytes):
    """
    Hash a polars Series of bytes or str values into a UInt64 Series.
    """
    try:
        import polars as pl  # type: ignore
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise ImportError(
            "Install polars to use hash_polars_series: pip install polars"
        ) from exc

    ser = series if hasattr(series, "dtype") else pl.Series(series)
    hash_value = _value_hasher(key)
    hashes = [hash_value(val) for val in ser]
    name = getattr(ser, "name", None) or "hash"
    return pl.Series(name=name, values=hashes, dtype=pl.UInt64)


__all__ = ["hash_arrow_array", "hash_pandas_series", "hash_polars_series"]
