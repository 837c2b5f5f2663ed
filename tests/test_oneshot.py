import sys
import os
import importlib
import logging
import random
import struct

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

import pytest

import keyedsiphash
from keyedsiphash import oneshot
from keyedsiphash.backends import available_backends, get_backend
from keyedsiphash.keys import split_key
from keyedsiphash.oneshot import siphash, siphash128, siphash_bytes
from keyedsiphash.siphash import SipHash24

GOLDEN = [
    (bytes(range(16)), bytes(range(15)), 0xA129CA6149BE45E5),
    (b"\x00" * 16, b"Hello world", 0xC9E8A3021F3822D9),
    (b"\x00" * 16, b"", 0x1E924B9D737700D7),
    (b"\x00" * 16, bytes(8), 0xE849E8BB6FFE2567),
    (b"\x00" * 16, bytes(1535), 0xE74D1C0AB64B2AFA),
]


@pytest.fixture
def restore_default_backend():
    previous = oneshot.get_default_backend()
    yield
    oneshot.set_default_backend(previous)


@pytest.mark.parametrize("backend", ["generic", "unrolled"])
@pytest.mark.parametrize("key,message,expected", GOLDEN)
def test_golden_vectors_per_backend(backend, key, message, expected):
    k0, k1 = split_key(key)
    assert siphash(k0, k1, message, backend=backend) == expected
    low, _ = siphash128(k0, k1, message, backend=backend)
    assert low == expected


def test_backends_agree_on_random_inputs():
    rng = random.Random(99)
    for _ in range(300):
        k0 = rng.getrandbits(64)
        k1 = rng.getrandbits(64)
        message = bytes(rng.getrandbits(8) for _ in range(rng.randint(0, 300)))
        assert siphash(k0, k1, message, backend="unrolled") == siphash(
            k0, k1, message, backend="generic"
        )
        assert siphash128(k0, k1, message, backend="unrolled") == siphash128(
            k0, k1, message, backend="generic"
        )


def test_oneshot_matches_chunked_streaming():
    rng = random.Random(7)
    for length in range(0, 70):
        message = bytes(rng.getrandbits(8) for _ in range(length))
        k0, k1 = rng.getrandbits(64), rng.getrandbits(64)
        state = SipHash24.from_halves(k0, k1)
        pos = 0
        while pos < length:
            step = rng.randint(1, 9)
            state.write(message[pos : pos + step])
            pos += step
        assert siphash(k0, k1, message) == state.intdigest()
        assert siphash128(k0, k1, message) == state.intdigest128()


def test_oneshot_accepts_bytes_like():
    data = b"Hello world"
    expected = siphash(0, 0, data)
    assert siphash(0, 0, bytearray(data)) == expected
    assert siphash(0, 0, memoryview(data)) == expected


def test_oneshot_accepts_strided_memoryview():
    view = memoryview(bytes(range(30)))[::2]
    expected = SipHash24.from_halves(1, 2).update(bytes(view))
    for backend in available_backends():
        assert siphash(1, 2, view, backend=backend) == expected.intdigest()
        assert siphash128(1, 2, view, backend=backend) == expected.intdigest128()


@pytest.mark.parametrize("backend", ["generic", "unrolled"])
def test_pinned_128_bit_words(backend):
    assert siphash128(0, 0, b"", backend=backend) == (
        0x1E924B9D737700D7,
        0x4ACF7ABB23205282,
    )
    k0, k1 = split_key(bytes(range(16)))
    assert siphash128(k0, k1, bytes(range(15)), backend=backend) == (
        0xA129CA6149BE45E5,
        0x0F4F947D0175F7D4,
    )


def test_backend_name_must_be_a_non_empty_str(restore_default_backend):
    with pytest.raises(TypeError):
        oneshot.set_default_backend(None)  # type: ignore
    with pytest.raises(TypeError):
        get_backend(3)  # type: ignore
    with pytest.raises(ValueError):
        siphash(0, 0, b"", backend="")
    with pytest.raises(ValueError):
        siphash128(0, 0, b"", backend="")
    assert oneshot.get_default_backend() == oneshot.DEFAULT_BACKEND


def test_siphash_bytes_is_little_endian():
    digest = siphash_bytes(b"\x00" * 16, b"Hello world")
    assert digest == struct.pack("<Q", 0xC9E8A3021F3822D9)


def test_oneshot_rejects_bad_input():
    for backend in available_backends():
        with pytest.raises(TypeError):
            siphash(0, 0, "text", backend=backend)  # type: ignore
        with pytest.raises(ValueError):
            siphash(-1, 0, b"", backend=backend)
        with pytest.raises(ValueError):
            siphash128(0, 2**64, b"", backend=backend)
    with pytest.raises(keyedsiphash.InvalidKeyLength):
        siphash_bytes(b"short", b"")


def test_unknown_backend():
    with pytest.raises(ValueError) as excinfo:
        siphash(0, 0, b"", backend="asm")
    assert "generic" in str(excinfo.value)
    with pytest.raises(ValueError):
        get_backend("nope")


def test_set_default_backend(restore_default_backend):
    oneshot.set_default_backend("GENERIC")
    assert oneshot.get_default_backend() == "generic"
    assert siphash(0, 0, b"Hello world") == 0xC9E8A3021F3822D9
    with pytest.raises(ValueError):
        oneshot.set_default_backend("missing")
    assert oneshot.get_default_backend() == "generic"


def test_backend_from_environment(monkeypatch):
    monkeypatch.setenv(oneshot.ENV_BACKEND, "generic")
    try:
        module = importlib.reload(oneshot)
        assert module.get_default_backend() == "generic"
    finally:
        monkeypatch.delenv(oneshot.ENV_BACKEND)
        importlib.reload(oneshot)
    assert oneshot.get_default_backend() == oneshot.DEFAULT_BACKEND


def test_bad_backend_in_environment_is_logged(monkeypatch, caplog):
    monkeypatch.setenv(oneshot.ENV_BACKEND, "avx2")
    try:
        with caplog.at_level(logging.WARNING, logger="keyedsiphash.oneshot"):
            module = importlib.reload(oneshot)
        assert module.get_default_backend() == module.DEFAULT_BACKEND
        assert "avx2" in caplog.text
    finally:
        monkeypatch.delenv(oneshot.ENV_BACKEND)
        importlib.reload(oneshot)


def test_package_exports():
    assert keyedsiphash.siphash24 is not None
    assert keyedsiphash.BLOCK_SIZE == 8
    assert keyedsiphash.DIGEST_SIZE == 8
    assert keyedsiphash.KEY_SIZE == 16
    assert keyedsiphash.available_backends() == ["generic", "unrolled"]
