"""Test secure random primitives."""

import threading

import pytest

import spgen.entropy as entropy
from spgen.entropy import (
    SystemByteSource,
    amplify_entropy,
    bits_to_bytes,
    init_secure_random,
    random_char,
    random_index,
    xor_bits,
)
from spgen.errors import ResourceError


def test_init_is_idempotent_across_threads() -> None:
    """Test concurrent init calls all succeed and leave the flag set."""
    errors: list[BaseException] = []

    def worker() -> None:
        try:
            for _ in range(20):
                init_secure_random()
        except BaseException as exc:  # noqa: BLE001
            errors.append(exc)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    assert entropy.is_secure_random_initialized()


def test_init_failure_is_resource_error(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test an unavailable OS source raises instead of degrading."""

    def no_urandom(n: int) -> bytes:
        raise OSError("no entropy device")

    monkeypatch.setattr(entropy, "_initialized", False)
    monkeypatch.setattr(entropy.os, "urandom", no_urandom)

    with pytest.raises(ResourceError):
        init_secure_random()
    assert not entropy.is_secure_random_initialized()


def test_system_source_wraps_os_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test SystemByteSource turns OSError into ResourceError."""
    init_secure_random()

    def no_urandom(n: int) -> bytes:
        raise OSError("gone")

    monkeypatch.setattr(entropy.os, "urandom", no_urandom)
    with pytest.raises(ResourceError):
        SystemByteSource()(4)


def test_system_source_length() -> None:
    """Test the OS source returns the requested number of bytes."""
    assert len(SystemByteSource()(32)) == 32


def test_random_index_uses_modulo(make_source) -> None:
    """Test one byte is drawn and reduced modulo the size."""
    source = make_source([200])
    assert random_index(70, source) == 200 % 70
    assert source.calls == 1


def test_random_index_rejects_empty_range() -> None:
    """Test a zero-size draw is a programming error."""
    with pytest.raises(ValueError):
        random_index(0)


def test_random_index_wraps_custom_source_os_errors(failing_source) -> None:
    """Test an OSError from a caller-supplied source becomes ResourceError."""
    with pytest.raises(ResourceError) as excinfo:
        random_index(10, failing_source(0))
    assert isinstance(excinfo.value.__cause__, OSError)


def test_random_index_in_range() -> None:
    """Test real draws stay inside the range."""
    for _ in range(500):
        assert 0 <= random_index(7) < 7


def test_random_char(make_source) -> None:
    """Test random_char picks alphabet[byte % len]."""
    assert random_char("xyz", make_source([4])) == "y"


def test_bits_to_bytes_pads() -> None:
    """Test bit packing pads the last byte with zeros."""
    assert bits_to_bytes([1, 0, 1]) == bytes([0b10100000])
    assert bits_to_bytes([]) == b""


def test_xor_bits_length_mismatch() -> None:
    """Test XOR refuses streams of different lengths."""
    assert xor_bits([1, 0, 1], [1, 1, 0]) == [0, 1, 1]
    with pytest.raises(ValueError):
        xor_bits([1], [1, 0])


def test_amplify_entropy_mixes_extra() -> None:
    """Test extra bytes change the digest and rounds=0 is a no-op."""
    assert amplify_entropy(b"abc", rounds=0) == b"abc"
    first = amplify_entropy(b"abc", rounds=2, extra=b"\x00")
    second = amplify_entropy(b"abc", rounds=2, extra=b"\x01")
    assert len(first) == 32
    assert first != second
