"""
Secure randomness:
Byte sources for the generator plus the bit/byte helpers and SHA-256
mixing used by the quantum source.
"""

from __future__ import annotations

import hashlib
import os
import threading
from typing import Callable, List

from loguru import logger

from .errors import ResourceError

# A byte source returns exactly `n` unpredictable bytes or raises ResourceError.
ByteSource = Callable[[int], bytes]

_init_lock = threading.Lock()
_initialized = False


def init_secure_random() -> None:
    """
    Probe the OS CSPRNG once per process.

    Idempotent and safe to call from several threads; the entry point calls
    it at startup and SystemByteSource calls it lazily. Raises ResourceError
    if the OS source is unavailable. There is no fallback to a weaker PRNG.
    """
    global _initialized

    if _initialized:
        return

    with _init_lock:
        if _initialized:
            return
        try:
            os.urandom(1)
        except (OSError, NotImplementedError) as exc:
            logger.error(f"OS random source unavailable: {exc!r}")
            raise ResourceError("Secure random source unavailable.") from exc
        _initialized = True
        logger.debug("Secure random source initialized.")


def is_secure_random_initialized() -> bool:
    return _initialized


class SystemByteSource:
    """
    Byte source backed by os.urandom.
    """

    def __call__(self, n: int) -> bytes:
        init_secure_random()
        try:
            data = os.urandom(n)
        except (OSError, NotImplementedError) as exc:
            logger.error(f"os.urandom({n}) failed: {exc!r}")
            raise ResourceError("Secure random source unavailable.") from exc

        if len(data) != n:
            raise ResourceError(
                f"Secure random source returned {len(data)} of {n} bytes."
            )
        return data


DEFAULT_SOURCE: ByteSource = SystemByteSource()


def random_index(size: int, source: ByteSource | None = None) -> int:
    """
    Draw one secure byte and reduce it modulo `size`.

    Sizes that do not divide 256 carry a small modulo bias; it is kept so a
    draw always costs exactly one byte.
    """
    if size <= 0:
        raise ValueError(f"size must be positive, got {size}")

    src = source or DEFAULT_SOURCE
    try:
        data = src(1)
    except (OSError, NotImplementedError) as exc:
        logger.error(f"Byte source failed: {exc!r}")
        raise ResourceError("Secure random source unavailable.") from exc

    if len(data) != 1:
        raise ResourceError("Byte source returned the wrong number of bytes.")
    return data[0] % size


def random_char(alphabet: str, source: ByteSource | None = None) -> str:
    """Pick one character of `alphabet` with random_index."""
    if not alphabet:
        raise ValueError("alphabet must not be empty")
    return alphabet[random_index(len(alphabet), source)]


def bits_to_bytes(bits: List[int]) -> bytes:
    """
    Pack a list of bits [0,1,1,0,...] into bytes (8 bits per byte).
    If bits length is not a multiple of 8, pad with zeros at the end.
    """
    if not bits:
        return b""

    pad_len = (8 - (len(bits) % 8)) % 8
    bits_padded = bits + [0] * pad_len

    byte_values = []
    for i in range(0, len(bits_padded), 8):
        byte = 0
        for bit in bits_padded[i : i + 8]:
            byte = (byte << 1) | bit
        byte_values.append(byte)

    return bytes(byte_values)


def xor_bits(left: List[int], right: List[int]) -> List[int]:
    """Bitwise XOR of two equal-length bit lists."""
    if len(left) != len(right):
        raise ValueError(
            f"Cannot XOR bit streams of different lengths ({len(left)} != {len(right)})."
        )
    return [a ^ b for a, b in zip(left, right)]


def amplify_entropy(data: bytes, rounds: int = 1, extra: bytes = b"") -> bytes:
    """
    Apply SHA-256 `rounds` times to mix `data` with `extra`.

    `extra` is folded into the first round only. With rounds <= 0 the
    input is returned unchanged.
    """
    if rounds <= 0:
        return data

    digest = hashlib.sha256(data + extra).digest()
    for _ in range(rounds - 1):
        digest = hashlib.sha256(digest).digest()
    return digest
