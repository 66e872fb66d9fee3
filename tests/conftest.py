"""Shared fixtures for spgen tests."""

from itertools import cycle
from typing import Iterable

import pytest

from spgen.config import CharsetConfig, GenerationOptions
from spgen.errors import ResourceError


class FakeByteSource:
    """Deterministic byte source that replays `values` forever."""

    def __init__(self, values: Iterable[int] = (0,)) -> None:
        self._values = cycle(list(values))
        self.calls = 0

    def __call__(self, n: int) -> bytes:
        self.calls += 1
        return bytes(next(self._values) for _ in range(n))


class BrokenByteSource:
    """Byte source whose backing device is gone."""

    def __call__(self, n: int) -> bytes:
        raise ResourceError("Secure random source unavailable.")


class FailingAfterSource:
    """Byte source that serves `limit` zero bytes, then raises `error`."""

    def __init__(self, limit: int, error: BaseException | None = None) -> None:
        self.remaining = limit
        self.error = error or OSError("device gone")

    def __call__(self, n: int) -> bytes:
        if self.remaining < n:
            raise self.error
        self.remaining -= n
        return bytes(n)


@pytest.fixture
def zero_source() -> FakeByteSource:
    return FakeByteSource([0])


@pytest.fixture
def broken_source() -> BrokenByteSource:
    return BrokenByteSource()


@pytest.fixture
def all_types_options() -> GenerationOptions:
    return GenerationOptions(
        length=16,
        charset=CharsetConfig(),
        require_all_types=True,
        min_numbers=1,
        min_special=1,
    )


@pytest.fixture
def lowercase_only_options() -> GenerationOptions:
    return GenerationOptions(
        length=12,
        charset=CharsetConfig(uppercase=False, numbers=False, special=False),
        require_all_types=False,
        min_numbers=0,
        min_special=0,
    )


@pytest.fixture
def failing_source():
    """Factory for a source that fails after a number of bytes."""
    return FailingAfterSource


@pytest.fixture
def make_source():
    """Factory for FakeByteSource with chosen byte values."""
    return FakeByteSource
