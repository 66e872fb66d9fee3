"""
Wipe-on-release character buffers for secrets.

Characters are kept in a bytearray so they can be overwritten in place.
A str handed out by reveal() is immutable and cannot be scrubbed; callers
should hold it for as short a time as possible.
"""

from __future__ import annotations

from typing import Iterable, Iterator


def secure_clear(buf: bytearray) -> None:
    """Overwrite every byte of a mutable buffer with zero."""
    for i in range(len(buf)):
        buf[i] = 0


class SecureBuffer:
    """
    Growable ASCII character buffer that zeroes its storage on wipe().

    Use it as a context manager so the wipe runs on every exit path:

        with SecureBuffer.allocate(16) as buf:
            buf[0] = "x"
    """

    __slots__ = ("_data", "_wiped")

    def __init__(self, initial: Iterable[str] = "") -> None:
        self._data = bytearray()
        self._wiped = False
        if initial:
            self.extend(initial)

    @classmethod
    def allocate(cls, size: int) -> "SecureBuffer":
        """Return a zero-filled buffer of `size` characters."""
        if size < 0:
            raise ValueError(f"size must be >= 0, got {size}")
        buf = cls()
        buf._data = bytearray(size)
        return buf

    # --- mutation ---

    def append(self, char: str) -> None:
        self._check_alive()
        self._data += _encode_char(char)

    def extend(self, chars: Iterable[str]) -> None:
        for char in chars:
            self.append(char)

    def __setitem__(self, index: int, char: str) -> None:
        self._check_alive()
        self._data[index] = _encode_char(char)[0]

    # --- access ---

    def __getitem__(self, index: int) -> str:
        self._check_alive()
        return chr(self._data[index])

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        self._check_alive()
        for value in self._data:
            yield chr(value)

    def __contains__(self, char: object) -> bool:
        if not isinstance(char, str) or len(char) != 1 or not char.isascii():
            return False
        self._check_alive()
        return ord(char) in self._data

    def __repr__(self) -> str:
        # Never show contents.
        state = "wiped" if self._wiped else f"{len(self._data)} chars"
        return f"<SecureBuffer {state}>"

    def reveal(self) -> str:
        """Return the buffer contents as an (unscrubbable) str."""
        self._check_alive()
        return self._data.decode("ascii")

    # --- lifecycle ---

    @property
    def wiped(self) -> bool:
        return self._wiped

    def wipe(self) -> None:
        """Zero the storage, then release it. Safe to call repeatedly."""
        secure_clear(self._data)
        self._data = bytearray()
        self._wiped = True

    def __enter__(self) -> "SecureBuffer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()

    def _check_alive(self) -> None:
        if self._wiped:
            raise ValueError("SecureBuffer has been wiped")


def _encode_char(char: str) -> bytes:
    if len(char) != 1:
        raise ValueError(f"expected a single character, got {len(char)}")
    return char.encode("ascii")
