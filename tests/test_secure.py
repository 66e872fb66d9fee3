"""Test wipe-on-release buffers."""

import pytest

from spgen.secure import SecureBuffer, secure_clear


def test_secure_clear_zeroes_every_byte() -> None:
    """Test secure_clear overwrites a bytearray in place."""
    data = bytearray(b"hunter2")
    secure_clear(data)
    assert data == bytearray(7)


def test_buffer_append_and_reveal() -> None:
    """Test characters round-trip through the buffer."""
    buf = SecureBuffer("ab")
    buf.append("c")
    buf.extend("de")
    assert len(buf) == 5
    assert buf.reveal() == "abcde"
    assert buf[2] == "c"
    assert "d" in buf
    assert "z" not in buf


def test_allocate_and_setitem() -> None:
    """Test a preallocated buffer can be filled by index."""
    buf = SecureBuffer.allocate(3)
    buf[0] = "x"
    buf[1] = "y"
    buf[2] = "z"
    assert buf.reveal() == "xyz"


def test_wipe_zeroes_storage_before_release() -> None:
    """Test wipe overwrites the old storage and marks the buffer dead."""
    buf = SecureBuffer("s3cr3t!")
    storage = buf._data
    buf.wipe()

    assert storage == bytearray(7)
    assert buf.wiped
    assert len(buf) == 0
    with pytest.raises(ValueError, match="wiped"):
        buf.reveal()


def test_context_manager_wipes_on_error() -> None:
    """Test the with-block wipes even when the body raises."""
    with pytest.raises(RuntimeError):
        with SecureBuffer("topsecret") as buf:
            storage = buf._data
            raise RuntimeError("boom")

    assert buf.wiped
    assert storage == bytearray(9)


def test_repr_hides_contents() -> None:
    """Test repr never shows the secret."""
    buf = SecureBuffer("hidden")
    assert "hidden" not in repr(buf)


@pytest.mark.parametrize("bad", ["", "ab", "é"])
def test_rejects_non_single_ascii_chars(bad: str) -> None:
    """Test only single ASCII characters are stored."""
    buf = SecureBuffer()
    with pytest.raises(ValueError):
        buf.append(bad)
