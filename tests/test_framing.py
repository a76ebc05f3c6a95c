from __future__ import annotations

import io
import struct

import pytest


class _ChunkedReader(io.RawIOBase):
    """Returns at most `chunk` bytes per read, like a pipe under load."""

    def __init__(self, data: bytes, chunk: int) -> None:
        self._buf = io.BytesIO(data)
        self._chunk = chunk

    def readable(self) -> bool:
        return True

    def read(self, n: int = -1) -> bytes:
        return self._buf.read(min(n, self._chunk) if n >= 0 else self._chunk)


def test_read_frame_returns_payload() -> None:
    from native_hosts.save_to_clipboard.framing import read_frame

    payload = b'{"action":"copyPdf"}'
    stream = io.BytesIO(struct.pack("<I", len(payload)) + payload + b"trailing")
    assert read_frame(stream) == payload


@pytest.mark.parametrize("data", [b"", b"\x01", b"\x01\x00", b"\x01\x00\x00"])
def test_short_header_is_incomplete_header(data: bytes) -> None:
    from native_hosts.save_to_clipboard.errors import IncompleteHeader, TransportError
    from native_hosts.save_to_clipboard.framing import read_frame

    with pytest.raises(IncompleteHeader) as info:
        read_frame(io.BytesIO(data))
    assert isinstance(info.value, TransportError)
    assert info.value.received == len(data)


def test_short_body_is_incomplete_body() -> None:
    from native_hosts.save_to_clipboard.errors import IncompleteBody
    from native_hosts.save_to_clipboard.framing import read_frame

    with pytest.raises(IncompleteBody) as info:
        read_frame(io.BytesIO(struct.pack("<I", 10) + b"abc"))
    assert info.value.expected == 10
    assert info.value.received == 3


def test_read_frame_reassembles_short_reads() -> None:
    from native_hosts.save_to_clipboard.framing import read_frame

    payload = b"x" * 100
    stream = _ChunkedReader(struct.pack("<I", len(payload)) + payload, chunk=3)
    assert read_frame(stream) == payload


def test_zero_length_frame_is_empty_payload() -> None:
    from native_hosts.save_to_clipboard.framing import read_frame

    assert read_frame(io.BytesIO(struct.pack("<I", 0))) == b""


def test_max_bytes_is_enforced_only_when_given() -> None:
    from native_hosts.save_to_clipboard.errors import FrameTooLarge
    from native_hosts.save_to_clipboard.framing import read_frame

    payload = b"y" * 64
    data = struct.pack("<I", len(payload)) + payload
    assert read_frame(io.BytesIO(data)) == payload
    with pytest.raises(FrameTooLarge):
        read_frame(io.BytesIO(data), max_bytes=63)


def test_write_frame_prefixes_little_endian_length_and_flushes() -> None:
    from native_hosts.save_to_clipboard.framing import write_frame

    class _Out(io.BytesIO):
        flushed = False

        def flush(self) -> None:
            self.flushed = True
            super().flush()

    out = _Out()
    write_frame(out, b"hello")
    assert out.getvalue() == b"\x05\x00\x00\x00hello"
    assert out.flushed


def test_write_frame_on_closed_stream_is_transport_error() -> None:
    from native_hosts.save_to_clipboard.errors import TransportError
    from native_hosts.save_to_clipboard.framing import write_frame

    out = io.BytesIO()
    out.close()
    with pytest.raises(TransportError):
        write_frame(out, b"hello")
