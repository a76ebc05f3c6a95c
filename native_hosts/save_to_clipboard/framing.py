"""Native Messaging framing over stdio.

Each frame is a 4-byte little-endian unsigned length followed by exactly that
many payload bytes. The same framing is used in both directions.
"""

from __future__ import annotations

import struct
from typing import BinaryIO

from .errors import FrameTooLarge, IncompleteBody, IncompleteHeader, TransportError

_HEADER = struct.Struct("<I")


def _read_exact(stream: BinaryIO, n: int) -> bytes:
    buf = bytearray()
    while len(buf) < n:
        chunk = stream.read(n - len(buf))
        if not chunk:
            break
        buf.extend(chunk)
    return bytes(buf)


def read_frame(stream: BinaryIO, *, max_bytes: int | None = None) -> bytes:
    """Read one frame. Blocks until the peer writes or closes the stream."""
    try:
        header = _read_exact(stream, _HEADER.size)
    except (OSError, ValueError) as exc:
        raise TransportError(f"failed to read frame header: {exc}") from exc
    if len(header) < _HEADER.size:
        raise IncompleteHeader(len(header))

    (length,) = _HEADER.unpack(header)
    if max_bytes is not None and length > max_bytes:
        raise FrameTooLarge(length, max_bytes)

    try:
        payload = _read_exact(stream, length)
    except (OSError, ValueError) as exc:
        raise TransportError(f"failed to read frame body: {exc}") from exc
    if len(payload) < length:
        raise IncompleteBody(length, len(payload))
    return payload


def write_frame(stream: BinaryIO, payload: bytes) -> None:
    # Flush right away: the browser reads synchronously and must not wait on our buffer.
    try:
        stream.write(_HEADER.pack(len(payload)))
        stream.write(payload)
        stream.flush()
    except (OSError, ValueError) as exc:
        raise TransportError(f"failed to write frame: {exc}") from exc


__all__ = ["read_frame", "write_frame"]
