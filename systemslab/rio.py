"""Robust I/O: full-length reads and writes, and a buffered line reader."""

from __future__ import annotations

from typing import Any

RIO_BUFSIZE = 8192
MAXLINE = 8192
MAXBUF = 8192


def _raw_read(source: Any, size: int) -> bytes:
    """Read at most ``size`` bytes from a socket or a binary file object."""
    if hasattr(source, "recv"):
        data = source.recv(size)
    else:
        data = source.read(size)
    return data or b""


def readn(source: Any, n: int) -> bytes:
    """Read up to ``n`` bytes without buffering, stopping early only at EOF."""
    chunks: list[bytes] = []
    remaining = n
    while remaining > 0:
        chunk = _raw_read(source, remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def writen(sock: Any, data: bytes) -> int:
    """Write all of ``data`` to a socket or binary file object; return its length."""
    if hasattr(sock, "sendall"):
        sock.sendall(data)
        return len(data)
    view = memoryview(data)
    while view:
        written = sock.write(view)
        if written is None:
            written = 0
        view = view[written:]
    return len(data)


class RobustReader:
    """Buffered reader over a socket or binary file object."""

    def __init__(self, source: Any) -> None:
        self.source = source
        self._buf = b""
        self._pos = 0

    def _fill(self) -> bool:
        """Make sure unread bytes are buffered; return False at EOF."""
        if self._pos < len(self._buf):
            return True
        chunk = _raw_read(self.source, RIO_BUFSIZE)
        if not chunk:
            return False
        self._buf = chunk
        self._pos = 0
        return True

    def read(self, n: int) -> bytes:
        """Read up to ``n`` bytes, fewer only at EOF."""
        out = bytearray()
        while len(out) < n and self._fill():
            end = min(len(self._buf), self._pos + (n - len(out)))
            out += self._buf[self._pos:end]
            self._pos = end
        return bytes(out)

    def readline(self, maxlen: int = MAXLINE) -> bytes:
        """Read one line, newline included, of at most ``maxlen - 1`` bytes.

        Returns an empty bytes object at EOF.
        """
        out = bytearray()
        limit = maxlen - 1
        while len(out) < limit and self._fill():
            end = min(len(self._buf), self._pos + (limit - len(out)))
            newline = self._buf.find(b"\n", self._pos, end)
            if newline >= 0:
                out += self._buf[self._pos:newline + 1]
                self._pos = newline + 1
                break
            out += self._buf[self._pos:end]
            self._pos = end
        return bytes(out)