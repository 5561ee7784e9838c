"""Owned PDF byte buffers with explicit copy and transfer steps.

A RawDocumentBytes is the single owner of one loaded PDF's bytes. Consumers
that may claim or retain the bytes they are given (the rasterizer, the
compression worker) must receive an independent copy taken with
``duplicate()`` and handed over with ``transfer()``; the original stays
usable by every other consumer.

Instances compare and hash by identity so they can key a
``weakref.WeakKeyDictionary``.
"""

from __future__ import annotations

from pathlib import Path

from pdfsmith.exceptions import BufferDetachedError

BytesLike = bytes | bytearray | memoryview


class RawDocumentBytes:
    """The bytes of one PDF file as originally loaded."""

    __slots__ = ("_data", "name", "__weakref__")

    def __init__(self, data: BytesLike, name: str | None = None):
        self._data: bytes | None = bytes(data)
        self.name = name

    @classmethod
    def from_path(cls, path: str | Path) -> "RawDocumentBytes":
        """Read a file from disk into a new buffer named after the file."""
        path = Path(path)
        return cls(path.read_bytes(), name=path.name)

    @classmethod
    def coerce(cls, data: "RawDocumentBytes | BytesLike") -> "RawDocumentBytes":
        """Return ``data`` unchanged if already a buffer, else wrap it."""
        if isinstance(data, cls):
            return data
        return cls(data)

    @property
    def data(self) -> bytes:
        """The buffer contents. Raises BufferDetachedError after ``transfer()``."""
        if self._data is None:
            raise BufferDetachedError(
                "Buffer was transferred and can no longer be read",
                context={"name": self.name} if self.name else None,
            )
        return self._data

    @property
    def detached(self) -> bool:
        return self._data is None

    @property
    def size(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return self.size

    def __bytes__(self) -> bytes:
        return self.data

    def duplicate(self) -> "RawDocumentBytes":
        """Take a deep copy backed by its own storage."""
        return RawDocumentBytes(bytes(memoryview(self.data)), name=self.name)

    def transfer(self) -> bytes:
        """Move the contents out, detaching this buffer.

        After the call every read of this object raises BufferDetachedError.
        Only call this on a buffer obtained from ``duplicate()`` or on one
        the caller will not use again.
        """
        data = self.data
        self._data = None
        return data

    def __repr__(self) -> str:
        state = "detached" if self.detached else f"{len(self._data)} bytes"
        label = f" {self.name!r}" if self.name else ""
        return f"<RawDocumentBytes{label} {state}>"
