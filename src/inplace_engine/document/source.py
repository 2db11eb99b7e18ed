"""Uniform access to byte buffers, files and binary streams."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Optional, Union

SourceLike = Union[bytes, bytearray, memoryview, str, "os.PathLike[str]", BinaryIO]


@dataclass(slots=True)
class EditSource:
    """Bytes read from a caller's source plus where (if anywhere) to write back."""

    data: bytes
    kind: str
    path: Optional[Path] = None

    @classmethod
    def open(cls, source: Any) -> "EditSource":
        if isinstance(source, (bytes, bytearray, memoryview)):
            return cls(data=bytes(source), kind="bytes")
        if isinstance(source, (str, os.PathLike)):
            path = Path(source)
            return cls(data=path.read_bytes(), kind="file", path=path)
        reader = getattr(source, "read", None)
        if callable(reader):
            payload = reader()
            if not isinstance(payload, (bytes, bytearray)):
                raise TypeError("Streams must be opened in binary mode")
            return cls(data=bytes(payload), kind="stream")
        raise TypeError(
            f"Unsupported source type '{type(source).__name__}'; "
            "pass bytes, a path or a binary stream"
        )

    def commit(self, updated: bytes, *, target: Optional[Path] = None) -> bytes:
        """Write ``updated`` back for file sources when it differs; return it."""

        destination = target or self.path
        if destination is not None and (target is not None or updated != self.data):
            Path(destination).write_bytes(updated)
        return updated


__all__ = ["EditSource", "SourceLike"]
