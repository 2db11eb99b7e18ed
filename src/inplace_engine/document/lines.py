"""Line model that keeps every terminator exactly as it was read."""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from inplace_engine.errors import EmptyDocumentError

from .encoding import Bom, decode, encode
from .splice import Splice, apply_splices

_LINE_PATTERN = re.compile(r"([^\r\n]*)(\r\n|\r|\n|$)")


@dataclass(frozen=True, slots=True)
class Line:
    """One physical line: its content, its own terminator and its offset."""

    index: int
    offset: int
    content: str
    terminator: str = ""

    @property
    def end(self) -> int:
        """Offset just past the content, before the terminator."""

        return self.offset + len(self.content)

    @property
    def full_end(self) -> int:
        return self.end + len(self.terminator)

    @property
    def stripped(self) -> str:
        return self.content.strip()

    def is_blank(self) -> bool:
        return not self.content.strip()


def split_lines(text: str) -> tuple[Line, ...]:
    lines: list[Line] = []
    offset = 0
    while offset < len(text):
        match = _LINE_PATTERN.match(text, offset)
        assert match is not None
        lines.append(
            Line(
                index=len(lines),
                offset=offset,
                content=match.group(1),
                terminator=match.group(2),
            )
        )
        offset = match.end()
    return tuple(lines)


@dataclass(frozen=True, slots=True)
class Document:
    """Decoded view of a buffer that can rebuild the exact original bytes."""

    text: str
    codec: str
    bom: Optional[Bom] = None
    raw: bytes = b""
    lines: tuple[Line, ...] = field(init=False, repr=False, compare=False)
    _starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lines = split_lines(self.text)
        object.__setattr__(self, "lines", lines)
        object.__setattr__(self, "_starts", tuple(line.offset for line in lines))

    @classmethod
    def from_bytes(cls, data: bytes, *, encoding: Optional[str] = None) -> "Document":
        text, bom, codec = decode(bytes(data), encoding=encoding)
        return cls(text=text, codec=codec, bom=bom, raw=bytes(data))

    @classmethod
    def from_text(
        cls, text: str, *, codec: str = "utf-8", bom: Optional[Bom] = None
    ) -> "Document":
        return cls(text=text, codec=codec, bom=bom, raw=encode(text, codec, bom))

    def line_at(self, offset: int) -> Line:
        """Return the line holding ``offset`` (terminators belong to their line)."""

        if not self.lines:
            raise IndexError("document has no lines")
        index = bisect_right(self._starts, offset) - 1
        return self.lines[max(0, min(index, len(self.lines) - 1))]

    def ensure_content(
        self, is_comment: Optional[Callable[[str], bool]] = None
    ) -> None:
        """Raise ``EmptyDocumentError`` unless a structural line exists."""

        for line in self.lines:
            stripped = line.stripped
            if not stripped:
                continue
            if is_comment is not None and is_comment(stripped):
                continue
            return
        raise EmptyDocumentError("Document has no structural content")

    def rebuild(self, splices: Iterable[Splice]) -> bytes:
        """Apply ``splices`` and re-encode with the original charset and BOM.

        Returns the original bytes untouched when the text does not change.
        """

        updated = apply_splices(self.text, splices)
        if updated == self.text:
            return self.raw
        return encode(updated, self.codec, self.bom)


__all__ = ["Document", "Line", "split_lines"]
