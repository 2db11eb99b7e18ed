"""Line-oriented ``key = value`` scanning shared by INI and Properties."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional, Pattern, Sequence

from inplace_engine.document import Document, Line, remove_lines
from inplace_engine.errors import EmptyDocumentError

from .base import Location


@dataclass(frozen=True, slots=True)
class KeyValueDialect:
    """Comment and key syntax for one ``key = value`` flavour."""

    name: str
    key_pattern: Pattern[str]
    line_comments: tuple[str, ...]
    inline_comments: tuple[str, ...]
    block_comments: tuple[tuple[str, str], ...] = ()
    sections: bool = False

    def __post_init__(self) -> None:
        if any(not prefix for prefix in self.line_comments + self.inline_comments):
            raise ValueError("Comment prefixes cannot be empty")
        for opener, closer in self.block_comments:
            if not opener or not closer:
                raise ValueError("Block comment delimiters cannot be empty")


@dataclass(frozen=True, slots=True)
class Entry:
    """One logical entry, possibly spread over continuation lines."""

    section: Optional[str]
    key: str
    first: Line
    last: Line
    location_start: int
    location_end: int
    current: str
    details: dict


def _continues(text: str) -> bool:
    trailing = len(text) - len(text.rstrip("\\"))
    return trailing % 2 == 1


class KeyValueScanner:
    """Walks entries, honouring sections, block comments and continuations."""

    def __init__(self, dialect: KeyValueDialect) -> None:
        self.dialect = dialect

    @property
    def format_name(self) -> str:
        return self.dialect.name

    def is_comment(self, stripped: str) -> bool:
        return stripped.startswith(self.dialect.line_comments)

    def _block_closer(self, stripped: str) -> Optional[str]:
        for opener, closer in self.dialect.block_comments:
            if stripped.startswith(opener):
                if closer in stripped[len(opener) :]:
                    return ""
                return closer
        return None

    def _structural_lines(self, lines: Sequence[Line]) -> Iterator[Line]:
        closer: Optional[str] = None
        for line in lines:
            if closer:
                if closer in line.content:
                    closer = None
                continue
            stripped = line.stripped
            if not stripped:
                continue
            pending = self._block_closer(stripped)
            if pending is not None:
                closer = pending or None
                continue
            if self.is_comment(stripped):
                continue
            yield line

    def ensure_content(self, document: Document) -> None:
        for _ in self._structural_lines(document.lines):
            return
        raise EmptyDocumentError(
            "Document has no structural content", format_name=self.format_name
        )

    def comment_column(self, content: str, start: int) -> Optional[int]:
        best: Optional[int] = None
        for prefix in self.dialect.inline_comments:
            index = content.find(prefix, start)
            while index >= 0 and not (index > 0 and content[index - 1] in " \t"):
                index = content.find(prefix, index + 1)
            if index >= 0 and (best is None or index < best):
                best = index
        return best

    def entries(self, document: Document) -> Iterator[Entry]:
        lines = document.lines
        section: Optional[str] = None
        consumed = -1
        for line in self._structural_lines(lines):
            if line.index <= consumed:
                continue
            stripped = line.stripped
            if self.dialect.sections and stripped.startswith("["):
                close = stripped.find("]")
                if close > 0:
                    section = stripped[1:close].strip()
                    continue
            match = self.dialect.key_pattern.match(line.content)
            if match is None:
                continue
            entry = self._entry(lines, line, match, section)
            consumed = entry.last.index
            yield entry

    def _entry(
        self,
        lines: Sequence[Line],
        line: Line,
        match: re.Match[str],
        section: Optional[str],
    ) -> Entry:
        content = line.content
        value_col = match.start("value")
        comment = self.comment_column(content, value_col)
        stop = comment if comment is not None else len(content)
        head = content[value_col:stop].rstrip()
        details: dict = {"continued": False, "eol": line.terminator or "\n"}

        if not _continues(head) or line.index + 1 >= len(lines):
            if head:
                start, end = value_col, value_col + len(head)
            else:
                sep_end = match.end("sep")
                pad = 1 if content[sep_end : sep_end + 1] in (" ", "\t") else 0
                start = end = sep_end + pad
                details["pad_after"] = comment is not None and comment == start
            return Entry(
                section=section,
                key=match.group("key").strip(),
                first=line,
                last=line,
                location_start=line.offset + start,
                location_end=line.offset + end,
                current=head,
                details=details,
            )

        body = head[:-1]
        parts = [body]
        gap = body[len(body.rstrip()) :]
        eols = [line.terminator]
        indent: Optional[str] = None
        last = line
        for follower in lines[line.index + 1 :]:
            last = follower
            text = follower.content
            lead = text[: len(text) - len(text.lstrip())]
            if indent is None:
                indent = lead
            piece = text[len(lead) :]
            if _continues(piece.rstrip()) and follower.index + 1 < len(lines):
                parts.append(piece.rstrip()[:-1])
                eols.append(follower.terminator)
                continue
            parts.append(piece)
            break

        details.update(
            continued=True,
            gap=gap,
            indent=indent or "",
            eols=tuple(eols),
        )
        return Entry(
            section=section,
            key=match.group("key").strip(),
            first=line,
            last=last,
            location_start=line.offset + value_col,
            location_end=last.end,
            current=parts[0] + "".join(part.lstrip() for part in parts[1:]),
            details=details,
        )

    def location(self, document: Document, entry: Entry, path) -> Location:
        return Location(
            path=path,
            value_start=entry.location_start,
            value_end=entry.location_end,
            current=entry.current,
            deletion=(remove_lines(entry.first, entry.last),),
            details=entry.details,
        )


__all__ = ["Entry", "KeyValueDialect", "KeyValueScanner"]
