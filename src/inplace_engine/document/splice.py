"""Character-span edits applied to a decoded document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from .lines import Line


@dataclass(frozen=True, slots=True)
class Splice:
    """Replace ``text[start:end]`` with ``replacement``."""

    start: int
    end: int
    replacement: str = ""

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid splice span {self.start}..{self.end}")


def apply_splices(text: str, splices: Iterable[Splice]) -> str:
    ordered = sorted(splices, key=lambda item: (item.start, item.end))
    pieces: list[str] = []
    cursor = 0
    for splice in ordered:
        if splice.start < cursor:
            raise ValueError("Overlapping splices")
        if splice.end > len(text):
            raise ValueError("Splice runs past the end of the document")
        pieces.append(text[cursor : splice.start])
        pieces.append(splice.replacement)
        cursor = splice.end
    pieces.append(text[cursor:])
    return "".join(pieces)


def remove_lines(first: "Line", last: "Line") -> Splice:
    """Drop whole physical lines, terminators included."""

    return Splice(first.offset, last.full_end)


def line_start_of(text: str, offset: int) -> int:
    cursor = offset
    while cursor > 0 and text[cursor - 1] not in "\r\n":
        cursor -= 1
    return cursor


def line_stop_of(text: str, offset: int) -> int:
    cursor = offset
    while cursor < len(text) and text[cursor] not in "\r\n":
        cursor += 1
    return cursor


def after_terminator(text: str, offset: int) -> int:
    if text.startswith("\r\n", offset):
        return offset + 2
    if offset < len(text) and text[offset] in "\r\n":
        return offset + 1
    return offset


def _comment_opener(text: str, start: int, stop: int, marker: str) -> int | None:
    """Offset of the first ``marker`` outside quotes in ``text[start:stop]``."""

    quote = ""
    index = start
    while index < stop:
        char = text[index]
        if quote:
            if char == "\\" and quote == '"':
                index += 1
            elif char == quote:
                quote = ""
        elif char in "\"'":
            quote = char
        elif text.startswith(marker, index):
            if marker != "#" or index == start or text[index - 1] in " \t":
                return index
        index += 1
    return None


def _previous_significant(text: str, offset: int, line_comment: str = "//") -> int:
    """Walk back from ``offset`` past whitespace and comments; -1 at the start."""

    back = offset
    while back >= 0:
        if text[back] in " \t\r\n":
            back -= 1
            continue
        if line_comment == "//" and back > 0 and text.startswith("*/", back - 1):
            opener = text.rfind("/*", 0, back - 1)
            if opener >= 0:
                back = opener - 1
                continue
        start = line_start_of(text, back)
        opener = _comment_opener(text, start, back + 1, line_comment)
        if opener is None:
            return back
        back = opener - 1
    return back


def remove_delimited_member(
    text: str, start: int, end: int, *, line_comment: str = "//"
) -> tuple[Splice, ...]:
    """Remove a comma-separated member spanning ``text[start:end]``.

    Used for JSON members and YAML flow entries. A member alone on its line
    takes the line with it; otherwise only the member, its comma and a single
    following space go. Removing the last member also drops the comma the
    preceding sibling no longer needs, looking past any comments between them.
    """

    cursor = end
    while cursor < len(text) and text[cursor] in " \t":
        cursor += 1
    has_comma = cursor < len(text) and text[cursor] == ","
    tail = cursor + 1 if has_comma else end

    line_start = line_start_of(text, start)
    line_stop = line_stop_of(text, tail)
    alone = not text[line_start:start].strip() and not text[tail:line_stop].strip()

    if alone:
        cut = Splice(line_start, after_terminator(text, line_stop))
    else:
        cut_end = tail
        if has_comma and cut_end < len(text) and text[cut_end] == " ":
            cut_end += 1
        cut = Splice(start, cut_end)

    if has_comma:
        return (cut,)

    back = _previous_significant(text, cut.start - 1, line_comment)
    if back < 0 or text[back] != ",":
        return (cut,)
    # Comments between the comma and the member stay put.
    if alone or text[back + 1 : cut.start].strip():
        return (Splice(back, back + 1), cut)
    return (Splice(back, cut.end),)


__all__ = [
    "Splice",
    "after_terminator",
    "apply_splices",
    "line_start_of",
    "line_stop_of",
    "remove_delimited_member",
    "remove_lines",
]
