"""Tag-matching XML locator for element text and attribute values."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional
from xml.sax.saxutils import unescape

from inplace_engine.document import Document, Splice
from inplace_engine.document.splice import after_terminator, line_start_of, line_stop_of
from inplace_engine.errors import MalformedDocumentError
from inplace_engine.paths import Attribute, Index, Key, ValuePath

from .base import Location, not_found

_NAME_PATTERN = re.compile(r"[^\s/>]+")
_ATTRIBUTE_PATTERN = re.compile(
    r"""(?P<lead>\s+)(?P<name>[^\s=/>]+)\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)')"""
)
_ENTITIES = {"&quot;": '"', "&apos;": "'"}


@dataclass(frozen=True, slots=True)
class _Step:
    name: str
    nth: Optional[int] = None


@dataclass(slots=True)
class _Frame:
    name: str
    start: int
    tag_end: int
    matched: bool
    counts: dict[str, int] = field(default_factory=dict)
    has_children: bool = False


def _compile(path: ValuePath) -> tuple[list[_Step], Optional[str]]:
    steps: list[_Step] = []
    attribute: Optional[str] = None
    for segment in path.segments:
        if attribute is not None:
            raise not_found(path, "xml", "attribute must be the last segment")
        if isinstance(segment, Key):
            steps.append(_Step(segment.name))
        elif isinstance(segment, Index):
            if not steps or steps[-1].nth is not None:
                raise not_found(path, "xml", "index must follow an element name")
            steps[-1] = _Step(steps[-1].name, segment.position)
        elif isinstance(segment, Attribute):
            attribute = segment.name
    if not steps:
        raise not_found(path, "xml", "no element segments")
    return steps, attribute


class XmlScanner:
    format_name = "xml"

    def is_comment(self, stripped: str) -> bool:
        return stripped.startswith(("<!--", "<?", "<!DOCTYPE"))

    def ensure_content(self, document: Document) -> None:
        document.ensure_content(self.is_comment)

    def _error(self, message: str, offset: int) -> MalformedDocumentError:
        return MalformedDocumentError(
            f"{message} at offset {offset}", offset=offset, format_name=self.format_name
        )

    def _find(self, text: str, needle: str, start: int, opened: int) -> int:
        index = text.find(needle, start)
        if index < 0:
            raise self._error(f"Missing '{needle}'", opened)
        return index + len(needle)

    def _tag_end(self, text: str, start: int) -> int:
        """Return the offset just past the ``>`` closing the tag at ``start``."""

        quote = ""
        for index in range(start + 1, len(text)):
            char = text[index]
            if quote:
                if char == quote:
                    quote = ""
            elif char in "\"'":
                quote = char
            elif char == ">":
                return index + 1
        raise self._error("Unterminated tag", start)

    def locate(self, document: Document, path: ValuePath) -> Location:
        steps, attribute = _compile(path)
        text = document.text
        stack: list[_Frame] = []
        roots: dict[str, int] = {}
        target: Optional[_Frame] = None
        pos = 0

        while True:
            start = text.find("<", pos)
            if start < 0:
                break
            if text.startswith("<!--", start):
                pos = self._find(text, "-->", start + 4, start)
            elif text.startswith("<![CDATA[", start):
                pos = self._find(text, "]]>", start + 9, start)
            elif text.startswith("<?", start):
                pos = self._find(text, "?>", start + 2, start)
            elif text.startswith("<!", start):
                close = self._tag_end(text, start)
                bracket = text.find("[", start, close)
                pos = self._find(text, "]>", bracket, start) if bracket >= 0 else close
            elif text.startswith("</", start):
                close = self._find(text, ">", start + 2, start)
                name = text[start + 2 : close - 1].strip()
                if not stack or stack[-1].name != name:
                    raise self._error(f"Unexpected closing tag '{name}'", start)
                frame = stack.pop()
                if frame is target:
                    return self._element_location(
                        document, path, frame, start, close
                    )
                pos = close
            else:
                close = self._tag_end(text, start)
                name_match = _NAME_PATTERN.match(text, start + 1)
                if name_match is None:
                    raise self._error("Missing element name", start)
                name = name_match.group(0)
                self_closing = text[close - 2] == "/"
                parent = stack[-1] if stack else None
                counts = parent.counts if parent is not None else roots
                ordinal = counts.get(name, 0)
                counts[name] = ordinal + 1
                if parent is not None:
                    parent.has_children = True

                depth = len(stack)
                matched = (
                    (parent is None or parent.matched)
                    and depth < len(steps)
                    and steps[depth].name == name
                    and steps[depth].nth in (None, ordinal)
                )
                frame = _Frame(name, start, close, matched)
                if matched and depth == len(steps) - 1 and target is None:
                    if attribute is not None:
                        located = self._attribute_location(
                            text, path, start, name_match.end(), close, attribute
                        )
                        if located is not None:
                            return located
                    elif self_closing:
                        return self._empty_location(document, path, frame)
                    else:
                        target = frame
                if not self_closing:
                    stack.append(frame)
                pos = close

        if target is not None:
            raise self._error(f"Element '{target.name}' is never closed", target.start)
        raise not_found(path, self.format_name)

    def _attribute_location(
        self,
        text: str,
        path: ValuePath,
        tag_start: int,
        attrs_start: int,
        tag_end: int,
        attribute: str,
    ) -> Optional[Location]:
        for match in _ATTRIBUTE_PATTERN.finditer(text, attrs_start, tag_end):
            if match.group("name") != attribute:
                continue
            group = "dq" if match.group("dq") is not None else "sq"
            value_start, value_end = match.span(group)
            return Location(
                path=path,
                value_start=value_start,
                value_end=value_end,
                current=unescape(match.group(group), _ENTITIES),
                deletion=(Splice(match.start(), match.end()),),
                kind="attribute",
                quote='"' if group == "dq" else "'",
                details={"tag_start": tag_start},
            )
        return None

    def _empty_location(
        self, document: Document, path: ValuePath, frame: _Frame
    ) -> Location:
        text = document.text
        return Location(
            path=path,
            value_start=frame.tag_end,
            value_end=frame.tag_end,
            current="",
            deletion=self._element_deletion(text, frame.start, frame.tag_end),
            kind="scalar",
            details={
                "self_closing": True,
                "tag_start": frame.start,
                "name": frame.name,
            },
        )

    def _element_location(
        self,
        document: Document,
        path: ValuePath,
        frame: _Frame,
        close_start: int,
        close_end: int,
    ) -> Location:
        text = document.text
        raw = text[frame.tag_end : close_start]
        container = frame.has_children
        return Location(
            path=path,
            value_start=frame.tag_end,
            value_end=close_start,
            current=None if container else unescape(raw, _ENTITIES),
            deletion=self._element_deletion(text, frame.start, close_end),
            kind="container" if container else "scalar",
            details={"tag_start": frame.start, "name": frame.name},
        )

    @staticmethod
    def _element_deletion(text: str, start: int, end: int) -> tuple[Splice, ...]:
        line_start = line_start_of(text, start)
        line_stop = line_stop_of(text, end)
        if text[line_start:start].strip() or text[end:line_stop].strip():
            return (Splice(start, end),)
        return (Splice(line_start, after_terminator(text, line_stop)),)


__all__ = ["XmlScanner"]
