"""Character-level JSON locator that tolerates ``//`` and ``/* */`` comments."""

from __future__ import annotations

import json
from typing import Optional

from inplace_engine.document import Document, remove_delimited_member
from inplace_engine.document.splice import line_stop_of
from inplace_engine.errors import EmptyDocumentError, MalformedDocumentError
from inplace_engine.paths import Index, Key, ValuePath

from .base import Location, not_found

_LITERAL_STOPS = frozenset(",}] \t\r\n/")


class _Cursor:
    """Forward-only reader over the decoded text."""

    __slots__ = ("text", "pos")

    def __init__(self, text: str, pos: int = 0) -> None:
        self.text = text
        self.pos = pos

    def error(self, message: str) -> MalformedDocumentError:
        return MalformedDocumentError(
            f"{message} at offset {self.pos}", offset=self.pos, format_name="json"
        )

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_trivia(self) -> None:
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            if char in " \t\r\n\ufeff":
                self.pos += 1
            elif text.startswith("//", self.pos):
                self.pos = line_stop_of(text, self.pos)
            elif text.startswith("/*", self.pos):
                close = text.find("*/", self.pos + 2)
                if close < 0:
                    raise self.error("Unterminated block comment")
                self.pos = close + 2
            else:
                return

    def read_string(self) -> str:
        """Consume a string literal and return its raw text, quotes included."""

        text = self.text
        start = self.pos
        index = start + 1
        while index < len(text):
            char = text[index]
            if char == "\\":
                index += 2
                continue
            if char == '"':
                self.pos = index + 1
                return text[start : self.pos]
            if char in "\r\n":
                break
            index += 1
        raise self.error("Unterminated string")

    def skip_value(self) -> None:
        char = self.peek()
        if char == '"':
            self.read_string()
        elif char in ("{", "["):
            self._skip_container()
        else:
            start = self.pos
            text = self.text
            while self.pos < len(text) and text[self.pos] not in _LITERAL_STOPS:
                self.pos += 1
            if self.pos == start:
                raise self.error("Expected a value")

    def _skip_container(self) -> None:
        depth = 0
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            if char == '"':
                self.read_string()
                continue
            if text.startswith("//", self.pos) or text.startswith("/*", self.pos):
                self.skip_trivia()
                continue
            if char in "{[":
                depth += 1
            elif char in "}]":
                depth -= 1
                if depth == 0:
                    self.pos += 1
                    return
            self.pos += 1
        raise self.error("Unterminated container")

    def expect(self, char: str) -> None:
        if self.peek() != char:
            raise self.error(f"Expected '{char}'")
        self.pos += 1


def _decode_key(cursor: _Cursor, raw: str) -> str:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise cursor.error(f"Invalid member name {raw}") from exc


def _normalise(raw: str) -> Optional[str]:
    if raw.startswith('"'):
        try:
            return json.loads(raw)
        except ValueError:
            return raw[1:-1]
    if raw[:1] in ("{", "["):
        return None
    return raw.strip()


class JsonScanner:
    format_name = "json"

    def is_comment(self, stripped: str) -> bool:
        return stripped.startswith("//") or stripped.startswith("/*")

    def ensure_content(self, document: Document) -> None:
        cursor = _Cursor(document.text)
        cursor.skip_trivia()
        if cursor.pos >= len(document.text):
            raise EmptyDocumentError(
                "Document has no structural content", format_name=self.format_name
            )

    def locate(self, document: Document, path: ValuePath) -> Location:
        text = document.text
        cursor = _Cursor(text)
        cursor.skip_trivia()
        last = len(path) - 1

        for depth, segment in enumerate(path.segments):
            opener = cursor.peek()
            if opener == "{" and isinstance(segment, Key):
                entry_start = self._find_member(cursor, segment.name)
            elif opener == "[" and isinstance(segment, Index):
                entry_start = self._find_element(cursor, segment.position)
            else:
                raise not_found(path, self.format_name)
            if entry_start is None:
                raise not_found(path, self.format_name)

            if depth < last:
                continue

            value_start = cursor.pos
            cursor.skip_value()
            value_end = cursor.pos
            raw = text[value_start:value_end]
            kind = "container" if raw[:1] in ("{", "[") else "scalar"
            return Location(
                path=path,
                value_start=value_start,
                value_end=value_end,
                current=_normalise(raw),
                deletion=remove_delimited_member(text, entry_start, value_end),
                kind=kind,
                quote='"' if raw.startswith('"') else None,
            )

        raise not_found(path, self.format_name)  # pragma: no cover - loop returns

    def _find_member(self, cursor: _Cursor, name: str) -> Optional[int]:
        """Advance to the value of member ``name``; return the member start."""

        cursor.expect("{")
        while True:
            cursor.skip_trivia()
            if cursor.peek() == "}":
                return None
            if cursor.peek() != '"':
                raise cursor.error("Expected a member name")
            key_start = cursor.pos
            key = _decode_key(cursor, cursor.read_string())
            cursor.skip_trivia()
            cursor.expect(":")
            cursor.skip_trivia()
            if key == name:
                return key_start
            cursor.skip_value()
            cursor.skip_trivia()
            if cursor.peek() == ",":
                cursor.pos += 1
                continue
            if cursor.peek() == "}":
                return None
            raise cursor.error("Expected ',' or '}'")

    def _find_element(self, cursor: _Cursor, position: int) -> Optional[int]:
        cursor.expect("[")
        count = 0
        while True:
            cursor.skip_trivia()
            if cursor.peek() == "]":
                return None
            if count == position:
                return cursor.pos
            cursor.skip_value()
            cursor.skip_trivia()
            if cursor.peek() == ",":
                cursor.pos += 1
                count += 1
                continue
            if cursor.peek() == "]":
                return None
            raise cursor.error("Expected ',' or ']'")


__all__ = ["JsonScanner"]
