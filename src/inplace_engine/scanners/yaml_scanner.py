"""Indentation-driven YAML locator with a flow-collection sub-scanner.

The scanner never builds a tree. It walks physical lines keeping a stack of
``(column, segment)`` pairs plus per-column sequence counters, and compares
the stack against the target path each time something is pushed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from inplace_engine.document import Document, Line, Splice, remove_delimited_member
from inplace_engine.document.splice import line_stop_of, remove_lines
from inplace_engine.errors import MalformedDocumentError
from inplace_engine.paths import Index, Key, Segment, ValuePath

from .base import Location, not_found

BLOCK_HEADER = re.compile(r"[|>](?:[1-9][+-]?|[+-][1-9]?)?$")
_KEY_PATTERN = re.compile(
    r"""(?P<key>"(?:[^"\\]|\\.)*"|'(?:[^']|'')*'|[^\s#'"{}\[\],&*!|>%@`][^#]*?)"""
    r"""[ \t]*:(?=[ \t]|$)"""
)
_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "/": "/",
    " ": " ",
}


def yaml_unquote(raw: str) -> str:
    if len(raw) >= 2 and raw[0] == raw[-1] == '"':
        return re.sub(
            r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), raw[1:-1]
        )
    if len(raw) >= 2 and raw[0] == raw[-1] == "'":
        return raw[1:-1].replace("''", "'")
    return raw


def _indent(content: str) -> int:
    return len(content) - len(content.lstrip(" "))


def _is_dash(content: str, pos: int) -> bool:
    return content[pos : pos + 1] == "-" and (
        pos + 1 == len(content) or content[pos + 1] in " \t"
    )


def _skip_blanks(content: str, pos: int) -> int:
    while pos < len(content) and content[pos] in " \t":
        pos += 1
    return pos


def _is_marker(body: str) -> bool:
    return body[:3] in ("---", "...") and (len(body) == 3 or body[3] in " \t")


def _quoted_end(text: str, pos: int) -> int:
    """Return the offset just past the quoted scalar opening at ``pos``, or -1."""

    quote = text[pos]
    index = pos + 1
    while index < len(text):
        char = text[index]
        if quote == '"' and char == "\\":
            index += 2
            continue
        if char == quote:
            if quote == "'" and text[index + 1 : index + 2] == "'":
                index += 2
                continue
            return index + 1
        index += 1
    return -1


def _value_bounds(content: str, start: int) -> tuple[int, int, Optional[int]]:
    """Return ``(value_start, value_end, comment_column)`` within one line.

    For an empty value the span is the insertion point just after the first
    blank following the indicator.
    """

    begin = _skip_blanks(content, start)
    search_from = begin
    if content[begin : begin + 1] in ("'", '"'):
        closing = _quoted_end(content, begin)
        if closing > 0:
            search_from = closing

    comment = None
    for index in range(search_from, len(content)):
        if content[index] == "#" and (index == begin or content[index - 1] in " \t"):
            comment = index
            break

    stop = comment if comment is not None else len(content)
    end = begin + len(content[begin:stop].rstrip())
    if end == begin:
        pad = 1 if start < len(content) and content[start] in " \t" else 0
        begin = end = start + pad
    return begin, end, comment


@dataclass(slots=True)
class _Node:
    """Structural element found on a line: a mapping key or a sequence item."""

    line: Line
    column: int
    value_col: int
    is_item: bool = False
    inline: bool = False
    dash_end: Optional[int] = None


def _subtree_end(
    lines: Sequence[Line], index: int, column: int, *, same_indent_items: bool
) -> int:
    last = index
    for line in lines[index + 1 :]:
        body = line.content.strip()
        if not body or body.startswith("#"):
            continue
        indent = _indent(line.content)
        if indent > column or (
            same_indent_items and indent == column and _is_dash(line.content, indent)
        ):
            last = line.index
            continue
        break
    return last


def _block_end(lines: Sequence[Line], index: int, column: int) -> int:
    last = index
    for line in lines[index + 1 :]:
        if line.is_blank():
            continue
        if _indent(line.content) > column:
            last = line.index
            continue
        break
    return last


class _FlowScanner:
    """Sub-grammar for ``{...}`` and ``[...]`` collections, possibly multi-line."""

    def __init__(self, text: str, path: ValuePath) -> None:
        self.text = text
        self.path = path

    def _error(self, message: str, offset: int) -> MalformedDocumentError:
        return MalformedDocumentError(
            f"{message} at offset {offset}", offset=offset, format_name="yaml"
        )

    def _skip_ws(self, pos: int) -> int:
        text = self.text
        while pos < len(text):
            char = text[pos]
            if char in " \t\r\n":
                pos += 1
            elif char == "#" and (pos == 0 or text[pos - 1] in " \t\r\n"):
                pos = line_stop_of(text, pos)
            else:
                break
        return pos

    def _quoted(self, pos: int) -> int:
        end = _quoted_end(self.text, pos)
        if end < 0:
            raise self._error("Unterminated quoted scalar", pos)
        return end

    def skip(self, pos: int) -> int:
        """Return the offset just past the collection opening at ``pos``."""

        text = self.text
        depth = 0
        index = pos
        while index < len(text):
            char = text[index]
            if char in "\"'" and (index == pos or text[index - 1] in " \t\r\n,[{:"):
                index = self._quoted(index)
                continue
            if char in "[{":
                depth += 1
            elif char in "]}":
                depth -= 1
                if depth == 0:
                    return index + 1
            index += 1
        raise self._error("Unterminated flow collection", pos)

    def _value_end(self, pos: int) -> int:
        text = self.text
        char = text[pos : pos + 1]
        if not char or char in ",]}":
            return pos
        if char in "\"'":
            return self._quoted(pos)
        if char in "[{":
            return self.skip(pos)
        end = pos
        while end < len(text) and text[end] not in ",]}\r\n":
            if text[end] == "#" and text[end - 1] in " \t":
                break
            end += 1
        return pos + len(text[pos:end].rstrip())

    def _key_end(self, pos: int) -> int:
        text = self.text
        if text[pos] in "\"'":
            return self._quoted(pos)
        end = pos
        while end < len(text) and text[end] not in ",]}\r\n":
            if text[end] == ":" and (
                end + 1 == len(text) or text[end + 1] in " \t\r\n,]}"
            ):
                break
            end += 1
        return pos + len(text[pos:end].rstrip())

    def _member(self, pos: int, name: str) -> Optional[tuple[int, int]]:
        text = self.text
        index = pos + 1
        while True:
            index = self._skip_ws(index)
            if index >= len(text):
                raise self._error("Unterminated flow mapping", pos)
            if text[index] == "}":
                return None
            key_start = index
            key_end = self._key_end(index)
            key = yaml_unquote(text[key_start:key_end])
            index = self._skip_ws(key_end)
            if text[index : index + 1] == ":":
                index = _skip_blanks(text, index + 1)
            if key == name:
                return key_start, index
            index = self._skip_ws(self._value_end(index))
            if text[index : index + 1] == ",":
                index += 1
                continue
            if text[index : index + 1] == "}":
                return None
            raise self._error("Expected ',' or '}'", index)

    def _element(self, pos: int, position: int) -> Optional[int]:
        text = self.text
        index = pos + 1
        count = 0
        while True:
            index = self._skip_ws(index)
            if index >= len(text):
                raise self._error("Unterminated flow sequence", pos)
            if text[index] == "]":
                return None
            if count == position:
                return index
            index = self._skip_ws(self._value_end(index))
            if text[index : index + 1] == ",":
                index += 1
                count += 1
                continue
            if text[index : index + 1] == "]":
                return None
            raise self._error("Expected ',' or ']'", index)

    def locate(self, pos: int, segments: Sequence[Segment]) -> Location:
        text = self.text
        last = len(segments) - 1
        for depth, segment in enumerate(segments):
            opener = text[pos : pos + 1]
            found: Optional[tuple[int, int]] = None
            if opener == "{" and isinstance(segment, Key):
                found = self._member(pos, segment.name)
            elif opener == "[" and isinstance(segment, Index):
                start = self._element(pos, segment.position)
                found = None if start is None else (start, start)
            if found is None:
                raise not_found(self.path, "yaml")
            entry_start, value_start = found
            if depth < last:
                pos = value_start
                continue
            value_end = self._value_end(value_start)
            raw = text[value_start:value_end]
            kind = "container" if raw[:1] in ("{", "[") else "scalar"
            return Location(
                path=self.path,
                value_start=value_start,
                value_end=value_end,
                current=None if kind == "container" else yaml_unquote(raw),
                deletion=remove_delimited_member(
                    text, entry_start, value_end, line_comment="#"
                ),
                kind=kind,
                quote=raw[0] if raw[:1] in ("'", '"') else None,
                details={"flow": True},
            )
        raise not_found(self.path, "yaml")  # pragma: no cover - loop returns


class YamlScanner:
    format_name = "yaml"

    def is_comment(self, stripped: str) -> bool:
        return stripped.startswith(("#", "%")) or _is_marker(stripped)

    def ensure_content(self, document: Document) -> None:
        document.ensure_content(self.is_comment)

    def locate(self, document: Document, path: ValuePath) -> Location:
        target = path.segments
        lines = document.lines
        flow = _FlowScanner(document.text, path)
        stack: list[tuple[int, Segment]] = []
        counters: dict[int, int] = {}
        skip_before = -1
        index = 0

        while index < len(lines):
            line = lines[index]
            index += 1
            if line.offset < skip_before:
                continue
            content = line.content
            column = _indent(content)
            body = content[column:]
            if not body or body.startswith("#"):
                continue
            if column == 0 and (_is_marker(body) or body.startswith("%")):
                if body.startswith("---"):
                    stack.clear()
                    counters.clear()
                continue

            node, matched = self._parse_line(line, column, stack, counters, target)
            if node is None:
                continue
            if matched:
                return self._build(document, node, path)

            current = tuple(segment for _, segment in stack)
            value_start, value_end, _ = _value_bounds(content, node.value_col)
            raw = content[value_start:value_end]
            if raw[:1] in ("{", "["):
                opener = line.offset + value_start
                if len(target) > len(current) and path.startswith(current):
                    return flow.locate(opener, target[len(current) :])
                skip_before = flow.skip(opener)
            elif BLOCK_HEADER.match(raw):
                index = _block_end(lines, line.index, node.column) + 1

        raise not_found(path, self.format_name)

    def _parse_line(
        self,
        line: Line,
        column: int,
        stack: list[tuple[int, Segment]],
        counters: dict[int, int],
        target: tuple[Segment, ...],
    ) -> tuple[Optional[_Node], bool]:
        content = line.content
        pos = column
        node: Optional[_Node] = None

        while _is_dash(content, pos):
            while stack and (
                stack[-1][0] > pos
                or (stack[-1][0] == pos and isinstance(stack[-1][1], Index))
            ):
                stack.pop()
            for col in [col for col in counters if col > pos]:
                del counters[col]
            position = counters.get(pos, -1) + 1
            counters[pos] = position
            stack.append((pos, Index(position)))
            dash_end = pos + 1
            pos = _skip_blanks(content, dash_end)
            node = _Node(
                line,
                column=dash_end - 1,
                value_col=dash_end,
                is_item=True,
                dash_end=dash_end,
            )
            if self._stack_path(stack) == target:
                return node, True

        if pos >= len(content) or content[pos] == "#":
            return node, False
        match = _KEY_PATTERN.match(content, pos)
        if match is None:
            return node, False

        inline = node is not None
        while stack and stack[-1][0] >= pos:
            stack.pop()
        for col in [col for col in counters if col >= pos]:
            del counters[col]
        stack.append((pos, Key(yaml_unquote(match.group("key").strip()))))
        key_node = _Node(
            line,
            column=pos,
            value_col=match.end(),
            inline=inline,
            dash_end=node.dash_end if node is not None else None,
        )
        return key_node, self._stack_path(stack) == target

    @staticmethod
    def _stack_path(stack: list[tuple[int, Segment]]) -> tuple[Segment, ...]:
        return tuple(segment for _, segment in stack)

    def _build(self, document: Document, node: _Node, path: ValuePath) -> Location:
        lines = document.lines
        line = node.line
        content = line.content
        value_start, value_end, comment = _value_bounds(content, node.value_col)
        raw = content[value_start:value_end]
        details: dict[str, object] = {
            "column": node.column,
            "eol": line.terminator or "\n",
            "pad_before": value_start == node.value_col and value_start == value_end,
            "pad_after": comment is not None and comment == value_start,
            "flow": False,
        }
        quote = None
        current: Optional[str]

        if BLOCK_HEADER.match(raw):
            last = _block_end(lines, line.index, node.column)
            body = lines[line.index + 1 : last + 1]
            block_indent = min(
                (_indent(item.content) for item in body if not item.is_blank()),
                default=node.column + 2,
            )
            current = "\n".join(item.content[block_indent:] for item in body)
            kind = "block"
            details.update(
                body_start=line.end,
                body_end=lines[last].end,
                block_indent=block_indent,
            )
        elif raw[:1] in ("{", "["):
            end = _FlowScanner(document.text, path).skip(line.offset + value_start)
            value_end = end - line.offset
            last = document.line_at(max(end - 1, 0)).index
            current = None
            kind = "container"
        else:
            last = _subtree_end(
                lines, line.index, node.column, same_indent_items=not node.is_item
            )
            if not raw and last > line.index:
                current = None
                kind = "container"
            elif node.is_item and _KEY_PATTERN.match(content, value_start):
                current = None
                kind = "container"
            else:
                current = yaml_unquote(raw)
                kind = "scalar"
                quote = raw[0] if raw[:1] in ("'", '"') else None

        return Location(
            path=path,
            value_start=line.offset + value_start,
            value_end=line.offset + value_end,
            current=current,
            deletion=self._deletion(lines, node, last),
            kind=kind,
            quote=quote,
            details=details,
        )

    @staticmethod
    def _deletion(lines: Sequence[Line], node: _Node, last: int) -> tuple[Splice, ...]:
        line = node.line
        if node.inline and node.dash_end is not None:
            return (Splice(line.offset + node.dash_end, lines[last].end),)
        return (remove_lines(line, lines[last]),)


__all__ = ["BLOCK_HEADER", "YamlScanner", "yaml_unquote"]
