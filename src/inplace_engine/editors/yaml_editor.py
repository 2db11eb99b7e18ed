"""YAML editor: scalar quoting and block-scalar rewrites.

Quoting follows one deterministic rule:

* ``bool`` and numbers are written bare (``true``, ``8080``)
* a string replacing a quoted scalar keeps the original quote style
* a string that would change meaning bare (``: ``, `` #``, leading
  indicators, padding, control characters, or ``,[]{}`` inside flow
  collections) is double-quoted
* anything else is written bare
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from inplace_engine.document import Document, Splice
from inplace_engine.scanners import Location, YamlScanner

from .base import LosslessEditor

_INDICATORS = frozenset("#&*!|>'\"%@`,[]{}")
_FLOW_SIGNIFICANT = frozenset(",[]{}")
_DOUBLE_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def _double_quote(text: str) -> str:
    return '"' + "".join(_DOUBLE_ESCAPES.get(char, char) for char in text) + '"'


def _needs_quotes(text: str, flow: bool) -> bool:
    if text != text.strip():
        return True
    if any(char in text for char in "\n\r\t"):
        return True
    head = text[0]
    if head in _INDICATORS:
        return True
    if head in "-?:" and (len(text) == 1 or text[1] == " "):
        return True
    if ": " in text or text.endswith(":") or " #" in text:
        return True
    return flow and any(char in _FLOW_SIGNIFICANT for char in text)


def render_yaml_scalar(
    value: Any, *, quote: Optional[str] = None, flow: bool = False
) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value)
    if quote == "'" and "\n" not in text:
        return "'" + text.replace("'", "''") + "'"
    if quote == '"':
        return _double_quote(text)
    if _needs_quotes(text, flow):
        return _double_quote(text)
    return text


def _block_lines(text: str, indent: int, eols: Sequence[str], eol: str) -> str:
    rows = text.replace("\r\n", "\n").split("\n")
    pieces = []
    for index, row in enumerate(rows):
        terminator = eols[index] if index < len(eols) else eol
        pieces.append(terminator + (" " * indent + row if row else ""))
    return "".join(pieces)


class YamlEditor(LosslessEditor):
    format_name = "yaml"
    extensions = (".yaml", ".yml")

    def __init__(self, *, logger_name: str | None = None) -> None:
        super().__init__(logger_name=logger_name)
        self._scanner = YamlScanner()

    @property
    def scanner(self) -> YamlScanner:
        return self._scanner

    def render_value(self, location: Location, value: Any) -> str:
        details = location.details
        rendered = render_yaml_scalar(
            value, quote=location.quote, flow=bool(details.get("flow"))
        )
        if details.get("pad_before"):
            rendered = " " + rendered
        if details.get("pad_after"):
            rendered += " "
        return rendered

    def render_set(
        self, document: Document, location: Location, value: Any
    ) -> Sequence[Splice]:
        details = location.details
        multiline = isinstance(value, str) and "\n" in value and not details.get("flow")
        if location.kind == "block":
            return self._rewrite_block(document, location, value, multiline)
        if not multiline:
            return super().render_set(document, location, value)

        line = document.line_at(location.value_start)
        header = " |" if details.get("pad_before") else "|"
        indent = int(details["column"]) + 2
        body = _block_lines(value, indent, (), line.terminator or "\n")
        return (
            Splice(location.value_start, location.value_end, header),
            Splice(line.end, line.end, body),
        )

    def render_clear(self, document: Document, location: Location) -> Sequence[Splice]:
        if location.kind == "block":
            return self._rewrite_block(document, location, "", False)
        return super().render_clear(document, location)

    def _rewrite_block(
        self, document: Document, location: Location, value: Any, multiline: bool
    ) -> Sequence[Splice]:
        details = location.details
        body_start = int(details["body_start"])
        body_end = int(details["body_end"])
        if not multiline:
            head = "" if value == "" else self.render_value(location, value)
            return (
                Splice(location.value_start, location.value_end, head),
                Splice(body_start, body_end, ""),
            )

        header_line = document.line_at(location.value_start)
        covered = [
            line.terminator
            for line in document.lines
            if header_line.index <= line.index and line.end < body_end
        ]
        body = _block_lines(
            value, int(details["block_indent"]), covered, str(details["eol"])
        )
        return (
            Splice(location.value_start, location.value_end, "|"),
            Splice(body_start, body_end, body),
        )


editor = YamlEditor()
set_value = editor.set_value
delete_entry = editor.delete_entry
search = editor.search
get_value = editor.get_value

__all__ = [
    "YamlEditor",
    "delete_entry",
    "editor",
    "get_value",
    "render_yaml_scalar",
    "search",
    "set_value",
]
