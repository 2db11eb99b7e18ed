"""XML editor for element text and attribute values."""

from __future__ import annotations

from typing import Any, Optional, Sequence
from xml.sax.saxutils import escape

from inplace_engine.document import Document, Splice
from inplace_engine.scanners import Location, XmlScanner, stringify_value

from .base import LosslessEditor

_QUOTE_ENTITIES = {'"': {'"': "&quot;"}, "'": {"'": "&apos;"}}


class XmlEditor(LosslessEditor):
    format_name = "xml"
    extensions = (".xml", ".xsd", ".xsl", ".config")

    def __init__(self, *, logger_name: str | None = None) -> None:
        super().__init__(logger_name=logger_name)
        self._scanner = XmlScanner()

    @property
    def scanner(self) -> XmlScanner:
        return self._scanner

    def render_value(self, location: Location, value: Any) -> str:
        text = stringify_value(value)
        if location.kind == "attribute":
            return escape(text, _QUOTE_ENTITIES.get(location.quote or '"', {}))
        return escape(text)

    def render_set(
        self, document: Document, location: Location, value: Any
    ) -> Sequence[Splice]:
        if not location.details.get("self_closing"):
            return super().render_set(document, location, value)
        tag_start = int(location.details["tag_start"])
        opening = document.text[tag_start : location.value_end - 2].rstrip() + ">"
        closing = f"</{location.details['name']}>"
        rendered = opening + self.render_value(location, value) + closing
        return (Splice(tag_start, location.value_end, rendered),)

    def render_clear(self, document: Document, location: Location) -> Sequence[Splice]:
        if location.details.get("self_closing"):
            return ()
        return super().render_clear(document, location)

    def remove_tag(
        self,
        source: Any,
        path: str,
        *,
        expected: Any = None,
        encoding: Optional[str] = None,
    ) -> bytes:
        """Element-oriented name for :meth:`delete_entry`."""

        return self.delete_entry(source, path, expected=expected, encoding=encoding)


editor = XmlEditor()
set_value = editor.set_value
delete_entry = editor.delete_entry
remove_tag = editor.remove_tag
search = editor.search
get_value = editor.get_value

__all__ = [
    "XmlEditor",
    "delete_entry",
    "editor",
    "get_value",
    "remove_tag",
    "search",
    "set_value",
]
