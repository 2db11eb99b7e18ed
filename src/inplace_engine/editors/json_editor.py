"""JSON editor: splices raw tokens, keeping comments and layout."""

from __future__ import annotations

import json
import re
from typing import Any, Sequence

from inplace_engine.document import Document, Splice
from inplace_engine.scanners import JsonScanner, Location

from .base import LosslessEditor

_JSON_LITERAL = re.compile(
    r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?|true|false|null"
)


def render_json_value(value: Any, *, was_string: bool) -> str:
    """Strings stay strings; bare literals are only written bare over non-strings."""

    if isinstance(value, str):
        if was_string or not _JSON_LITERAL.fullmatch(value):
            return json.dumps(value, ensure_ascii=False)
        return value
    return json.dumps(value, ensure_ascii=False)


class JsonEditor(LosslessEditor):
    format_name = "json"
    extensions = (".json", ".jsonc")

    def __init__(self, *, logger_name: str | None = None) -> None:
        super().__init__(logger_name=logger_name)
        self._scanner = JsonScanner()

    @property
    def scanner(self) -> JsonScanner:
        return self._scanner

    def render_value(self, location: Location, value: Any) -> str:
        return render_json_value(value, was_string=location.quote is not None)

    def render_clear(self, document: Document, location: Location) -> Sequence[Splice]:
        return (Splice(location.value_start, location.value_end, '""'),)


editor = JsonEditor()
set_value = editor.set_value
delete_entry = editor.delete_entry
search = editor.search
get_value = editor.get_value

__all__ = [
    "JsonEditor",
    "delete_entry",
    "editor",
    "get_value",
    "render_json_value",
    "search",
    "set_value",
]
