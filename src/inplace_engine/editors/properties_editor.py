"""Java ``.properties`` editor."""

from __future__ import annotations

from inplace_engine.scanners import PropertiesScanner

from .keyvalue import KeyValueEditor


class PropertiesEditor(KeyValueEditor):
    format_name = "properties"
    extensions = (".properties",)

    def __init__(self, *, logger_name: str | None = None) -> None:
        super().__init__(logger_name=logger_name)
        self._scanner = PropertiesScanner()


editor = PropertiesEditor()
set_value = editor.set_value
replace = editor.replace
delete_entry = editor.delete_entry
remove_line = editor.remove_line
search = editor.search
get_value = editor.get_value

__all__ = [
    "PropertiesEditor",
    "delete_entry",
    "editor",
    "get_value",
    "remove_line",
    "replace",
    "search",
    "set_value",
]
