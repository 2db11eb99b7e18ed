"""Java ``.properties`` locator; the whole path is the key."""

from __future__ import annotations

import re

from inplace_engine.document import Document
from inplace_engine.paths import ValuePath

from .base import Location, not_found
from .keyvalue import KeyValueDialect, KeyValueScanner

PROPERTIES_KEY_PATTERN = re.compile(
    r"(?P<indent>[ \t\f]*)(?P<key>[^:=\s\\]+)"
    r"(?P<sep>[ \t\f]*[=:])(?P<gap>[ \t\f]*)(?P<value>.*)$"
)

PROPERTIES_DIALECT = KeyValueDialect(
    name="properties",
    key_pattern=PROPERTIES_KEY_PATTERN,
    line_comments=("#", "!"),
    inline_comments=("#", "!"),
)


class PropertiesScanner(KeyValueScanner):
    def __init__(self) -> None:
        super().__init__(PROPERTIES_DIALECT)

    def locate(self, document: Document, path: ValuePath) -> Location:
        key = path.text
        for entry in self.entries(document):
            if entry.key == key:
                return self.location(document, entry, path)
        raise not_found(path, self.format_name)


__all__ = ["PROPERTIES_DIALECT", "PROPERTIES_KEY_PATTERN", "PropertiesScanner"]
