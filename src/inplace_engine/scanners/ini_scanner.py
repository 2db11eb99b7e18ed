"""INI locator: ``[section]`` headers plus ``key = value`` lines."""

from __future__ import annotations

import re
from typing import Iterable, Optional

from inplace_engine.document import Document
from inplace_engine.paths import ValuePath
from inplace_engine.runtime.settings import load_settings

from .base import Location, not_found
from .keyvalue import KeyValueDialect, KeyValueScanner

INI_KEY_PATTERN = re.compile(
    r"(?P<indent>[ \t]*)(?P<key>[^=:\s\[][^=:]*?)"
    r"(?P<sep>[ \t]*[=:])(?P<gap>[ \t]*)(?P<value>.*)$"
)


def ini_dialect(
    comment_prefixes: Optional[Iterable[str]] = None,
    block_comments: Optional[Iterable[tuple[str, str]]] = None,
) -> KeyValueDialect:
    prefixes = tuple(
        comment_prefixes
        if comment_prefixes is not None
        else load_settings().ini_comment_prefixes
    )
    return KeyValueDialect(
        name="ini",
        key_pattern=INI_KEY_PATTERN,
        line_comments=prefixes,
        inline_comments=prefixes,
        block_comments=tuple(tuple(pair) for pair in (block_comments or ())),
        sections=True,
    )


def split_ini_path(path: ValuePath) -> tuple[Optional[str], str]:
    """``section/key`` splits at the first slash; a bare key is global."""

    segments = path.segments
    if len(segments) == 1:
        return None, segments[0].text
    return segments[0].text, "/".join(segment.text for segment in segments[1:])


class IniScanner(KeyValueScanner):
    def __init__(
        self,
        comment_prefixes: Optional[Iterable[str]] = None,
        block_comments: Optional[Iterable[tuple[str, str]]] = None,
    ) -> None:
        super().__init__(ini_dialect(comment_prefixes, block_comments))

    def locate(self, document: Document, path: ValuePath) -> Location:
        section, key = split_ini_path(path)
        for entry in self.entries(document):
            if entry.section == section and entry.key == key:
                return self.location(document, entry, path)
        raise not_found(path, self.format_name)


__all__ = ["INI_KEY_PATTERN", "IniScanner", "ini_dialect", "split_ini_path"]
