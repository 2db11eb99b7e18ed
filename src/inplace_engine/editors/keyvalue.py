"""Shared editing rules for ``key = value`` formats with continuations."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from inplace_engine.document import Document, Splice
from inplace_engine.paths import ValuePath
from inplace_engine.scanners import KeyValueScanner, Location, stringify_value

from .base import LosslessEditor

DEFAULT_CONTINUATION_INDENT = "    "


def render_continued(text: str, details: dict) -> str:
    """Lay ``text`` out over continuation lines the way the entry already was."""

    rows = text.replace("\r\n", "\n").split("\n")
    if len(rows) == 1:
        return rows[0] + (" " if details.get("pad_after") else "")
    gap = details.get("gap", " ")
    indent = details.get("indent") or DEFAULT_CONTINUATION_INDENT
    eols: Sequence[str] = details.get("eols", ())
    fallback = details.get("eol", "\n")
    pieces = []
    for index, row in enumerate(rows):
        if index:
            pieces.append(indent)
        pieces.append(row)
        if index < len(rows) - 1:
            terminator = eols[index] if index < len(eols) else fallback
            pieces.append(gap + "\\" + terminator)
    return "".join(pieces)


class KeyValueEditor(LosslessEditor):
    """Base for INI and Properties; adds the line-oriented aliases."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        super().__init__(logger_name=logger_name)
        self._scanner: Optional[KeyValueScanner] = None

    @property
    def scanner(self) -> KeyValueScanner:
        if self._scanner is None:
            raise NotImplementedError("KeyValueEditor subclasses must set a scanner")
        return self._scanner

    def render_set(
        self, document: Document, location: Location, value: Any
    ) -> Sequence[Splice]:
        rendered = render_continued(stringify_value(value), dict(location.details))
        return (Splice(location.value_start, location.value_end, rendered),)

    def replace(
        self,
        source: Any,
        path: str | ValuePath,
        new_value: Any,
        *,
        encoding: Optional[str] = None,
    ) -> bytes:
        """Unconditional :meth:`set_value`."""

        return self.set_value(source, path, new_value, encoding=encoding)

    def remove_line(
        self,
        source: Any,
        path: str | ValuePath,
        *,
        expected: Any = None,
        encoding: Optional[str] = None,
    ) -> bytes:
        """Line-oriented name for :meth:`delete_entry`."""

        return self.delete_entry(source, path, expected=expected, encoding=encoding)


__all__ = ["DEFAULT_CONTINUATION_INDENT", "KeyValueEditor", "render_continued"]
