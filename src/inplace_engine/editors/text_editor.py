"""Plain-text editor: literal or regex matches, whole-line removal.

There is no path model here; the "path" of the shared contract is the pattern
to look for. A pattern that matches nothing is a no-op and the original bytes
come back.
"""

from __future__ import annotations

from typing import Any, Optional, Pattern

from inplace_engine.document import Document, EditSource
from inplace_engine.runtime.telemetry import SpanHandle, record_event
from inplace_engine.scanners import (
    TextScanner,
    compile_pattern,
    stringify_value,
    values_match,
)

from .base import LosslessEditor


class TextEditor(LosslessEditor):
    format_name = "text"
    extensions = (".txt", ".text", ".log")

    def __init__(self, *, logger_name: str | None = None) -> None:
        super().__init__(logger_name=logger_name)
        self._scanner = TextScanner()

    @property
    def scanner(self) -> TextScanner:
        return self._scanner

    def _no_match(
        self, origin: EditSource, handle: SpanHandle, operation: str, pattern: str
    ) -> bytes:
        handle.add_metadata("outcome", "no_match")
        record_event(
            "text_no_match",
            level="debug",
            data={"operation": operation, "pattern": pattern},
            logger_name=self._logger_name,
        )
        return origin.data

    def _expected_holds(
        self,
        document: Document,
        compiled: Pattern[str],
        expected: Any,
        handle: SpanHandle,
        operation: str,
    ) -> bool:
        if expected is None:
            return True
        match = self.scanner.find(document, compiled)
        if match is not None and values_match(match.group(0), expected):
            return True
        handle.add_metadata("outcome", "cas_mismatch")
        record_event(
            "cas_mismatch",
            level="debug",
            data={"format": self.format_name, "operation": operation},
            logger_name=self._logger_name,
        )
        return False

    def replace(
        self,
        source: Any,
        pattern: str,
        replacement: Any,
        *,
        regex: bool = False,
        expected: Any = None,
        encoding: Optional[str] = None,
    ) -> bytes:
        """Substitute the first match of ``pattern`` with ``replacement``."""

        compiled = compile_pattern(pattern, regex=regex)
        with self._operation("replace", pattern) as handle:
            origin, document = self._open(source, encoding, handle)
            if not self._expected_holds(
                document, compiled, expected, handle, "replace"
            ):
                return origin.data
            rendered = stringify_value(replacement)
            splice = self.scanner.replacement(document, compiled, rendered)
            if splice is None:
                return self._no_match(origin, handle, "replace", pattern)
            return origin.commit(document.rebuild((splice,)))

    def remove_line(
        self,
        source: Any,
        pattern: str,
        *,
        regex: bool = False,
        expected: Any = None,
        encoding: Optional[str] = None,
    ) -> bytes:
        """Delete every line the first match touches, terminators included."""

        compiled = compile_pattern(pattern, regex=regex)
        with self._operation("remove_line", pattern) as handle:
            origin, document = self._open(source, encoding, handle)
            if not self._expected_holds(
                document, compiled, expected, handle, "remove_line"
            ):
                return origin.data
            splice = self.scanner.line_removal(document, compiled)
            if splice is None:
                return self._no_match(origin, handle, "remove_line", pattern)
            return origin.commit(document.rebuild((splice,)))

    def set_value(  # type: ignore[override]
        self,
        source: Any,
        path: str,
        new_value: Any,
        *,
        expected: Any = None,
        encoding: Optional[str] = None,
        regex: bool = False,
    ) -> bytes:
        return self.replace(
            source, path, new_value, regex=regex, expected=expected, encoding=encoding
        )

    def delete_entry(  # type: ignore[override]
        self,
        source: Any,
        path: str,
        *,
        expected: Any = None,
        encoding: Optional[str] = None,
        regex: bool = False,
    ) -> bytes:
        return self.remove_line(
            source, path, regex=regex, expected=expected, encoding=encoding
        )

    def search(  # type: ignore[override]
        self,
        source: Any,
        path: str,
        expected: Any = None,
        *,
        encoding: Optional[str] = None,
        regex: bool = False,
    ) -> bool:
        compiled = compile_pattern(path, regex=regex)
        with self._operation("search", path) as handle:
            _, document = self._open(source, encoding, handle)
            match = self.scanner.find(document, compiled)
            found = match is not None and (
                expected is None or values_match(match.group(0), expected)
            )
            handle.add_metadata("found", found)
            return found

    def get_value(  # type: ignore[override]
        self,
        source: Any,
        path: str,
        *,
        encoding: Optional[str] = None,
        regex: bool = False,
    ) -> Optional[str]:
        """Text of the first match, or ``None``."""

        compiled = compile_pattern(path, regex=regex)
        with self._operation("get_value", path) as handle:
            _, document = self._open(source, encoding, handle)
            match = self.scanner.find(document, compiled)
            return None if match is None else match.group(0)


editor = TextEditor()
replace = editor.replace
remove_line = editor.remove_line
set_value = editor.set_value
delete_entry = editor.delete_entry
search = editor.search
get_value = editor.get_value

__all__ = [
    "TextEditor",
    "delete_entry",
    "editor",
    "get_value",
    "remove_line",
    "replace",
    "search",
    "set_value",
]
