"""Lossless editor template shared by every format.

Each operation runs the same pipeline inside a telemetry span::

    bytes -> Document -> scanner.locate -> (expectation check) -> splices -> bytes

Compare-and-swap mismatches are not errors: the caller gets the original
bytes back and nothing is written.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence

from inplace_engine.document import Document, EditSource, Splice
from inplace_engine.errors import EditorError, PathNotFoundError
from inplace_engine.paths import ValuePath
from inplace_engine.runtime.telemetry import SpanHandle, record_event, span
from inplace_engine.scanners.base import (
    Location,
    Scanner,
    not_found,
    stringify_value,
    values_match,
)


def is_clear(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


class LosslessEditor:
    """Stateless editor; one instance may serve any number of threads."""

    format_name: str = ""
    extensions: tuple[str, ...] = ()

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._logger_name = logger_name

    @property
    def scanner(self) -> Scanner:
        raise NotImplementedError

    # -- rendering hooks -------------------------------------------------

    def render_value(self, location: Location, value: Any) -> str:
        return stringify_value(value)

    def render_set(
        self, document: Document, location: Location, value: Any
    ) -> Sequence[Splice]:
        rendered = self.render_value(location, value)
        return (Splice(location.value_start, location.value_end, rendered),)

    def render_clear(self, document: Document, location: Location) -> Sequence[Splice]:
        return (Splice(location.value_start, location.value_end, ""),)

    # -- plumbing --------------------------------------------------------

    @contextmanager
    def _operation(self, name: str, path: object) -> Iterator[SpanHandle]:
        with span(
            f"{self.format_name}::{name}",
            logger_name=self._logger_name,
            component="editors",
            metadata={"format": self.format_name, "path": str(path)},
        ) as handle:
            try:
                yield handle
            except EditorError as exc:
                if exc.format_name is None:
                    exc.format_name = self.format_name
                if exc.path is None:
                    exc.path = str(path)
                raise

    def _open(
        self, source: Any, encoding: Optional[str], handle: SpanHandle
    ) -> tuple[EditSource, Document]:
        origin = EditSource.open(source)
        handle.add_metadata("source", origin.kind)
        document = Document.from_bytes(origin.data, encoding=encoding)
        handle.add_metadata("codec", document.codec)
        self.scanner.ensure_content(document)
        return origin, document

    def _holds(
        self, location: Location, expected: Any, handle: SpanHandle, operation: str
    ) -> bool:
        if expected is None or values_match(location.current, expected):
            return True
        handle.add_metadata("outcome", "cas_mismatch")
        record_event(
            "cas_mismatch",
            level="debug",
            data={
                "format": self.format_name,
                "operation": operation,
                "path": str(location.path),
            },
            logger_name=self._logger_name,
        )
        return False

    # -- public contract -------------------------------------------------

    def set_value(
        self,
        source: Any,
        path: str | ValuePath,
        new_value: Any,
        *,
        expected: Any = None,
        encoding: Optional[str] = None,
    ) -> bytes:
        """Replace the value at ``path``; ``None`` or ``""`` clears it."""

        value_path = ValuePath.parse(path)
        with self._operation("set_value", value_path) as handle:
            origin, document = self._open(source, encoding, handle)
            location = self.scanner.locate(document, value_path)
            if not self._holds(location, expected, handle, "set_value"):
                return origin.data
            if location.kind == "container":
                raise not_found(
                    value_path, self.format_name, "does not address a scalar"
                )
            # Rewriting the same value could still change escapes or layout.
            if location.current == stringify_value(new_value):
                handle.add_metadata("outcome", "unchanged")
                return origin.data
            if is_clear(new_value):
                splices = self.render_clear(document, location)
            else:
                splices = self.render_set(document, location, new_value)
            return origin.commit(document.rebuild(splices))

    def delete_entry(
        self,
        source: Any,
        path: str | ValuePath,
        *,
        expected: Any = None,
        encoding: Optional[str] = None,
    ) -> bytes:
        """Remove the whole logical entry at ``path``."""

        value_path = ValuePath.parse(path)
        with self._operation("delete_entry", value_path) as handle:
            origin, document = self._open(source, encoding, handle)
            location = self.scanner.locate(document, value_path)
            if not self._holds(location, expected, handle, "delete_entry"):
                return origin.data
            return origin.commit(document.rebuild(location.deletion))

    def search(
        self,
        source: Any,
        path: str | ValuePath,
        expected: Any = None,
        *,
        encoding: Optional[str] = None,
    ) -> bool:
        """True when ``path`` exists and, if given, its value matches ``expected``."""

        value_path = ValuePath.parse(path)
        with self._operation("search", value_path) as handle:
            _, document = self._open(source, encoding, handle)
            try:
                location = self.scanner.locate(document, value_path)
            except PathNotFoundError:
                handle.add_metadata("found", False)
                return False
            found = expected is None or values_match(location.current, expected)
            handle.add_metadata("found", found)
            return found

    def get_value(
        self,
        source: Any,
        path: str | ValuePath,
        *,
        encoding: Optional[str] = None,
    ) -> Optional[str]:
        """Normalised current value; ``None`` for containers."""

        value_path = ValuePath.parse(path)
        with self._operation("get_value", value_path) as handle:
            _, document = self._open(source, encoding, handle)
            return self.scanner.locate(document, value_path).current


__all__ = ["LosslessEditor", "is_clear"]
