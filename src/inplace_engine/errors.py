"""Exception taxonomy shared by every lossless editor."""

from __future__ import annotations

from typing import Optional


class EditorError(RuntimeError):
    """Base class for failures raised before any bytes are written."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        format_name: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.format_name = format_name


class EmptyDocumentError(EditorError):
    """Raised when a document holds nothing but blanks and comments."""


class PathNotFoundError(EditorError, LookupError):
    """Raised when the full path chain is absent or not editable."""


class UnsupportedEncodingError(EditorError, LookupError):
    """Raised for unknown charsets and for bytes the charset cannot decode."""

    def __init__(
        self,
        message: str,
        *,
        encoding: Optional[str] = None,
        path: Optional[str] = None,
        format_name: Optional[str] = None,
    ) -> None:
        super().__init__(message, path=path, format_name=format_name)
        self.encoding = encoding


class MalformedDocumentError(EditorError, ValueError):
    """Raised when the structure around a target cannot be spliced safely."""

    def __init__(
        self,
        message: str,
        *,
        offset: Optional[int] = None,
        path: Optional[str] = None,
        format_name: Optional[str] = None,
    ) -> None:
        super().__init__(message, path=path, format_name=format_name)
        self.offset = offset


__all__ = [
    "EditorError",
    "EmptyDocumentError",
    "MalformedDocumentError",
    "PathNotFoundError",
    "UnsupportedEncodingError",
]
