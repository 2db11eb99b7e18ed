"""Lossless in-place editing for JSON, YAML, XML, INI, Properties and text."""

from __future__ import annotations

import os
from typing import Any, Optional

from .editors import (
    IniEditor,
    JsonEditor,
    LosslessEditor,
    PropertiesEditor,
    TextEditor,
    XmlEditor,
    YamlEditor,
    editor_for,
    editor_for_path,
    format_for_path,
)
from .errors import (
    EditorError,
    EmptyDocumentError,
    MalformedDocumentError,
    PathNotFoundError,
    UnsupportedEncodingError,
)
from .paths import ValuePath, parse_path


def _resolve(source: Any, format_name: Optional[str], options: dict) -> LosslessEditor:
    if format_name:
        return editor_for(format_name, **options)
    if isinstance(source, (str, os.PathLike)):
        return editor_for_path(source, **options)
    raise ValueError("format_name is required for byte and stream sources")


def set_value(
    source: Any,
    path: str | ValuePath,
    new_value: Any,
    *,
    format_name: Optional[str] = None,
    expected: Any = None,
    encoding: Optional[str] = None,
    **options: Any,
) -> bytes:
    """Set ``path`` to ``new_value``.

    The format is ``format_name`` when given, otherwise the file suffix.
    """

    editor = _resolve(source, format_name, options)
    return editor.set_value(
        source, path, new_value, expected=expected, encoding=encoding
    )


def delete_entry(
    source: Any,
    path: str | ValuePath,
    *,
    format_name: Optional[str] = None,
    expected: Any = None,
    encoding: Optional[str] = None,
    **options: Any,
) -> bytes:
    editor = _resolve(source, format_name, options)
    return editor.delete_entry(source, path, expected=expected, encoding=encoding)


def search(
    source: Any,
    path: str | ValuePath,
    expected: Any = None,
    *,
    format_name: Optional[str] = None,
    encoding: Optional[str] = None,
    **options: Any,
) -> bool:
    editor = _resolve(source, format_name, options)
    return editor.search(source, path, expected, encoding=encoding)


__all__ = [
    "EditorError",
    "EmptyDocumentError",
    "IniEditor",
    "JsonEditor",
    "LosslessEditor",
    "MalformedDocumentError",
    "PathNotFoundError",
    "PropertiesEditor",
    "TextEditor",
    "UnsupportedEncodingError",
    "ValuePath",
    "XmlEditor",
    "YamlEditor",
    "delete_entry",
    "editor_for",
    "editor_for_path",
    "format_for_path",
    "parse_path",
    "search",
    "set_value",
]

__version__ = "0.1.0"
