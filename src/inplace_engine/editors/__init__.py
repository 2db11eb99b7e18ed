"""Per-format lossless editors and lookup by format name or file suffix."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Dict

from . import (
    ini_editor,
    json_editor,
    properties_editor,
    text_editor,
    xml_editor,
    yaml_editor,
)
from .base import LosslessEditor, is_clear
from .ini_editor import IniEditor
from .json_editor import JsonEditor
from .keyvalue import KeyValueEditor
from .properties_editor import PropertiesEditor
from .text_editor import TextEditor
from .xml_editor import XmlEditor
from .yaml_editor import YamlEditor

_FACTORIES: Dict[str, Callable[..., LosslessEditor]] = {
    "json": JsonEditor,
    "yaml": YamlEditor,
    "yml": YamlEditor,
    "xml": XmlEditor,
    "ini": IniEditor,
    "properties": PropertiesEditor,
    "text": TextEditor,
    "txt": TextEditor,
}

_SHARED: Dict[Callable[..., LosslessEditor], LosslessEditor] = {
    JsonEditor: json_editor.editor,
    YamlEditor: yaml_editor.editor,
    XmlEditor: xml_editor.editor,
    IniEditor: ini_editor.editor,
    PropertiesEditor: properties_editor.editor,
    TextEditor: text_editor.editor,
}


def available_formats() -> tuple[str, ...]:
    return tuple(sorted(_FACTORIES))


def editor_for(format_name: str, **options: Any) -> LosslessEditor:
    """Return the editor for ``format_name``.

    Without options the shared stateless instance is returned; options (such
    as the INI ``comment_prefixes``) build a dedicated one.
    """

    key = format_name.strip().lower().lstrip(".")
    factory = _FACTORIES.get(key)
    if factory is None:
        known = ", ".join(available_formats())
        raise ValueError(f"Unknown format '{format_name}'. Known formats: {known}")
    if options:
        return factory(**options)
    return _SHARED[factory]


def format_for_path(path: str | os.PathLike[str]) -> str:
    """Infer a format name from the file suffix."""

    suffix = Path(path).suffix.lower()
    for shared in _SHARED.values():
        if suffix in shared.extensions:
            return shared.format_name
    raise ValueError(f"Cannot infer a format from '{path}'; pass one explicitly")


def editor_for_path(path: str | os.PathLike[str], **options: Any) -> LosslessEditor:
    return editor_for(format_for_path(path), **options)


__all__ = [
    "IniEditor",
    "JsonEditor",
    "KeyValueEditor",
    "LosslessEditor",
    "PropertiesEditor",
    "TextEditor",
    "XmlEditor",
    "YamlEditor",
    "available_formats",
    "editor_for",
    "editor_for_path",
    "format_for_path",
    "is_clear",
]
