"""INI editor with configurable comment prefixes and block comments."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from inplace_engine.paths import ValuePath
from inplace_engine.scanners import IniScanner

from .keyvalue import KeyValueEditor


class IniEditor(KeyValueEditor):
    format_name = "ini"
    extensions = (".ini", ".cfg", ".conf", ".inf")

    def __init__(
        self,
        comment_prefixes: Optional[Iterable[str]] = None,
        block_comments: Optional[Iterable[tuple[str, str]]] = None,
        *,
        logger_name: str | None = None,
    ) -> None:
        super().__init__(logger_name=logger_name)
        self._scanner = IniScanner(comment_prefixes, block_comments)


editor = IniEditor()


def _pick(
    comment_prefixes: Optional[Iterable[str]],
    block_comments: Optional[Iterable[tuple[str, str]]],
) -> IniEditor:
    if comment_prefixes is None and block_comments is None:
        return editor
    return IniEditor(comment_prefixes, block_comments)


def set_value(
    source: Any,
    path: str | ValuePath,
    new_value: Any,
    *,
    expected: Any = None,
    encoding: Optional[str] = None,
    comment_prefixes: Optional[Iterable[str]] = None,
    block_comments: Optional[Iterable[tuple[str, str]]] = None,
) -> bytes:
    return _pick(comment_prefixes, block_comments).set_value(
        source, path, new_value, expected=expected, encoding=encoding
    )


def replace(
    source: Any,
    path: str | ValuePath,
    new_value: Any,
    *,
    encoding: Optional[str] = None,
    comment_prefixes: Optional[Iterable[str]] = None,
    block_comments: Optional[Iterable[tuple[str, str]]] = None,
) -> bytes:
    return _pick(comment_prefixes, block_comments).replace(
        source, path, new_value, encoding=encoding
    )


def delete_entry(
    source: Any,
    path: str | ValuePath,
    *,
    expected: Any = None,
    encoding: Optional[str] = None,
    comment_prefixes: Optional[Iterable[str]] = None,
    block_comments: Optional[Iterable[tuple[str, str]]] = None,
) -> bytes:
    return _pick(comment_prefixes, block_comments).delete_entry(
        source, path, expected=expected, encoding=encoding
    )


remove_line = delete_entry


def search(
    source: Any,
    path: str | ValuePath,
    expected: Any = None,
    *,
    encoding: Optional[str] = None,
    comment_prefixes: Optional[Iterable[str]] = None,
    block_comments: Optional[Iterable[tuple[str, str]]] = None,
) -> bool:
    return _pick(comment_prefixes, block_comments).search(
        source, path, expected, encoding=encoding
    )


def get_value(
    source: Any,
    path: str | ValuePath,
    *,
    encoding: Optional[str] = None,
    comment_prefixes: Optional[Iterable[str]] = None,
    block_comments: Optional[Iterable[tuple[str, str]]] = None,
) -> Optional[str]:
    return _pick(comment_prefixes, block_comments).get_value(
        source, path, encoding=encoding
    )


__all__ = [
    "IniEditor",
    "delete_entry",
    "editor",
    "get_value",
    "remove_line",
    "replace",
    "search",
    "set_value",
]
