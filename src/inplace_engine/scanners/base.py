"""Shared scanner contract: locate a path, report spans and the current value."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol

from inplace_engine.document import Document, Splice
from inplace_engine.errors import PathNotFoundError
from inplace_engine.paths import ValuePath

REGEX_PREFIX = "regex:"


@dataclass(frozen=True, slots=True)
class Location:
    """Result of a successful scan; lives only for the duration of one call.

    ``value_start``/``value_end`` bound the raw value text that a set replaces.
    ``deletion`` holds the splices that remove the whole logical entry.
    ``current`` is the normalised value used for comparisons.
    """

    path: ValuePath
    value_start: int
    value_end: int
    current: Optional[str]
    deletion: tuple[Splice, ...] = ()
    kind: str = "scalar"
    quote: Optional[str] = None
    details: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.value_end < self.value_start:
            raise ValueError("value_end precedes value_start")


class Scanner(Protocol):
    """Grammar-specific locator; implementations keep all state in locals."""

    format_name: str

    def is_comment(self, stripped: str) -> bool:
        """Return True when a stripped line is a full-line comment."""
        ...

    def ensure_content(self, document: Document) -> None:
        """Raise ``EmptyDocumentError`` when nothing structural is present."""
        ...

    def locate(self, document: Document, path: ValuePath) -> Location:
        """Return the location of ``path`` or raise ``PathNotFoundError``."""
        ...


def not_found(path: ValuePath, format_name: str, reason: str = "") -> PathNotFoundError:
    message = f"Path '{path}' not found"
    if reason:
        message = f"{message}: {reason}"
    return PathNotFoundError(message, path=str(path), format_name=format_name)


def stringify_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def unquote(text: str) -> str:
    stripped = text.strip()
    if len(stripped) >= 2 and stripped[0] == stripped[-1] and stripped[0] in "\"'":
        return stripped[1:-1]
    return stripped


def values_match(current: Optional[str], expected: Any) -> bool:
    """Compare a normalised current value with a caller's expectation.

    ``regex:<pattern>`` expectations are full-matched against the value.
    """

    actual = unquote(current or "")
    if isinstance(expected, str) and expected.startswith(REGEX_PREFIX):
        pattern = expected[len(REGEX_PREFIX) :]
        return re.fullmatch(pattern, actual, re.DOTALL) is not None
    return actual == unquote(stringify_value(expected))


__all__ = [
    "Location",
    "REGEX_PREFIX",
    "Scanner",
    "not_found",
    "stringify_value",
    "unquote",
    "values_match",
]
