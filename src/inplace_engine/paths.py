"""Slash-separated value paths: ``database/settings/pool_size``.

Segments are classified while parsing:

* a non-negative integer becomes :class:`Index` (``services/1/enabled``)
* a leading ``@`` becomes :class:`Attribute` (``server/@encoding``, XML only)
* anything else is a :class:`Key`

A backslash escapes the next character and forces the segment to be a plain
key, so ``a\\/b`` names the key ``a/b`` and ``\\@id`` names the key ``@id``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union


@dataclass(frozen=True, slots=True)
class Key:
    name: str

    @property
    def text(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Index:
    position: int

    def __post_init__(self) -> None:
        if self.position < 0:
            raise ValueError("Index position must be non-negative")

    @property
    def text(self) -> str:
        return str(self.position)


@dataclass(frozen=True, slots=True)
class Attribute:
    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Attribute name cannot be empty")

    @property
    def text(self) -> str:
        return f"@{self.name}"


Segment = Union[Key, Index, Attribute]


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("/", "\\/")


def _classify(raw: str, literal: bool) -> Segment:
    if literal:
        return Key(raw)
    if raw.isdigit() and raw.isascii():
        return Index(int(raw))
    if raw.startswith("@"):
        return Attribute(raw[1:])
    return Key(raw)


def _split(raw: str) -> list[tuple[str, bool]]:
    parts: list[tuple[str, bool]] = []
    current: list[str] = []
    literal = False
    chars = iter(raw)
    for char in chars:
        if char == "\\":
            escaped = next(chars, None)
            if escaped is None:
                raise ValueError(f"Dangling escape at end of path '{raw}'")
            current.append(escaped)
            literal = True
        elif char == "/":
            parts.append(("".join(current), literal))
            current, literal = [], False
        else:
            current.append(char)
    parts.append(("".join(current), literal))
    return parts


@dataclass(frozen=True, slots=True)
class ValuePath:
    """Immutable, parsed address of one value inside a document."""

    segments: tuple[Segment, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise ValueError("ValuePath requires at least one segment")
        object.__setattr__(self, "segments", tuple(self.segments))

    @classmethod
    def parse(cls, raw: Union[str, "ValuePath"]) -> "ValuePath":
        if isinstance(raw, ValuePath):
            return raw
        if not isinstance(raw, str):
            raise TypeError(f"Path must be a string, got {type(raw).__name__}")
        body = raw[1:] if raw.startswith("/") else raw
        if not body:
            raise ValueError("Path cannot be empty")
        segments = []
        for text, literal in _split(body):
            if not text:
                raise ValueError(f"Path '{raw}' contains an empty segment")
            segments.append(_classify(text, literal))
        return cls(tuple(segments))

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __str__(self) -> str:
        rendered = []
        for segment in self.segments:
            if isinstance(segment, Key):
                text = _escape(segment.name)
                if text.isdigit() or text.startswith("@"):
                    text = "\\" + text
                rendered.append(text)
            else:
                rendered.append(segment.text)
        return "/".join(rendered)

    @property
    def leaf(self) -> Segment:
        return self.segments[-1]

    @property
    def text(self) -> str:
        """Unescaped ``/``-joined form, used by flat formats as a single key."""

        return "/".join(segment.text for segment in self.segments)

    def startswith(self, prefix: tuple[Segment, ...]) -> bool:
        return self.segments[: len(prefix)] == tuple(prefix)


def parse_path(raw: Union[str, ValuePath]) -> ValuePath:
    return ValuePath.parse(raw)


__all__ = [
    "Attribute",
    "Index",
    "Key",
    "Segment",
    "ValuePath",
    "parse_path",
]
