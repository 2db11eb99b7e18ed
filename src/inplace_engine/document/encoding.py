"""Byte-order-mark sniffing and charset resolution."""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from typing import Optional

from inplace_engine.errors import UnsupportedEncodingError
from inplace_engine.runtime.settings import load_settings


@dataclass(frozen=True, slots=True)
class Bom:
    """Byte-order mark found at the head of a buffer."""

    kind: str
    raw: bytes
    codec: str

    def __post_init__(self) -> None:
        if not self.raw:
            raise ValueError("Bom requires at least one byte")

    def __len__(self) -> int:
        return len(self.raw)


UTF8_BOM = Bom("utf-8", codecs.BOM_UTF8, "utf-8")
UTF16_BE_BOM = Bom("utf-16-be", codecs.BOM_UTF16_BE, "utf-16-be")
UTF16_LE_BOM = Bom("utf-16-le", codecs.BOM_UTF16_LE, "utf-16-le")

KNOWN_BOMS: tuple[Bom, ...] = (UTF8_BOM, UTF16_BE_BOM, UTF16_LE_BOM)


def detect_bom(data: bytes) -> Optional[Bom]:
    for bom in KNOWN_BOMS:
        if data.startswith(bom.raw):
            return bom
    return None


def resolve_codec(name: str) -> str:
    """Return the canonical codec name or raise ``UnsupportedEncodingError``."""

    try:
        return codecs.lookup(name.strip()).name
    except LookupError as exc:
        raise UnsupportedEncodingError(
            f"Unsupported encoding '{name}'", encoding=name
        ) from exc


def decode(
    data: bytes, *, encoding: Optional[str] = None
) -> tuple[str, Optional[Bom], str]:
    """Decode ``data`` into ``(text, bom, codec)``.

    A BOM always wins over ``encoding``; without either the configured default
    charset applies. The explicit name is still validated when a BOM is present
    so a typo never passes silently.
    """

    explicit = resolve_codec(encoding) if encoding else None
    bom = detect_bom(data)
    if bom is not None:
        codec = bom.codec
        payload = data[len(bom):]
    else:
        codec = explicit or resolve_codec(load_settings().default_encoding)
        payload = data

    try:
        text = payload.decode(codec)
    except UnicodeDecodeError as exc:
        raise UnsupportedEncodingError(
            f"Content is not valid {codec}: {exc.reason}", encoding=codec
        ) from exc
    return text, bom, codec


def encode(text: str, codec: str, bom: Optional[Bom] = None) -> bytes:
    try:
        body = text.encode(codec)
    except UnicodeEncodeError as exc:
        raise UnsupportedEncodingError(
            f"Value cannot be represented in {codec}: {exc.reason}", encoding=codec
        ) from exc
    return (bom.raw if bom else b"") + body


__all__ = [
    "Bom",
    "KNOWN_BOMS",
    "UTF16_BE_BOM",
    "UTF16_LE_BOM",
    "UTF8_BOM",
    "decode",
    "detect_bom",
    "encode",
    "resolve_codec",
]
