"""Masking client: overwrite sensitive values with a fixed token.

Structured formats mask by path through their lossless editor. Anything else
is treated as plain text where every item is a regular expression; each match
becomes the token, keeping a ``key=`` prefix when the match has one.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Iterable, Optional

from inplace_engine.document import Document, EditSource, Splice
from inplace_engine.editors import editor_for
from inplace_engine.runtime.settings import DEFAULT_MASK_TOKEN, load_settings
from inplace_engine.runtime.telemetry import span

MASK = DEFAULT_MASK_TOKEN

STRUCTURED_TYPES = frozenset({"ini", "yaml", "yml", "properties", "json", "xml"})


def _masked(match: re.Match[str], token: str) -> str:
    text = match.group(0)
    separator = text.find("=")
    if separator >= 0:
        return text[: separator + 1] + token
    return token


def mask_text(
    data: bytes, patterns: Iterable[str], token: str, *, encoding: Optional[str] = None
) -> bytes:
    """Replace every match of every pattern, one pattern after another."""

    for pattern in patterns:
        document = Document.from_bytes(data, encoding=encoding)
        compiled = re.compile(pattern)
        splices = [
            Splice(match.start(), match.end(), _masked(match, token))
            for match in compiled.finditer(document.text)
            if match.end() > match.start()
        ]
        data = document.rebuild(splices)
    return data


def mask(
    source: Any,
    file_type: str,
    paths_or_patterns: Iterable[str],
    *,
    token: Optional[str] = None,
    encoding: Optional[str] = None,
    output: Optional[str | os.PathLike[str]] = None,
) -> bytes:
    """Mask ``paths_or_patterns`` in ``source`` and return the new bytes.

    File sources are overwritten unless ``output`` names another file; byte
    and stream sources are only written when ``output`` is given.
    """

    kind = file_type.strip().lower()
    replacement = token if token is not None else load_settings().mask_token
    items = list(paths_or_patterns)
    origin = EditSource.open(source)
    with span(
        "masking::mask",
        component="masking",
        metadata={"type": kind, "items": len(items), "source": origin.kind},
    ):
        data = origin.data
        if kind in STRUCTURED_TYPES:
            editor = editor_for(kind)
            for path in items:
                data = editor.set_value(data, path, replacement, encoding=encoding)
        else:
            data = mask_text(data, items, replacement, encoding=encoding)
        target = Path(output) if output is not None else None
        return origin.commit(data, target=target)


__all__ = ["MASK", "STRUCTURED_TYPES", "mask", "mask_text"]
