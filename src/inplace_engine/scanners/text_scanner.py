"""Pattern lookup for plain text; there is no structure beyond lines."""

from __future__ import annotations

import re
from typing import Optional, Pattern

from inplace_engine.document import Document, Splice, remove_lines


def compile_pattern(pattern: str, *, regex: bool = False) -> Pattern[str]:
    if not pattern:
        raise ValueError("Pattern cannot be empty")
    return re.compile(pattern if regex else re.escape(pattern))


class TextScanner:
    format_name = "text"

    def is_comment(self, stripped: str) -> bool:
        return False

    def ensure_content(self, document: Document) -> None:
        document.ensure_content()

    def find(
        self, document: Document, pattern: Pattern[str]
    ) -> Optional[re.Match[str]]:
        return pattern.search(document.text)

    def replacement(
        self, document: Document, pattern: Pattern[str], replacement: str
    ) -> Optional[Splice]:
        """Splice substituting the first match, or ``None`` without a match."""

        match = self.find(document, pattern)
        if match is None:
            return None
        return Splice(match.start(), match.end(), replacement)

    def line_removal(
        self, document: Document, pattern: Pattern[str]
    ) -> Optional[Splice]:
        """Splice removing every line the first match touches, or ``None``."""

        match = self.find(document, pattern)
        if match is None:
            return None
        first = document.line_at(match.start())
        last = document.line_at(max(match.end() - 1, match.start()))
        return remove_lines(first, last)


__all__ = ["TextScanner", "compile_pattern"]
