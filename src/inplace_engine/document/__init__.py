"""Decoded documents, exact line bookkeeping and span splicing."""

from .encoding import Bom, KNOWN_BOMS, decode, detect_bom, encode, resolve_codec
from .lines import Document, Line, split_lines
from .source import EditSource, SourceLike
from .splice import Splice, apply_splices, remove_delimited_member, remove_lines

__all__ = [
    "Bom",
    "Document",
    "EditSource",
    "KNOWN_BOMS",
    "Line",
    "SourceLike",
    "Splice",
    "apply_splices",
    "decode",
    "detect_bom",
    "encode",
    "remove_delimited_member",
    "remove_lines",
    "resolve_codec",
    "split_lines",
]
