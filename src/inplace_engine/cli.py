"""Command line front end: ``inplace-edit`` / ``python -m inplace_engine``."""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from inplace_engine.editors import (
    LosslessEditor,
    editor_for,
    editor_for_path,
    text_editor,
)
from inplace_engine.errors import EditorError
from inplace_engine.masking import mask
from inplace_engine.runtime.telemetry import configure

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


def _common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="File to edit")
    parser.add_argument("--encoding", help="Charset used when no BOM is present")
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the result instead of rewriting the file",
    )


def _structured(parser: argparse.ArgumentParser) -> None:
    _common(parser)
    parser.add_argument("path", help="Slash-separated value path")
    parser.add_argument(
        "--format",
        dest="format_name",
        help="json, yaml, xml, ini, properties or text (default: from the suffix)",
    )
    parser.add_argument("--expect", help="Only edit when the current value matches")


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="inplace-edit",
        description="Edit one value in a config file and leave the rest untouched.",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log with the development preset"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    set_parser = commands.add_parser("set", help="Set or clear a value")
    _structured(set_parser)
    set_parser.add_argument("value", help="New value; an empty string clears it")

    delete_parser = commands.add_parser("delete", help="Delete an entry")
    _structured(delete_parser)

    search_parser = commands.add_parser("search", help="Exit 0 when a path exists")
    _structured(search_parser)
    search_parser.add_argument("value", nargs="?", help="Value the path must hold")

    replace_parser = commands.add_parser("replace", help="Replace text in a plain file")
    _common(replace_parser)
    replace_parser.add_argument("pattern")
    replace_parser.add_argument("replacement")
    replace_parser.add_argument("--regex", action="store_true")

    remove_parser = commands.add_parser("remove-line", help="Remove a matching line")
    _common(remove_parser)
    remove_parser.add_argument("pattern")
    remove_parser.add_argument("--regex", action="store_true")

    mask_parser = commands.add_parser("mask", help="Mask values by path or regex")
    _common(mask_parser)
    mask_parser.add_argument("items", nargs="+", help="Paths, or regexes for text")
    mask_parser.add_argument("--type", dest="file_type", help="Default: file suffix")
    mask_parser.add_argument("--token", help="Replacement token")

    return parser.parse_args(argv)


def _editor(args: argparse.Namespace) -> LosslessEditor:
    if getattr(args, "format_name", None):
        return editor_for(args.format_name)
    return editor_for_path(args.file)


def _source(args: argparse.Namespace) -> Any:
    return Path(args.file).read_bytes() if args.stdout else args.file


def _emit(args: argparse.Namespace, result: bytes) -> None:
    if args.stdout:
        sys.stdout.buffer.write(result)
        sys.stdout.buffer.flush()


def _run(args: argparse.Namespace) -> int:
    command = args.command
    if command == "search":
        found = _editor(args).search(
            args.file, args.path, args.value, encoding=args.encoding
        )
        return EXIT_OK if found else EXIT_NOT_FOUND

    source = _source(args)
    if command == "set":
        result = _editor(args).set_value(
            source, args.path, args.value, expected=args.expect, encoding=args.encoding
        )
    elif command == "delete":
        result = _editor(args).delete_entry(
            source, args.path, expected=args.expect, encoding=args.encoding
        )
    elif command in ("replace", "remove-line"):
        text = text_editor.editor
        if command == "replace":
            result = text.replace(
                source,
                args.pattern,
                args.replacement,
                regex=args.regex,
                encoding=args.encoding,
            )
        else:
            result = text.remove_line(
                source, args.pattern, regex=args.regex, encoding=args.encoding
            )
    else:
        file_type = args.file_type or Path(args.file).suffix.lstrip(".") or "text"
        result = mask(
            source, file_type, args.items, token=args.token, encoding=args.encoding
        )
    _emit(args, result)
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    if args.verbose:
        configure(preset="development")
    try:
        return _run(args)
    except (EditorError, OSError, ValueError, TypeError, re.error) as exc:
        print(f"inplace-edit: {exc}", file=sys.stderr)
        return EXIT_ERROR


__all__ = ["EXIT_ERROR", "EXIT_NOT_FOUND", "EXIT_OK", "main"]


if __name__ == "__main__":  # pragma: no cover - manual entry point
    sys.exit(main())
