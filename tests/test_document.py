import codecs

import pytest

from inplace_engine.document import (
    Document,
    EditSource,
    Splice,
    apply_splices,
    decode,
    detect_bom,
    remove_delimited_member,
    split_lines,
)
from inplace_engine.errors import EmptyDocumentError, UnsupportedEncodingError


def make_document(text: str, codec: str = "utf-8") -> Document:
    return Document.from_text(text, codec=codec)


def test_split_lines_keeps_each_terminator() -> None:
    lines = split_lines("a\r\nb\rc\nd")

    assert [line.content for line in lines] == ["a", "b", "c", "d"]
    assert [line.terminator for line in lines] == ["\r\n", "\r", "\n", ""]
    assert [line.offset for line in lines] == [0, 3, 5, 7]


def test_split_lines_handles_trailing_terminator_and_blank_lines() -> None:
    lines = split_lines("x\n\n")

    assert [(line.content, line.terminator) for line in lines] == [
        ("x", "\n"),
        ("", "\n"),
    ]


@pytest.mark.parametrize(
    "bom, codec",
    [
        (codecs.BOM_UTF8, "utf-8"),
        (codecs.BOM_UTF16_BE, "utf-16-be"),
        (codecs.BOM_UTF16_LE, "utf-16-le"),
    ],
)
def test_decode_prefers_bom_over_hint(bom: bytes, codec: str) -> None:
    payload = bom + "k=v\n".encode(codec)

    text, found, resolved = decode(payload, encoding="latin-1")

    assert text == "k=v\n"
    assert found is not None and found.raw == bom
    assert resolved == codecs.lookup(codec).name


def test_decode_uses_hint_without_bom() -> None:
    payload = "名称=张三".encode("gbk")

    text, bom, codec = decode(payload, encoding="GBK")

    assert text == "名称=张三"
    assert bom is None
    assert codec == "gbk"


def test_decode_rejects_unknown_charset() -> None:
    with pytest.raises(UnsupportedEncodingError) as excinfo:
        decode(b"a=1", encoding="no-such-charset")

    assert excinfo.value.encoding == "no-such-charset"


def test_decode_rejects_undecodable_bytes() -> None:
    with pytest.raises(UnsupportedEncodingError):
        decode(b"caf\xe9", encoding="utf-8")


def test_detect_bom_without_prefix() -> None:
    assert detect_bom(b"plain") is None


def test_rebuild_round_trips_bom_and_returns_original_when_unchanged() -> None:
    raw = codecs.BOM_UTF8 + b"a=1\r\nb=2"
    document = Document.from_bytes(raw)

    assert document.rebuild(()) == raw
    assert document.rebuild((Splice(2, 3, "9"),)) == codecs.BOM_UTF8 + b"a=9\r\nb=2"


def test_line_at_maps_offsets_to_lines() -> None:
    document = make_document("one\ntwo\r\nthree")

    assert document.line_at(0).content == "one"
    assert document.line_at(3).content == "one"
    assert document.line_at(4).content == "two"
    assert document.line_at(len(document.text) - 1).content == "three"


def test_ensure_content_rejects_blank_and_comment_only_documents() -> None:
    with pytest.raises(EmptyDocumentError):
        make_document("  \n\t\r\n").ensure_content()

    with pytest.raises(EmptyDocumentError):
        make_document("# only\n; comments\n").ensure_content(
            lambda stripped: stripped.startswith(("#", ";"))
        )

    make_document("# comment\nkey=value\n").ensure_content(
        lambda stripped: stripped.startswith("#")
    )


def test_apply_splices_rejects_overlaps() -> None:
    with pytest.raises(ValueError):
        apply_splices("abcdef", [Splice(0, 3, "x"), Splice(2, 4, "y")])


def test_apply_splices_orders_edits() -> None:
    assert apply_splices("abcdef", [Splice(4, 5, "E"), Splice(0, 1, "A")]) == "AbcdEf"


def test_remove_delimited_member_inline_middle() -> None:
    text = '{"a": 1, "b": 2, "c": 3}'
    start = text.index('"b"')
    end = text.index("2") + 1

    assert apply_splices(text, remove_delimited_member(text, start, end)) == (
        '{"a": 1, "c": 3}'
    )


def test_remove_delimited_member_last_inline_drops_previous_comma() -> None:
    text = '{"a": 1, "b": 2}'
    start = text.index('"b"')
    end = text.index("2") + 1

    assert apply_splices(text, remove_delimited_member(text, start, end)) == '{"a": 1}'


def test_remove_delimited_member_own_line() -> None:
    text = '{\n  "a": 1,\n  "b": 2\n}'
    start = text.index('"b"')
    end = text.index("2") + 1

    assert apply_splices(text, remove_delimited_member(text, start, end)) == (
        '{\n  "a": 1\n}'
    )


def test_edit_source_accepts_bytes_streams_and_paths(tmp_path) -> None:
    import io

    assert EditSource.open(bytearray(b"x")).kind == "bytes"
    assert EditSource.open(io.BytesIO(b"x")).data == b"x"

    target = tmp_path / "f.txt"
    target.write_bytes(b"old")
    origin = EditSource.open(target)
    assert origin.kind == "file"
    origin.commit(b"new")
    assert target.read_bytes() == b"new"


def test_edit_source_rejects_text_streams_and_other_types() -> None:
    import io

    with pytest.raises(TypeError):
        EditSource.open(io.StringIO("x"))
    with pytest.raises(TypeError):
        EditSource.open(42)


def test_commit_skips_write_when_unchanged(tmp_path) -> None:
    target = tmp_path / "same.txt"
    target.write_bytes(b"same")
    before = target.stat().st_mtime_ns
    origin = EditSource.open(str(target))

    assert origin.commit(b"same") == b"same"
    assert target.stat().st_mtime_ns == before
