import codecs
from concurrent.futures import ThreadPoolExecutor

import pytest

from inplace_engine.editors import properties_editor
from inplace_engine.errors import PathNotFoundError

UTF8_BOM = b"\xef\xbb\xbf"

SAMPLE = (
    "# Global comment\r\n"
    " username = admin\r"
    " password=123   # pass\n"
    " desc=old1 \\\n"
    " old2\n"
    " desc2=test3\r\n"
    "! system comment\r\n"
    "timeout=30  \r"
    "timeout2=30  \r"
    "cache=abc\r\n"
    "obsolete=x\n"
    " debug=true"
)


def test_full_mutation_scenario_with_bom(tmp_path) -> None:
    target = tmp_path / "sample.properties"
    target.write_bytes(UTF8_BOM + SAMPLE.encode("utf-8"))

    properties_editor.set_value(target, "username", "root")
    properties_editor.set_value(target, "desc", "New1\nNew2")
    properties_editor.set_value(target, "timeout", 60, expected="30")
    properties_editor.replace(target, "timeout2", 60)
    properties_editor.set_value(target, "cache", None)
    properties_editor.remove_line(target, "obsolete", expected="x")

    assert target.read_bytes() == UTF8_BOM + (
        "# Global comment\r\n"
        " username = root\r"
        " password=123   # pass\n"
        " desc=New1 \\\n"
        " New2\n"
        " desc2=test3\r\n"
        "! system comment\r\n"
        "timeout=60  \r"
        "timeout2=60  \r"
        "cache=\r\n"
        " debug=true"
    ).encode("utf-8")


def test_gbk_sample(tmp_path) -> None:
    original = "用户名=张三\n超时=30\r\n缓存=开\n地址=上海\r\n描述=旧\n"
    target = tmp_path / "sample_gbk.properties"
    target.write_bytes(original.encode("gbk"))

    properties_editor.set_value(target, "用户名", "李四", encoding="GBK")
    properties_editor.set_value(target, "超时", 60, expected=30, encoding="GBK")
    properties_editor.set_value(target, "缓存", "", encoding="GBK")
    properties_editor.delete_entry(target, "地址", encoding="GBK")
    properties_editor.set_value(target, "描述", "新1\n新2", encoding="GBK")

    assert target.read_bytes().decode("gbk") == (
        "用户名=李四\n超时=60\r\n缓存=\n描述=新1 \\\n    新2\n"
    )


def test_continued_value_is_read_joined() -> None:
    assert properties_editor.get_value(SAMPLE.encode(), "desc") == "old1 old2"
    assert properties_editor.search(SAMPLE.encode(), "desc2", "test3")


def test_concurrent_edits_on_shared_bytes() -> None:
    payload = b"a=1\nb=2\rc=3\r\n"

    with ThreadPoolExecutor(max_workers=3) as pool:
        first = pool.submit(properties_editor.set_value, payload, "a", "9")
        second = pool.submit(properties_editor.set_value, payload, "b", "8")
        third = pool.submit(properties_editor.delete_entry, payload, "c")

    assert first.result() == b"a=9\nb=2\rc=3\r\n"
    assert second.result() == b"a=1\nb=8\rc=3\r\n"
    assert third.result() == b"a=1\nb=2\r"


def test_whole_path_is_the_key() -> None:
    payload = b"db/url=jdbc\n"

    assert properties_editor.get_value(payload, "db/url") == "jdbc"
    with pytest.raises(PathNotFoundError):
        properties_editor.set_value(payload, "db", "x")


def test_writing_back_a_continued_value_keeps_its_lines() -> None:
    payload = b"desc=old1 \\\n    old2\nnext=1\n"

    updated = properties_editor.set_value(
        payload, "desc", "old1 old2", expected="old1 old2"
    )

    assert updated == payload


def test_every_value_round_trips_unchanged() -> None:
    payload = SAMPLE.encode("utf-8")

    for key in ("username", "password", "desc", "desc2", "timeout", "debug"):
        current = properties_editor.get_value(payload, key)
        assert properties_editor.set_value(payload, key, current) == payload


def test_repeated_set_is_idempotent() -> None:
    once = properties_editor.set_value(SAMPLE.encode("utf-8"), "timeout", 45)

    assert properties_editor.set_value(once, "timeout", 45) == once


@pytest.mark.parametrize(
    ("bom", "codec"),
    [(codecs.BOM_UTF16_LE, "utf-16-le"), (codecs.BOM_UTF16_BE, "utf-16-be")],
)
def test_utf16_edit_keeps_bom_and_line_endings(bom, codec) -> None:
    payload = bom + "a=1\r\nb=2\n".encode(codec)

    assert properties_editor.set_value(payload, "b", 3) == (
        bom + "a=1\r\nb=3\n".encode(codec)
    )
