from concurrent.futures import ThreadPoolExecutor

import pytest

from inplace_engine.editors import yaml_editor
from inplace_engine.editors.yaml_editor import render_yaml_scalar
from inplace_engine.errors import EmptyDocumentError, PathNotFoundError

UTF8_BOM = b"\xef\xbb\xbf"


def make_complex(name: str, host: str, password: str, first: str, second: str) -> str:
    return (
        "# App configuration\r\n"
        "app:\n"
        f"  name: {name}\r\n"
        "  version: 1.0.0\n"
        "  debug: true\n"
        "  timeout: 30\r\n"
        "  database:\n"
        f"    host: {host}\n"
        "    port: 5432\r\n"
        f"    password: {password}\n"
        "  features:\n"
        f"    - name: {first}\n"
        "      enabled: true\n"
        f"    - name: {second}\r\n"
        "      ttl: 3600\n"
        "service:\n"
        "  port: 8080 # to be changed\n"
    )


def make_expected(name: str, host: str, first: str, second: str) -> str:
    return (
        "# App configuration\r\n"
        "app:\n"
        f"  name: {name}\r\n"
        "  version: 2.0.0\n"
        "  debug: false\n"
        "  timeout: 60\r\n"
        "  database:\n"
        f"    host: {host}\n"
        "    port: 5432\r\n"
        "    password: \n"
        "  features:\n"
        f"    - name: {first}\n"
        f"    - name: {second}\r\n"
        "      ttl: 7200\n"
        "service:\n"
        "  port: 9090 # to be changed\n"
    )


def apply_suite(target, new_name: str, encoding: str | None = None) -> None:
    yaml_editor.set_value(target, "app/version", "2.0.0", encoding=encoding)
    yaml_editor.set_value(
        target, "app/debug", False, expected="true", encoding=encoding
    )
    yaml_editor.set_value(target, "app/database/password", "", encoding=encoding)
    yaml_editor.set_value(target, "app/features/1/ttl", 7200, encoding=encoding)
    yaml_editor.delete_entry(target, "app/features/0/enabled", encoding=encoding)
    yaml_editor.set_value(target, "service/port", "9090", encoding=encoding)
    yaml_editor.set_value(target, "app/timeout", 60, encoding=encoding)
    yaml_editor.set_value(target, "app/name", new_name, encoding=encoding)


def test_complex_utf8_sample_with_bom(tmp_path) -> None:
    target = tmp_path / "complex.yml"
    original = make_complex("MyApp", "localhost", "secret", "auth", "cache")
    target.write_bytes(UTF8_BOM + original.encode("utf-8"))

    apply_suite(target, "MyRenamedApp")

    data = target.read_bytes()
    assert data.startswith(UTF8_BOM)
    assert data[len(UTF8_BOM) :].decode("utf-8") == make_expected(
        "MyRenamedApp", "localhost", "auth", "cache"
    )


def test_complex_gbk_sample(tmp_path) -> None:
    target = tmp_path / "complex_gbk.yml"
    original = make_complex("我的应用", "本地主机", "密码", "认证", "缓存")
    target.write_bytes(original.encode("gbk"))

    apply_suite(target, "新名字应用", encoding="GBK")

    assert target.read_bytes().decode("gbk") == make_expected(
        "新名字应用", "本地主机", "认证", "缓存"
    )


def test_concurrent_edits_on_shared_bytes() -> None:
    payload = b"root:\n  a: 1\n  b: 2\n  c: 3\n"
    jobs = {"root/a": "10", "root/b": "20", "root/c": "30"}

    with ThreadPoolExecutor(max_workers=3) as pool:
        futures = {
            path: pool.submit(yaml_editor.set_value, payload, path, value)
            for path, value in jobs.items()
        }

    assert futures["root/a"].result() == b"root:\n  a: 10\n  b: 2\n  c: 3\n"
    assert futures["root/b"].result() == b"root:\n  a: 1\n  b: 20\n  c: 3\n"
    assert futures["root/c"].result() == b"root:\n  a: 1\n  b: 2\n  c: 30\n"


def test_worked_example_server_port() -> None:
    payload = b"server:\n  host: 0.0.0.0\n  port: 8080\n"

    assert yaml_editor.set_value(payload, "server/port", 9090) == (
        b"server:\n  host: 0.0.0.0\n  port: 9090\n"
    )


def test_flow_mapping_and_sequence() -> None:
    payload = b"server: {host: a, port: 8080}\nports: [80, 443]\n"

    assert yaml_editor.set_value(payload, "server/port", 9090) == (
        b"server: {host: a, port: 9090}\nports: [80, 443]\n"
    )
    assert yaml_editor.set_value(payload, "ports/1", 8443) == (
        b"server: {host: a, port: 8080}\nports: [80, 8443]\n"
    )
    assert yaml_editor.delete_entry(payload, "server/port") == (
        b"server: {host: a}\nports: [80, 443]\n"
    )
    assert yaml_editor.get_value(payload, "server/host") == "a"


def test_block_sequence_of_scalars() -> None:
    payload = b"hosts:\n  - a\n  - b\nnext: 1\n"

    assert yaml_editor.set_value(payload, "hosts/1", "c") == (
        b"hosts:\n  - a\n  - c\nnext: 1\n"
    )
    assert yaml_editor.delete_entry(payload, "hosts/0") == b"hosts:\n  - b\nnext: 1\n"
    assert not yaml_editor.search(payload, "hosts/2")


def test_block_scalar_collapse_and_rewrite() -> None:
    payload = b"script: |\n  echo one\n  echo two\nname: x\n"

    assert yaml_editor.get_value(payload, "script") == "echo one\necho two"
    assert yaml_editor.set_value(payload, "script", "done") == (
        b"script: done\nname: x\n"
    )
    assert yaml_editor.set_value(payload, "script", "a\nb") == (
        b"script: |\n  a\n  b\nname: x\n"
    )
    assert yaml_editor.delete_entry(payload, "script") == b"name: x\n"


def test_multiline_value_becomes_block_scalar() -> None:
    payload = b"name: x\r\nother: y\r\n"

    assert yaml_editor.set_value(payload, "name", "l1\nl2") == (
        b"name: |\r\n  l1\r\n  l2\r\nother: y\r\n"
    )


def test_quote_style_is_kept_or_added() -> None:
    payload = b"single: 'old'\ndouble: \"old\"\nplain: old\n"

    assert yaml_editor.set_value(payload, "single", "it's") == (
        b"single: 'it''s'\ndouble: \"old\"\nplain: old\n"
    )
    assert yaml_editor.set_value(payload, "double", "new") == (
        b"single: 'old'\ndouble: \"new\"\nplain: old\n"
    )
    assert yaml_editor.set_value(payload, "plain", "a: b") == (
        b"single: 'old'\ndouble: \"old\"\nplain: \"a: b\"\n"
    )
    assert yaml_editor.search(payload, "single", "old")


@pytest.mark.parametrize(
    "value, quote, expected",
    [
        (True, None, "true"),
        (8080, '"', "8080"),
        ("plain", None, "plain"),
        ("*****", None, '"*****"'),
        ("# not a comment", None, '"# not a comment"'),
        ("a,b", None, "a,b"),
    ],
)
def test_render_yaml_scalar(value, quote, expected) -> None:
    assert render_yaml_scalar(value, quote=quote) == expected


def test_flow_context_quotes_separators() -> None:
    assert render_yaml_scalar("a,b", flow=True) == '"a,b"'


def test_comments_and_document_markers_are_skipped() -> None:
    payload = b"%YAML 1.2\n---\n# lead\nkey: value # trailing\n...\n"

    assert yaml_editor.set_value(payload, "key", "other") == (
        b"%YAML 1.2\n---\n# lead\nkey: other # trailing\n...\n"
    )


def test_errors() -> None:
    with pytest.raises(PathNotFoundError):
        yaml_editor.set_value(b"app:\n  name: x\n", "app", "y")
    with pytest.raises(PathNotFoundError):
        yaml_editor.set_value(b"app:\n  name: x\n", "app/missing", "y")
    with pytest.raises(EmptyDocumentError):
        yaml_editor.set_value(b"# only a comment\n", "a", "b")


@pytest.mark.parametrize(
    "payload",
    [
        b"k: |-\n  a\n  b\nnext: 1\n",
        b"k: |\n  a\n  b\n",
        b"k: 'quoted'\n",
        b"k: {a: 1, b: two}\n",
    ],
)
def test_writing_back_the_current_value_is_identity(payload) -> None:
    path = "k/b" if b"{" in payload else "k"
    current = yaml_editor.get_value(payload, path)

    assert yaml_editor.set_value(payload, path, current, expected=current) == payload


def test_repeated_set_is_idempotent() -> None:
    payload = make_complex("demo", "db", "secret", "one", "two").encode("utf-8")

    once = yaml_editor.set_value(payload, "app/database/port", 6543)

    assert once != payload
    assert yaml_editor.set_value(once, "app/database/port", 6543) == once
