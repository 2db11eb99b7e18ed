import pytest

import inplace_engine
from inplace_engine.editors import (
    IniEditor,
    JsonEditor,
    TextEditor,
    YamlEditor,
    available_formats,
    editor_for,
    editor_for_path,
    format_for_path,
    json_editor,
)
from inplace_engine.errors import (
    EditorError,
    EmptyDocumentError,
    MalformedDocumentError,
    PathNotFoundError,
    UnsupportedEncodingError,
)


def test_editor_for_returns_shared_instances() -> None:
    assert editor_for("json") is json_editor.editor
    assert editor_for(" YML ") is editor_for("yaml")
    assert isinstance(editor_for("txt"), TextEditor)
    assert "properties" in available_formats()


def test_options_build_a_dedicated_editor() -> None:
    custom = editor_for("ini", comment_prefixes=["//"])

    assert isinstance(custom, IniEditor)
    assert custom is not editor_for("ini")
    assert custom.get_value(b"k = v // c\n", "k") == "v"


def test_unknown_format_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown format"):
        editor_for("toml")


@pytest.mark.parametrize(
    "name, expected",
    [
        ("a.json", "json"),
        ("a.YAML", "yaml"),
        ("dir/a.yml", "yaml"),
        ("a.xml", "xml"),
        ("a.cfg", "ini"),
        ("a.properties", "properties"),
        ("a.log", "text"),
    ],
)
def test_format_for_path(name, expected) -> None:
    assert format_for_path(name) == expected


def test_editor_for_path_and_unknown_suffix() -> None:
    assert isinstance(editor_for_path("settings.jsonc"), JsonEditor)
    assert isinstance(editor_for_path("x.yaml"), YamlEditor)
    with pytest.raises(ValueError):
        format_for_path("Makefile")


def test_package_facade(tmp_path) -> None:
    target = tmp_path / "app.yaml"
    target.write_bytes(b"a: 1\nb: 2\n")

    inplace_engine.set_value(target, "a", 5)
    assert target.read_bytes() == b"a: 5\nb: 2\n"
    assert inplace_engine.search(target, "b", 2)
    inplace_engine.delete_entry(target, "b")
    assert target.read_bytes() == b"a: 5\n"

    payload = b"x=1\n"
    assert inplace_engine.set_value(payload, "x", 2, format_name="properties") == (
        b"x=2\n"
    )
    with pytest.raises(ValueError):
        inplace_engine.set_value(payload, "x", 2)


def test_error_taxonomy() -> None:
    assert issubclass(PathNotFoundError, LookupError)
    assert issubclass(UnsupportedEncodingError, LookupError)
    assert issubclass(MalformedDocumentError, ValueError)
    for error in (EmptyDocumentError, PathNotFoundError, MalformedDocumentError):
        assert issubclass(error, EditorError)
        assert issubclass(error, RuntimeError)


def test_errors_carry_format_and_path() -> None:
    with pytest.raises(EmptyDocumentError) as caught:
        inplace_engine.set_value(b"# nothing\n", "a", 1, format_name="yaml")

    assert caught.value.format_name == "yaml"
    assert caught.value.path == "a"
