from inplace_engine.cli import EXIT_ERROR, EXIT_NOT_FOUND, EXIT_OK, main


def test_set_rewrites_the_file_using_its_suffix(tmp_path) -> None:
    target = tmp_path / "app.json"
    target.write_bytes(b'{"server": {"port": 8080}}\n')

    assert main(["set", str(target), "server/port", "9090"]) == EXIT_OK
    assert target.read_bytes() == b'{"server": {"port": 9090}}\n'


def test_stdout_leaves_the_file_untouched(tmp_path, capsysbinary) -> None:
    target = tmp_path / "app.conf"
    target.write_bytes(b"[s]\nk = v\n")

    code = main(["set", str(target), "s/k", "w", "--stdout", "--format", "ini"])

    assert code == EXIT_OK
    assert capsysbinary.readouterr().out == b"[s]\nk = w\n"
    assert target.read_bytes() == b"[s]\nk = v\n"


def test_search_exit_codes(tmp_path) -> None:
    target = tmp_path / "app.yaml"
    target.write_bytes(b"a:\n  b: 1\n")

    assert main(["search", str(target), "a/b"]) == EXIT_OK
    assert main(["search", str(target), "a/b", "1"]) == EXIT_OK
    assert main(["search", str(target), "a/b", "2"]) == EXIT_NOT_FOUND
    assert main(["search", str(target), "a/c"]) == EXIT_NOT_FOUND


def test_delete_with_expectation(tmp_path) -> None:
    target = tmp_path / "app.properties"
    target.write_bytes(b"a=1\nb=2\n")

    assert main(["delete", str(target), "a", "--expect", "9"]) == EXIT_OK
    assert target.read_bytes() == b"a=1\nb=2\n"
    assert main(["delete", str(target), "a", "--expect", "1"]) == EXIT_OK
    assert target.read_bytes() == b"b=2\n"


def test_text_commands(tmp_path) -> None:
    target = tmp_path / "notes.txt"
    target.write_bytes(b"port = 8080\ndebug = on\n")

    assert main(["replace", str(target), r"\d+", "9090", "--regex"]) == EXIT_OK
    assert main(["remove-line", str(target), "debug"]) == EXIT_OK
    assert target.read_bytes() == b"port = 9090\n"


def test_mask_infers_the_type_from_the_suffix(tmp_path) -> None:
    target = tmp_path / "app.ini"
    target.write_bytes(b"[db]\npassword = secret\n")

    assert main(["mask", str(target), "db/password", "--token", "xxx"]) == EXIT_OK
    assert target.read_bytes() == b"[db]\npassword = xxx\n"


def test_errors_are_reported_on_stderr(tmp_path, capsys) -> None:
    target = tmp_path / "app.json"
    target.write_bytes(b'{"a": 1}\n')

    assert main(["set", str(target), "missing", "1"]) == EXIT_ERROR
    assert "inplace-edit:" in capsys.readouterr().err
    assert main(["set", str(tmp_path / "app.unknown"), "a", "1"]) == EXIT_ERROR
    assert main(["set", str(tmp_path / "absent.json"), "a", "1"]) == EXIT_ERROR
