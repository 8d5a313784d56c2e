import json

import pytest

from plotscript.cli import _parse_script_arg, main


@pytest.fixture
def write_script(tmp_path):
    def _write(name, source):
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return str(path)

    return _write


def test_run_drives_the_script_to_completion(write_script, capsys):
    path = write_script(
        "inn.ps",
        """
        show_text_box(1)
        wait_for_text_box()
        choice = show_menu(3)
        wait(2)
        return choice + 10
        """,
    )
    main(["run", path])

    out = capsys.readouterr().out
    assert "--- Script completed ---" in out
    assert "Result: 10" in out
    assert "2 host request(s) over 5 frame(s)" in out


def test_run_passes_script_arguments(write_script, capsys):
    path = write_script("greet.ps", "func greet(name, times) { return name + times }")
    main(["run", path, "--arg", '"Alex"', "--arg", "3"])
    assert "Result: Alex3" in capsys.readouterr().out


def test_run_reports_a_faulted_script(write_script, capsys):
    path = write_script("broken.ps", "x = 1\nreturn x / 0")
    with pytest.raises(SystemExit) as excinfo:
        main(["run", path])
    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "--- SCRIPT ERROR ---" in err
    assert "Error in 'broken' (Line: 2" in err


def test_run_gives_up_after_max_ticks(write_script, capsys):
    path = write_script("forever.ps", "while true { wait(1) }")
    with pytest.raises(SystemExit):
        main(["run", path, "--max-ticks", "5"])
    assert "still running after 5 frame(s)" in capsys.readouterr().err


def test_check_accepts_a_valid_script(write_script, capsys):
    path = write_script("ok.ps", "func f(a) { return a }\nf(1)")
    main(["check", path])
    assert "no errors found" in capsys.readouterr().out


def test_check_reports_the_first_error(write_script, capsys):
    path = write_script("bad.ps", "x = 1\nif x {")
    with pytest.raises(SystemExit):
        main(["check", path])
    assert "Error in 'bad'" in capsys.readouterr().err


def test_missing_files_are_reported(tmp_path, capsys):
    with pytest.raises(SystemExit):
        main(["check", str(tmp_path / "missing.ps")])
    assert "not found" in capsys.readouterr().err


def test_tokens_and_ast_dump_json(write_script, capsys):
    path = write_script("tiny.ps", "x = 2")

    main(["tokens", path])
    tokens = json.loads(capsys.readouterr().out)
    assert [t["kind"] for t in tokens] == ["IDENTIFIER", "OPERATOR", "NUMBER", "EOF"]

    main(["ast", path])
    program = json.loads(capsys.readouterr().out)
    assert program["node"] == "Program"
    assert program["script_name"] == "tiny"
    statement = program["body"]["statements"][0]
    assert statement["expression"]["node"] == "Assignment"
    assert statement["expression"]["value"]["value"] == 2


@pytest.mark.parametrize(
    "text, expected",
    [
        pytest.param("3", 3, id="integer"),
        pytest.param("[1, true]", [1, True], id="array"),
        pytest.param('"quoted"', "quoted", id="json_string"),
        pytest.param("plain", "plain", id="bare_string"),
        pytest.param('{"a": 1}', '{"a": 1}', id="object_kept_as_text"),
    ],
)
def test_script_argument_parsing(text, expected):
    assert _parse_script_arg(text) == expected
