import io

import pytest

from jsonmend import cli


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_validate_valid_file(tmp_path, capsys):
    path = _write(tmp_path, "ok.json", '{"a": 1}')
    assert cli.main(["validate", path]) == cli.EXIT_OK
    assert capsys.readouterr().out.strip() == "Valid JSON"


def test_validate_invalid_file_prints_location_and_context(tmp_path, capsys):
    path = _write(tmp_path, "bad.json", '{\n  "a":\n}')
    assert cli.main(["validate", path]) == cli.EXIT_INVALID
    err = capsys.readouterr().err
    assert "Invalid JSON: Expecting value" in err
    assert "[line 3, column 1]" in err
    assert "  3: }" in err


def test_blank_input_is_not_an_error(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("   "))
    assert cli.main(["format"]) == cli.EXIT_OK
    assert capsys.readouterr().out.strip() == "No input"


def test_format_and_minify_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO('{"a":[1,2]}'))
    assert cli.main(["format", "-"]) == cli.EXIT_OK
    assert capsys.readouterr().out == '{\n  "a": [\n    1,\n    2\n  ]\n}\n'

    monkeypatch.setattr("sys.stdin", io.StringIO('{ "a" : [ 1 , 2 ] }'))
    assert cli.main(["minify"]) == cli.EXIT_OK
    assert capsys.readouterr().out == '{"a":[1,2]}\n'


def test_format_writes_output_file(tmp_path, capsys):
    path = _write(tmp_path, "in.json", "[1]")
    target = tmp_path / "formatted.json"
    assert cli.main(["format", path, "--output", str(target)]) == cli.EXIT_OK
    assert target.read_text(encoding="utf-8") == "[\n  1\n]\n"


def test_format_invalid_input_fails(tmp_path, capsys):
    path = _write(tmp_path, "in.json", "[1,")
    assert cli.main(["format", path]) == cli.EXIT_INVALID
    assert capsys.readouterr().out == ""


def test_repair_with_report(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("{a:'b', c:1,}"))
    assert cli.main(["repair", "--report"]) == cli.EXIT_OK
    captured = capsys.readouterr()
    assert captured.out == '{"a":"b","c":1}\n'
    assert "quote_key" in captured.err
    assert "trailing_comma" in captured.err


def test_repair_noop_reports_failure(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("{{{"))
    assert cli.main(["repair"]) == cli.EXIT_INVALID
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "No safe repair found" in captured.err


def test_scan_lists_tokens(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO('{"a": true}'))
    assert cli.main(["scan"]) == cli.EXIT_OK
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "punctuation\t'{'"
    assert lines[1] == "key\t'\"a\"'"
    assert "boolean\t'true'" in lines


def test_unsupported_upload(tmp_path, capsys):
    path = _write(tmp_path, "data.yaml", "a: 1")
    assert cli.main(["validate", path]) == cli.EXIT_INPUT_ERROR
    assert "Unsupported file type" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert cli.main(["validate", str(tmp_path / "missing.json")]) == cli.EXIT_INPUT_ERROR
    assert "failed to read input" in capsys.readouterr().err


def test_payload_gate(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("[\x00]"))
    assert cli.main(["validate"]) == cli.EXIT_INPUT_ERROR


def test_command_is_required():
    with pytest.raises(SystemExit):
        cli.main([])
