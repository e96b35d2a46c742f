import pytest

from jsonmend import constants as app_constants
from jsonmend.domain_impl.json import json_io_core
from jsonmend.exceptions import AppError, UnsupportedUploadError


def test_load_document_text(tmp_path):
    path = tmp_path / "data.json"
    path.write_text('{"a": 1}', encoding="utf-8")
    assert json_io_core.load_document_text(path) == '{"a": 1}'


def test_load_document_strips_bom(tmp_path):
    path = tmp_path / "bom.JSON"
    path.write_bytes(b'\xef\xbb\xbf{"a": 1}')
    assert json_io_core.load_document_text(path) == '{"a": 1}'


def test_non_json_upload_is_rejected(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(UnsupportedUploadError) as info:
        json_io_core.load_document_text(path)
    assert isinstance(info.value, AppError)
    assert info.value.suffix == ".txt"


def test_write_document_text_adds_newline(tmp_path):
    target = tmp_path / "out" / app_constants.DOWNLOAD_FILENAME
    written = json_io_core.write_document_text('{"a":1}', target)
    assert written == str(target)
    assert target.read_text(encoding="utf-8") == '{"a":1}\n'


def test_write_document_text_refuses_empty_output(tmp_path):
    with pytest.raises(ValueError):
        json_io_core.write_document_text("", tmp_path / "x.json")


def test_check_input_payload(monkeypatch):
    assert json_io_core.check_input_payload("") == (True, "")
    assert json_io_core.check_input_payload('{"a": "\t"}') == (True, "")
    ok, reason = json_io_core.check_input_payload("{\x00}")
    assert not ok and "binary" in reason
    ok, reason = json_io_core.check_input_payload("\ud800")
    assert not ok
    monkeypatch.setattr(app_constants, "INPUT_MAX_CHARS", 4)
    ok, reason = json_io_core.check_input_payload("[1,2]")
    assert not ok and "safety limit" in reason
