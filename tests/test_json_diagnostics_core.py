import pytest

from jsonmend.domain_impl.json.json_diagnostics_core import (
    JsonError,
    MessagePatternAdapter,
    Position,
    StdlibJsonAdapter,
    classify_error,
    error_context_lines,
    format_error,
    locate_error,
    resolve_position,
)


@pytest.mark.parametrize(
    "offset, expected",
    [
        (0, Position(1, 1)),
        (1, Position(1, 2)),
        (2, Position(2, 1)),
        (3, Position(2, 2)),
        (6, Position(3, 1)),
    ],
)
def test_resolve_position(offset, expected):
    assert resolve_position("a\nbc\nd", offset) == expected


def test_resolve_position_clamps_to_last_character():
    assert resolve_position("a\nbc\nd", 99) == Position(3, 1)
    assert resolve_position("ab\n", 10) == Position(1, 3)
    assert resolve_position("abc", -4) == Position(1, 1)
    assert resolve_position("", 3) == Position(1, 1)


def test_classify_stdlib_message():
    error = classify_error("Expecting value: line 1 column 6 (char 5)")
    assert error == JsonError("Expecting value: line 1 column 6 (char 5)", line=1, column=6, position=5)


def test_classify_position_only_message_leaves_line_column_empty():
    error = classify_error("Unexpected token } in JSON at position 5")
    assert error.position == 5
    assert error.line is None and error.column is None
    assert error.message == "Unexpected token } in JSON at position 5"


def test_classify_plain_message():
    assert classify_error("boom") == JsonError("boom")
    assert classify_error("").message == "Invalid JSON"


def test_message_pattern_adapter_falls_back_to_offset():
    adapter = MessagePatternAdapter()
    assert adapter.describe("Unexpected end of JSON input", offset=7).position == 7
    assert adapter.describe("Unexpected token x in JSON at position 2", offset=7).position == 2


def test_stdlib_adapter_prefers_decoder_offset():
    error = StdlibJsonAdapter().describe("Expecting value: line 1 column 6 (char 5)", offset=4)
    assert error.position == 4
    assert (error.line, error.column) == (1, 6)


def test_locate_error_derives_from_current_text():
    error = JsonError("bad", position=3)
    assert locate_error(error, "ab\ncd") == Position(2, 1)
    assert locate_error(error) is None
    assert locate_error(JsonError("bad", line=4, column=2, position=0), "x") == Position(4, 2)


def test_format_error_uses_best_location():
    assert format_error(JsonError("bad", position=3), "ab\ncd") == "bad [line 2, column 1]"
    assert format_error(JsonError("bad", position=3)) == "bad [position 3]"
    assert format_error(JsonError("bad")) == "bad"


def test_error_context_lines():
    text = "one\ntwo\nthree\nfour\nfive\nsix"
    assert error_context_lines(text, 1) == ["1: one", "2: two", "3: three"]
    assert error_context_lines(text, 4, radius=1) == ["3: three", "4: four", "5: five"]
