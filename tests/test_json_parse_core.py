from decimal import Decimal

from jsonmend.domain_impl.json.json_parse_core import ParseInvalid, ParseValid, is_blank, parse


def test_valid_document():
    result = parse('{"a":1,"b":[1,2,3]}')
    assert isinstance(result, ParseValid)
    assert result.is_valid
    assert result.value == {"a": 1, "b": [1, 2, 3]}


def test_missing_value_reports_offset_of_closer():
    result = parse('{"a":}')
    assert isinstance(result, ParseInvalid)
    assert not result.is_valid
    assert "Expecting value" in result.error.message
    assert result.error.position == 5
    assert (result.error.line, result.error.column) == (1, 6)


def test_multiline_error_location():
    result = parse('{\n  "a": 1,\n  "b": \n}')
    assert isinstance(result, ParseInvalid)
    assert result.error.line == 4
    assert result.error.column == 1


def test_non_standard_constants_are_rejected():
    result = parse("[NaN]")
    assert isinstance(result, ParseInvalid)
    assert result.error.position == 1
    assert (result.error.line, result.error.column) == (1, 2)

    result = parse('{"x": -Infinity}')
    assert isinstance(result, ParseInvalid)
    assert result.error.position == 6


def test_constant_names_inside_strings_are_ignored():
    assert parse('["NaN", "Infinity"]').value == ["NaN", "Infinity"]


def test_numbers():
    assert parse("12345678901234567890123").value == 12345678901234567890123
    assert parse("1.5").value == 1.5
    assert parse("1e400").value == Decimal("1e400")
    assert parse("-1e400").value == Decimal("-1e400")


def test_key_order_is_preserved():
    assert list(parse('{"z": 1, "a": 2, "m": 3}').value) == ["z", "a", "m"]


def test_extra_data():
    result = parse("{} x")
    assert isinstance(result, ParseInvalid)
    assert result.error.message.startswith("Extra data")
    assert result.error.position == 3


def test_byte_order_mark_is_rejected():
    result = parse("\ufeff{}")
    assert isinstance(result, ParseInvalid)
    assert result.error.position == 0


def test_raw_control_characters_in_strings_are_rejected():
    result = parse('{"a": "x\ty"}')
    assert isinstance(result, ParseInvalid)
    assert "control character" in result.error.message


def test_blank_input_is_invalid_for_the_parser_itself():
    assert is_blank("")
    assert is_blank(" \n\t ")
    assert not is_blank(" 0 ")
    assert isinstance(parse(""), ParseInvalid)


def test_excessive_nesting_is_reported_not_raised():
    depth = 200000
    result = parse("[" * depth + "]" * depth)
    assert isinstance(result, ParseInvalid)
    assert result.error.message
