import pytest

from haifa_bytecode.operands import extract_string_literal, resolve_param


@pytest.mark.parametrize(
    "token, expected",
    [
        ("7", 7),
        ("-12", -12),
        ("0x1F", 31),
        ("0X1f", 31),
        ("0o17", 15),
        ("017", 15),
        ("0b101", 5),
        ("1_000", 1000),
        ("0", 0),
        ("9223372036854775807", 9223372036854775807),
    ],
)
def test_integer_literals(token, expected):
    value = resolve_param(token)
    assert value == expected
    assert isinstance(value, int)


@pytest.mark.parametrize(
    "token",
    ["foo", "+", "08", "0x", "1__0", "1.5", "true", "9223372036854775808", "", "１２"],
)
def test_other_tokens_stay_strings(token):
    assert resolve_param(token) == token


def test_string_literal_between_first_quotes():
    assert extract_string_literal('1 putstring "a b"') == "a b"
    assert extract_string_literal('1 putstring ""') == ""
    assert extract_string_literal('"first" "second"') == "first"


def test_string_literal_needs_two_quotes():
    assert extract_string_literal("1 putstring hi") is None
    assert extract_string_literal('1 putstring "hi') is None


def test_escaped_quote_is_not_special():
    assert extract_string_literal(r'1 putstring "a\"b"') == "a\\"
