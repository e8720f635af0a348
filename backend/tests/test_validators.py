"""Unit tests for validators."""
from talencor.utils.validators import (
    sanitize_string,
    validate_hex_color,
    validate_mobile_number,
    validate_phone,
    validate_sin,
)


def test_validate_phone():
    assert validate_phone("416-555-0001") is True
    assert validate_phone("(647) 946-2177") is True
    assert validate_phone("+1 416 555 0001") is True
    assert validate_phone("555-0001") is False
    assert validate_phone("") is False
    assert validate_phone(None) is False


def test_validate_mobile_number():
    assert validate_mobile_number("416-555-0001") is True
    assert validate_mobile_number("4165550001") is False
    assert validate_mobile_number("(416) 555-0001") is False
    assert validate_mobile_number(None) is False


def test_validate_sin():
    assert validate_sin("123456789") is True
    assert validate_sin("123-456-789") is True
    assert validate_sin("123 456 789") is True
    assert validate_sin("12345678") is False
    assert validate_sin("1234567890") is False
    assert validate_sin("12345678a") is False
    assert validate_sin("") is False


def test_validate_hex_color():
    assert validate_hex_color("#3B82F6") is True
    assert validate_hex_color("#abcdef") is True
    assert validate_hex_color("3B82F6") is False
    assert validate_hex_color("#FFF") is False
    assert validate_hex_color(None) is False


def test_sanitize_string():
    assert sanitize_string("  hello  ") == "hello"
    assert sanitize_string(None) == ""
    assert sanitize_string("a" * 20, max_length=5) == "aaaaa"
    assert sanitize_string("line1\nline2\tend") == "line1\nline2\tend"
    assert sanitize_string("bad\x00\x07chars") == "badchars"
    # stored as typed; escaping happens at render time
    assert sanitize_string("Smith & Sons <Ltd>") == "Smith & Sons <Ltd>"
