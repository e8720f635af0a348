"""
Input validation and sanitization. Used by request schemas and services.
"""
import re

# Application forms require the dashed North American format
MOBILE_NUMBER_PATTERN = re.compile(r"^\d{3}-\d{3}-\d{4}$")

SIN_PATTERN = re.compile(r"^[\d\s-]{9,11}$")

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")

CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def validate_phone(phone: str | None) -> bool:
    """Loose phone check: at least 10 digits, any punctuation."""
    if not phone:
        return False
    digits = re.sub(r"\D", "", phone)
    return 10 <= len(digits) <= 15


def validate_mobile_number(number: str | None) -> bool:
    """Strict ``123-456-7890`` format used on the job application form."""
    return bool(number and MOBILE_NUMBER_PATTERN.match(number))


def validate_sin(sin: str | None) -> bool:
    """
    Social Insurance Number: 9 digits, optionally grouped with spaces or dashes
    (9-11 characters total).
    """
    if not sin or not SIN_PATTERN.match(sin):
        return False
    return len(re.sub(r"\D", "", sin)) == 9


def validate_hex_color(color: str | None) -> bool:
    return bool(color and HEX_COLOR_PATTERN.match(color))


def sanitize_string(value: str | None, max_length: int = 10_000) -> str:
    """
    Trim, drop control characters (newlines and tabs survive) and cap length.
    HTML escaping happens where text is rendered, not on the way in.
    """
    if value is None:
        return ""
    s = CONTROL_CHARS_PATTERN.sub("", str(value)).strip()
    return s[:max_length]
