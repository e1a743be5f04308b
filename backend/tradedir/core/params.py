"""
Query parameter sanitising for public directory endpoints.

Bad input is never rejected here: values are clamped or defaulted.
"""

from typing import Any, Optional

# Pagination bounds
DEFAULT_PAGE = 1
MIN_PAGE = 1
MAX_PAGE = 5000

DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 50

# Free-text inputs are truncated to this many characters
MAX_QUERY_LENGTH = 100


def clamp_int(value: Any, default: int, minimum: int, maximum: int) -> int:
    """
    Parse an integer and clamp it to [minimum, maximum].

    Leading digits are honoured ("7abc" -> 7); anything unparseable
    returns the default.
    """
    text = str(value if value is not None else "").strip()

    digits = ""
    for index, char in enumerate(text):
        if char.isdigit() or (index == 0 and char in "+-"):
            digits += char
        else:
            break

    try:
        number = int(digits)
    except ValueError:
        return default

    return max(minimum, min(maximum, number))


def safe_query_text(value: Any) -> str:
    """Trim free text and cap it at MAX_QUERY_LENGTH characters."""
    text = str(value or "").strip()
    if not text:
        return ""
    return text[:MAX_QUERY_LENGTH]


def is_valid_id(value: Any) -> bool:
    """An id is valid when it is present and not blank."""
    if value is None:
        return False
    return len(str(value).strip()) > 0


def first_present(*values: Any) -> Optional[Any]:
    """Return the first truthy value, used for parameter aliases."""
    for value in values:
        if value:
            return value
    return None


def first_valid_id(*values: Any) -> Optional[str]:
    """Return the first value that passes is_valid_id."""
    for value in values:
        if is_valid_id(value):
            return str(value)
    return None
