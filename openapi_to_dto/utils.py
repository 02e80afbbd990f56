"""
Utility functions for the OpenAPI to DTO generator.
"""

import re

# Splits on anything that is not a letter or digit
_SEPARATOR_PATTERN = re.compile(r"[^A-Za-z0-9]+")

# camelCase boundaries: "inProgress" -> "in_Progress", "HTTPCode" -> "HTTP_Code"
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])|([A-Z]+)([A-Z][a-z])")


def _split_into_words(text: str) -> list[str]:
    """Split text on separators (underscores, hyphens, dots, spaces...)."""
    return [word for word in _SEPARATOR_PATTERN.split(text) if word]


def to_pascal_case(text: str) -> str:
    """Convert an identifier-ish string to PascalCase.

    Only the first letter of every word is upper-cased; the rest of the word
    is kept as written, so existing camelCase boundaries survive.

    Examples:
        "status" -> "Status"
        "customerId" -> "CustomerId"
        "user_id" -> "UserId"
        "listUsers" -> "ListUsers"
        "ABC" -> "ABC"

    Args:
        text: The text to convert

    Returns:
        PascalCase string
    """
    if not text:
        return ""
    return "".join(word[0].upper() + word[1:] for word in _split_into_words(text))


def to_upper_snake_case(value: str) -> str:
    """Convert an enum literal to an UPPER_SNAKE_CASE member key.

    Examples:
        "open" -> "OPEN"
        "in-progress" -> "IN_PROGRESS"
        "inProgress" -> "IN_PROGRESS"
        "2fa" -> "_2FA"

    Args:
        value: The enum literal

    Returns:
        UPPER_SNAKE_CASE key, prefixed with "_" when it would start with a digit
    """

    def split_camel(match: re.Match) -> str:
        if match.group(1):
            return f"{match.group(1)}_{match.group(2)}"
        return f"{match.group(3)}_{match.group(4)}"

    text = _CAMEL_BOUNDARY.sub(split_camel, str(value))
    key = "_".join(_split_into_words(text)).upper()
    if not key:
        return "_"
    if key[0].isdigit():
        key = f"_{key}"
    return key


def to_camel_case(text: str) -> str:
    """Convert an identifier-ish string to camelCase.

    Examples:
        "X-Request-Id" -> "xRequestId"
        "page[size]" -> "pageSize"
        "listOrders" -> "listOrders"

    Args:
        text: The text to convert

    Returns:
        camelCase string
    """
    pascal = to_pascal_case(text)
    if not pascal:
        return ""
    return pascal[0].lower() + pascal[1:]
