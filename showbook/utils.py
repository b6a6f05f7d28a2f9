"""Shared utilities used across the booking engine and its collaborators."""

import re
from typing import Optional


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("050 123 4567")
        '0501234567'
        >>> normalize_phone("+971 (50) 123-4567")
        '+971501234567'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def same_text(left: Optional[str], right: Optional[str]) -> bool:
    """Case-insensitive exact match; an empty or missing side never matches.

    Examples:
        >>> same_text("Alice@X.com", "alice@x.com")
        True
        >>> same_text(None, "")
        False
    """
    if not left or not right:
        return False
    return left.lower() == right.lower()
