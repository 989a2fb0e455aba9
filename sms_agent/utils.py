"""Shared utilities used across the SMS support agent."""

import re


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("+1 (415) 555-0134")
        '+14155550134'
        >>> normalize_phone(" 415.555.0134 ")
        '4155550134'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def mask_phone(value: str) -> str:
    """Hide all but the last four digits of a phone number for log output.

    Examples:
        >>> mask_phone("+14155550134")
        '***0134'
    """
    digits = re.sub(r"[^\d]", "", value)
    if len(digits) <= 4:
        return "***"
    return "***" + digits[-4:]
