"""Phone number normalization and number-type helpers."""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"[^\d]")

# Phone number types that can receive texts
SUPPORTED_NUMBER_TYPES = (
    # GData: https://developers.google.com/gdata/docs/2.0/elements#rel-values_71
    "http://schemas.google.com/g/2005#home",
    "http://schemas.google.com/g/2005#main",
    "http://schemas.google.com/g/2005#mobile",
    "http://schemas.google.com/g/2005#other",
    "http://schemas.google.com/g/2005#pager",
    "http://schemas.google.com/g/2005#work",
    "http://schemas.google.com/g/2005#work_mobile",
    "http://schemas.google.com/g/2005#work_pager",
    # vCard (RFC 2426)
    "home",
    "cell",
    "pager",
    "pref",
    "work",
    "voice",
)


def digits_only(text: str | None) -> str:
    """Strip every non-digit character from text."""
    if not text:
        return ""
    return _NON_DIGITS.sub("", text)


def normalize_number(number: str | None) -> str:
    """Get the identity key for a phone number.

    Two numbers that normalize to the same key refer to the same person,
    e.g. "(555) 123-4567" and "555.123.4567".
    """
    return digits_only(number)


def number_variants(phone: str) -> list[str]:
    """
    Normalize a phone number for lookups.
    Returns multiple variants to handle country code differences.
    """
    digits = digits_only(phone)
    variants: list[str] = []

    if not digits:
        return variants

    variants.append(digits)

    # US/Canada: try without the leading country code
    if digits.startswith("1") and len(digits) == 11:
        variants.append(digits[1:])

    # 10 digits: try with the country code
    if len(digits) == 10:
        variants.append("1" + digits)
        variants.append("+1" + digits)

    variants.append("+" + digits)
    return variants


def number_type_icon(number_type: str | None) -> str:
    """Get the icon name used for a number type."""
    if not number_type:
        return "phone-number-default"

    number_type = number_type.lower()
    if "home" in number_type:
        return "phone-number-home"
    if "cell" in number_type or "mobile" in number_type:
        return "phone-number-mobile"
    if "work" in number_type or "voice" in number_type:
        return "phone-number-work"
    return "phone-number-default"


def is_sms_capable(number_type: str | None) -> bool:
    """Check if a number of this type can receive texts.

    Numbers without a type are assumed to be capable.
    """
    if not number_type:
        return True
    return number_type.lower() in SUPPORTED_NUMBER_TYPES
