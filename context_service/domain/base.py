import re
from datetime import UTC, datetime
from typing import Optional, Union

MAX_SAFE_INTEGER = 2**53 - 1

_DIGITS = re.compile(r"^\d+$")


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns"""
    return datetime.now(UTC).replace(tzinfo=None)


def normalise_account_id(value) -> Optional[Union[int, str]]:
    """
    Canonical form of an external account id.

    monday.com sends account ids as numbers in some payloads and as numeric
    strings in others. Purely numeric strings without leading zeros become
    ints; everything else is returned as a trimmed string.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else str(value)

    trimmed = str(value).strip()
    if _DIGITS.match(trimmed):
        numeric = int(trimmed)
        if numeric <= MAX_SAFE_INTEGER and str(numeric) == trimmed:
            return numeric
    return trimmed


def account_key(value) -> Optional[str]:
    """Persisted form of an account id: str() of its canonical form, None when blank"""
    normalised = normalise_account_id(value)
    if normalised is None or normalised == "":
        return None
    return str(normalised)
