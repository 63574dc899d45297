# tutorbook/schemas/common.py
"""
Shared wire types.

Dates travel as ``YYYY-MM-DD`` and times as 24-hour ``HH:MM``; both parse
back to the same value they were serialized from.
"""

from datetime import date, time
import re
from typing import Annotated

from pydantic import BeforeValidator, PlainSerializer

from ..core.constants import DATE_FORMAT, TIME_FORMAT

DATE_ONLY_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_HHMM_REGEX = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def _ensure_date_only(value: object) -> object:
    if isinstance(value, str):
        candidate = value.strip()
        if not DATE_ONLY_REGEX.fullmatch(candidate):
            raise ValueError("date must be a YYYY-MM-DD date-only string")
        return candidate
    return value


def _parse_hhmm(value: object) -> object:
    """Convert HH:MM strings to time objects."""
    if isinstance(value, str):
        match = TIME_HHMM_REGEX.fullmatch(value.strip())
        if not match:
            raise ValueError(f"Invalid time format: {value}. Expected HH:MM format.")
        return time(int(match.group(1)), int(match.group(2)))
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)
    return value


WireDate = Annotated[
    date,
    BeforeValidator(_ensure_date_only),
    PlainSerializer(lambda d: d.strftime(DATE_FORMAT), return_type=str),
]

WireTime = Annotated[
    time,
    BeforeValidator(_parse_hhmm),
    PlainSerializer(lambda t: t.strftime(TIME_FORMAT), return_type=str),
]
