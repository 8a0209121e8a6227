"""ISO-8601 <-> datetime conversion for items crossing the wire"""

from datetime import datetime
from typing import Iterable, Optional

from dateutil.parser import isoparse


def parse_date(value):
    """ISO string -> aware/naive datetime; anything else is returned untouched"""
    if isinstance(value, str) and value:
        try:
            return isoparse(value)
        except ValueError:
            return value
    return value


def convert_dates(item: dict, fields: Iterable[str]) -> dict:
    """
    Return a copy of item with the named fields parsed as datetimes.

    Dotted names reach into nested summaries, e.g. "event.date" converts the
    date of the event embedded in a payment. Missing fields are skipped.
    """
    result = dict(item)
    nested: dict[str, list[str]] = {}

    for field in fields:
        head, _, rest = field.partition(".")
        if rest:
            nested.setdefault(head, []).append(rest)
        elif head in result:
            result[head] = parse_date(result[head])

    for head, rest in nested.items():
        if isinstance(result.get(head), dict):
            result[head] = convert_dates(result[head], rest)

    return result


def serialize_dates(payload: dict) -> dict:
    """datetime values -> ISO strings so the payload can be sent as JSON"""
    return {k: v.isoformat() if isinstance(v, datetime) else v for k, v in payload.items()}


def to_iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
