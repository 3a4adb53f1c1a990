from __future__ import annotations

"""Base class shared by every record the connector can publish.

A record only has to know how to turn itself into a plain dict; the JSON
string embedded in the message envelope is derived from it.
"""

import json
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_date(value) -> Optional[str]:
    """Render a date as UTC ``YYYY-MM-DDTHH:MM:SSZ``.

    Naive datetimes are taken as UTC, plain dates as midnight UTC. Strings
    are assumed to be formatted already and pass through untouched.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime(DATE_FORMAT)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day).strftime(DATE_FORMAT)
    return str(value)


def serialize_list(items: Optional[Iterable[Any]]) -> List[Any]:
    if items is None:
        return []
    return [item.to_dict() if isinstance(item, Entry) else item for item in items]


class Entry(ABC):

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-ready representation of the record."""

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def __eq__(self, other):
        if not isinstance(other, Entry) or type(other) is not type(self):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"{type(self).__name__}({self.to_dict()!r})"
