"""
Column value comparators.

Each comparator turns two raw field values into a signed ordering result:
negative if the first sorts before the second, zero if equal, positive otherwise.
The set is closed: string, numeric, natural, datetime and boolean.
"""

import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional, Union

from dateutil.parser import isoparse

_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_NATURAL_CHUNK_RE = re.compile(r"(\d+)")

TRUE_VALUES = frozenset({"true", "1", "yes", "on", "y"})


def _sign(a, b) -> int:
    return (a > b) - (a < b)


class Comparator(ABC):
    """Base class for all column comparators."""

    @abstractmethod
    def compare(self, a: str, b: str) -> int:
        """Compare two field values."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class StringComparator(Comparator):
    """Lexicographic comparison by code point (case-sensitive by default)."""

    def __init__(self, case_sensitive: bool = True):
        self.case_sensitive = case_sensitive

    def compare(self, a: str, b: str) -> int:
        a = "" if a is None else str(a)
        b = "" if b is None else str(b)
        if not self.case_sensitive:
            a, b = a.lower(), b.lower()
        return _sign(a, b)

    def __repr__(self) -> str:
        return f"StringComparator(case_sensitive={self.case_sensitive})"


class NumericComparator(Comparator):
    """Numeric comparison for integers and floats; non-numeric values count as 0."""

    @staticmethod
    def to_number(value: Optional[str]) -> float:
        if value is None:
            return 0.0
        value = str(value)
        if not _NUMERIC_RE.match(value):
            return 0.0
        return float(value)

    def compare(self, a: str, b: str) -> int:
        return _sign(self.to_number(a), self.to_number(b))


class NaturalComparator(Comparator):
    """
    Natural order comparison: "file2" sorts before "file10".

    Digit runs are compared by numeric value, everything else as text.
    """

    def __init__(self, case_sensitive: bool = True):
        self.case_sensitive = case_sensitive

    def _chunks(self, value: Optional[str]) -> List[str]:
        value = "" if value is None else str(value)
        if not self.case_sensitive:
            value = value.lower()
        return [c for c in _NATURAL_CHUNK_RE.split(value) if c]

    def compare(self, a: str, b: str) -> int:
        chunks_a = self._chunks(a)
        chunks_b = self._chunks(b)
        for chunk_a, chunk_b in zip(chunks_a, chunks_b):
            if chunk_a.isdecimal() and chunk_b.isdecimal():
                result = _sign(int(chunk_a), int(chunk_b))
            else:
                result = _sign(chunk_a, chunk_b)
            if result:
                return result
        result = _sign(len(chunks_a), len(chunks_b))
        if result:
            return result
        # "007" and "7" are equal numerically; fall back to plain text order
        return _sign("".join(chunks_a), "".join(chunks_b))

    def __repr__(self) -> str:
        return f"NaturalComparator(case_sensitive={self.case_sensitive})"


class DateTimeComparator(Comparator):
    """
    Date/time comparison.

    Values are parsed with ``datetime.strptime(fmt)``, or as ISO-8601 when
    ``fmt`` is None. Unparsable and empty values sort after every valid date;
    two unparsable values are equal.
    """

    def __init__(self, fmt: Optional[str] = "%Y-%m-%d %H:%M:%S"):
        self.fmt = fmt

    def parse(self, value: Union[str, datetime, None]) -> Optional[datetime]:
        if isinstance(value, datetime):
            parsed = value
        else:
            value = "" if value is None else str(value).strip()
            if not value:
                return None
            try:
                if self.fmt is None:
                    parsed = isoparse(value)
                else:
                    parsed = datetime.strptime(value, self.fmt)
            except (ValueError, OverflowError):
                return None
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed

    def compare(self, a: str, b: str) -> int:
        date_a = self.parse(a)
        date_b = self.parse(b)

        if date_a is None and date_b is None:
            return 0
        if date_a is None:
            return 1
        if date_b is None:
            return -1
        return _sign(date_a, date_b)

    def __repr__(self) -> str:
        return f"DateTimeComparator(fmt={self.fmt!r})"


class BooleanComparator(Comparator):
    """Boolean comparison (false before true) over common truthy tokens."""

    @staticmethod
    def to_bool(value: Union[str, bool, None]) -> bool:
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        return str(value).strip().lower() in TRUE_VALUES

    def compare(self, a: str, b: str) -> int:
        return _sign(self.to_bool(a), self.to_bool(b))
