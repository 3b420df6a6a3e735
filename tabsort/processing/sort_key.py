"""
Composite sort keys.

A SortKey is an ordered list of SortColumns. Its ``compare`` method is the one
ordering used by the in-memory sort, the per-chunk sort and the merge heap.
"""

import functools
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Callable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from tabsort.core.exceptions import ColumnNotFoundError, InvalidConfigurationError
from tabsort.processing.comparators import Comparator, StringComparator

Record = Mapping[str, str]
KeyValues = Tuple[str, ...]


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"

    @property
    def multiplier(self) -> int:
        """Sign applied to the comparator result."""
        return 1 if self is SortDirection.ASC else -1


@dataclass(frozen=True)
class SortColumn:
    """A single column to sort by."""

    name: str
    direction: SortDirection = SortDirection.ASC
    comparator: Comparator = field(default_factory=StringComparator)


class SortKey:
    """An ordered, non-empty sequence of sort columns."""

    def __init__(self, columns: Sequence[SortColumn]):
        columns = list(columns)
        if not columns:
            raise InvalidConfigurationError(
                "At least one sort column must be specified"
            )
        self.columns: List[SortColumn] = columns

    @classmethod
    def build(
        cls,
        columns: Union[str, SortColumn, Sequence[SortColumn], "SortKey"],
        comparator: Optional[Comparator] = None,
    ) -> "SortKey":
        """Normalize the accepted column forms into a SortKey."""
        if isinstance(columns, SortKey):
            return columns
        if isinstance(columns, str):
            return cls(
                [
                    SortColumn(
                        columns, SortDirection.ASC, comparator or StringComparator()
                    )
                ]
            )
        if isinstance(columns, SortColumn):
            return cls([columns])
        return cls([SortColumn(c) if isinstance(c, str) else c for c in columns])

    def __iter__(self) -> Iterator[SortColumn]:
        return iter(self.columns)

    def __len__(self) -> int:
        return len(self.columns)

    @property
    def names(self) -> List[str]:
        return [column.name for column in self.columns]

    def validate_against(self, header: Sequence[str]) -> None:
        """Ensure every sort column exists in the header."""
        for column in self.columns:
            if column.name not in header:
                raise ColumnNotFoundError(column.name, header)

    def extract(self, record: Record) -> KeyValues:
        """Key values of a record; a missing field counts as the empty string."""
        return tuple(
            "" if record.get(column.name) is None else record[column.name]
            for column in self.columns
        )

    def compare_keys(self, key_a: KeyValues, key_b: KeyValues) -> int:
        """Compare two extracted keys left to right, stopping at the first difference."""
        for column, value_a, value_b in zip(self.columns, key_a, key_b):
            comparison = column.comparator.compare(value_a, value_b)
            if comparison != 0:
                return comparison * column.direction.multiplier
        return 0

    def compare(self, record_a: Record, record_b: Record) -> int:
        return self.compare_keys(self.extract(record_a), self.extract(record_b))

    def as_sort_key(self) -> Callable[[Record], Any]:
        """A ``key=`` function for ``list.sort`` built on ``compare``."""
        return functools.cmp_to_key(self.compare)

    def __repr__(self) -> str:
        parts = ", ".join(
            f"{c.name} {c.direction.value} {c.comparator!r}" for c in self.columns
        )
        return f"SortKey({parts})"
