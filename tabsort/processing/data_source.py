"""
Data source components for the sorter.

This module defines the tabular source interface consumed by the sorter and a
simple in-memory implementation of it.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Protocol, Sequence

import structlog

from tabsort.core.memory_utils import estimate_record_size

logger = structlog.get_logger(__name__)


class TabularSource(Protocol):
    """A header plus a lazy, single-pass sequence of records."""

    header: List[str]

    def __iter__(self) -> Iterator[Dict[str, str]]: ...

    @property
    def size_hint(self) -> Optional[int]: ...


class IterableSource:
    """
    Wraps any iterable of records with an explicit header.
    """

    def __init__(
        self,
        header: Sequence[str],
        records: Iterable[Dict[str, str]],
        size_hint: Optional[int] = None,
    ):
        """
        Initializes the IterableSource.

        Args:
            header: Field names shared by every record.
            records: The records; consumed once.
            size_hint: Optional size of the input in bytes.
        """
        self.header = list(header)
        self._records = records
        self._size_hint = size_hint

    @classmethod
    def from_records(
        cls, header: Sequence[str], records: Sequence[Dict[str, str]]
    ) -> "IterableSource":
        """Builds a source whose size hint is estimated from the records."""
        size = sum(estimate_record_size(r) for r in records)
        return cls(header, records, size_hint=size)

    @property
    def size_hint(self) -> Optional[int]:
        return self._size_hint

    def __iter__(self) -> Iterator[Dict[str, str]]:
        yield from self._records


class TabularSink(Protocol):
    """Accepts one header write followed by record writes."""

    def write_header(self, header: Sequence[str]) -> None: ...

    def write(self, record: Dict[str, str]) -> None: ...
