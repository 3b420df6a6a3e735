"""
tabsort: external merge sort for large tabular record streams.
"""

from tabsort.core.exceptions import (
    ColumnNotFoundError,
    InvalidConfigurationError,
    ResourceExhaustionError,
    SortIOError,
    TabSortError,
)
from tabsort.core.logger import setup_logging
from tabsort.core.metrics import SortMetrics
from tabsort.processing.comparators import (
    BooleanComparator,
    DateTimeComparator,
    NaturalComparator,
    NumericComparator,
    StringComparator,
)
from tabsort.processing.csv_io import CsvSource, write_csv
from tabsort.processing.data_source import IterableSource
from tabsort.processing.external_sorter import (
    ExternalSorter,
    SortedOutput,
    SortStrategy,
    select_strategy,
)
from tabsort.processing.sort_key import SortColumn, SortDirection, SortKey

__all__ = [
    "BooleanComparator",
    "ColumnNotFoundError",
    "CsvSource",
    "DateTimeComparator",
    "ExternalSorter",
    "InvalidConfigurationError",
    "IterableSource",
    "NaturalComparator",
    "NumericComparator",
    "ResourceExhaustionError",
    "SortColumn",
    "SortDirection",
    "SortIOError",
    "SortKey",
    "SortMetrics",
    "SortStrategy",
    "SortedOutput",
    "StringComparator",
    "TabSortError",
    "select_strategy",
    "setup_logging",
    "write_csv",
]
