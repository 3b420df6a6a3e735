"""
Exception types raised by the sorting engine.
"""

from typing import List, Sequence


class TabSortError(RuntimeError):
    """Base exception for all library errors."""


class InvalidConfigurationError(TabSortError):
    """Raised when sorter settings, headers or sort keys are unusable."""


class ColumnNotFoundError(TabSortError):
    """Raised when a requested sort column is missing from the header."""

    def __init__(self, column: str, available: Sequence[str]):
        self.column = column
        self.available: List[str] = list(available)
        super().__init__(
            f"Column '{column}' not found in header. "
            f"Available: {', '.join(self.available)}"
        )


class SortIOError(TabSortError):
    """Raised when a temporary run file cannot be created, written or read."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(message)


class ResourceExhaustionError(TabSortError):
    """
    Reserved for memory budget violations.

    The in-memory threshold is advisory, so the engine itself never raises this.
    """
