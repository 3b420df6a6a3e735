"""
Memory monitoring utilities for the sorter.
"""

import resource
import sys
from typing import Mapping


def get_peak_memory_usage():
    """
    Get the peak resident memory of this process in bytes.

    Returns:
        int: Peak memory usage in bytes
    """
    usage = resource.getrusage(resource.RUSAGE_SELF)
    if sys.platform == "darwin":
        return usage.ru_maxrss  # Already bytes on macOS
    return usage.ru_maxrss * 1024  # Convert KB to bytes on Linux


def estimate_record_size(record: Mapping[str, str]) -> int:
    """
    Estimate the serialized size of a record in bytes.

    Rough estimation: sum of field name and value lengths plus separators.
    """
    size = 0
    for key, value in record.items():
        size += len(key) + len(value or "") + 2
    return size + 1
