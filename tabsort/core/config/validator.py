"""
Configuration validator that validates sorter settings values.
"""

import os

from tabsort.core.exceptions import InvalidConfigurationError

from .models import SorterSettings


def validate_configuration(settings: SorterSettings) -> None:
    """Validate sorter settings, raising InvalidConfigurationError on the first problem."""
    if settings.chunk_size < 1:
        raise InvalidConfigurationError(
            f"Chunk size must be > 0 (got {settings.chunk_size})"
        )

    if settings.merge_factor < 2:
        raise InvalidConfigurationError(
            f"Merge factor must be at least 2 (got {settings.merge_factor})"
        )

    if settings.memory_threshold < 0:
        raise InvalidConfigurationError(
            f"Memory threshold must be >= 0 bytes (got {settings.memory_threshold})"
        )

    if settings.input_size_hint is not None and settings.input_size_hint < 0:
        raise InvalidConfigurationError(
            f"Input size hint must be >= 0 bytes (got {settings.input_size_hint})"
        )

    temp_dir = settings.temp_dir
    if not os.path.isdir(temp_dir) or not os.access(temp_dir, os.W_OK):
        raise InvalidConfigurationError(f"Temp directory not writable: {temp_dir}")
