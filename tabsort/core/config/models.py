"""
Configuration models for the sorter.
"""

import tempfile
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class SorterSettings:
    """Settings for a single ExternalSorter instance.

    - chunk_size: records sorted in memory before spilling a run
    - merge_factor: maximum number of runs merged in one pass (fan-in)
    - memory_threshold: inputs smaller than this many bytes are sorted in memory
    - input_size_hint: explicit input size in bytes, for sources that can't report one
    """

    chunk_size: int = 50_000
    merge_factor: int = 50
    temp_dir: str = field(default_factory=tempfile.gettempdir)
    memory_threshold: int = 20 * 1024 * 1024  # 20 MiB
    input_size_hint: Optional[int] = None
    use_gzip: bool = False  # Compress run files on disk


@dataclass
class AppSettings:
    """Root settings for applications embedding the sorter."""

    sorter: SorterSettings = field(default_factory=SorterSettings)
    console_log_level: str = "INFO"
    log_dir: Optional[str] = None
