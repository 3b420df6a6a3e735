import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import structlog

from tabsort.core.memory_utils import get_peak_memory_usage

logger = structlog.get_logger(__name__)


@dataclass
class SortMetrics:
    """Counters collected over a single sort call."""

    # Volume
    records_processed: int = 0
    chunks_created: int = 0
    merge_passes: int = 0
    temp_files_created: int = 0

    # I/O
    total_bytes_read: int = 0
    total_bytes_written: int = 0

    # Memory
    peak_memory: int = field(default_factory=get_peak_memory_usage)

    # Timing
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    def record_bytes_read(self, count: int):
        """Record bytes read from run files."""
        self.total_bytes_read += count

    def record_bytes_written(self, count: int):
        """Record bytes written to run files."""
        self.total_bytes_written += count

    def update_peak_memory(self):
        """Refresh the peak memory snapshot."""
        current = get_peak_memory_usage()
        if current > self.peak_memory:
            self.peak_memory = current

    def finish(self):
        """Mark the sort as complete."""
        self.end_time = time.time()
        self.update_peak_memory()

    @property
    def is_finished(self) -> bool:
        return self.end_time is not None

    def get_total_time(self) -> float:
        """Get total elapsed time in seconds."""
        end = self.end_time if self.end_time is not None else time.time()
        return round(end - self.start_time, 3)

    def get_records_per_second(self) -> float:
        """Get records processed per second."""
        elapsed = self.get_total_time()
        return round(self.records_processed / elapsed, 2) if elapsed > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Generate a metrics report."""
        return {
            "total_time": self.get_total_time(),
            "records_processed": self.records_processed,
            "records_per_second": self.get_records_per_second(),
            "chunks_created": self.chunks_created,
            "merge_passes": self.merge_passes,
            "temp_files_created": self.temp_files_created,
            "peak_memory_bytes": self.peak_memory,
            "peak_memory_mb": round(self.peak_memory / 1024 / 1024, 2),
            "total_bytes_read": self.total_bytes_read,
            "total_bytes_written": self.total_bytes_written,
        }

    def log_summary(self):
        """Log a summary of metrics."""
        report = self.to_dict()
        logger.info(
            f"Sort Summary: "
            f"Records: {self.records_processed}, "
            f"Chunks: {self.chunks_created}, "
            f"Merge passes: {self.merge_passes}, "
            f"Rate: {report['records_per_second']:.1f} records/sec, "
            f"Peak memory: {report['peak_memory_mb']:.1f} MB",
            **report,
        )
