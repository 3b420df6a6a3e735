"""
Chunking component of the external sort.

Reads records from a source, sorts them in bounded batches and spills every
batch to disk as a sorted run.
"""

from typing import Dict, Iterable, List, Sequence

import structlog

from tabsort.core.metrics import SortMetrics
from tabsort.processing.run_io import Run, RunFileRegistry
from tabsort.processing.sort_key import SortKey

logger = structlog.get_logger(__name__)


class ChunkProducer:
    """
    Splits a record stream into sorted runs of at most ``chunk_size`` records.
    """

    def __init__(
        self, chunk_size: int, registry: RunFileRegistry, metrics: SortMetrics
    ):
        self.chunk_size = chunk_size
        self.registry = registry
        self.metrics = metrics
        self.logger = structlog.get_logger(__name__)

    def produce_runs(
        self,
        records: Iterable[Dict[str, str]],
        sort_key: SortKey,
        header: Sequence[str],
    ) -> List[Run]:
        """
        Reads records, sorts them into chunks, and writes them to temporary files.
        """
        runs: List[Run] = []
        batch: List[Dict[str, str]] = []
        key_func = sort_key.as_sort_key()

        def flush_chunk() -> None:
            nonlocal batch
            if not batch:
                return
            batch.sort(key=key_func)
            writer = self.registry.writer(header)
            with writer:
                writer.write_all(batch)
            run = writer.close()
            runs.append(run)
            self.metrics.chunks_created += 1
            self.metrics.update_peak_memory()
            self.logger.debug(
                f"Wrote sorted chunk with {run.record_count} records -> {run.path}"
            )
            batch = []

        for record in records:
            batch.append(record)
            self.metrics.records_processed += 1
            if len(batch) >= self.chunk_size:
                flush_chunk()

        flush_chunk()
        self.logger.info(
            f"Prepared {len(runs)} sorted chunk(s) from "
            f"{self.metrics.records_processed} records."
        )
        return runs
