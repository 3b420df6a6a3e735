"""
External sorting component.

This module provides the orchestrator that sorts tabular record streams which
may not fit into memory. Small inputs are sorted in memory; everything else is
split into sorted chunks on disk and combined with a multi-pass k-way merge.
"""

import weakref
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Union

import structlog

from tabsort.core.config import SorterSettings, validate_configuration
from tabsort.core.exceptions import InvalidConfigurationError
from tabsort.core.metrics import SortMetrics
from tabsort.core.simple_error_handler import log_exception, remove_quietly
from tabsort.processing.chunker import ChunkProducer
from tabsort.processing.comparators import Comparator
from tabsort.processing.data_source import TabularSink, TabularSource
from tabsort.processing.merger import KWayMerger
from tabsort.processing.run_io import Run, RunFileRegistry, RunReader
from tabsort.processing.sort_key import SortColumn, SortKey

logger = structlog.get_logger(__name__)


class SortStrategy(Enum):
    IN_MEMORY = "in_memory"
    EXTERNAL = "external"


def select_strategy(size_bytes: Optional[int], threshold: int) -> SortStrategy:
    """
    Chooses between the in-memory and the external path.

    An unknown size always takes the external path.
    """
    if size_bytes is None:
        return SortStrategy.EXTERNAL
    if size_bytes < threshold:
        return SortStrategy.IN_MEMORY
    return SortStrategy.EXTERNAL


class SortedOutput:
    """
    The sorted result: a header plus a single-pass stream of records.

    When backed by a run file, the file is deleted once the records have been
    fully read, the output is closed, or the output is garbage collected.
    """

    def __init__(
        self,
        header: Sequence[str],
        records: Optional[List[Dict[str, str]]] = None,
        run: Optional[Run] = None,
        use_gzip: bool = False,
    ):
        self.header: List[str] = list(header)
        self._records = records if records is not None else []
        self._run = run
        self._use_gzip = use_gzip
        self._consumed = False
        self._finalizer = None
        if run is not None:
            # Removes the run file even if the output is dropped unread
            self._finalizer = weakref.finalize(self, remove_quietly, run.path)

    @property
    def path(self) -> Optional[str]:
        return self._run.path if self._run is not None else None

    def __len__(self) -> int:
        if self._run is not None:
            return self._run.record_count
        return len(self._records)

    def __iter__(self) -> Iterator[Dict[str, str]]:
        if self._consumed:
            return
        self._consumed = True
        if self._run is None:
            yield from self._records
            return
        try:
            with RunReader(self._run.path, self._use_gzip) as reader:
                yield from reader
        finally:
            self.close()

    def write_to(self, sink: TabularSink) -> None:
        """Writes the header once, then every record, to a tabular sink."""
        sink.write_header(self.header)
        for record in self:
            sink.write(record)

    def close(self) -> None:
        self._consumed = True
        self._records = []
        if self._finalizer is not None:
            self._finalizer()
        self._run = None

    def __enter__(self) -> "SortedOutput":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ExternalSorter:
    """
    Sorts a tabular source by one or more columns using external sorting.
    """

    def __init__(
        self,
        chunk_size: int = 50_000,
        merge_factor: int = 50,
        temp_dir: Optional[str] = None,
        memory_threshold: int = 20 * 1024 * 1024,
        input_size_hint: Optional[int] = None,
        use_gzip: bool = False,
    ):
        """
        Initializes the ExternalSorter.

        Raises:
            InvalidConfigurationError: If any setting is out of range or the
                temp directory is not writable.
        """
        settings = SorterSettings(
            chunk_size=chunk_size,
            merge_factor=merge_factor,
            memory_threshold=memory_threshold,
            input_size_hint=input_size_hint,
            use_gzip=use_gzip,
        )
        if temp_dir is not None:
            settings.temp_dir = temp_dir
        validate_configuration(settings)
        self.settings = settings
        self.metrics = SortMetrics()
        self.logger = structlog.get_logger(__name__)

    @classmethod
    def from_settings(cls, settings: SorterSettings) -> "ExternalSorter":
        return cls(
            chunk_size=settings.chunk_size,
            merge_factor=settings.merge_factor,
            temp_dir=settings.temp_dir,
            memory_threshold=settings.memory_threshold,
            input_size_hint=settings.input_size_hint,
            use_gzip=settings.use_gzip,
        )

    def get_metrics(self) -> SortMetrics:
        """Metrics of the most recent sort call."""
        return self.metrics

    @log_exception
    def sort(
        self,
        source: TabularSource,
        columns: Union[str, SortColumn, Sequence[SortColumn], SortKey],
        comparator: Optional[Comparator] = None,
    ) -> SortedOutput:
        """
        Sorts the source and returns the ordered output.

        Args:
            source: The records to sort, with their header.
            columns: A column name, a SortColumn, a sequence of SortColumns or a SortKey.
            comparator: Comparator for the single-column-name form.

        Raises:
            InvalidConfigurationError: If the header or the sort key is empty.
            ColumnNotFoundError: If a sort column is missing from the header.
            SortIOError: If a temporary run file can't be created, written or read.
        """
        self.metrics = SortMetrics()
        sort_key = SortKey.build(columns, comparator)

        header = list(source.header or [])
        if not header:
            raise InvalidConfigurationError("Input must have a header for sorting.")
        sort_key.validate_against(header)

        strategy = select_strategy(
            self._estimate_size(source), self.settings.memory_threshold
        )
        self.logger.info(f"Sorting by {sort_key!r} using the {strategy.value} path")

        if strategy is SortStrategy.IN_MEMORY:
            output = self._sort_in_memory(source, sort_key, header)
        else:
            output = self._sort_external(source, sort_key, header)

        self.metrics.finish()
        self.metrics.log_summary()
        return output

    def _estimate_size(self, source: TabularSource) -> Optional[int]:
        if self.settings.input_size_hint is not None:
            return self.settings.input_size_hint
        return getattr(source, "size_hint", None)

    def _sort_in_memory(
        self, source: TabularSource, sort_key: SortKey, header: List[str]
    ) -> SortedOutput:
        records = list(source)
        self.metrics.records_processed = len(records)
        records.sort(key=sort_key.as_sort_key())
        self.metrics.update_peak_memory()
        return SortedOutput(header, records=records)

    def _sort_external(
        self, source: TabularSource, sort_key: SortKey, header: List[str]
    ) -> SortedOutput:
        registry = RunFileRegistry(
            self.settings.temp_dir, self.settings.use_gzip, self.metrics
        )
        try:
            producer = ChunkProducer(self.settings.chunk_size, registry, self.metrics)
            runs = producer.produce_runs(source, sort_key, header)
            if not runs:
                return SortedOutput(header, records=[])

            final_run = self._merge_runs(runs, sort_key, header, registry)
            registry.release(final_run)
            return SortedOutput(header, run=final_run, use_gzip=self.settings.use_gzip)
        finally:
            registry.cleanup()

    def _merge_runs(
        self,
        runs: List[Run],
        sort_key: SortKey,
        header: List[str],
        registry: RunFileRegistry,
    ) -> Run:
        """
        Merges runs in passes of at most ``merge_factor`` runs until one remains.
        """
        merger = KWayMerger(registry)
        merge_factor = self.settings.merge_factor

        while len(runs) > 1:
            merged: List[Run] = []
            for start in range(0, len(runs), merge_factor):
                group = runs[start : start + merge_factor]
                if len(group) == 1:
                    # Nothing to merge with; carry it to the next pass
                    merged.append(group[0])
                    continue
                merged.append(merger.merge(group, sort_key, header))
                for run in group:
                    registry.discard(run)
            runs = merged
            self.metrics.merge_passes += 1
            self.metrics.update_peak_memory()
            self.logger.debug(
                f"Merge pass {self.metrics.merge_passes} left {len(runs)} run(s)"
            )

        return runs[0]
