"""
K-way merge of sorted runs.

The priority queue holds one HeapEntry per open run. Entries are ordered by the
composite sort key; records that compare equal on every key are emitted in the
order of their runs within the merge group (lower run index first).
"""

import heapq
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Sequence

import structlog

from tabsort.processing.run_io import Run, RunFileRegistry
from tabsort.processing.sort_key import KeyValues, SortKey

logger = structlog.get_logger(__name__)


@dataclass
class HeapEntry:
    """Current head record of one run in the merge."""

    key: KeyValues
    run_index: int
    record: Dict[str, str] = field(compare=False)
    sort_key: SortKey = field(compare=False, repr=False)

    def __lt__(self, other: "HeapEntry") -> bool:
        comparison = self.sort_key.compare_keys(self.key, other.key)
        if comparison != 0:
            return comparison < 0
        return self.run_index < other.run_index


class KWayMerger:
    """
    Merges a group of sorted runs into one sorted run.
    """

    def __init__(self, registry: RunFileRegistry):
        self.registry = registry
        self.logger = structlog.get_logger(__name__)

    def merge(
        self, runs: Sequence[Run], sort_key: SortKey, header: Sequence[str]
    ) -> Run:
        """
        Performs a k-way merge of the given runs into a new run.
        """
        writer = self.registry.writer(header)
        with ExitStack() as stack:
            iterators: List[Iterator[Dict[str, str]]] = []
            for run in runs:
                reader = stack.enter_context(self.registry.reader(run))
                iterators.append(iter(reader))

            heap: List[HeapEntry] = []
            for idx, records in enumerate(iterators):
                record = next(records, None)
                if record is not None:
                    heap.append(
                        HeapEntry(sort_key.extract(record), idx, record, sort_key)
                    )
            heapq.heapify(heap)

            with writer:
                while heap:
                    entry = heap[0]
                    writer.write(entry.record)
                    record = next(iterators[entry.run_index], None)
                    if record is None:
                        heapq.heappop(heap)
                    else:
                        heapq.heapreplace(
                            heap,
                            HeapEntry(
                                sort_key.extract(record),
                                entry.run_index,
                                record,
                                sort_key,
                            ),
                        )

        merged = writer.close()
        self.logger.debug(
            f"Merged {len(runs)} run(s) into {merged.path} "
            f"({merged.record_count} records)"
        )
        return merged
