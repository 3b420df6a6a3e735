"""
Sequential access to sorted runs on disk.

A run file is JSON lines: the header array first, then one array of values per
record in header order. Runs are written once and then read once, forward.
"""

import gzip
import json
import os
import tempfile
from dataclasses import dataclass
from typing import Dict, Generator, List, Optional, Sequence

import structlog

from tabsort.core.exceptions import SortIOError
from tabsort.core.metrics import SortMetrics
from tabsort.core.simple_error_handler import remove_quietly
from tabsort.processing.sort_key import Record

logger = structlog.get_logger(__name__)


@dataclass
class Run:
    """A sorted run persisted to a temporary file."""

    path: str
    record_count: int = 0


def open_run_file(path: str, mode: str, use_gzip: bool):
    if use_gzip:
        return gzip.open(path, mode + "t", encoding="utf-8")
    return open(path, mode, encoding="utf-8", newline="\n")


def run_suffix(use_gzip: bool) -> str:
    return ".jsonl.gz" if use_gzip else ".jsonl"


def create_temp_file(temp_dir: str, use_gzip: bool, prefix: str = "tabsort_") -> str:
    """Create an empty, uniquely named file in ``temp_dir`` and return its path."""
    try:
        fd, tmp_path = tempfile.mkstemp(
            suffix=run_suffix(use_gzip), prefix=prefix, dir=temp_dir
        )
    except OSError as e:
        raise SortIOError(
            f"Failed to create temporary file in {temp_dir}: {e}", path=temp_dir
        ) from e
    os.close(fd)
    return tmp_path


class RunFileRegistry:
    """
    Creates run files for one sort call and tracks them until they are deleted
    or handed over to the caller.
    """

    def __init__(self, temp_dir: str, use_gzip: bool, metrics: SortMetrics):
        self.temp_dir = temp_dir
        self.use_gzip = use_gzip
        self.metrics = metrics
        self._paths: List[str] = []

    @property
    def paths(self) -> List[str]:
        return list(self._paths)

    def new_path(self) -> str:
        path = create_temp_file(self.temp_dir, self.use_gzip)
        self._paths.append(path)
        self.metrics.temp_files_created += 1
        return path

    def writer(self, header: Sequence[str]) -> "RunWriter":
        return RunWriter(self.new_path(), header, self.use_gzip, self.metrics)

    def reader(self, run: Run) -> "RunReader":
        return RunReader(run.path, self.use_gzip, self.metrics)

    def release(self, run: Run) -> None:
        """Stop tracking a run whose ownership moves to the caller."""
        if run.path in self._paths:
            self._paths.remove(run.path)

    def discard(self, run: Run) -> None:
        """Delete a run that has been fully consumed."""
        self.release(run)
        remove_quietly(run.path)

    def cleanup(self) -> None:
        """Delete every run still tracked; failures are logged, not raised."""
        if self._paths:
            logger.debug(f"Removing {len(self._paths)} temporary run file(s)")
        for path in self._paths:
            remove_quietly(path)
        self._paths = []


class RunWriter:
    """Writes a header followed by records to a run file."""

    def __init__(
        self,
        path: str,
        header: Sequence[str],
        use_gzip: bool = False,
        metrics: Optional[SortMetrics] = None,
    ):
        self.path = path
        self.header: List[str] = list(header)
        self.use_gzip = use_gzip
        self.metrics = metrics
        self.record_count = 0
        self._fh = None

    def open(self) -> "RunWriter":
        try:
            self._fh = open_run_file(self.path, "w", self.use_gzip)
        except OSError as e:
            raise SortIOError(
                f"Failed to open run file {self.path} for writing: {e}", path=self.path
            ) from e
        self._write_line(self.header)
        return self

    def write(self, record: Record) -> None:
        self._write_line(
            ["" if record.get(name) is None else record[name] for name in self.header]
        )
        self.record_count += 1

    def write_all(self, records) -> None:
        for record in records:
            self.write(record)

    def close(self) -> Run:
        if self._fh is not None:
            try:
                self._fh.close()
            except OSError as e:
                raise SortIOError(
                    f"Failed to close run file {self.path}: {e}", path=self.path
                ) from e
            finally:
                self._fh = None
        return Run(self.path, self.record_count)

    def _write_line(self, values: List[str]) -> None:
        line = json.dumps(values, ensure_ascii=False) + "\n"
        try:
            self._fh.write(line)
        except OSError as e:
            raise SortIOError(
                f"Failed to write run file {self.path}: {e}", path=self.path
            ) from e
        if self.metrics is not None:
            self.metrics.record_bytes_written(len(line.encode("utf-8")))

    def __enter__(self) -> "RunWriter":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
            return
        # Already failing; don't mask the pending error with a close error
        try:
            self.close()
        except SortIOError:
            logger.warning(f"Could not close run file {self.path} after error")


class RunReader:
    """Reads the header and then records, forward only, from a run file."""

    def __init__(
        self,
        path: str,
        use_gzip: bool = False,
        metrics: Optional[SortMetrics] = None,
    ):
        self.path = path
        self.use_gzip = use_gzip
        self.metrics = metrics
        self.header: List[str] = []
        self._fh = None

    def open(self) -> "RunReader":
        try:
            self._fh = open_run_file(self.path, "r", self.use_gzip)
            first = self._fh.readline()
        except OSError as e:
            self.close()
            raise SortIOError(
                f"Failed to open run file {self.path} for reading: {e}", path=self.path
            ) from e
        if not first:
            self.close()
            raise SortIOError(f"Run file {self.path} has no header", path=self.path)
        self._count(first)
        self.header = self._decode(first)
        return self

    def __iter__(self) -> Generator[Dict[str, str], None, None]:
        header = self.header
        while self._fh is not None:
            try:
                line = self._fh.readline()
            except OSError as e:
                raise SortIOError(
                    f"Failed to read run file {self.path}: {e}", path=self.path
                ) from e
            if not line:
                return
            self._count(line)
            yield dict(zip(header, self._decode(line)))

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def _count(self, line: str) -> None:
        if self.metrics is not None:
            self.metrics.record_bytes_read(len(line.encode("utf-8")))

    def _decode(self, line: str) -> List[str]:
        try:
            return json.loads(line)
        except json.JSONDecodeError as e:
            raise SortIOError(
                f"Corrupt run file {self.path}: {e}", path=self.path
            ) from e

    def __enter__(self) -> "RunReader":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
