"""
CSV adapters for the sorter: a file-backed source and sink.
"""

import csv
import os
from typing import Dict, Iterator, List, Optional, Sequence

import structlog

logger = structlog.get_logger(__name__)


class CsvSource:
    """
    Reads a headered CSV file as a tabular source.

    The first row is the header. The file size is reported as the size hint so
    small files can take the in-memory path.
    """

    def __init__(self, path: str, delimiter: str = ",", encoding: str = "utf-8"):
        self.path = path
        self.delimiter = delimiter
        self.encoding = encoding
        self.header: List[str] = self._read_header()

    def _read_header(self) -> List[str]:
        with open(self.path, "r", encoding=self.encoding, newline="") as f:
            reader = csv.reader(f, delimiter=self.delimiter)
            header = next(reader, [])
        # Spreadsheet exports often start with a UTF-8 byte order mark
        if header and header[0].startswith("\ufeff"):
            header[0] = header[0][1:]
        return header

    @property
    def size_hint(self) -> Optional[int]:
        try:
            return os.path.getsize(self.path)
        except OSError:
            return None

    def __iter__(self) -> Iterator[Dict[str, str]]:
        with open(self.path, "r", encoding=self.encoding, newline="") as f:
            reader = csv.reader(f, delimiter=self.delimiter)
            next(reader, None)
            header = self.header
            for row in reader:
                if not row:
                    continue
                record = dict(zip(header, row))
                # Short rows are padded with empty values
                for name in header[len(row) :]:
                    record[name] = ""
                yield record


class CsvSink:
    """Writes a header and records to an open text file as CSV."""

    def __init__(self, fh, delimiter: str = ","):
        self._writer = csv.writer(fh, delimiter=delimiter)
        self.header: List[str] = []
        self.record_count = 0

    def write_header(self, header: Sequence[str]) -> None:
        self.header = list(header)
        self._writer.writerow(self.header)

    def write(self, record: Dict[str, str]) -> None:
        self._writer.writerow([record.get(name, "") for name in self.header])
        self.record_count += 1


def write_csv(output, path: str, delimiter: str = ",", encoding: str = "utf-8") -> int:
    """
    Writes a sorted output to a CSV file.

    Returns:
        The number of records written.
    """
    with open(path, "w", encoding=encoding, newline="") as f:
        sink = CsvSink(f, delimiter=delimiter)
        output.write_to(sink)
    logger.info(f"Wrote {sink.record_count} records to {path}")
    return sink.record_count
