import csv
import os

import pytest

from tabsort.processing.comparators import NumericComparator
from tabsort.processing.csv_io import CsvSource, write_csv
from tabsort.processing.data_source import IterableSource
from tabsort.processing.external_sorter import ExternalSorter
from tabsort.processing.sort_key import SortColumn, SortDirection


@pytest.fixture
def sample_csv(temp_sort_dir, people_header, people_records):
    path = os.path.join(temp_sort_dir, "people.csv")
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(people_header)
        for record in people_records:
            writer.writerow([record[name] for name in people_header])
    return path


def read_rows(path):
    with open(path, encoding="utf-8", newline="") as f:
        return list(csv.reader(f))


def test_csv_source_reads_header_records_and_size(sample_csv, people_records):
    source = CsvSource(sample_csv)

    assert source.header == ["name", "age", "city"]
    assert list(source) == people_records
    assert source.size_hint == os.path.getsize(sample_csv)


def test_csv_source_pads_short_rows(temp_sort_dir):
    path = os.path.join(temp_sort_dir, "short.csv")
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write("a;b;c\n1;2\n\n3;4;5\n")

    source = CsvSource(path, delimiter=";")
    assert list(source) == [
        {"a": "1", "b": "2", "c": ""},
        {"a": "3", "b": "4", "c": "5"},
    ]


def test_empty_csv_has_no_header(temp_sort_dir):
    path = os.path.join(temp_sort_dir, "empty.csv")
    open(path, "w").close()
    assert CsvSource(path).header == []


@pytest.mark.parametrize("memory_threshold", [0, 20 * 1024 * 1024])
def test_sort_csv_file_end_to_end(temp_sort_dir, sample_csv, memory_threshold):
    out_dir = os.path.join(temp_sort_dir, "runs")
    os.makedirs(out_dir)
    sorter = ExternalSorter(
        chunk_size=2, temp_dir=out_dir, memory_threshold=memory_threshold
    )

    output = sorter.sort(
        CsvSource(sample_csv),
        SortColumn("age", SortDirection.DESC, NumericComparator()),
    )
    out_path = os.path.join(temp_sort_dir, "sorted.csv")
    count = write_csv(output, out_path)

    assert count == 5
    rows = read_rows(out_path)
    assert rows[0] == ["name", "age", "city"]
    assert [row[1] for row in rows[1:]] == ["35", "32", "30", "28", "25"]
    assert os.listdir(out_dir) == []


def test_write_csv_header_only_for_empty_output(temp_sort_dir):
    sorter = ExternalSorter(temp_dir=temp_sort_dir)
    output = sorter.sort(IterableSource(["x", "y"], []), "x")
    out_path = os.path.join(temp_sort_dir, "empty_sorted.csv")

    assert write_csv(output, out_path) == 0
    assert read_rows(out_path) == [["x", "y"]]


def test_csv_source_strips_byte_order_mark(temp_sort_dir):
    path = os.path.join(temp_sort_dir, "export.csv")
    with open(path, "w", encoding="utf-8-sig", newline="") as f:
        f.write("name,age\nBob,25\nAlice,30\n")

    source = CsvSource(path)
    assert source.header == ["name", "age"]

    output = ExternalSorter(temp_dir=temp_sort_dir).sort(source, "name")
    assert [r["name"] for r in output] == ["Alice", "Bob"]
