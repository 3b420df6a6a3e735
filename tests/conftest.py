import shutil
import tempfile

import pytest

from tabsort.core.config import get_settings
from tabsort.processing.data_source import IterableSource

TABSORT_ENV_VARS = [
    "TABSORT_CHUNK_SIZE",
    "TABSORT_MERGE_FACTOR",
    "TABSORT_TEMP_DIR",
    "TABSORT_MEMORY_THRESHOLD",
    "TABSORT_INPUT_SIZE_HINT",
    "TABSORT_USE_GZIP",
    "TABSORT_LOG_DIR",
    "LOG_LEVEL",
]


@pytest.fixture(scope="function", autouse=True)
def set_test_environment(monkeypatch):
    """
    Gives every test a clean environment so settings from the developer's
    shell or a .env file don't leak into assertions.
    """
    for name in TABSORT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="function")
def temp_sort_dir():
    """Create a temporary directory for run files."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture(scope="function")
def people_header():
    return ["name", "age", "city"]


@pytest.fixture(scope="function")
def people_records():
    """A small set of people rows with a mix of cities and ages."""
    return [
        {"name": "Alice", "age": "30", "city": "New York"},
        {"name": "Bob", "age": "25", "city": "Los Angeles"},
        {"name": "Charlie", "age": "35", "city": "Chicago"},
        {"name": "Diana", "age": "28", "city": "Houston"},
        {"name": "Eve", "age": "32", "city": "Phoenix"},
    ]


@pytest.fixture(scope="function")
def people_source(people_header, people_records):
    return IterableSource(people_header, list(people_records))
