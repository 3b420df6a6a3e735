import os
import tempfile
from unittest.mock import patch

import pytest

from tabsort.core.config import SorterSettings, get_settings, validate_configuration
from tabsort.core.exceptions import InvalidConfigurationError


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Clear the settings cache before each test."""
    get_settings.cache_clear()


@patch("tabsort.core.config.loader.load_dotenv")
def test_get_settings_defaults(mock_load_dotenv):
    """
    Test that defaults apply when no environment variables are set.
    """
    settings = get_settings()

    mock_load_dotenv.assert_called_once()
    assert settings.sorter.chunk_size == 50_000
    assert settings.sorter.merge_factor == 50
    assert settings.sorter.temp_dir == tempfile.gettempdir()
    assert settings.sorter.memory_threshold == 20 * 1024 * 1024
    assert settings.sorter.input_size_hint is None
    assert settings.sorter.use_gzip is False
    assert settings.console_log_level == "INFO"
    assert settings.log_dir is None


@patch("tabsort.core.config.loader.load_dotenv")
def test_get_settings_happy_path(mock_load_dotenv, temp_sort_dir):
    """
    Test that settings are loaded correctly when all environment variables are set.
    """
    test_env = {
        "TABSORT_CHUNK_SIZE": "1000",
        "TABSORT_MERGE_FACTOR": "8",
        "TABSORT_TEMP_DIR": temp_sort_dir,
        "TABSORT_MEMORY_THRESHOLD": "4096",
        "TABSORT_INPUT_SIZE_HINT": "123456",
        "TABSORT_USE_GZIP": "Yes",
        "TABSORT_LOG_DIR": "/var/log/tabsort",
        "LOG_LEVEL": "debug",
    }

    with patch.dict(os.environ, test_env):
        settings = get_settings()

        assert settings.sorter == SorterSettings(
            chunk_size=1000,
            merge_factor=8,
            temp_dir=temp_sort_dir,
            memory_threshold=4096,
            input_size_hint=123456,
            use_gzip=True,
        )
        assert settings.console_log_level == "DEBUG"
        assert settings.log_dir == "/var/log/tabsort"


@patch("tabsort.core.config.loader.load_dotenv")
def test_settings_are_cached(mock_load_dotenv):
    assert get_settings() is get_settings()


@pytest.mark.parametrize(
    "name, value",
    [
        ("TABSORT_CHUNK_SIZE", "0"),
        ("TABSORT_CHUNK_SIZE", "lots"),
        ("TABSORT_MERGE_FACTOR", "1"),
        ("TABSORT_MEMORY_THRESHOLD", "-1"),
        ("TABSORT_INPUT_SIZE_HINT", "-5"),
        ("TABSORT_TEMP_DIR", "/definitely/not/a/real/dir"),
    ],
)
@patch("tabsort.core.config.loader.load_dotenv")
def test_invalid_values_raise(mock_load_dotenv, name, value):
    """
    Test that an InvalidConfigurationError is raised for unusable values.
    """
    with patch.dict(os.environ, {name: value}):
        with pytest.raises(InvalidConfigurationError):
            get_settings()


def test_validate_configuration_accepts_defaults():
    validate_configuration(SorterSettings())


def test_validate_configuration_messages(temp_sort_dir):
    with pytest.raises(InvalidConfigurationError, match="Chunk size must be > 0"):
        validate_configuration(SorterSettings(chunk_size=0, temp_dir=temp_sort_dir))
    with pytest.raises(InvalidConfigurationError, match="Merge factor must be at least 2"):
        validate_configuration(SorterSettings(merge_factor=1, temp_dir=temp_sort_dir))
