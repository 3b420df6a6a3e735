"""
Configuration loader that loads settings from environment variables.
"""

import os
import tempfile
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from tabsort.core.exceptions import InvalidConfigurationError

from .models import AppSettings, SorterSettings

TRUE_STRINGS = ("1", "true", "yes", "on")


def _int_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise InvalidConfigurationError(
            f"Environment variable '{name}' must be an integer (got {raw!r})."
        ) from None


def _optional_int_env(name: str) -> Optional[int]:
    if not os.getenv(name):
        return None
    return _int_env(name, "0")


@lru_cache(maxsize=None)
def get_settings() -> AppSettings:
    """
    Loads the settings from environment variables.
    Uses a cache to ensure settings are loaded only once.
    """
    load_dotenv()

    # --- Sorter Settings ---
    sorter_settings = SorterSettings(
        chunk_size=_int_env("TABSORT_CHUNK_SIZE", "50000"),
        merge_factor=_int_env("TABSORT_MERGE_FACTOR", "50"),
        temp_dir=os.getenv("TABSORT_TEMP_DIR") or tempfile.gettempdir(),
        memory_threshold=_int_env("TABSORT_MEMORY_THRESHOLD", str(20 * 1024 * 1024)),
        input_size_hint=_optional_int_env("TABSORT_INPUT_SIZE_HINT"),
        use_gzip=os.getenv("TABSORT_USE_GZIP", "false").strip().lower()
        in TRUE_STRINGS,
    )

    # --- Validate Configuration ---
    from .validator import validate_configuration

    validate_configuration(sorter_settings)

    return AppSettings(
        sorter=sorter_settings,
        console_log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_dir=os.getenv("TABSORT_LOG_DIR") or None,
    )
