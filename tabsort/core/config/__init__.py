"""
Centralized configuration management.

This module provides a clean interface to the configuration system.
"""

from .loader import get_settings as get_settings
from .models import (
    AppSettings as AppSettings,
)
from .models import (
    SorterSettings as SorterSettings,
)
from .validator import validate_configuration as validate_configuration

__all__ = [
    "AppSettings",
    "SorterSettings",
    "get_settings",
    "validate_configuration",
]
