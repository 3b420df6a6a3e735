"""
Simple, standardized error handling for the library.

This module provides basic error handling utilities that are used throughout
the sorter to ensure consistent error logging and best-effort cleanup.
"""

import functools
import os
from typing import Callable

import structlog

logger = structlog.get_logger(__name__)


def log_exception(func: Callable) -> Callable:
    """
    Decorator to log exceptions with full traceback information.

    This decorator ensures that any exception raised by the wrapped function
    is properly logged with traceback information before being re-raised.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            logger.error(
                f"Exception in {func.__name__}: {str(e)}",
                exc_info=True,
                func_name=func.__name__,
                error_type=type(e).__name__,
            )
            raise

    return wrapper


def remove_quietly(path: str) -> bool:
    """
    Remove a file, logging instead of raising on failure.

    Returns:
        True if the file is gone afterwards, False if removal failed.
    """
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        return True
    except OSError as e:
        logger.error(f"Error removing temp file {path}: {e}")
        return False
