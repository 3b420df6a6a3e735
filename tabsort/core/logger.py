import logging
import logging.handlers
import os
import sys

import structlog

from tabsort.core.config import AppSettings


def setup_logging(settings: AppSettings) -> None:
    """
    Configures structured logging using structlog.
    """
    # Get console log level from settings
    console_level_name = settings.console_log_level.upper()
    console_level = getattr(logging, console_level_name, logging.INFO)

    # Shared processors for structlog
    shared_processors: list = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=True),
    )
    console_handler.setFormatter(console_formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(console_handler)

    # Rotating file handler (JSON format), only when a log directory is configured
    if settings.log_dir:
        os.makedirs(settings.log_dir, exist_ok=True)
        log_file_path = os.path.join(settings.log_dir, "tabsort.log")
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path,
            maxBytes=5 * 1024 * 1024,  # 5 MB
            backupCount=3,
        )
        file_handler.setLevel(logging.DEBUG)
        file_formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    structlog.get_logger(__name__).info("Logging configured successfully.")
