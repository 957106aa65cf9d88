"""
Logging setup for the vector database.

Applies a LoggingConfig to the package logger: a console handler and,
when a file path is configured, a size-rotated log file.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from nano_vectordb.config.config_manager import LoggingConfig

PACKAGE_LOGGER = "nano_vectordb"


def setup_logging(config: LoggingConfig, logger_name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Configure the package logger from a LoggingConfig.

    Handlers installed by an earlier call are replaced, so calling this
    twice does not duplicate output.

    Args:
        config: Logging configuration
        logger_name: Logger to configure (default: the package logger)

    Returns:
        The configured logger
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(config.level.value)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)

    if config.enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if config.file_path:
        Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger
