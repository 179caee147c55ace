"""Logging configuration for the save codec tool."""

import logging
import sys
from typing import Optional

from .config import config


def setup_logging(log_level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """Set up logging configuration for the tool.

    Args:
        log_level: Override the log level from config
        log_file: Override the log file from config

    Returns:
        Configured logger instance
    """
    level = log_level or config.log_level
    log_file = log_file or config.log_file

    # Create formatter
    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Logs go to stderr so decoded output can be piped from stdout
    if not any(getattr(h, "_savetool", False) for h in root_logger.handlers):
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler._savetool = True
        root_logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            file_handler._savetool = True
            root_logger.addHandler(file_handler)

    tool_logger = logging.getLogger("savetool")
    tool_logger.setLevel(getattr(logging, level.upper()))

    return tool_logger


# Initialize logger
log = setup_logging()
