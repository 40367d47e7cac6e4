"""
whatsnew Unified Logging Configuration

Provides consistent logging setup across all whatsnew modules.
Console output goes to stderr so rendered query results on stdout stay clean.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Optional

# Default configuration
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_DIR = Path("logs")

# Environment variable names
ENV_LOG_LEVEL = "WHATSNEW_LOG_LEVEL"
ENV_LOG_FORMAT = "WHATSNEW_LOG_FORMAT"
ENV_LOG_FILE = "WHATSNEW_LOG_FILE"
ENV_LOG_DIR = "WHATSNEW_LOG_DIR"


def setup_logging(
    name: str,
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_dir: Optional[Path] = None,
    console: bool = True,
    format_string: Optional[str] = None,
    date_format: Optional[str] = None,
) -> logging.Logger:
    """
    Set up unified logging with consistent format.

    Args:
        name: Logger name (usually __name__ from calling module, or "whatsnew"
              to configure the whole package)
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
               Defaults to WHATSNEW_LOG_LEVEL env var or INFO
        log_file: Optional log file name (created in log_dir)
                  Defaults to WHATSNEW_LOG_FILE env var
        log_dir: Directory for log files
                Defaults to WHATSNEW_LOG_DIR env var or "./logs"
        console: Whether to output to stderr (default: True)
        format_string: Custom format string
        date_format: Custom date format string

    Returns:
        Configured logger instance

    Examples:
        >>> logger = setup_logging("whatsnew")
        >>> logger = setup_logging("whatsnew", level="DEBUG", log_file="whatsnew.log")
    """
    if level is None:
        level = os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)

    if format_string is None:
        format_string = os.getenv(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT)

    if date_format is None:
        date_format = DEFAULT_DATE_FORMAT

    if log_file is None:
        log_file = os.getenv(ENV_LOG_FILE) or None

    if log_dir is None:
        log_dir_str = os.getenv(ENV_LOG_DIR)
        log_dir = Path(log_dir_str) if log_dir_str else DEFAULT_LOG_DIR

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    formatter = logging.Formatter(format_string, datefmt=date_format)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(numeric_level)
        logger.addHandler(console_handler)

    if log_file:
        log_dir.mkdir(parents=True, exist_ok=True)

        log_path = log_dir / log_file
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(numeric_level)
        logger.addHandler(file_handler)

    return logger
