"""
Logging utilities for ARlink

Handlers are attached to the ``arlink`` package logger, not the root
logger, so an application embedding ARlink keeps its own configuration.
"""

import logging
import sys
import time
from functools import wraps
from pathlib import Path
from typing import IO, Optional, Union

import colorlog

PACKAGE_LOGGER = "arlink"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def _console_handler(
    stream: IO, format_string: str, use_colors: bool
) -> logging.Handler:
    if use_colors:
        handler = colorlog.StreamHandler(stream)
        handler.setFormatter(
            colorlog.ColoredFormatter(
                "%(log_color)s" + format_string,
                datefmt=DATE_FORMAT,
                log_colors=LOG_COLORS,
            )
        )
    else:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(format_string, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: Union[str, int] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    format_string: Optional[str] = None,
    use_colors: bool = True,
    stream: Optional[IO] = None,
) -> logging.Logger:
    """
    Configure the ``arlink`` logger

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Logging level (INFO, DEBUG, etc.)
        log_file: Optional file that also receives every record
        format_string: Custom format string
        use_colors: Colour console output with colorlog
        stream: Console stream (default: standard output)

    Returns:
        Configured package logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    format_string = format_string or LOG_FORMAT

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = _console_handler(
        stream if stream is not None else sys.stdout, format_string, use_colors
    )
    console_handler.setLevel(level)
    package_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(logging.Formatter(format_string, datefmt=DATE_FORMAT))
        file_handler.setLevel(level)
        package_logger.addHandler(file_handler)

    package_logger.setLevel(level)
    package_logger.propagate = False

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``arlink`` namespace"""
    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


def log_execution_time(func):
    """Decorator to log execution time of functions"""

    @wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        start_time = time.time()

        try:
            result = func(*args, **kwargs)
            execution_time = time.time() - start_time
            logger.info(f"{func.__name__} completed in {execution_time:.2f} seconds")
            return result
        except Exception as e:
            execution_time = time.time() - start_time
            logger.error(
                f"{func.__name__} failed after {execution_time:.2f} seconds: {e}"
            )
            raise

    return wrapper
