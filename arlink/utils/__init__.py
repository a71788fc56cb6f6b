"""
Utility functions and classes for ARlink
"""

from .logging import get_logger, log_execution_time, setup_logging
from .validation import (validate_environment, validate_non_negative,
                         validate_python_packages)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_execution_time",
    "validate_non_negative",
    "validate_python_packages",
    "validate_environment",
]
