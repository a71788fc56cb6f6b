"""
Validation utilities for ARlink
"""

import importlib
import logging
import sys
from numbers import Integral
from typing import Any, Dict, List

from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


def validate_non_negative(**params: Any) -> None:
    """
    Check that every keyword argument is a non-negative integer

    Raises:
        ValidationError: Naming the first offending parameter
    """
    for name, value in params.items():
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise ValidationError(f"{name} must be an integer, got {value!r}")
        if value < 0:
            raise ValidationError(f"{name} must be non-negative, got {value}")


def validate_python_packages(packages: List[str]) -> Dict[str, bool]:
    """
    Check if Python packages are available

    Args:
        packages: List of package names

    Returns:
        Dictionary mapping package names to availability status
    """
    results = {}

    for package in packages:
        try:
            importlib.import_module(package)
            results[package] = True
            logger.debug(f"Package {package}: available")
        except ImportError:
            results[package] = False
            logger.debug(f"Package {package}: not available")

    return results


def validate_environment() -> List[str]:
    """
    Environment validation

    Returns:
        List of validation issues found
    """
    issues = []

    logger.info("Validating ARlink environment...")

    if sys.version_info < (3, 8):
        issues.append(
            f"Python 3.8+ required, found {sys.version_info.major}.{sys.version_info.minor}"
        )

    core_packages = ["numpy", "pandas", "bioframe", "joblib", "yaml", "colorlog"]

    package_status = validate_python_packages(core_packages)
    missing_packages = [
        pkg for pkg, available in package_status.items() if not available
    ]

    if missing_packages:
        issues.append(f"Missing Python packages: {', '.join(missing_packages)}")

    if issues:
        logger.warning(f"Environment validation found {len(issues)} issues")
        for issue in issues:
            logger.warning(f"  - {issue}")
    else:
        logger.info("Environment validation passed")

    return issues
