"""
ARlink: associating accelerated regions with the genes they may regulate

ARlink links accelerated noncoding regions (ARs) to genes under two
independent policies and counts the associations per gene.

Main Components:
- Immutable, chromosome-partitioned interval stores
- Sweep-based interval overlap join
- TAD projection of gene annotations
- GREAT-style basal plus extension regulatory domains
- Deduplicated per-gene association counting and reporting

Example:
    >>> from arlink import RegulatoryAssociationAnalysis
    >>> analysis = RegulatoryAssociationAnalysis(config="config.yaml")
    >>> results = analysis.run_full_pipeline()
"""

import logging
import sys
from importlib import metadata
from typing import Any, Dict

try:
    __version__ = metadata.version("arlink")
except metadata.PackageNotFoundError:
    __version__ = "0.1.0-dev"

# Module imports
from . import config, genomics, intervals, utils
from .config import Config, load_config
# Main imports
from .core import RegulatoryAssociationAnalysis
from .exceptions import (ArlinkError, DivisionByZeroError, EmptyResultWarning,
                         ValidationError)
from .utils import setup_logging, validate_environment

__all__ = [
    "__version__",
    "RegulatoryAssociationAnalysis",
    "Config",
    "load_config",
    "setup_logging",
    "validate_environment",
    "ArlinkError",
    "ValidationError",
    "DivisionByZeroError",
    "EmptyResultWarning",
    "intervals",
    "genomics",
    "config",
    "utils",
]


def get_info() -> Dict[str, Any]:
    """Get package information."""
    return {
        "name": "ARlink",
        "version": __version__,
        "description": "TAD and regulatory-domain association of accelerated regions with genes",
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        "modules": __all__[10:],  # Just the module names
    }


def check_dependencies() -> Dict[str, bool]:
    """Check if key dependencies are available."""
    dependencies = {}

    for name in ("numpy", "pandas", "bioframe", "joblib"):
        try:
            __import__(name)
            dependencies[name] = True
        except ImportError:
            dependencies[name] = False

    return dependencies


logger = logging.getLogger(__name__)
logger.debug(f"ARlink v{__version__} initialized")
