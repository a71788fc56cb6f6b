"""
Core configuration management for ARlink
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

logger = logging.getLogger(__name__)

INPUT_TABLES = ("genes", "tads", "ars", "tss")


@dataclass
class Config:
    """Main configuration class for ARlink analysis"""

    # General settings
    project_name: str = "ARlink_Analysis"
    genome_build: str = "hg19"
    n_jobs: int = 1

    # Output path
    output_dir: Optional[str] = None

    # Input tables: genes, tads, ars, tss
    inputs: Dict[str, Optional[str]] = field(default_factory=dict)

    # Analysis parameters
    io: Dict[str, Any] = field(default_factory=dict)
    regulatory_domain: Dict[str, Any] = field(default_factory=dict)
    tad_policy: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Fill in default configurations"""
        self.inputs = {**{table: None for table in INPUT_TABLES}, **(self.inputs or {})}
        self.io = {**self._get_default_io(), **(self.io or {})}
        self.regulatory_domain = {
            **self._get_default_regulatory_domain(),
            **(self.regulatory_domain or {}),
        }
        self.tad_policy = {**self._get_default_tad_policy(), **(self.tad_policy or {})}

    def _get_default_io(self) -> Dict[str, Any]:
        """Default table loading configuration"""
        return {
            "strip_name_suffix": True,
            "chromosome_prefix": "chr",
            "columns": {},
        }

    def _get_default_regulatory_domain(self) -> Dict[str, Any]:
        """Default GREAT-style regulatory domain configuration"""
        return {
            "enabled": True,
            "basal_upstream": 5000,
            "basal_downstream": 1000,
            "max_extension": 1000000,
            "strand_aware": False,
            "restrict_to_genes": True,
        }

    def _get_default_tad_policy(self) -> Dict[str, Any]:
        """Default TAD projection configuration"""
        return {"enabled": True}

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(config_file: Union[str, Path]) -> Config:
    """Load configuration from YAML or JSON file"""
    config_path = Path(config_file)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from {config_path}")

    with open(config_path, "r") as f:
        if config_path.suffix.lower() in [".yaml", ".yml"]:
            config_dict = yaml.safe_load(f)
        elif config_path.suffix.lower() == ".json":
            config_dict = json.load(f)
        else:
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")

    return Config(**(config_dict or {}))


def save_config(config: Config, output_file: Union[str, Path]) -> None:
    """Save configuration to YAML or JSON file (chosen by suffix)"""
    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = config.to_dict()

    with open(output_path, "w") as f:
        if output_path.suffix.lower() == ".json":
            json.dump(config_dict, f, indent=2)
        else:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2)

    logger.info(f"Configuration saved to {output_path}")


def validate_config(config: Config) -> List[str]:
    """Validate configuration and return list of issues"""
    issues = []

    for table, path in config.inputs.items():
        if table not in INPUT_TABLES:
            issues.append(f"Unknown input table: {table}")
        elif path and not Path(path).exists():
            issues.append(f"Input table {table} does not exist: {path}")

    if config.output_dir:
        try:
            Path(config.output_dir).mkdir(parents=True, exist_ok=True)
        except Exception as e:
            issues.append(f"Cannot create output directory {config.output_dir}: {e}")

    if not isinstance(config.n_jobs, int) or config.n_jobs == 0:
        issues.append("n_jobs must be a non-zero integer")

    for key in ("basal_upstream", "basal_downstream", "max_extension"):
        value = config.regulatory_domain.get(key)
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            issues.append(f"regulatory_domain.{key} must be a non-negative integer")

    if not config.genome_build:
        issues.append("genome_build must be set")

    return issues


def get_default_config() -> Config:
    """Get default configuration object"""
    return Config()
