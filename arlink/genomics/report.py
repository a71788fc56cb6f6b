"""
Reporting for association results

Pure consumers of CountTables: summary frames, narrative text and CSV
export. Nothing here changes the computed numbers.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np
import pandas as pd

from ..utils import get_logger
from .aggregation import CountTable, proportion

logger = get_logger(__name__)

POLICY_DESCRIPTIONS = {
    "tad": "the TAD policy",
    "regulatory_domain": "the regulatory-domain policy",
}


@dataclass
class PolicyResult:
    """Result container for one association policy"""

    policy: str
    domains: int
    table: CountTable
    universe_size: int
    elements: int = 0
    parameters: Dict[str, Any] = field(default_factory=dict)

    @property
    def proportion(self) -> Optional[float]:
        """Percentage of the gene universe with at least one element"""
        if self.universe_size == 0:
            return None
        return proportion(self.table, self.universe_size)

    @property
    def element_proportion(self) -> Optional[float]:
        """Percentage of elements associated with at least one gene"""
        if self.elements == 0:
            return None
        return self.table.distinct_elements / self.elements * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "policy": self.policy,
            "domains": self.domains,
            "genes_with_elements": len(self.table),
            "associations": self.table.total,
            "associated_elements": self.table.distinct_elements,
            "universe_size": self.universe_size,
            "elements": self.elements,
            "proportion": self.proportion,
            "element_proportion": self.element_proportion,
            "parameters": dict(self.parameters),
            "counts": [{"label": label, "count": count} for label, count in self.table],
        }


def summarize_results(results: List[PolicyResult]) -> pd.DataFrame:
    """One summary row per policy"""

    summary_data = []

    for result in results:
        counts = result.table.to_dataframe()["count"]
        summary_data.append(
            {
                "policy": result.policy,
                "domains": result.domains,
                "genes_with_elements": len(result.table),
                "universe_size": result.universe_size,
                "percent_genes": (
                    result.proportion if result.proportion is not None else np.nan
                ),
                "associated_elements": result.table.distinct_elements,
                "total_elements": result.elements,
                "percent_elements": (
                    result.element_proportion
                    if result.element_proportion is not None
                    else np.nan
                ),
                "associations": result.table.total,
                "median_count": counts.median() if len(counts) > 0 else np.nan,
                "max_count": counts.max() if len(counts) > 0 else 0,
            }
        )

    return pd.DataFrame(summary_data)


def format_report(results: List[PolicyResult], top_n: int = 5) -> str:
    """
    Narrative summary of association results

    Args:
        results: Policy results to describe
        top_n: Number of top genes listed per policy

    Returns:
        Multi-line report text
    """
    lines = []

    for result in results:
        description = POLICY_DESCRIPTIONS.get(result.policy, result.policy)
        n_genes = len(result.table)

        if result.proportion is None:
            lines.append(
                f"{n_genes} genes have at least one AR under {description} "
                f"(empty gene universe)"
            )
        else:
            lines.append(
                f"{n_genes} of {result.universe_size} genes ({result.proportion:.2f}%) "
                f"have at least one AR under {description}"
            )

        if result.element_proportion is not None:
            lines.append(
                f"  {result.table.distinct_elements} of {result.elements} ARs "
                f"({result.element_proportion:.2f}%) fall in at least one domain"
            )

        if result.table.empty:
            lines.append("  No associations found")
            continue

        top = ", ".join(f"{label} ({count})" for label, count in result.table.head(top_n))
        lines.append(f"  Top genes: {top}")

    return "\n".join(lines)


def export_results(
    results: List[PolicyResult], output_dir: Union[str, Path], prefix: str = "arlink"
) -> Dict[str, Path]:
    """
    Write count tables and a summary table as CSV

    Args:
        results: Policy results to export
        output_dir: Output directory
        prefix: File name prefix

    Returns:
        Dictionary mapping table names to written paths
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    exported_files = {}

    for result in results:
        filepath = output_path / f"{prefix}_{result.policy}_counts.csv"
        result.table.to_dataframe().to_csv(filepath, index=False)
        exported_files[result.policy] = filepath
        logger.debug(f"Exported: {filepath.name}")

    summary_file = output_path / f"{prefix}_summary.csv"
    summarize_results(results).to_csv(summary_file, index=False)
    exported_files["summary"] = summary_file

    logger.info(f"Exported {len(exported_files)} CSV files to {output_path}")
    return exported_files
