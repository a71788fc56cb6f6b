"""
Core ARlink analysis orchestrator
"""

import json
import pickle
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import Config, load_config, validate_config
from .exceptions import ValidationError
from .genomics import (AssociationAggregator, DomainBuilder,
                       IntervalTableLoader, PolicyResult, export_results,
                       format_report, summarize_store)
from .intervals import IntervalStore
from .utils import get_logger

logger = get_logger(__name__)

DEFAULT_STEPS = ["tad", "regulatory_domain"]


class RegulatoryAssociationAnalysis:
    """
    Runs both association policies over one set of input tables

    Stores are loaded lazily from the configured input paths unless they
    were supplied up front with :meth:`from_stores`.
    """

    def __init__(self, config: Union[str, Path, Config, Dict[str, Any]]):
        """
        Initialize ARlink analysis

        Args:
            config: Configuration file path, Config object, or config dict
        """
        if isinstance(config, (str, Path)):
            self.config = load_config(config)
        elif isinstance(config, dict):
            self.config = Config(**config)
        elif isinstance(config, Config):
            self.config = config
        else:
            raise ValidationError(
                "Invalid config type. Expected str, Path, dict, or Config object"
            )

        for issue in validate_config(self.config):
            logger.warning(f"Configuration issue: {issue}")

        self.loader = IntervalTableLoader(self.config)
        self.domain_builder = DomainBuilder(n_jobs=self.config.n_jobs)
        self.aggregator = AssociationAggregator(n_jobs=self.config.n_jobs)

        self._stores: Dict[str, IntervalStore] = {}
        self.results: Dict[str, Dict[str, Any]] = {}
        self.execution_times: Dict[str, float] = {}

    @classmethod
    def from_stores(
        cls,
        config: Optional[Union[Config, Dict[str, Any]]] = None,
        **stores: IntervalStore,
    ) -> "RegulatoryAssociationAnalysis":
        """Create an analysis over already-built stores (genes, tads, ars, tss)"""
        analysis = cls(config if config is not None else Config())
        for kind, store in stores.items():
            if not isinstance(store, IntervalStore):
                raise ValidationError(f"{kind} must be an IntervalStore")
            analysis._stores[kind] = store
        return analysis

    def _has_input(self, kind: str) -> bool:
        return kind in self._stores or bool(self.config.inputs.get(kind))

    def store(self, kind: str) -> IntervalStore:
        """Input store for ``kind``, loading it on first use"""
        if kind not in self._stores:
            self._stores[kind] = self.loader.load(kind)
        return self._stores[kind]

    def run_tad_policy(self) -> PolicyResult:
        """Associate ARs with genes through the TADs the genes fall in"""

        logger.info("Running TAD association policy")

        genes = self.store("genes")
        ars = self.store("ars")

        domains = self.domain_builder.project_tad(genes, self.store("tads"))
        table = self.aggregator.aggregate(domains, ars)

        return PolicyResult(
            policy="tad",
            domains=len(domains),
            table=table,
            universe_size=len(genes.labels()),
            elements=len(ars.labels()),
        )

    def run_regulatory_domain_policy(self) -> PolicyResult:
        """Associate ARs with genes through basal plus extension domains"""

        params = self.config.regulatory_domain
        logger.info("Running regulatory-domain association policy")

        gene_filter = None
        universe = None
        if params.get("restrict_to_genes", True) and self._has_input("genes"):
            gene_filter = set(self.store("genes").labels())
            universe = len(gene_filter)

        tss = self.store("tss")
        ars = self.store("ars")

        domains = self.domain_builder.extend_domain(
            tss,
            gene_filter,
            basal_upstream=params["basal_upstream"],
            basal_downstream=params["basal_downstream"],
            max_extension=params["max_extension"],
            strand_aware=params.get("strand_aware", False),
        )
        table = self.aggregator.aggregate(domains, ars)

        if universe is None:
            universe = len(tss.labels())

        return PolicyResult(
            policy="regulatory_domain",
            domains=len(domains),
            table=table,
            universe_size=universe,
            elements=len(ars.labels()),
            parameters={
                key: params[key]
                for key in (
                    "basal_upstream",
                    "basal_downstream",
                    "max_extension",
                    "strand_aware",
                )
                if key in params
            },
        )

    def run_full_pipeline(self, steps: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Run the association policies

        Args:
            steps: Policies to run (default: every enabled policy)

        Returns:
            Dictionary of per-step results
        """
        logger.info("=" * 60)
        logger.info(f"Starting ARlink analysis: {self.config.project_name}")
        logger.info(f"Genome build: {self.config.genome_build}")
        logger.info("=" * 60)

        start_time = time.time()

        if steps is None:
            enabled = {
                "tad": self.config.tad_policy.get("enabled", True),
                "regulatory_domain": self.config.regulatory_domain.get("enabled", True),
            }
            steps = [step for step in DEFAULT_STEPS if enabled[step]]

        for step in steps:
            try:
                step_start = time.time()
                logger.info(f"{'=' * 20} STEP: {step.upper()} {'=' * 20}")

                if step == "tad":
                    result = self.run_tad_policy()
                elif step == "regulatory_domain":
                    result = self.run_regulatory_domain_policy()
                else:
                    logger.warning(f"Unknown pipeline step: {step}")
                    continue

                self.results[step] = {"success": True, "result": result}

                step_time = time.time() - step_start
                self.execution_times[step] = step_time
                logger.info(f"Step {step} completed in {step_time:.2f} seconds")

            except Exception as e:
                logger.error(f"Step {step} failed: {e}", exc_info=True)
                self.results[step] = {"success": False, "error": str(e)}

        self.execution_times["total"] = time.time() - start_time

        self._create_pipeline_summary()

        return self.results

    def policy_results(self) -> List[PolicyResult]:
        """Successful policy results in run order"""
        return [
            entry["result"] for entry in self.results.values() if entry.get("success")
        ]

    def report(self) -> str:
        return format_report(self.policy_results())

    def export(self, output_dir: Optional[Union[str, Path]] = None) -> Dict[str, Path]:
        """Export count tables and summary CSVs"""
        target = output_dir or self.config.output_dir
        if target is None:
            raise ValidationError("No output directory configured")
        return export_results(self.policy_results(), target, prefix=self.config.project_name)

    def input_summary(self) -> Dict[str, Dict[str, Any]]:
        """Statistics for every loaded input store"""
        return {kind: summarize_store(store) for kind, store in self._stores.items()}

    def _create_pipeline_summary(self) -> None:
        """Log pipeline summary"""

        logger.info("=" * 50)
        logger.info("ARLINK PIPELINE SUMMARY")
        logger.info("=" * 50)

        for step, exec_time in self.execution_times.items():
            if step != "total":
                logger.info(f"  {step}: {exec_time:.2f} seconds")
        logger.info(f"  TOTAL: {self.execution_times.get('total', 0):.2f} seconds")

        for step, entry in self.results.items():
            status = "SUCCESS" if entry["success"] else "FAILED"
            logger.info(f"  {step}: {status}")
            if not entry["success"]:
                logger.info(f"    Error: {entry['error']}")

        for line in self.report().splitlines():
            logger.info(line)

    def get_execution_times(self) -> Dict[str, float]:
        """Get execution times for all steps"""
        return self.execution_times

    def save_results(self, output_file: Union[str, Path], format: str = "json") -> None:
        """
        Save results to file

        Args:
            output_file: Path to output file
            format: Format ('json', 'pickle')
        """
        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if format == "pickle":
            with open(output_path, "wb") as f:
                pickle.dump(self.results, f)
        elif format == "json":
            with open(output_path, "w") as f:
                json.dump(self._results_to_json(), f, indent=2)
        else:
            raise ValueError(f"Unsupported format: {format}")

        logger.info(f"Results saved to {output_path}")

    def _results_to_json(self) -> Dict[str, Any]:
        """Convert results to JSON-serializable format"""

        json_results = {
            "project_name": self.config.project_name,
            "genome_build": self.config.genome_build,
            "execution_times": self.execution_times,
            "steps": {},
        }

        for step, entry in self.results.items():
            if entry["success"]:
                json_results["steps"][step] = {
                    "success": True,
                    **entry["result"].to_dict(),
                }
            else:
                json_results["steps"][step] = dict(entry)

        return json_results
