"""
Genomics analysis module for ARlink

This module provides functionality for:
- TAD projection of gene annotations
- GREAT-style basal plus extension regulatory domains
- Deduplicated gene/AR association counting
- Interval table loading and normalisation
- Summary reporting of association results
"""

from .aggregation import AssociationAggregator, CountTable, proportion
from .annotations import (IntervalTableLoader, load_store,
                          normalize_chromosome, read_interval_table,
                          records_from_dataframe, strip_name_suffix,
                          summarize_store)
from .domains import DomainBuilder, basal_window
from .report import (PolicyResult, export_results, format_report,
                     summarize_results)

__all__ = [
    "DomainBuilder",
    "basal_window",
    "AssociationAggregator",
    "CountTable",
    "proportion",
    "IntervalTableLoader",
    "load_store",
    "read_interval_table",
    "records_from_dataframe",
    "normalize_chromosome",
    "strip_name_suffix",
    "summarize_store",
    "PolicyResult",
    "summarize_results",
    "format_report",
    "export_results",
]
