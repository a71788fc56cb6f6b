"""
Interval table loading for ARlink

This module reads the flat coordinate tables (genes, TADs, ARs, TSS
records), normalises them and turns them into IntervalStores.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import bioframe as bf
import pandas as pd

from ..config import Config
from ..exceptions import ValidationError
from ..intervals import GenomicInterval, IntervalStore, Strand
from ..intervals.store import strand_counts
from ..utils import get_logger, log_execution_time

logger = get_logger(__name__)

TABLE_LAYOUTS: Dict[str, List[str]] = {
    "genes": ["chrom", "start", "end", "name"],
    "tads": ["chrom", "start", "end"],
    "ars": ["chrom", "start", "end", "name"],
    "tss": ["chrom", "start", "end", "strand", "name"],
}

POINT_TABLES = {"tss"}

_NAME_SUFFIX = re.compile(r"[._]\d+$")


def strip_name_suffix(name: str) -> str:
    """Drop a trailing numeric copy suffix (``MYO15A_2`` -> ``MYO15A``)"""
    return _NAME_SUFFIX.sub("", str(name).strip())


def normalize_chromosome(name: str, prefix: Optional[str] = "chr") -> str:
    """
    Normalise a chromosome name so different tables agree

    Args:
        name: Raw chromosome name
        prefix: Prefix added to bare names (e.g. ``1`` -> ``chr1``);
            None or empty leaves names untouched

    Returns:
        Normalised chromosome name
    """
    name = str(name).strip()
    if prefix and name and not name.lower().startswith(prefix.lower()):
        return f"{prefix}{name}"
    return name


def read_interval_table(
    path: Union[str, Path],
    kind: str,
    columns: Optional[List[str]] = None,
    strip_suffix: bool = True,
    chromosome_prefix: Optional[str] = "chr",
) -> pd.DataFrame:
    """
    Read a BED-like interval table

    Args:
        path: Tab-separated file; ``#`` lines and a leading header row
            are skipped
        kind: One of ``genes``, ``tads``, ``ars``, ``tss``
        columns: Column layout overriding the default for ``kind``
        strip_suffix: Strip numeric suffixes from TSS gene names
        chromosome_prefix: Prefix for bare chromosome names

    Returns:
        DataFrame with at least chrom, start, end and name columns

    Raises:
        FileNotFoundError: If the file is missing
        ValidationError: If the table does not match the layout
    """
    if kind not in TABLE_LAYOUTS:
        raise ValidationError(
            f"Unknown table kind {kind!r}; expected one of {sorted(TABLE_LAYOUTS)}"
        )

    table_path = Path(path)
    if not table_path.exists():
        raise FileNotFoundError(f"{kind} table not found: {table_path}")

    layout = list(columns or TABLE_LAYOUTS[kind])
    logger.info(f"Loading {kind} table from {table_path}")

    try:
        df = bf.read_table(
            str(table_path),
            names=layout,
            usecols=list(range(len(layout))),
            comment="#",
            dtype=str,
        )
    except ValueError as e:
        raise ValidationError(
            f"{table_path} does not match the {kind} layout {layout}: {e}"
        ) from e

    # Header row, if any
    if len(df) > 0 and not str(df["start"].iloc[0]).strip().lstrip("-").isdigit():
        df = df.iloc[1:].reset_index(drop=True)

    return normalize_interval_table(
        df, kind, strip_suffix=strip_suffix, chromosome_prefix=chromosome_prefix
    )


def normalize_interval_table(
    df: pd.DataFrame,
    kind: str,
    strip_suffix: bool = True,
    chromosome_prefix: Optional[str] = "chr",
) -> pd.DataFrame:
    """Coerce coordinates, normalise names and fill missing labels"""

    missing = [c for c in ("chrom", "start", "end") if c not in df.columns]
    if missing:
        raise ValidationError(f"{kind} table missing columns: {missing}")

    df = df.copy()

    try:
        df["start"] = pd.to_numeric(df["start"]).astype("int64")
        df["end"] = pd.to_numeric(df["end"]).astype("int64")
    except (ValueError, TypeError) as e:
        raise ValidationError(f"Non-integer coordinates in {kind} table: {e}") from e

    df["chrom"] = df["chrom"].map(
        lambda c: normalize_chromosome(c, chromosome_prefix)
    )

    if "name" not in df.columns:
        df["name"] = (
            df["chrom"] + ":" + df["start"].astype(str) + "-" + df["end"].astype(str)
        )
    else:
        df["name"] = df["name"].astype(str).str.strip()
        if kind == "tss" and strip_suffix:
            df["name"] = df["name"].map(strip_name_suffix)

    if "strand" in df.columns:
        df["strand"] = df["strand"].map(lambda s: Strand.parse(s).value)

    logger.debug(f"Normalised {kind} table: {len(df)} rows")
    return df


def records_from_dataframe(
    df: pd.DataFrame,
    label_col: Optional[str] = "name",
    strand_col: Optional[str] = "strand",
    chrom_col: str = "chrom",
    start_col: str = "start",
    end_col: str = "end",
) -> List[GenomicInterval]:
    """
    Convert a BED-like frame into GenomicInterval records

    Label and strand columns are optional; missing ones give region
    labels and unknown strands.
    """
    missing = [c for c in (chrom_col, start_col, end_col) if c not in df.columns]
    if missing:
        raise ValidationError(f"Interval table missing columns: {missing}")

    n = len(df)
    labels = (
        df[label_col].astype(str).tolist()
        if label_col and label_col in df.columns
        else [""] * n
    )
    strands = (
        df[strand_col].tolist()
        if strand_col and strand_col in df.columns
        else [None] * n
    )

    records = []
    for chrom, start, end, label, strand in zip(
        df[chrom_col].tolist(),
        df[start_col].tolist(),
        df[end_col].tolist(),
        labels,
        strands,
    ):
        try:
            start, end = int(start), int(end)
        except (TypeError, ValueError) as e:
            raise ValidationError(
                f"Non-integer coordinates for {label!r}: {start!r}-{end!r}"
            ) from e
        records.append(
            GenomicInterval(
                chromosome=str(chrom),
                start=start,
                end=end,
                label=label,
                strand=Strand.parse(strand),
            )
        )

    return records


@log_execution_time
def load_store(
    path: Union[str, Path],
    kind: str,
    columns: Optional[List[str]] = None,
    strip_suffix: bool = True,
    chromosome_prefix: Optional[str] = "chr",
) -> IntervalStore:
    """Read an interval table and build its IntervalStore"""
    df = read_interval_table(
        path,
        kind,
        columns=columns,
        strip_suffix=strip_suffix,
        chromosome_prefix=chromosome_prefix,
    )
    return IntervalStore.build(
        records_from_dataframe(df), allow_point=kind in POINT_TABLES
    )


class IntervalTableLoader:
    """Loads and caches the interval tables named in a configuration"""

    def __init__(self, config: Config):
        """
        Initialize table loader

        Args:
            config: ARlink configuration object
        """
        self.config = config
        self.io_params = config.io
        self.inputs = config.inputs

        self._stores: Dict[str, IntervalStore] = {}

    def load(self, kind: str, force_reload: bool = False) -> IntervalStore:
        """
        Load one table as an IntervalStore

        Args:
            kind: One of ``genes``, ``tads``, ``ars``, ``tss``
            force_reload: Ignore the cached store

        Returns:
            IntervalStore for the table
        """
        if kind in self._stores and not force_reload:
            logger.debug(f"Using cached {kind} store")
            return self._stores[kind]

        path = self.inputs.get(kind)
        if not path:
            raise ValidationError(f"No input path configured for {kind} table")

        store = load_store(
            path,
            kind,
            columns=self.io_params.get("columns", {}).get(kind),
            strip_suffix=self.io_params.get("strip_name_suffix", True),
            chromosome_prefix=self.io_params.get("chromosome_prefix", "chr"),
        )
        self._stores[kind] = store
        self._log_store_summary(kind, store)
        return store

    def load_all(self) -> Dict[str, IntervalStore]:
        """Load every configured table"""
        return {kind: self.load(kind) for kind, path in self.inputs.items() if path}

    def _log_store_summary(self, kind: str, store: IntervalStore) -> None:
        logger.info(
            f"Loaded {len(store)} {kind} records on {len(store.chromosomes)} chromosomes"
        )
        for chrom in store.chromosomes:
            logger.debug(f"  {chrom}: {len(store.intervals_on(chrom))} {kind}")
        if kind in POINT_TABLES:
            logger.info(f"Strand distribution: {strand_counts(store)}")


def summarize_store(store: IntervalStore) -> Dict[str, Any]:
    """Basic statistics for an interval store"""
    lengths = [interval.length for interval in store.all()]
    return {
        "intervals": len(store),
        "chromosomes": len(store.chromosomes),
        "distinct_labels": len(store.labels()),
        "mean_length": (sum(lengths) / len(lengths)) if lengths else 0.0,
        "strands": strand_counts(store),
    }
