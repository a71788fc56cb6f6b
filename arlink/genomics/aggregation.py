"""
Association counting

Elements (ARs) are joined against gene-labelled domains, the resulting
(gene, element) associations are deduplicated, and the number of
distinct elements per gene is tabulated.
"""

import warnings
from typing import Iterable, Iterator, List, Sequence, Tuple

import pandas as pd

from ..exceptions import DivisionByZeroError, EmptyResultWarning, ValidationError
from ..intervals import (AssociationRecord, DerivedInterval, IntervalStore,
                         OverlapJoin)
from ..utils import get_logger

logger = get_logger(__name__)

ASSOCIATION_COLUMNS = ["subject_label", "query_label"]
COUNT_COLUMNS = ["label", "count"]


class CountTable:
    """
    Per-label counts ordered by count (descending), then label (ascending)

    Rows are fixed at construction.
    """

    __slots__ = ("_rows", "_index", "_distinct_elements")

    def __init__(self, rows: Iterable[Tuple[str, int]], distinct_elements: int = 0):
        ordered = sorted(
            ((str(label), int(count)) for label, count in rows),
            key=lambda row: (-row[1], row[0]),
        )
        self._rows: Tuple[Tuple[str, int], ...] = tuple(ordered)
        self._index = {label: count for label, count in self._rows}
        if len(self._index) != len(self._rows):
            raise ValidationError("CountTable labels must be unique")
        self._distinct_elements = distinct_elements

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, distinct_elements: int = 0) -> "CountTable":
        """Build from a frame with ``label`` and ``count`` columns"""
        missing = [c for c in COUNT_COLUMNS if c not in df.columns]
        if missing:
            raise ValidationError(f"Count table missing columns: {missing}")
        return cls(zip(df["label"], df["count"]), distinct_elements=distinct_elements)

    @property
    def labels(self) -> List[str]:
        return [label for label, _ in self._rows]

    @property
    def total(self) -> int:
        """Sum of all counts (number of distinct gene-element associations)"""
        return sum(count for _, count in self._rows)

    @property
    def distinct_elements(self) -> int:
        """Number of distinct elements associated with at least one label"""
        return self._distinct_elements

    @property
    def empty(self) -> bool:
        return not self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Tuple[str, int]]:
        return iter(self._rows)

    def __getitem__(self, label: str) -> int:
        return self._index[label]

    def __contains__(self, label: object) -> bool:
        return label in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CountTable):
            return NotImplemented
        return (
            self._rows == other._rows
            and self._distinct_elements == other._distinct_elements
        )

    def __repr__(self) -> str:
        return f"CountTable(labels={len(self)}, total={self.total})"

    def head(self, n: int = 10) -> List[Tuple[str, int]]:
        return list(self._rows[:n])

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(list(self._rows), columns=COUNT_COLUMNS).astype(
            {"count": "int64"}
        )


def proportion(table: CountTable, universe_size: int) -> float:
    """
    Percentage of a universe represented in a count table

    Args:
        table: Count table
        universe_size: Size of the universe (e.g. number of genes)

    Returns:
        ``len(table) / universe_size * 100``

    Raises:
        DivisionByZeroError: If the universe is empty
        ValidationError: If the universe size is negative
    """
    if universe_size == 0:
        raise DivisionByZeroError("Cannot compute a proportion of an empty universe")
    if universe_size < 0:
        raise ValidationError(f"Universe size must be non-negative, got {universe_size}")
    return len(table) / universe_size * 100


class AssociationAggregator:
    """Associates elements with gene domains and counts them per gene"""

    def __init__(self, n_jobs: int = 1):
        self.join = OverlapJoin(n_jobs=n_jobs)

    def associate(
        self, domains: Sequence[DerivedInterval], elements: IntervalStore
    ) -> List[AssociationRecord]:
        """
        Deduplicated (gene, element) associations

        Elements are the query side and domains the subject side. A single
        element hitting several domains carrying the same gene label
        contributes a single record.

        Args:
            domains: Gene-labelled domains
            elements: Element intervals (ARs)

        Returns:
            Unique AssociationRecords in first-seen order
        """
        domain_store = IntervalStore.build(domains, allow_point=True)

        records = [
            AssociationRecord(
                subject_label=domain_store[pair.subject_index].label,
                query_label=elements[pair.query_index].label,
            )
            for pair in self.join(elements, domain_store)
        ]
        unique = list(dict.fromkeys(records))

        logger.info(
            f"{len(records)} element-domain overlaps, "
            f"{len(unique)} unique gene-element associations"
        )
        return unique

    def count(self, associations: Iterable[AssociationRecord]) -> CountTable:
        """Count distinct element labels per gene label"""
        df = pd.DataFrame(list(associations), columns=ASSOCIATION_COLUMNS)
        df = df.drop_duplicates()

        if df.empty:
            return CountTable([])

        counts = (
            df.groupby("subject_label")["query_label"]
            .nunique()
            .reset_index()
            .rename(columns={"subject_label": "label", "query_label": "count"})
        )
        return CountTable.from_dataframe(
            counts, distinct_elements=df["query_label"].nunique()
        )

    def aggregate(
        self, domains: Sequence[DerivedInterval], elements: IntervalStore
    ) -> CountTable:
        """
        Count distinct associated elements per gene

        An empty result is returned (with an EmptyResultWarning) rather
        than raised when nothing overlaps.

        Args:
            domains: Gene-labelled domains
            elements: Element intervals (ARs)

        Returns:
            CountTable sorted by count descending, label ascending
        """
        table = self.count(self.associate(domains, elements))

        if table.empty:
            message = (
                f"No element among {len(elements)} overlaps any of "
                f"{len(domains)} domains"
            )
            logger.warning(message)
            warnings.warn(message, EmptyResultWarning, stacklevel=2)
        else:
            logger.info(
                f"{table.distinct_elements} elements associated with {len(table)} genes"
            )

        return table
