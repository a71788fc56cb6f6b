"""
Chromosome-partitioned, coordinate-sorted interval storage

An IntervalStore is built once from a sequence of records and is
read-only afterwards, so a single instance can be shared between
concurrent readers.
"""

import re
from bisect import bisect_right
from collections import defaultdict
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import pandas as pd

from ..exceptions import ValidationError
from ..utils import get_logger
from .models import GenomicInterval, Strand

logger = get_logger(__name__)

_SPECIAL_CHROMOSOMES = {"X": 1000, "Y": 1001, "M": 1002, "MT": 1002}

STORE_COLUMNS = ["chrom", "start", "end", "name", "strand"]


def chromosome_sort_key(name: str) -> Tuple[int, int, str]:
    """
    Natural sort key for chromosome names

    chr1 < chr2 < ... < chr10 < ... < chrX < chrY < chrM < everything else
    """
    bare = re.sub(r"^chr", "", name, flags=re.IGNORECASE)
    if bare.isdigit():
        return (0, int(bare), name)
    if bare.upper() in _SPECIAL_CHROMOSOMES:
        return (0, _SPECIAL_CHROMOSOMES[bare.upper()], name)
    return (1, 0, name)


def _interval_sort_key(interval: GenomicInterval) -> Tuple[int, int, str]:
    return (interval.start, interval.end, interval.label)


class IntervalStore:
    """Immutable mapping from chromosome to sorted intervals"""

    __slots__ = ("_partitions", "_chromosomes", "_offsets", "_size", "_allow_point")

    def __init__(
        self,
        partitions: Dict[str, Tuple[GenomicInterval, ...]],
        allow_point: bool = False,
    ):
        """
        Use :meth:`build` instead; the constructor trusts its input to be
        validated and sorted already.
        """
        chromosomes = tuple(sorted(partitions, key=chromosome_sort_key))

        offsets = []
        size = 0
        for chrom in chromosomes:
            offsets.append(size)
            size += len(partitions[chrom])

        partitions = {c: tuple(partitions[c]) for c in chromosomes}

        init = object.__setattr__
        init(self, "_partitions", MappingProxyType(partitions))
        init(self, "_chromosomes", chromosomes)
        init(self, "_offsets", tuple(offsets))
        init(self, "_size", size)
        init(self, "_allow_point", bool(allow_point))

    def __setattr__(self, name, value):
        raise AttributeError(f"IntervalStore is read-only; cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"IntervalStore is read-only; cannot delete {name!r}")

    def __reduce__(self):
        return (self.__class__, (dict(self._partitions), self._allow_point))

    @classmethod
    def build(
        cls, records: Iterable[GenomicInterval], allow_point: bool = False
    ) -> "IntervalStore":
        """
        Build a store from interval records

        Args:
            records: Interval records in any order
            allow_point: Accept zero-length point features (TSS records)

        Returns:
            Frozen IntervalStore

        Raises:
            ValidationError: If any record is malformed; no partial store
                is ever returned
        """
        grouped: Dict[str, List[GenomicInterval]] = defaultdict(list)

        for record in records:
            if not isinstance(record, GenomicInterval):
                raise ValidationError(
                    f"Expected GenomicInterval, got {type(record).__name__}"
                )
            record.validate(allow_point=allow_point)
            grouped[record.chromosome].append(record)

        partitions = {
            chrom: tuple(sorted(intervals, key=_interval_sort_key))
            for chrom, intervals in grouped.items()
        }

        store = cls(partitions, allow_point=allow_point)
        logger.debug(
            f"Built store with {len(store)} intervals on {len(store.chromosomes)} chromosomes"
        )
        return store

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        label_col: Optional[str] = "name",
        strand_col: Optional[str] = "strand",
        allow_point: bool = False,
    ) -> "IntervalStore":
        """
        Build a store from a BED-like DataFrame with chrom/start/end columns

        Args:
            df: Input table
            label_col: Column holding the interval label (optional)
            strand_col: Column holding the strand (optional)
            allow_point: Accept zero-length point features
        """
        from ..genomics.annotations import records_from_dataframe

        records = records_from_dataframe(df, label_col=label_col, strand_col=strand_col)
        return cls.build(records, allow_point=allow_point)

    @property
    def allow_point(self) -> bool:
        """True if the store accepts zero-length point features"""
        return self._allow_point

    @property
    def chromosomes(self) -> Tuple[str, ...]:
        """Chromosomes holding at least one interval, in natural order"""
        return self._chromosomes

    def intervals_on(self, chromosome: str) -> Tuple[GenomicInterval, ...]:
        """Sorted intervals on one chromosome (empty for unknown chromosomes)"""
        return self._partitions.get(chromosome, ())

    def offset(self, chromosome: str) -> int:
        """Position of the first interval of ``chromosome`` in :meth:`all` order"""
        try:
            return self._offsets[self._chromosomes.index(chromosome)]
        except ValueError:
            return self._size

    def all(self) -> Iterator[GenomicInterval]:
        """Lazily iterate every interval, chromosome by chromosome"""
        for chrom in self._chromosomes:
            yield from self._partitions[chrom]

    def labels(self) -> List[str]:
        """Distinct labels in first-seen order"""
        return list(dict.fromkeys(interval.label for interval in self.all()))

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[GenomicInterval]:
        return self.all()

    def __getitem__(self, index: int) -> GenomicInterval:
        if index < 0:
            index += self._size
        if not 0 <= index < self._size:
            raise IndexError(f"Interval index out of range: {index}")

        slot = bisect_right(self._offsets, index) - 1
        chrom = self._chromosomes[slot]
        return self._partitions[chrom][index - self._offsets[slot]]

    def __repr__(self) -> str:
        return (
            f"IntervalStore(intervals={self._size}, "
            f"chromosomes={len(self._chromosomes)})"
        )

    def to_dataframe(self) -> pd.DataFrame:
        """Export as a BED-like DataFrame in store order"""
        rows = [
            (i.chromosome, i.start, i.end, i.label, i.strand.value) for i in self.all()
        ]
        df = pd.DataFrame(rows, columns=STORE_COLUMNS)
        return df.astype({"start": "int64", "end": "int64"})


def strand_counts(store: IntervalStore) -> Dict[str, int]:
    counts: Dict[str, int] = {s.value: 0 for s in Strand}
    for interval in store.all():
        counts[interval.strand.value] += 1
    return counts
