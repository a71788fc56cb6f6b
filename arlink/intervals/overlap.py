"""
Interval overlap join

For every chromosome present in both stores, a coordinate sweep walks the
query intervals in sorted order. Subjects that start before the current
query are kept in a heap keyed on their end; once expired entries are
dropped, every remaining one overlaps the query. Subjects that start
inside the query are found by bisecting the subject starts. Cost is
O((n + m) log m + k log k) per chromosome for k reported pairs.
"""

import heapq
from bisect import bisect_left
from typing import List, Optional, Sequence, Tuple

from joblib import Parallel, delayed

from ..exceptions import ValidationError
from ..utils import get_logger
from .models import GenomicInterval, OverlapPair
from .store import IntervalStore

logger = get_logger(__name__)


def intervals_overlap(a: GenomicInterval, b: GenomicInterval) -> bool:
    """True if ``a`` and ``b`` share a chromosome and a non-empty intersection"""
    return a.chromosome == b.chromosome and a.start < b.end and b.start < a.end


def _sweep_chromosome(
    queries: Sequence[GenomicInterval],
    subjects: Sequence[GenomicInterval],
    query_offset: int,
    subject_offset: int,
) -> List[OverlapPair]:
    """Sweep one chromosome; both inputs must be sorted by (start, end)"""

    pairs: List[OverlapPair] = []
    starts = [subject.start for subject in subjects]
    active: List[Tuple[int, int]] = []  # (subject end, subject position)
    next_subject = 0
    n_subjects = len(subjects)

    for qi, query in enumerate(queries):
        # Subjects starting before this query stay active until they end
        while next_subject < n_subjects and starts[next_subject] < query.start:
            heapq.heappush(active, (subjects[next_subject].end, next_subject))
            next_subject += 1

        # Query starts never decrease, so expired subjects stay expired
        while active and active[0][0] <= query.start:
            heapq.heappop(active)

        hits = [si for _, si in active]

        # Subjects starting inside the query; only points at its start miss
        upper = bisect_left(starts, query.end, next_subject)
        hits.extend(
            si for si in range(next_subject, upper) if subjects[si].end > query.start
        )

        hits.sort()
        pairs.extend(
            OverlapPair(query_offset + qi, subject_offset + si) for si in hits
        )

    return pairs


def overlap(
    query: IntervalStore, subject: IntervalStore, n_jobs: int = 1
) -> List[OverlapPair]:
    """
    Find every overlapping (query, subject) pair

    Multiplicities are preserved: no pair is merged or dropped here.

    Args:
        query: Store providing query intervals
        subject: Store providing subject intervals
        n_jobs: Number of joblib workers for per-chromosome sweeps
            (1 runs sequentially, -1 uses all cores)

    Returns:
        Pairs of store positions, ordered by chromosome, then query
        position, then subject position

    Raises:
        ValidationError: If either argument is not a built IntervalStore
    """
    for role, store in (("query", query), ("subject", subject)):
        if not isinstance(store, IntervalStore):
            raise ValidationError(
                f"{role} must be a built IntervalStore, got {type(store).__name__}"
            )

    shared = [c for c in query.chromosomes if subject.intervals_on(c)]

    tasks = [
        (
            query.intervals_on(chrom),
            subject.intervals_on(chrom),
            query.offset(chrom),
            subject.offset(chrom),
        )
        for chrom in shared
    ]

    if n_jobs == 1 or len(tasks) <= 1:
        chunks = [_sweep_chromosome(*task) for task in tasks]
    else:
        logger.debug(f"Sweeping {len(tasks)} chromosomes with n_jobs={n_jobs}")
        chunks = Parallel(n_jobs=n_jobs)(
            delayed(_sweep_chromosome)(*task) for task in tasks
        )

    pairs = [pair for chunk in chunks for pair in chunk]

    logger.debug(
        f"Overlap join: {len(query)} query x {len(subject)} subject intervals, "
        f"{len(shared)} shared chromosomes, {len(pairs)} pairs"
    )
    return pairs


class OverlapJoin:
    """Overlap join with a fixed worker configuration"""

    def __init__(self, n_jobs: Optional[int] = 1):
        self.n_jobs = 1 if n_jobs is None else n_jobs

    def __call__(
        self, query: IntervalStore, subject: IntervalStore
    ) -> List[OverlapPair]:
        return overlap(query, subject, n_jobs=self.n_jobs)

    def labelled_pairs(
        self, query: IntervalStore, subject: IntervalStore
    ) -> List[Tuple[GenomicInterval, GenomicInterval]]:
        """Resolve overlap pairs to (query interval, subject interval) tuples"""
        return [
            (query[pair.query_index], subject[pair.subject_index])
            for pair in self(query, subject)
        ]
