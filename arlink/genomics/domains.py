"""
Derived interval construction

Two ways of turning gene annotations into candidate regulatory territory:

- TAD projection: every TAD overlapping a gene becomes, in full, one of
  that gene's domains.
- Regulatory-domain extension: a basal window around each TSS, widened
  by a fixed extension on both sides.

The extension reproduces a simplified GREAT rule. Basal offsets are
applied to the literal start/end regardless of strand (unless
``strand_aware`` is requested), and the full extension is always applied;
it is never capped at a neighbouring gene's basal domain.
"""

from typing import Iterable, List, Optional, Set, Tuple

from ..exceptions import ValidationError
from ..intervals import (DerivedInterval, GenomicInterval, IntervalStore,
                         OverlapJoin, Strand)
from ..utils import get_logger, validate_non_negative

logger = get_logger(__name__)


def basal_window(
    tss: GenomicInterval,
    basal_upstream: int,
    basal_downstream: int,
    strand_aware: bool = False,
) -> Tuple[int, int]:
    """
    Basal regulatory window around a TSS record

    Args:
        tss: TSS record (usually a point feature)
        basal_upstream: Bases subtracted from the start
        basal_downstream: Bases added to the end
        strand_aware: Mirror the offsets for minus-strand records

    Returns:
        (start, end) of the basal window
    """
    if strand_aware and tss.strand is Strand.MINUS:
        return tss.start - basal_downstream, tss.end + basal_upstream
    return tss.start - basal_upstream, tss.end + basal_downstream


class DomainBuilder:
    """Builds gene-labelled domains from TADs or TSS records"""

    def __init__(self, n_jobs: int = 1):
        """
        Initialize domain builder

        Args:
            n_jobs: Workers used by the underlying overlap join
        """
        self.join = OverlapJoin(n_jobs=n_jobs)

    def project_tad(
        self, genes: IntervalStore, tads: IntervalStore
    ) -> List[DerivedInterval]:
        """
        Re-label TADs with the genes they overlap

        Each (gene, TAD) overlap yields one domain spanning the whole TAD
        and labelled with the gene. A TAD holding two genes therefore
        yields two domains with identical coordinates; nothing is
        deduplicated here.

        Args:
            genes: Gene intervals (query side)
            tads: TAD intervals (subject side)

        Returns:
            One DerivedInterval per overlapping (gene, TAD) pair
        """
        logger.info(f"Projecting {len(tads)} TADs onto {len(genes)} genes")

        domains = []
        for gene, tad in self.join.labelled_pairs(genes, tads):
            domains.append(
                DerivedInterval(
                    chromosome=tad.chromosome,
                    start=tad.start,
                    end=tad.end,
                    label=gene.label,
                    strand=gene.strand,
                    source=tad.label,
                )
            )

        n_genes = len({d.label for d in domains})
        logger.info(f"Built {len(domains)} TAD domains covering {n_genes} genes")
        if not domains:
            logger.warning("No gene overlaps any TAD")

        return domains

    def extend_domain(
        self,
        tss: IntervalStore,
        gene_filter: Optional[Iterable[str]],
        basal_upstream: int,
        basal_downstream: int,
        max_extension: int,
        strand_aware: bool = False,
    ) -> List[DerivedInterval]:
        """
        Build basal-plus-extension regulatory domains

        Coordinates are not clamped: results may be negative or run past
        the chromosome end.

        Args:
            tss: TSS records (point features allowed)
            gene_filter: Gene labels to keep; None keeps every record
            basal_upstream: Bases subtracted from each TSS start
            basal_downstream: Bases added to each TSS end
            max_extension: Bases added on both sides of the basal window
            strand_aware: Mirror the basal offsets for minus-strand records

        Returns:
            One DerivedInterval per retained TSS record, in store order

        Raises:
            ValidationError: If any window parameter is negative
        """
        validate_non_negative(
            basal_upstream=basal_upstream,
            basal_downstream=basal_downstream,
            max_extension=max_extension,
        )
        if not isinstance(tss, IntervalStore):
            raise ValidationError(
                f"tss must be a built IntervalStore, got {type(tss).__name__}"
            )

        keep: Optional[Set[str]] = None if gene_filter is None else set(gene_filter)

        logger.info(
            f"Extending domains: basal -{basal_upstream}/+{basal_downstream}, "
            f"extension {max_extension}, strand_aware={strand_aware}"
        )

        domains = [
            self._extend_one(
                record, basal_upstream, basal_downstream, max_extension, strand_aware
            )
            for record in tss.all()
            if keep is None or record.label in keep
        ]

        logger.info(f"Built {len(domains)} regulatory domains from {len(tss)} TSS records")
        if keep is not None:
            missing = keep - {d.label for d in domains}
            if missing:
                logger.debug(f"{len(missing)} filtered genes have no TSS record")

        return domains

    @staticmethod
    def _extend_one(
        record: GenomicInterval,
        basal_upstream: int,
        basal_downstream: int,
        max_extension: int,
        strand_aware: bool,
    ) -> DerivedInterval:
        start, end = basal_window(record, basal_upstream, basal_downstream, strand_aware)
        return DerivedInterval(
            chromosome=record.chromosome,
            start=start - max_extension,
            end=end + max_extension,
            label=record.label,
            strand=record.strand,
            source=record.to_region(),
        )
