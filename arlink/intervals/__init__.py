"""
Interval data model and overlap engine for ARlink

This module provides:
- Immutable genomic interval value types
- Chromosome-partitioned, sorted interval stores
- Sweep-based overlap join between two stores
"""

from .models import (AssociationRecord, DerivedInterval, GenomicInterval,
                     OverlapPair, Strand)
from .overlap import OverlapJoin, intervals_overlap, overlap
from .store import IntervalStore, chromosome_sort_key

__all__ = [
    "GenomicInterval",
    "DerivedInterval",
    "OverlapPair",
    "AssociationRecord",
    "Strand",
    "IntervalStore",
    "chromosome_sort_key",
    "OverlapJoin",
    "overlap",
    "intervals_overlap",
]
