"""
Interval value types shared by the store, the overlap join and the
domain builders.

All coordinates are 0-based and half-open (BED convention).
"""

from dataclasses import dataclass
from enum import Enum
from numbers import Integral
from typing import NamedTuple, Optional, Union

from ..exceptions import ValidationError


class Strand(str, Enum):
    """Strand of a genomic feature"""

    PLUS = "+"
    MINUS = "-"
    UNKNOWN = "."

    @classmethod
    def parse(cls, value: Optional[Union[str, "Strand"]]) -> "Strand":
        """Parse a strand token, mapping missing or unrecognised values to UNKNOWN"""
        if isinstance(value, Strand):
            return value
        if value is None:
            return cls.UNKNOWN
        token = str(value).strip()
        if token == "+":
            return cls.PLUS
        if token == "-":
            return cls.MINUS
        return cls.UNKNOWN


@dataclass(frozen=True)
class GenomicInterval:
    """
    Immutable labelled interval on one chromosome.

    Intervals are only ever compared within the same chromosome. An
    interval created without a label is labelled by its region
    (``chrom:start-end``) so distinct unnamed records stay distinct.
    """

    chromosome: str
    start: int
    end: int
    label: str = ""
    strand: Strand = Strand.UNKNOWN

    def __post_init__(self):
        # numpy and other integral scalars become plain ints
        for name in ("start", "end"):
            value = getattr(self, name)
            if isinstance(value, Integral) and not isinstance(value, bool):
                object.__setattr__(self, name, int(value))
        if not self.label:
            object.__setattr__(self, "label", self.to_region())

    @property
    def length(self) -> int:
        """Interval length in base pairs"""
        return self.end - self.start

    @property
    def is_point(self) -> bool:
        """True for zero-length point features such as a TSS"""
        return self.start == self.end

    def overlaps(self, other: "GenomicInterval") -> bool:
        """Half-open overlap test; touching endpoints do not overlap"""
        if self.chromosome != other.chromosome:
            return False
        return self.start < other.end and other.start < self.end

    def validate(self, allow_point: bool = False) -> None:
        """
        Check the interval invariants

        Args:
            allow_point: Accept ``start == end`` (point features)

        Raises:
            ValidationError: If the chromosome name is empty or the
                coordinates are not ordered
        """
        if not isinstance(self.chromosome, str) or not self.chromosome.strip():
            raise ValidationError(
                f"Invalid chromosome name {self.chromosome!r} for interval {self.label!r}"
            )

        for name in ("start", "end"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Integral):
                raise ValidationError(
                    f"Non-integer {name} coordinate {value!r} in {self.to_region()}"
                )

        if allow_point:
            if self.start > self.end:
                raise ValidationError(
                    f"Start ({self.start}) is after end ({self.end}) in {self.to_region()}"
                )
        elif self.start >= self.end:
            raise ValidationError(
                f"Start ({self.start}) must be less than end ({self.end}) in {self.to_region()}"
            )

    def to_region(self) -> str:
        """Format as a ``chrom:start-end`` region string"""
        return f"{self.chromosome}:{self.start}-{self.end}"


@dataclass(frozen=True)
class DerivedInterval(GenomicInterval):
    """
    Interval whose coordinates come from one collection (a TAD, a TSS
    window) and whose label comes from another (the gene).

    ``source`` names the record that donated the coordinates.
    """

    source: str = ""


class OverlapPair(NamedTuple):
    """Positions of an overlapping (query, subject) pair in their stores"""

    query_index: int
    subject_index: int


class AssociationRecord(NamedTuple):
    """A gene (subject) label associated with an element (query) label"""

    subject_label: str
    query_label: str
