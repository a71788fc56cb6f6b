"""Tests for interval value types and the interval store."""

import dataclasses
import pickle
import random
import types

import numpy as np
import pandas as pd
import pytest

from arlink.exceptions import ValidationError
from arlink.intervals import (DerivedInterval, GenomicInterval, IntervalStore,
                              Strand, chromosome_sort_key)
from conftest import make_store


class TestGenomicInterval:
    """Tests for GenomicInterval."""

    def test_is_immutable(self):
        """Test that intervals cannot be modified after construction."""
        interval = GenomicInterval("chr1", 10, 20, "a")
        with pytest.raises(dataclasses.FrozenInstanceError):
            interval.start = 5

    def test_overlaps_half_open(self):
        """Test that touching intervals do not overlap."""
        a = GenomicInterval("chr1", 10, 20)
        assert not a.overlaps(GenomicInterval("chr1", 20, 30))
        assert not a.overlaps(GenomicInterval("chr1", 0, 10))
        assert a.overlaps(GenomicInterval("chr1", 19, 30))

    def test_different_chromosomes_never_overlap(self):
        """Test chromosome partitioning of the overlap test."""
        a = GenomicInterval("chr1", 10, 20)
        assert not a.overlaps(GenomicInterval("chr2", 10, 20))

    def test_validate_rejects_empty_interval(self):
        """Test start >= end is rejected."""
        with pytest.raises(ValidationError):
            GenomicInterval("chr1", 20, 20).validate()
        with pytest.raises(ValidationError):
            GenomicInterval("chr1", 30, 20).validate()

    def test_validate_point_feature(self):
        """Test allow_point accepts start == end but not start > end."""
        GenomicInterval("chr1", 20, 20).validate(allow_point=True)
        with pytest.raises(ValidationError):
            GenomicInterval("chr1", 21, 20).validate(allow_point=True)

    def test_validate_rejects_blank_chromosome(self):
        """Test empty chromosome names are rejected."""
        with pytest.raises(ValidationError):
            GenomicInterval("", 1, 2).validate()
        with pytest.raises(ValidationError):
            GenomicInterval("  ", 1, 2).validate()

    def test_validate_rejects_non_integer_coordinates(self):
        with pytest.raises(ValidationError):
            GenomicInterval("chr1", 1.5, 2).validate()

    def test_numpy_coordinates_normalised(self):
        """Test numpy integer coordinates are accepted and stored as int."""
        interval = GenomicInterval("chr1", np.int64(5), np.int32(10), "a")
        interval.validate()

        assert type(interval.start) is int
        assert type(interval.end) is int
        store = IntervalStore.build([interval])
        assert store[0] == GenomicInterval("chr1", 5, 10, "a")

    def test_rows_from_itertuples_build_a_store(self):
        df = pd.DataFrame({"chrom": ["chr1", "chr2"], "start": [1, 7], "end": [4, 9]})
        records = [
            GenomicInterval(row.chrom, row.start, row.end) for row in df.itertuples()
        ]
        assert len(IntervalStore.build(records)) == 2

    def test_bool_coordinates_rejected(self):
        with pytest.raises(ValidationError):
            GenomicInterval("chr1", False, True).validate()

    def test_unlabelled_interval_uses_region(self):
        """Test unnamed intervals get distinct region labels."""
        assert GenomicInterval("chr1", 10, 20).label == "chr1:10-20"
        assert GenomicInterval("chr1", 10, 20, "").label == "chr1:10-20"
        assert GenomicInterval("chr1", 10, 20, "x").label == "x"

    def test_derived_interval_is_genomic_interval(self):
        """Test derived intervals carry their coordinate source."""
        derived = DerivedInterval("chr1", 1, 5, "GENE", source="tad1")
        assert isinstance(derived, GenomicInterval)
        assert derived.source == "tad1"

    def test_strand_parse(self):
        assert Strand.parse("+") is Strand.PLUS
        assert Strand.parse("-") is Strand.MINUS
        assert Strand.parse(None) is Strand.UNKNOWN
        assert Strand.parse("?") is Strand.UNKNOWN


class TestIntervalStore:
    """Tests for IntervalStore construction and access."""

    def test_sorted_by_start_then_end(self):
        """Test per-chromosome sort order."""
        store = make_store(
            [("chr1", 50, 80, "c"), ("chr1", 10, 90, "b"), ("chr1", 10, 20, "a")]
        )
        assert [i.label for i in store.intervals_on("chr1")] == ["a", "b", "c"]

    def test_chromosomes_in_natural_order(self):
        store = make_store(
            [("chr10", 1, 2), ("chrX", 1, 2), ("chr2", 1, 2), ("chr1", 1, 2)]
        )
        assert store.chromosomes == ("chr1", "chr2", "chr10", "chrX")

    def test_chromosome_sort_key_unplaced_last(self):
        names = ["chrUn_gl000220", "chrM", "chr1"]
        assert sorted(names, key=chromosome_sort_key) == [
            "chr1",
            "chrM",
            "chrUn_gl000220",
        ]

    def test_unknown_chromosome_is_empty(self):
        """Test missing chromosomes return an empty sequence, not an error."""
        store = make_store([("chr1", 1, 2)])
        assert store.intervals_on("chr7") == ()

    def test_all_is_lazy(self):
        store = make_store([("chr1", 1, 2), ("chr2", 1, 2)])
        iterator = store.all()
        assert isinstance(iterator, types.GeneratorType)
        assert len(list(iterator)) == 2

    def test_index_matches_iteration_order(self):
        """Test positional access follows all() order across chromosomes."""
        store = make_store(
            [("chr2", 5, 6, "d"), ("chr1", 3, 4, "b"), ("chr1", 1, 2, "a"), ("chr3", 1, 2, "e")]
        )
        assert [store[i].label for i in range(len(store))] == [
            i.label for i in store.all()
        ]
        assert store[-1].label == "e"
        with pytest.raises(IndexError):
            store[len(store)]

    def test_offsets(self):
        store = make_store([("chr1", 1, 2), ("chr1", 3, 4), ("chr2", 1, 2)])
        assert store.offset("chr1") == 0
        assert store.offset("chr2") == 2

    def test_invalid_record_fails_whole_build(self):
        """Test a single malformed record fails construction."""
        with pytest.raises(ValidationError):
            make_store([("chr1", 1, 2), ("chr1", 10, 5)])

    def test_rejects_non_interval_records(self):
        with pytest.raises(ValidationError):
            IntervalStore.build([("chr1", 1, 2)])

    def test_point_store(self):
        """Test point features require allow_point."""
        with pytest.raises(ValidationError):
            make_store([("chr1", 5, 5)])
        store = make_store([("chr1", 5, 5)], allow_point=True)
        assert store[0].is_point

    def test_permutation_invariant(self):
        """Test store contents do not depend on input order."""
        rows = [
            ("chr1", 10, 20, "a"),
            ("chr1", 10, 20, "b"),
            ("chr1", 5, 50, "c"),
            ("chr2", 1, 3, "d"),
            ("chr10", 7, 9, "e"),
        ]
        expected = list(make_store(rows).all())
        rng = random.Random(7)
        for _ in range(5):
            shuffled = rows[:]
            rng.shuffle(shuffled)
            assert list(make_store(shuffled).all()) == expected

    def test_labels_distinct(self):
        store = make_store([("chr1", 1, 2, "a"), ("chr1", 3, 4, "a"), ("chr2", 1, 2, "b")])
        assert store.labels() == ["a", "b"]

    def test_read_only(self):
        """Test a built store cannot be modified."""
        store = make_store([("chr1", 1, 2)], allow_point=True)
        assert store.allow_point is True

        with pytest.raises(AttributeError):
            store.allow_point = False
        with pytest.raises(AttributeError):
            store._partitions = {}
        with pytest.raises(AttributeError):
            del store._offsets
        with pytest.raises(TypeError):
            store._partitions["chr2"] = ()
        assert len(store) == 1

    def test_pickle_round_trip(self):
        store = make_store([("chr1", 1, 2, "a"), ("chr2", 3, 9, "b")])
        restored = pickle.loads(pickle.dumps(store))
        assert list(restored.all()) == list(store.all())
        assert restored.allow_point is False

    def test_dataframe_round_trip(self):
        """Test conversion from and to BED-like frames."""
        df = pd.DataFrame(
            {
                "chrom": ["chr1", "chr1"],
                "start": [30, 10],
                "end": [40, 20],
                "name": ["y", "x"],
                "strand": ["-", "+"],
            }
        )
        store = IntervalStore.from_dataframe(df)
        out = store.to_dataframe()

        assert out["name"].tolist() == ["x", "y"]
        assert out["strand"].tolist() == ["+", "-"]
        assert out["start"].dtype == "int64"
