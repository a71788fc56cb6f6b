"""Tests for TAD projection and regulatory-domain extension."""

import pytest

from arlink.exceptions import ValidationError
from arlink.genomics import DomainBuilder, basal_window
from arlink.intervals import GenomicInterval, Strand, overlap
from conftest import make_store


@pytest.fixture
def builder():
    return DomainBuilder()


class TestProjectTad:
    """Tests for DomainBuilder.project_tad."""

    def test_gene_inside_tad(self, builder, example_genes, example_tads):
        """Test the domain takes the TAD coordinates and the gene label."""
        domains = builder.project_tad(example_genes, example_tads)

        assert len(domains) == 1
        domain = domains[0]
        assert (domain.chromosome, domain.start, domain.end) == ("chr1", 50, 500)
        assert domain.label == "GJB2"
        assert domain.source == "tad1"

    def test_gene_spanning_two_tads(self, builder):
        """Test a gene overlapping two TADs receives both of them."""
        genes = make_store([("chr1", 400, 700, "G")])
        tads = make_store([("chr1", 0, 500, "t1"), ("chr1", 500, 900, "t2")])

        domains = builder.project_tad(genes, tads)
        assert [(d.start, d.end) for d in domains] == [(0, 500), (500, 900)]
        assert {d.label for d in domains} == {"G"}

    def test_shared_tad_not_deduplicated(self, builder):
        """Test two genes in one TAD yield two domains with equal coordinates."""
        genes = make_store([("chr1", 100, 200, "A"), ("chr1", 300, 400, "B")])
        tads = make_store([("chr1", 0, 1000, "t")])

        domains = builder.project_tad(genes, tads)
        assert [d.label for d in domains] == ["A", "B"]
        assert {(d.start, d.end) for d in domains} == {(0, 1000)}

    def test_domain_count_equals_overlap_count(self, builder):
        genes = make_store(
            [("chr1", 10, 60, "A"), ("chr1", 40, 120, "B"), ("chr2", 5, 15, "C")]
        )
        tads = make_store(
            [("chr1", 0, 50), ("chr1", 50, 100), ("chr2", 100, 200), ("chr3", 0, 10)]
        )
        assert len(builder.project_tad(genes, tads)) == len(overlap(genes, tads))

    def test_unlabelled_tad_source_is_region(self, builder):
        genes = make_store([("chr1", 10, 20, "A")])
        tads = make_store([("chr1", 0, 100, "")])
        assert builder.project_tad(genes, tads)[0].source == "chr1:0-100"

    def test_gene_outside_every_tad(self, builder):
        genes = make_store([("chr1", 1000, 2000, "A")])
        tads = make_store([("chr1", 0, 100, "t")])
        assert builder.project_tad(genes, tads) == []


class TestExtendDomain:
    """Tests for DomainBuilder.extend_domain."""

    def test_basal_plus_extension(self, builder, example_tss):
        """Test a + strand TSS at 1000 with default-style parameters."""
        domains = builder.extend_domain(
            example_tss,
            {"MYO15A"},
            basal_upstream=5000,
            basal_downstream=1000,
            max_extension=100000,
        )

        assert len(domains) == 1
        domain = domains[0]
        assert (domain.start, domain.end) == (-104000, 102000)
        assert domain.label == "MYO15A"
        assert domain.source == "chr1:1000-1000"

    def test_coordinates_not_clamped(self, builder, example_tss):
        domain = builder.extend_domain(example_tss, None, 5000, 1000, 0)[0]
        assert domain.start == -4000

    def test_zero_parameters_give_point_domain(self, builder, example_tss):
        domain = builder.extend_domain(example_tss, None, 0, 0, 0)[0]
        assert (domain.start, domain.end) == (1000, 1000)

    @pytest.mark.parametrize(
        "params",
        [(-1, 1000, 100), (5000, -1, 100), (5000, 1000, -1)],
    )
    def test_negative_parameters_rejected(self, builder, example_tss, params):
        with pytest.raises(ValidationError):
            builder.extend_domain(example_tss, None, *params)

    def test_gene_filter(self, builder):
        """Test only TSS records whose label is in the filter are kept."""
        tss = make_store(
            [("chr1", 100, 100, "A", "+"), ("chr1", 200, 200, "B", "-"), ("chr2", 50, 50, "C", "+")],
            allow_point=True,
        )

        domains = builder.extend_domain(tss, ["A", "C", "MISSING"], 10, 10, 0)
        assert [d.label for d in domains] == ["A", "C"]

        assert builder.extend_domain(tss, [], 10, 10, 0) == []
        assert len(builder.extend_domain(tss, None, 10, 10, 0)) == 3

    def test_one_domain_per_tss_record(self, builder):
        """Test genes with several TSS records get several domains."""
        tss = make_store(
            [("chr1", 100, 100, "A", "+"), ("chr1", 900, 900, "A", "+")],
            allow_point=True,
        )
        domains = builder.extend_domain(tss, None, 10, 10, 0)
        assert [(d.start, d.end) for d in domains] == [(90, 110), (890, 910)]

    def test_strand_symmetric_by_default(self, builder):
        tss = make_store([("chr1", 10000, 10000, "A", "-")], allow_point=True)
        domain = builder.extend_domain(tss, None, 5000, 1000, 0)[0]
        assert (domain.start, domain.end) == (5000, 11000)

    def test_strand_aware_mirrors_minus_strand(self, builder):
        tss = make_store(
            [("chr1", 10000, 10000, "A", "-"), ("chr1", 20000, 20000, "B", "+")],
            allow_point=True,
        )
        domains = builder.extend_domain(tss, None, 5000, 1000, 0, strand_aware=True)
        assert [(d.start, d.end) for d in domains] == [(9000, 15000), (15000, 21000)]

    def test_rejects_non_store(self, builder):
        with pytest.raises(ValidationError):
            builder.extend_domain([GenomicInterval("chr1", 1, 1)], None, 1, 1, 1)


class TestBasalWindow:
    def test_unknown_strand_uses_plus_orientation(self):
        tss = GenomicInterval("chr1", 100, 100, "A", Strand.UNKNOWN)
        assert basal_window(tss, 50, 10, strand_aware=True) == (50, 110)
