"""Shared fixtures for ARlink tests."""

import pytest

from arlink.intervals import GenomicInterval, IntervalStore, Strand


def make_store(rows, allow_point=False):
    """Build a store from (chrom, start, end[, label[, strand]]) tuples."""
    records = []
    for row in rows:
        chrom, start, end = row[:3]
        label = row[3] if len(row) > 3 else f"{chrom}:{start}-{end}"
        strand = Strand.parse(row[4]) if len(row) > 4 else Strand.UNKNOWN
        records.append(GenomicInterval(chrom, start, end, label, strand))
    return IntervalStore.build(records, allow_point=allow_point)


@pytest.fixture
def example_genes():
    return make_store([("chr1", 100, 200, "GJB2")])


@pytest.fixture
def example_tads():
    return make_store([("chr1", 50, 500, "tad1")])


@pytest.fixture
def example_ars():
    return make_store([("chr1", 300, 310, "AR1"), ("chr1", 600, 610, "AR2")])


@pytest.fixture
def example_tss():
    return make_store([("chr1", 1000, 1000, "MYO15A", "+")], allow_point=True)


@pytest.fixture
def great_ars():
    return make_store(
        [("chr1", 50000, 50010, "AR_in"), ("chr1", 110000, 110010, "AR_out")]
    )


@pytest.fixture
def table_dir(tmp_path):
    """Directory holding one small table of each kind."""
    (tmp_path / "genes.bed").write_text(
        "chrom\tstart\tend\tname\n"
        "chr1\t100\t200\tGJB2\n"
        "chr1\t5000\t6000\tMYO15A\n"
        "chr2\t100\t300\tOTOF\n"
    )
    (tmp_path / "tads.bed").write_text(
        "# TAD calls\n"
        "chr1\t50\t500\n"
        "chr1\t4000\t9000\n"
        "chr2\t1000\t2000\n"
    )
    (tmp_path / "ars.bed").write_text(
        "chr1\t300\t310\tAR1\n"
        "chr1\t600\t610\tAR2\n"
        "chr1\t8000\t8010\tAR3\n"
        "chr2\t1500\t1510\tAR4\n"
    )
    (tmp_path / "tss.bed").write_text(
        "chr1\t100\t100\t+\tGJB2_1\n"
        "chr1\t6000\t6000\t-\tMYO15A\n"
        "chr2\t100\t100\t+\tOTOF.2\n"
        "chr3\t100\t100\t+\tNOTINGENES\n"
    )
    return tmp_path
