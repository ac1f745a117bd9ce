import pytest
from pathlib import Path

from inscripta.gffset.feature.feature import GFFFeature
from inscripta.gffset.feature.feature_set import GFFSet
from inscripta.gffset.feature.frame import Frame
from inscripta.gffset.location.strand import Strand


@pytest.fixture
def test_data_dir() -> Path:
    return Path(__file__).parent / "data"


def tx_feature(
    transcript_id, feature_type, start, end, strand=Strand.PLUS, score=None, frame=Frame.NONE, seqname="chr1"
):
    """A feature of a transcript, tagged in GTF style."""
    return GFFFeature(
        seqname,
        "test",
        feature_type,
        start,
        end,
        score=score,
        strand=strand,
        frame=frame,
        attribute=f'gene_id "{transcript_id}"; transcript_id "{transcript_id}";',
    )


@pytest.fixture
def make_set():
    """Builds a set grouped by transcript_id from ``(transcript_id, type, start, end, ...)`` tuples."""

    def _make_set(*records, grouped=True):
        gff = GFFSet([tx_feature(*record) for record in records])
        if grouped:
            gff.group("transcript_id")
        return gff

    return _make_set
