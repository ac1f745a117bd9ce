import io

import pytest

from inscripta.gffset.feature.feature import GFFFeature
from inscripta.gffset.feature.feature_set import GFFMetadata, GFFSet
from inscripta.gffset.feature.frame import Frame
from inscripta.gffset.io.gff.exc import GFFExportException
from inscripta.gffset.io.gff.parser import parse_gff
from inscripta.gffset.io.gff.writer import write_gff
from inscripta.gffset.location.strand import Strand


class TestGFFWriter:
    def test_write(self):
        gff = GFFSet(
            [
                GFFFeature("chr1", "src", "CDS", 5, 10, 2, Strand.MINUS, Frame.ONE, 'transcript_id "a";'),
                GFFFeature("chr1", "src", "exon", 1, 20),
            ],
            GFFMetadata(gff_version="2", date="2024-1-15"),
        )
        handle = io.StringIO()
        write_gff(gff, handle)
        assert handle.getvalue() == (
            "##gff-version 2\n"
            "##date 2024-1-15\n"
            'chr1\tsrc\tCDS\t5\t10\t2.000\t-\t2\ttranscript_id "a";\n'
            "chr1\tsrc\texon\t1\t20\t.\t.\t.\t\n"
        )

    def test_round_trip(self, test_data_dir, tmp_path):
        gff = parse_gff(test_data_dir / "example.gtf")
        out_path = tmp_path / "out.gtf"
        write_gff(gff, out_path)
        rebuilt = parse_gff(out_path)
        assert rebuilt.metadata == gff.metadata
        assert rebuilt.features == gff.features
        with open(out_path) as fh:
            lines = fh.read().splitlines()
        assert lines[:3] == ["##gff-version 2", "##source-version genie 1.2", "##date 2024-01-15"]
        assert lines[7] == 'chr1\ttest\texon\t500\t700\t0.500\t-\t.\tgene_id "g2"; transcript_id "tx2";'

    def test_source_version_without_source(self):
        gff = GFFSet(metadata=GFFMetadata(source_version="1.0"))
        with pytest.raises(GFFExportException):
            write_gff(gff, io.StringIO())
