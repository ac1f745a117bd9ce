import io

import pytest

from inscripta.gffset.exc import UngroupedFeatureSetError
from inscripta.gffset.location.strand import Strand
from inscripta.gffset.ops.overlaps import remove_overlaps

PLUS = Strand.PLUS


class TestRemoveOverlaps:
    """Greedy removal of overlapping groups; groups are built in start order unless noted."""

    def test_lower_scoring_overlap_is_discarded(self, make_set):
        gff = make_set(
            ("A", "CDS", 1, 10, PLUS, 5),
            ("B", "CDS", 5, 15, PLUS, 3),
            ("C", "CDS", 20, 25, PLUS, 1),
        )
        discards = io.StringIO()
        remove_overlaps(gff, discards)
        assert gff.groups.names == ["A", "C"]
        assert [(f.start, f.end) for f in gff] == [(1, 10), (20, 25)]
        assert discards.getvalue() == 'chr1\ttest\tCDS\t5\t15\t3.000\t+\t.\tgene_id "B"; transcript_id "B";\n'

    def test_higher_scoring_overlap_replaces_kept_group(self, make_set):
        gff = make_set(
            ("A", "CDS", 1, 10, PLUS, 5),
            ("B", "CDS", 5, 15, PLUS, 10),
            ("C", "CDS", 12, 25, PLUS, 1),
        )
        remove_overlaps(gff)
        assert gff.groups.names == ["B"]

    def test_scores_are_summed_over_group(self, make_set):
        gff = make_set(
            ("A", "exon", 1, 10, PLUS, 2),
            ("A", "exon", 30, 40, PLUS, 2),
            ("B", "exon", 5, 35, PLUS, 3),
        )
        gff.sort()
        remove_overlaps(gff)
        assert gff.groups.names == ["A"]
        assert len(gff) == 2

    def test_span_is_used_without_scores(self, make_set):
        gff = make_set(
            ("long", "exon", 1, 100),
            ("short1", "exon", 10, 20),
            ("short2", "exon", 30, 40),
            ("after", "exon", 150, 160),
        )
        remove_overlaps(gff)
        assert gff.groups.names == ["long", "after"]
        assert [(f.start, f.end) for f in gff] == [(1, 100), (150, 160)]

    def test_ties_keep_earlier_group(self, make_set):
        gff = make_set(("A", "CDS", 1, 10, PLUS, 1), ("B", "CDS", 10, 19, PLUS, 1))
        remove_overlaps(gff)
        assert gff.groups.names == ["A"]

    def test_kept_groups_do_not_overlap(self, make_set):
        """Many chained overlaps with arbitrary scores; whatever is kept must be disjoint."""
        records = [(f"t{i}", "exon", i * 7, i * 7 + 12, PLUS, (i * 37) % 11) for i in range(1, 40)]
        gff = make_set(*records)
        gff.sort()
        remove_overlaps(gff)
        spans = [(g.start, g.end) for g in gff.groups]
        for (_, end1), (start2, _) in zip(spans, spans[1:]):
            assert end1 < start2

    def test_grouping_matches_features(self, make_set):
        gff = make_set(
            ("A", "exon", 1, 10),
            ("A", "CDS", 3, 8),
            ("B", "exon", 5, 12),
            ("C", "exon", 20, 30),
        )
        remove_overlaps(gff)
        assert list(gff.groups.iter_features()) == gff.features
        assert gff.groups.tag == "transcript_id"

    def test_requires_groups(self, make_set):
        gff = make_set(("A", "CDS", 1, 10), grouped=False)
        with pytest.raises(UngroupedFeatureSetError):
            remove_overlaps(gff)
