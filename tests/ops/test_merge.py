from inscripta.gffset.feature.frame import Frame
from inscripta.gffset.location.strand import Strand
from inscripta.gffset.ops.merge import flatten, flatten_within_groups

PLUS = Strand.PLUS
MINUS = Strand.MINUS


def coords(gff):
    return [(f.feature, f.start, f.end) for f in gff]


class TestFlatten:
    def test_overlapping_and_adjacent(self, make_set):
        gff = make_set(
            ("A", "exon", 1, 10, PLUS, 1),
            ("A", "exon", 11, 20, PLUS, 2),
            ("B", "exon", 15, 30, PLUS, 4),
            ("B", "exon", 40, 50, PLUS, 8),
            grouped=False,
        )
        flatten(gff)
        assert coords(gff) == [("exon", 1, 30), ("exon", 40, 50)]
        assert [f.score for f in gff] == [7, 8]

    def test_nested(self, make_set):
        gff = make_set(("A", "exon", 1, 100), ("A", "exon", 10, 20), ("A", "exon", 50, 120), grouped=False)
        flatten(gff)
        assert coords(gff) == [("exon", 1, 120)]

    def test_null_score(self, make_set):
        gff = make_set(("A", "exon", 1, 10, PLUS, 1), ("A", "exon", 5, 20), grouped=False)
        flatten(gff)
        assert gff[0].score == 1
        assert not gff[0].score_is_null

    def test_not_merged(self, make_set):
        gff = make_set(
            ("A", "exon", 1, 10),
            ("A", "exon", 12, 20),
            ("A", "CDS", 18, 30),
            ("A", "CDS", 25, 40, PLUS, None, Frame.ZERO),
            ("A", "CDS", 41, 50, MINUS),
            grouped=False,
        )
        flatten(gff)
        assert len(gff) == 5

    def test_idempotent(self, make_set):
        gff = make_set(
            ("A", "exon", 1, 10), ("A", "exon", 5, 20), ("A", "exon", 21, 25), ("A", "exon", 30, 40), grouped=False
        )
        flatten(gff)
        once = coords(gff)
        flatten(gff)
        assert coords(gff) == once == [("exon", 1, 25), ("exon", 30, 40)]

    def test_drops_grouping_on_merge(self, make_set):
        gff = make_set(("A", "exon", 1, 10), ("B", "exon", 5, 20))
        flatten(gff)
        assert not gff.is_grouped
        assert coords(gff) == [("exon", 1, 20)]

    def test_keeps_grouping_without_merge(self, make_set):
        gff = make_set(("A", "exon", 1, 10), ("B", "exon", 20, 30))
        flatten(gff)
        assert gff.is_grouped


class TestFlattenWithinGroups:
    """Merging that never crosses group boundaries and keeps the index in sync."""

    def test_respects_groups(self, make_set):
        gff = make_set(("A", "exon", 1, 10), ("A", "exon", 11, 20), ("B", "exon", 15, 30))
        gff.sort()
        flatten_within_groups(gff)
        assert coords(gff) == [("exon", 1, 20), ("exon", 15, 30)]
        assert gff.is_grouped
        assert [len(g) for g in gff.groups] == [1, 1]
        assert list(gff.groups.iter_features()) == gff.features

    def test_merged_feature_leaves_group(self, make_set):
        gff = make_set(("A", "CDS", 1, 10), ("A", "CDS", 5, 20), ("A", "exon", 30, 40))
        gff.sort()
        flatten_within_groups(gff)
        group = gff.groups[0]
        assert (group.start, group.end) == (1, 40)
        assert [(f.feature, f.start, f.end) for f in group] == [("CDS", 1, 20), ("exon", 30, 40)]

    def test_interleaved_groups(self, make_set):
        """Pieces of one transcript merge even when another transcript's feature sorts between them."""
        gff = make_set(("A", "exon", 1, 10), ("B", "exon", 5, 20), ("A", "exon", 11, 15))
        flatten_within_groups(gff)
        assert coords(gff) == [("exon", 1, 15), ("exon", 5, 20)]
        assert [g.name for g in gff.groups] == ["A", "B"]
        assert [[(f.start, f.end) for f in g] for g in gff.groups] == [[(1, 15)], [(5, 20)]]
        assert list(gff.groups.iter_features()) == gff.features

    def test_ungrouped(self, make_set):
        gff = make_set(("A", "exon", 1, 10), ("B", "exon", 5, 20), grouped=False)
        flatten_within_groups(gff)
        assert coords(gff) == [("exon", 1, 20)]
