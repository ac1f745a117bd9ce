"""
Object representation of a single GFF feature (one row of a GFF file).

Features are deliberately mutable: the derivation passes in :mod:`gffset.ops` adjust coordinates, frames and
attribute text in place.
"""
import re
from typing import Any, Dict, Optional

from inscripta.gffset.constants import NULL_COLUMN
from inscripta.gffset.exc import ValidationException, InvalidPositionException
from inscripta.gffset.feature.frame import Frame
from inscripta.gffset.location.strand import Strand

# UCSC genome browser style position, e.g. chr10:102553847-102554897 with an optional trailing strand
GENOMIC_POSITION_REGEX = re.compile(r"(chr[_a-zA-Z0-9]+):([0-9]+)-([0-9]+)([-+])?")


class GFFFeature:
    """
    One annotated interval. Coordinates are 1-based and closed, as in the GFF file.

    The ``frame`` is stored in the internal convention; see :class:`~gffset.feature.frame.Frame`. An undefined score
    is flagged by ``score_is_null``; the ``score`` value is then meaningless.
    """

    __slots__ = [
        "seqname",
        "source",
        "feature",
        "start",
        "end",
        "score",
        "strand",
        "frame",
        "attribute",
        "score_is_null",
    ]

    def __init__(
        self,
        seqname: str,
        source: str,
        feature: str,
        start: int,
        end: int,
        score: Optional[float] = None,
        strand: Strand = Strand.UNSTRANDED,
        frame: Frame = Frame.NONE,
        attribute: str = "",
        score_is_null: Optional[bool] = None,
    ):
        if seqname is None or source is None or feature is None or attribute is None:
            raise ValidationException("seqname, source, feature and attribute must not be null")
        if not isinstance(strand, Strand):
            raise ValidationException(f"strand must be a Strand; got {strand!r}")
        if not isinstance(frame, Frame):
            raise ValidationException(f"frame must be a Frame; got {frame!r}")
        if score_is_null is None:
            score_is_null = score is None

        self.seqname = seqname
        self.source = source
        self.feature = feature
        self.start = start
        self.end = end
        self.score = 0.0 if score is None else float(score)
        self.strand = strand
        self.frame = frame
        self.attribute = attribute
        self.score_is_null = score_is_null

    def __str__(self):
        return f"GFFFeature({self.seqname}:{self.start}-{self.end}:{self.strand}, type={self.feature})"

    def __repr__(self):
        return "<{}>".format(str(self))

    def __eq__(self, other) -> bool:
        if not isinstance(other, GFFFeature):
            return False
        return self._key() == other._key()

    def _key(self):
        return (
            self.seqname,
            self.source,
            self.feature,
            self.start,
            self.end,
            None if self.score_is_null else self.score,
            self.strand,
            self.frame,
            self.attribute,
        )

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def overlaps(self, start: int, end: int) -> bool:
        return self.start <= end and self.end >= start

    def is_contained_in(self, start: int, end: int) -> bool:
        return self.start >= start and self.end <= end

    def require_valid_interval(self):
        if self.start > self.end:
            raise InvalidPositionException(f"{self} has start after end")

    def copy(self) -> "GFFFeature":
        """Returns an exact, independent copy of this feature."""
        return GFFFeature(
            self.seqname,
            self.source,
            self.feature,
            self.start,
            self.end,
            score=self.score,
            strand=self.strand,
            frame=self.frame,
            attribute=self.attribute,
            score_is_null=self.score_is_null,
        )

    def score_to_gff(self) -> str:
        if self.score_is_null:
            return NULL_COLUMN
        return "%.3f" % self.score

    def to_gff(self) -> str:
        """Serialize as a single tab-delimited GFF line (without the newline). The frame is written in the external
        convention."""
        return "\t".join(
            (
                self.seqname,
                self.source,
                self.feature,
                str(self.start),
                str(self.end),
                self.score_to_gff(),
                self.strand.to_symbol(),
                self.frame.to_gff(),
                self.attribute,
            )
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dict usable by :class:`gffset.io.models.GFFFeatureModel`."""
        return dict(
            seqname=self.seqname,
            source=self.source,
            feature=self.feature,
            start=self.start,
            end=self.end,
            score=None if self.score_is_null else self.score,
            strand=self.strand.name,
            frame=self.frame.to_external(),
            attribute=self.attribute,
        )

    @staticmethod
    def from_dict(vals: Dict[str, Any]) -> "GFFFeature":
        """Build a :class:`GFFFeature` from a dictionary. The frame is expected in the external convention."""
        return GFFFeature(
            seqname=vals["seqname"],
            source=vals["source"],
            feature=vals["feature"],
            start=vals["start"],
            end=vals["end"],
            score=vals["score"],
            strand=Strand[vals["strand"]],
            frame=Frame.from_external(vals["frame"]),
            attribute=vals.get("attribute", ""),
        )

    @staticmethod
    def from_record(
        seqname: str,
        source: str,
        feature: str,
        start: int,
        end: int,
        score: Optional[float],
        strand: str,
        frame: Optional[int],
        attribute: str,
    ) -> "GFFFeature":
        """Build a feature from the plain values a reader produces: the strand as a symbol and the frame as an
        external integer or ``None``."""
        return GFFFeature(
            seqname,
            source,
            feature,
            start,
            end,
            score=score,
            strand=Strand.from_symbol(strand),
            frame=Frame.from_external(frame),
            attribute=attribute if attribute is not None else "",
        )

    @staticmethod
    def from_genomic_position(
        position: str,
        source: str,
        feature: str,
        score: Optional[float] = None,
        frame: Frame = Frame.NONE,
        attribute: str = "",
    ) -> Optional["GFFFeature"]:
        """
        Build a feature from a genomic position string of the type used in the UCSC genome browser, e.g.
        ``chr10:102553847-102554897``. A trailing ``+`` or ``-`` is interpreted as the strand; otherwise the feature
        is unstranded.

        Returns:
            A new feature, or ``None`` if the string can't be parsed.
        """
        match = GENOMIC_POSITION_REGEX.search(position)
        if match is None:
            return None
        chrom, start, end, strand = match.groups()
        return GFFFeature(
            chrom,
            source,
            feature,
            int(start),
            int(end),
            score=score,
            strand=Strand.from_symbol(strand) if strand else Strand.UNSTRANDED,
            frame=frame,
            attribute=attribute,
        )
