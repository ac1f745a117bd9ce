"""
Converts GFF features to :class:`Bio.SeqFeature.SeqFeature` objects, which can be attached to a
:class:`Bio.SeqRecord.SeqRecord` and written out with :mod:`Bio.SeqIO`.
"""
from typing import Dict, Iterable, List

from Bio.SeqFeature import FeatureLocation, SeqFeature

from inscripta.gffset.feature.attributes import parse_attributes
from inscripta.gffset.feature.feature import GFFFeature
from inscripta.gffset.feature.feature_set import GFFSet


def feature_qualifiers(feature: GFFFeature) -> Dict[str, List[str]]:
    """Qualifiers of one feature: its source, score and frame if defined, and its attribute tags."""
    qualifiers = {"source": [feature.source]}
    if not feature.score_is_null:
        qualifiers["score"] = [feature.score_to_gff()]
    if not feature.frame.is_null:
        # GenBank counts the codon start from 1
        qualifiers["codon_start"] = [str(feature.frame.to_external() + 1)]
    for key, value in parse_attributes(feature.attribute).items():
        qualifiers[key] = [value]
    return qualifiers


def feature_to_seqfeature(feature: GFFFeature) -> SeqFeature:
    """Convert one feature. Biopython locations are 0-based and half-open."""
    location = FeatureLocation(feature.start - 1, feature.end, strand=feature.strand.to_biopython())
    seq_feature = SeqFeature(location, type=feature.feature)
    seq_feature.qualifiers = feature_qualifiers(feature)
    return seq_feature


def gff_set_to_seqfeatures(gff: GFFSet) -> Iterable[SeqFeature]:
    """
    Converts every feature of a :class:`~gffset.feature.feature_set.GFFSet` to a :class:`Bio.SeqFeature.SeqFeature`,
    in set order.

    Yields:
        A ``SeqFeature`` for each feature.
    """
    for feature in gff:
        yield feature_to_seqfeature(feature)
