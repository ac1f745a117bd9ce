"""
Constants shared across the feature model, the derivation passes and GFF I/O.
"""
from enum import Enum

NULL_COLUMN = "."
DEFAULT_GFF_VERSION = 2
# tag name recorded on a grouping built from the feature type column rather than from an attribute
FEATURE_GROUP_TAG = "feature"
GENE_ID_TAG = "gene_id"
GFF_MIN_COLUMNS = 5


class HasMemberMixin(Enum):
    """Adds a `has_value()` and `has_name()` convenience method to enumerations."""

    @classmethod
    def has_value(cls, value):
        return value in cls._value2member_map_

    @classmethod
    def has_name(cls, name):
        return name in cls.__members__


class GFFFeatureTypes(HasMemberMixin):
    """Feature types that the structural derivation passes recognize or create. Matching is case sensitive."""

    CDS = "CDS"
    EXON = "exon"
    START_CODON = "start_codon"
    STOP_CODON = "stop_codon"
    UTR5 = "5'UTR"
    UTR3 = "3'UTR"
    INTRON = "intron"
    SPLICE5 = "5'splice"
    SPLICE3 = "3'splice"


class GFFMetadataTags(HasMemberMixin):
    """Tags of the ``##`` meta-data comment lines that are understood. Matching is case insensitive."""

    VERSION = "gff-version"
    SOURCE_VERSION = "source-version"
    DATE = "date"

    @classmethod
    def from_tag(cls, tag: str) -> "GFFMetadataTags":
        """Case insensitive lookup; raises ``ValueError`` for anything unrecognized."""
        return cls(tag.lower())
