"""
The feature model: single GFF features, the sets that own them, and groupings of the features of a set.
"""

from inscripta.gffset.feature.frame import Frame  # noqa F401
from inscripta.gffset.feature.attributes import AttributeParser, TagLookup, parse_attributes  # noqa F401
from inscripta.gffset.feature.feature import GFFFeature  # noqa F401
from inscripta.gffset.feature.groups import FeatureGroup, GroupingIndex  # noqa F401
from inscripta.gffset.feature.feature_set import GFFSet, GFFMetadata, SearchCursor  # noqa F401
