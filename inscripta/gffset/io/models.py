"""
Data models. These models allow for validation of inputs to GFFSet objects, acting as a JSON schema for serializing
and deserializing feature sets.
"""
from typing import ClassVar, List, Optional, Type

from marshmallow import Schema, ValidationError, validates_schema
from marshmallow_dataclass import dataclass

from inscripta.gffset.feature.feature import GFFFeature
from inscripta.gffset.feature.feature_set import GFFSet
from inscripta.gffset.location.strand import Strand


@dataclass
class BaseModel:
    """Base for all of the models."""

    Schema: ClassVar[Type[Schema]] = Schema  # noqa: F811

    class Meta:
        ordered = True


@dataclass
class GFFFeatureModel(BaseModel):
    """Data model that allows construction of a :class:`~gffset.feature.feature.GFFFeature` object.

    Coordinates are 1-based and inclusive. The frame is in the external convention (0-2, or ``None`` if undefined).
    """

    seqname: str
    source: str
    feature: str
    start: int
    end: int
    strand: Strand = Strand.UNSTRANDED
    score: Optional[float] = None
    frame: Optional[int] = None
    attribute: str = ""

    @validates_schema
    def validate_interval(self, data, **kwargs):
        if data["start"] > data["end"]:
            raise ValidationError(f"start {data['start']} is after end {data['end']}")
        if data.get("frame") is not None and not 0 <= data["frame"] <= 2:
            raise ValidationError(f"frame must be 0, 1 or 2, not {data['frame']}")

    def to_gff_feature(self) -> GFFFeature:
        """Construct a :class:`~gffset.feature.feature.GFFFeature` from a :class:`GFFFeatureModel`."""
        return GFFFeature.from_dict(GFFFeatureModel.Schema().dump(self))

    @staticmethod
    def from_gff_feature(feature: GFFFeature) -> "GFFFeatureModel":
        """Convert a :class:`~gffset.feature.feature.GFFFeature` to a :class:`GFFFeatureModel`."""
        return GFFFeatureModel.Schema().load(feature.to_dict())


@dataclass
class GFFSetModel(BaseModel):
    """Data model that allows construction of a :class:`~gffset.feature.feature_set.GFFSet` object.

    Groupings are not serialized; regroup after loading if needed.
    """

    features: List[GFFFeatureModel]
    gff_version: str = ""
    source: str = ""
    source_version: str = ""
    date: str = ""

    def to_gff_set(self) -> GFFSet:
        """Construct a :class:`~gffset.feature.feature_set.GFFSet` from a :class:`GFFSetModel`."""
        return GFFSet.from_dict(GFFSetModel.Schema().dump(self))

    @staticmethod
    def from_gff_set(gff: GFFSet) -> "GFFSetModel":
        """Convert a :class:`~gffset.feature.feature_set.GFFSet` to a :class:`GFFSetModel`."""
        return GFFSetModel.Schema().load(gff.to_dict())
