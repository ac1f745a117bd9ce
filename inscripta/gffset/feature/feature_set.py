"""
The :class:`GFFSet` is the container for every feature read from a GFF file. It owns an ordered list of
:class:`~gffset.feature.feature.GFFFeature` objects, the meta-data from the ``##`` header lines, and optionally a
:class:`~gffset.feature.groups.GroupingIndex` over its features.

The order of :attr:`GFFSet.features` is meaningful: it is the order in which features are iterated and written.

Any edit that removes or reorders features drops the grouping index (see :meth:`GFFSet.ungroup`). Operations that
need groups raise :class:`~gffset.exc.UngroupedFeatureSetError` if there are none, so a stale index can never be
used silently.
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, Iterator, List, Optional, TextIO, Tuple

from inscripta.gffset.constants import DEFAULT_GFF_VERSION, GFFMetadataTags
from inscripta.gffset.exc import InvalidPositionException, UngroupedFeatureSetError
from inscripta.gffset.feature.feature import GFFFeature
from inscripta.gffset.feature.groups import FeatureGroup, GroupingIndex, feature_sort_key
from inscripta.gffset.location.strand import Strand

logger = logging.getLogger(__name__)

RecordTuple = Tuple[str, str, str, int, int, Optional[float], str, Optional[int], str]


@dataclass
class GFFMetadata:
    """Set-level meta-data, read from and written to ``##`` comment lines. Empty strings are unset values."""

    gff_version: str = ""
    source: str = ""
    source_version: str = ""
    date: str = ""

    def copy(self) -> "GFFMetadata":
        return GFFMetadata(self.gff_version, self.source, self.source_version, self.date)

    def to_gff_headers(self) -> List[str]:
        """One header line per meta-data field that is set. The source is only written with its version."""
        headers = []
        if self.gff_version:
            headers.append(f"##{GFFMetadataTags.VERSION.value} {self.gff_version}")
        if self.source_version:
            headers.append(f"##{GFFMetadataTags.SOURCE_VERSION.value} {self.source} {self.source_version}")
        if self.date:
            headers.append(f"##{GFFMetadataTags.DATE.value} {self.date}")
        return headers


@dataclass
class SearchCursor:
    """
    Position to resume a windowed search from, for :meth:`GFFSet.subset_range_overlap_sorted`. When scanning
    consecutive, ascending windows over a set sorted by start, reusing the same cursor makes the whole scan linear.
    """

    index: int = 0


def reverse_strand_only(features: Iterable[GFFFeature]) -> bool:
    """Returns ``True`` if no feature is on the plus strand and at least one feature is on the minus strand."""
    possible = False
    for feature in features:
        if feature.strand == Strand.PLUS:
            return False
        if feature.strand == Strand.MINUS:
            possible = True
    return possible


def reverse_complement_features(features: List[GFFFeature], start_range: int, end_range: int):
    """
    Adjust coordinates and strand of features to reflect reverse complementation of the interval
    ``[start_range, end_range]``. The order of the list is reversed as well, since it will generally be ascending.

    The features, ``start_range`` and ``end_range`` are all assumed to use the same coordinate frame (1-based,
    inclusive). The list is modified in place.
    """
    for feature in features:
        start = feature.start
        feature.start = end_range - feature.end + start_range
        feature.end = end_range - start + start_range
        feature.strand = feature.strand.reverse()
    features.reverse()


class GFFSet:
    """An ordered collection of GFF features, with meta-data and an optional grouping of the features."""

    def __init__(self, features: Optional[List[GFFFeature]] = None, metadata: Optional[GFFMetadata] = None):
        self.features = features if features is not None else []
        self.metadata = metadata if metadata is not None else GFFMetadata()
        self.groups: Optional[GroupingIndex] = None

    def __str__(self):
        grouping = f", grouped by {self.groups.tag}" if self.groups is not None else ""
        return f"GFFSet(features={len(self.features)}{grouping})"

    def __repr__(self):
        return "<{}>".format(str(self))

    def __iter__(self) -> Iterator[GFFFeature]:
        yield from self.features

    def __len__(self) -> int:
        return len(self.features)

    def __getitem__(self, item: int) -> GFFFeature:
        return self.features[item]

    @staticmethod
    def from_template(other: "GFFSet") -> "GFFSet":
        """A new, empty set with the same meta-data as ``other``."""
        return GFFSet(metadata=other.metadata.copy())

    @staticmethod
    def with_defaults(source: str, source_version: str) -> "GFFSet":
        """A new, empty set with the default GFF version, today's date, and the given source and source version."""
        today = date.today()
        return GFFSet(
            metadata=GFFMetadata(
                gff_version=str(DEFAULT_GFF_VERSION),
                source=source,
                source_version=source_version,
                date=f"{today.year}-{today.month}-{today.day}",
            )
        )

    @staticmethod
    def from_records(records: Iterable[RecordTuple], metadata: Optional[GFFMetadata] = None) -> "GFFSet":
        """
        Build a set from plain tuples of
        ``(seqname, source, feature, start, end, score, strand, frame, attribute)``, as produced by a reader.
        ``score`` and ``frame`` may be ``None``; ``frame`` is in the external convention and ``strand`` is a symbol.
        """
        features = []
        for record in records:
            feature = GFFFeature.from_record(*record)
            feature.require_valid_interval()
            features.append(feature)
        return GFFSet(features, metadata)

    @property
    def is_grouped(self) -> bool:
        return self.groups is not None

    def require_groups(self, operation: str) -> GroupingIndex:
        """Return the grouping index, or raise if there is none."""
        if self.groups is None:
            raise UngroupedFeatureSetError(f"{operation} requires groups")
        return self.groups

    def append(self, feature: GFFFeature):
        """Add a feature at the end. The new feature is in no group, so the grouping is dropped."""
        self.features.append(feature)
        self.ungroup()

    def extend(self, features: Iterable[GFFFeature]):
        self.features.extend(features)
        self.ungroup()

    def replace(self, features: List[GFFFeature]):
        """Replace all features of this set."""
        self.features = features
        self.ungroup()

    def clear(self):
        """Remove all features."""
        self.features = []
        self.ungroup()

    def add_to_group(self, group: FeatureGroup, feature: GFFFeature):
        """Add a new feature to both this set and one of its groups, keeping the two views consistent."""
        self.features.append(feature)
        group.add(feature)

    def _subset(self, features: List[GFFFeature]) -> "GFFSet":
        return GFFSet(features, self.metadata.copy())

    @staticmethod
    def _require_range(start: int, end: int):
        if start > end:
            raise InvalidPositionException(f"Range start {start} is after range end {end}")

    def subset_range(self, start: int, end: int, reset_indices: bool = False) -> "GFFSet":
        """
        A new set holding copies of the features that lie entirely within ``[start, end]``. Meta-data is copied.

        Args:
            start: First position of the range, inclusive.
            end: Last position of the range, inclusive.
            reset_indices: If ``True``, coordinates of the copies are made relative to ``start`` (which becomes 1).
        """
        self._require_range(start, end)
        subset = []
        for feature in self.features:
            if feature.is_contained_in(start, end):
                new_feature = feature.copy()
                if reset_indices:
                    new_feature.start = new_feature.start - start + 1
                    new_feature.end = new_feature.end - start + 1
                subset.append(new_feature)
        return self._subset(subset)

    def subset_range_overlap(self, start: int, end: int) -> "GFFSet":
        """A new set holding copies of the features that overlap ``[start, end]``, even partially."""
        self._require_range(start, end)
        return self._subset([f.copy() for f in self.features if f.overlaps(start, end)])

    def subset_range_overlap_sorted(self, start: int, end: int, cursor: SearchCursor) -> "GFFSet":
        """
        Like :meth:`subset_range_overlap`, but assumes features are sorted by start position.

        The search starts at ``cursor.index``, assuming there are no overlapping features before it, and stops at the
        first feature starting after ``end``. On return, the cursor points at the first match; it is left alone if
        there are no matches.
        """
        self._require_range(start, end)
        subset = []
        for i in range(cursor.index, len(self.features)):
            feature = self.features[i]
            if feature.overlaps(start, end):
                if not subset:
                    cursor.index = i
                subset.append(feature.copy())
            elif feature.start > end:
                break
        return self._subset(subset)

    def add_offset(self, offset: int, max_coord: Optional[int] = None):
        """
        Add ``offset`` to the start and end of every feature.

        A feature whose new end is before position 1, or whose new start is after ``max_coord``, is removed. A feature
        only partially out of bounds is truncated to ``[1, max_coord]``. ``max_coord`` of ``None`` (or less than 1)
        means there is no upper bound.
        """
        bounded = max_coord is not None and max_coord > 0
        keepers = []
        for feature in self.features:
            feature.start += offset
            feature.end += offset
            if feature.end < 1 or (bounded and feature.start > max_coord):
                continue
            if feature.start < 1:
                feature.start = 1
            if bounded and feature.end > max_coord:
                feature.end = max_coord
            keepers.append(feature)
        removed = len(self.features) - len(keepers)
        if removed:
            logger.info(f"Removed {removed} features shifted out of bounds")
        self.replace(keepers)

    def reverse_complement(self, start_range: int, end_range: int):
        """Reverse complement every feature of this set with respect to the interval ``[start_range, end_range]``.
        See :func:`reverse_complement_features`."""
        self._require_range(start_range, end_range)
        reverse_complement_features(self.features, start_range, end_range)
        self.ungroup()

    def filter_by_type(self, types: Iterable[str], exclude: bool = False, discards: Optional[TextIO] = None):
        """
        Discard any feature whose type is not in ``types``.

        Args:
            types: Feature types to keep.
            exclude: Exclude rather than keep the given types.
            discards: If provided, discarded features are written to this handle as GFF lines.
        """
        types = set(types)
        keepers = []
        for feature in self.features:
            if (feature.feature in types) != exclude:
                keepers.append(feature)
            elif discards is not None:
                print(feature.to_gff(), file=discards)
        if len(keepers) != len(self.features):
            self.replace(keepers)

    def partition_by_type(self) -> Dict[str, List[GFFFeature]]:
        """Features by type, with types in order of first appearance."""
        partition = OrderedDict()
        for feature in self.features:
            partition.setdefault(feature.feature, []).append(feature)
        return partition

    def reverse_strand_only(self) -> bool:
        return reverse_strand_only(self.features)

    def sort(self):
        """
        Sort features by start position, then by end position.

        If features are grouped, they are sorted within groups, groups are sorted by their span, and the feature list
        is rewritten as the concatenation of the groups.
        """
        if self.groups is None:
            self.features.sort(key=feature_sort_key)
        else:
            self.groups.sort()
            self.features = list(self.groups.iter_features())

    def group(self, tag: str):
        """Group features by the value of ``tag`` in the attribute column. An existing grouping is replaced."""
        self.groups = GroupingIndex.by_tag(self.features, tag)
        logger.debug(f"Grouped {len(self.features)} features into {len(self.groups)} groups by {tag}")

    def group_by_feature(self):
        """Group features by feature type. An existing grouping is replaced."""
        self.groups = GroupingIndex.by_feature_type(self.features)

    def ungroup(self):
        """Drop the grouping. Features are unaffected."""
        self.groups = None

    def regroup(self):
        """Rebuild the grouping from the current features, using the same tag as the existing grouping."""
        groups = self.require_groups("regroup")
        if groups.by_type:
            self.group_by_feature()
        else:
            self.group(groups.tag)

    def group_index_of(self, feature: GFFFeature) -> Optional[Tuple[int, int]]:
        """
        Find the group that holds ``feature``. This scans all groups and is not efficient.

        Returns:
            ``None`` if the set is not grouped, otherwise a tuple of the group index and the position of the feature
            within that group.

        Raises:
            GroupMembershipError: if the set is grouped, but no group holds ``feature``.
        """
        if self.groups is None:
            return None
        return self.groups.find(feature)

    def group_name_of(self, feature: GFFFeature) -> Optional[str]:
        """Name of the group holding ``feature``, or ``None`` if the set is not grouped."""
        found = self.group_index_of(feature)
        if found is None:
            return None
        return self.groups[found[0]].name

    def exon_group(self, tag: str):
        """
        Group contiguous features, e.g., an exon and its adjacent splice sites.

        Within each existing group (or the whole set, if not grouped), runs of overlapping or adjacent features on the
        same strand receive a new ``tag`` attribute. Its value is the outer group name and a run counter, such as
        ``exon_id "tx1.2"``; the counter alone is used if the outer group has no name. The set is then regrouped by
        ``tag``. Features are sorted as a side effect, in a way that reflects the initial grouping.
        """
        self.sort()
        if self.groups is None:
            outer_groups = [FeatureGroup("", self.features)]
        else:
            outer_groups = self.groups.groups

        for group in outer_groups:
            idx = 0
            last = None
            for feature in group.features:
                if last is None or feature.start > last.end + 1 or feature.strand != last.strand:
                    idx += 1
                if feature.attribute in ("", "."):
                    feature.attribute = ""
                else:
                    feature.attribute += " ; "
                if group.name:
                    feature.attribute += f'{tag} "{group.name}.{idx}"'
                else:
                    feature.attribute += f'{tag} "{idx}"'
                if last is None or feature.end > last.end:
                    last = feature

        self.group(tag)

    def to_gff(self) -> Iterator[str]:
        """Yields the header lines and then one line per feature."""
        yield from self.metadata.to_gff_headers()
        for feature in self.features:
            yield feature.to_gff()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dict usable by :class:`gffset.io.models.GFFSetModel`."""
        return dict(
            gff_version=self.metadata.gff_version,
            source=self.metadata.source,
            source_version=self.metadata.source_version,
            date=self.metadata.date,
            features=[f.to_dict() for f in self.features],
        )

    @staticmethod
    def from_dict(vals: Dict[str, Any]) -> "GFFSet":
        """Build a :class:`GFFSet` from a dictionary."""
        metadata = GFFMetadata(
            gff_version=vals.get("gff_version", ""),
            source=vals.get("source", ""),
            source_version=vals.get("source_version", ""),
            date=vals.get("date", ""),
        )
        return GFFSet([GFFFeature.from_dict(f) for f in vals["features"]], metadata)

