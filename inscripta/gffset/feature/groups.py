"""
Grouping of the features of a :class:`~gffset.feature.feature_set.GFFSet`.

A :class:`GroupingIndex` partitions the features of a set by the value of an attribute tag (for instance
``transcript_id``) or by the feature type. Each :class:`FeatureGroup` keeps an ordered list of its members and the
span (min start, max end) that covers them.

The index never owns features. Features belong to the :class:`~gffset.feature.feature_set.GFFSet`; dropping an index
leaves every feature of the set untouched. Conversely, an index goes stale as soon as the feature list of the set is
edited, so the set drops its index on every edit that removes or reorders features, and the index is rebuilt rather
than patched.

Membership lookups compare features by identity and scan every group, so they are linear in the size of the set.
"""
from typing import Callable, Iterable, Iterator, List, Optional, Tuple, Dict

from inscripta.gffset.constants import FEATURE_GROUP_TAG
from inscripta.gffset.exc import GroupMembershipError
from inscripta.gffset.feature.attributes import AttributeParser
from inscripta.gffset.feature.feature import GFFFeature

# features with no value for the grouping tag are all placed in one group with an empty name
NULL_GROUP_NAME = ""


def feature_sort_key(feature: GFFFeature) -> Tuple[int, int]:
    """Order by start, then by end. This puts short features that overlap the ends of longer ones in a sensible
    order."""
    return feature.start, feature.end


class FeatureGroup:
    """A named group of features, such as the features of one transcript."""

    def __init__(self, name: str, features: Optional[List[GFFFeature]] = None):
        self.name = name
        self.features = []
        self.start = None
        self.end = None
        for feature in features or []:
            self.add(feature)

    def __str__(self):
        return f"FeatureGroup({self.name}:{self.start}-{self.end}, size={len(self.features)})"

    def __repr__(self):
        return "<{}>".format(str(self))

    def __iter__(self) -> Iterator[GFFFeature]:
        yield from self.features

    def __len__(self) -> int:
        return len(self.features)

    def add(self, feature: GFFFeature):
        """Append a feature and extend the span of this group to cover it."""
        if not self.features:
            self.start = feature.start
            self.end = feature.end
        else:
            if feature.start < self.start:
                self.start = feature.start
            if feature.end > self.end:
                self.end = feature.end
        self.features.append(feature)

    def position_of(self, feature: GFFFeature) -> int:
        """Position of this exact feature object in the member list, or -1."""
        for i, member in enumerate(self.features):
            if member is feature:
                return i
        return -1

    def remove_at(self, position: int) -> GFFFeature:
        """Remove the member at ``position`` and shrink the span accordingly."""
        feature = self.features.pop(position)
        self.update_span()
        return feature

    def update_span(self):
        """Recompute the span from the current members. Needed after coordinates of members were edited in place."""
        if not self.features:
            self.start = self.end = None
            return
        self.start = min(f.start for f in self.features)
        self.end = max(f.end for f in self.features)

    def sort(self):
        self.features.sort(key=feature_sort_key)

    @property
    def comparison_score(self) -> float:
        """
        A rough score used to decide which of two overlapping groups to keep: the sum of the scores of the members,
        or, if no member has a score, the span of the group.
        """
        scores = [f.score for f in self.features if not f.score_is_null]
        if scores:
            return sum(scores)
        return self.end - self.start + 1

    def features_of_type(self, *feature_types: str) -> List[GFFFeature]:
        return [f for f in self.features if f.feature in feature_types]


class GroupingIndex:
    """An ordered list of :class:`FeatureGroup` built over the features of a set."""

    def __init__(self, tag: str, groups: Optional[List[FeatureGroup]] = None, by_type: bool = False):
        self.tag = tag
        self.groups = groups if groups is not None else []
        # True if groups are keyed by feature type rather than by an attribute tag
        self.by_type = by_type

    def __str__(self):
        return f"GroupingIndex(tag={self.tag}, groups={len(self.groups)})"

    def __repr__(self):
        return "<{}>".format(str(self))

    def __iter__(self) -> Iterator[FeatureGroup]:
        yield from self.groups

    def __len__(self) -> int:
        return len(self.groups)

    def __getitem__(self, item: int) -> FeatureGroup:
        return self.groups[item]

    @staticmethod
    def _build(
        features: Iterable[GFFFeature], tag: str, key: Callable[[GFFFeature], str], by_type: bool = False
    ) -> "GroupingIndex":
        index = GroupingIndex(tag, by_type=by_type)
        by_name: Dict[str, FeatureGroup] = {}
        for feature in features:
            name = key(feature)
            group = by_name.get(name)
            if group is None:
                group = FeatureGroup(name)
                by_name[name] = group
                index.groups.append(group)
            group.add(feature)
        return index

    @staticmethod
    def by_tag(features: Iterable[GFFFeature], tag: str) -> "GroupingIndex":
        """Group features by the value of ``tag`` in their attribute. Features where the tag is missing are placed in
        a single group named by the empty string."""
        parser = AttributeParser(tag)
        return GroupingIndex._build(
            features, tag, lambda feature: parser.lookup(feature.attribute).value_or(NULL_GROUP_NAME)
        )

    @staticmethod
    def by_feature_type(features: Iterable[GFFFeature]) -> "GroupingIndex":
        """Group features by their feature type. Attributes are not inspected."""
        return GroupingIndex._build(features, FEATURE_GROUP_TAG, lambda feature: feature.feature, by_type=True)

    @property
    def names(self) -> List[str]:
        return [g.name for g in self.groups]

    def iter_features(self) -> Iterator[GFFFeature]:
        """All members, group by group, in group order."""
        for group in self.groups:
            yield from group.features

    def sort(self):
        """Sort the members of every group, then the groups by their span."""
        for group in self.groups:
            group.sort()
            group.update_span()
        self.groups.sort(key=lambda g: (g.start, g.end))

    def find(self, feature: GFFFeature) -> Tuple[int, int]:
        """
        Locate a feature.

        Returns:
            A tuple of the index of the group that holds ``feature`` and the position of ``feature`` in that group.

        Raises:
            GroupMembershipError: if no group holds ``feature``.
        """
        for group_idx, group in enumerate(self.groups):
            pos = group.position_of(feature)
            if pos != -1:
                return group_idx, pos
        raise GroupMembershipError(f"Could not find {feature} in any group of {self}")
