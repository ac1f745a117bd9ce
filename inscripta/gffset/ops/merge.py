"""
Merging of overlapping or adjacent features of the same type.

Features must be sorted (see :meth:`~gffset.feature.feature_set.GFFSet.sort`). Two consecutive features are merged
when they have the same type and strand, neither has a frame, and the second starts at most one base after the end
of the first. When two features are merged, the first is extended over the second, scores are summed if both are
defined, and the attributes of the second are dropped along with the second feature.
"""
import logging
from typing import List, Tuple

from inscripta.gffset.feature.feature import GFFFeature
from inscripta.gffset.feature.feature_set import GFFSet

logger = logging.getLogger(__name__)


def _can_merge(last: GFFFeature, this: GFFFeature) -> bool:
    return (
        last.end >= this.start - 1
        and last.strand == this.strand
        and last.feature == this.feature
        and last.frame.is_null
        and this.frame.is_null
    )


def _merge_into(last: GFFFeature, this: GFFFeature):
    # a feature nested in the previous one leaves its end unchanged
    last.end = max(last.end, this.end)
    if not last.score_is_null and not this.score_is_null:
        last.score += this.score


def _flatten(gff: GFFSet, keep_groups: bool):
    """
    Shared implementation of :func:`flatten` and :func:`flatten_within_groups`.

    If ``keep_groups`` and the set is grouped, each feature is compared with the last kept feature of its own group,
    so features of interleaved groups still merge within their group but never across groups. Merged features are
    removed from their group so that the grouping stays valid. Otherwise any grouping is dropped when a merge happens.
    """
    if len(gff.features) <= 1:
        return

    respect_groups = keep_groups and gff.groups is not None
    if respect_groups:
        keepers, merged = _merge_within_groups(gff)
    else:
        keepers, merged = _merge_consecutive(gff)

    if merged:
        logger.info(f"Merged {merged} features")
        gff.features = keepers
        if respect_groups:
            for group in gff.groups:
                group.update_span()
        else:
            gff.ungroup()


def _merge_consecutive(gff: GFFSet) -> Tuple[List[GFFFeature], int]:
    last = gff.features[0]
    keepers = [last]
    merged = 0
    for this in gff.features[1:]:
        if _can_merge(last, this):
            _merge_into(last, this)
            merged += 1
        else:
            keepers.append(this)
            last = this
    return keepers, merged


def _merge_within_groups(gff: GFFSet) -> Tuple[List[GFFFeature], int]:
    # last kept feature of each group, by group index
    last_in_group = {}
    keepers = []
    merged = 0
    for this in gff.features:
        group_idx, pos = gff.groups.find(this)
        last = last_in_group.get(group_idx)
        if last is not None and _can_merge(last, this):
            gff.groups[group_idx].remove_at(pos)
            _merge_into(last, this)
            merged += 1
        else:
            keepers.append(this)
            last_in_group[group_idx] = this
    return keepers, merged


def flatten(gff: GFFSet):
    """
    Merge overlapping or adjacent features of the same type, across group boundaries. Any grouping is dropped if
    features were merged.
    """
    _flatten(gff, keep_groups=False)


def flatten_within_groups(gff: GFFSet):
    """
    Merge overlapping or adjacent features of the same type, only if they are in the same group. The grouping is kept
    and stays consistent with the features. If the set is not grouped, this is the same as :func:`flatten`.
    """
    _flatten(gff, keep_groups=True)
