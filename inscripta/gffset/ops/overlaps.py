"""
Removal of overlapping groups, e.g. competing gene predictions that share a locus.

Groups are visited in order and kept greedily. A group that overlaps groups already kept replaces all of them if its
score is higher than their combined score, and is discarded otherwise. The score of a group is the sum of the scores
of its features, or its span if none of them are scored. Only groups that directly intersect the candidate are
compared, so when three or more groups chain-overlap the kept set is not guaranteed to be the best possible one.
"""
import logging
from bisect import bisect_right
from typing import List, Optional, TextIO

from inscripta.gffset.feature.feature_set import GFFSet
from inscripta.gffset.feature.groups import FeatureGroup, GroupingIndex

logger = logging.getLogger(__name__)


def _write_discards(groups: List[FeatureGroup], discards: Optional[TextIO]):
    if discards is None:
        return
    for group in groups:
        for feature in group.features:
            print(feature.to_gff(), file=discards)


def remove_overlaps(gff: GFFSet, discards: Optional[TextIO] = None):
    """
    Identify overlapping groups and keep, for each cluster of overlaps, the best scoring groups.

    Features must already be grouped, and groups are expected in ascending order of start position (see
    :meth:`~gffset.feature.feature_set.GFFSet.sort`). On return the set holds only the features of the kept groups,
    in group order, and its grouping holds only the kept groups.

    Args:
        gff: Set to process.
        discards: If provided, the features of discarded groups are written here as GFF lines.

    Raises:
        UngroupedFeatureSetError: if ``gff`` is not grouped.
    """
    grouping = gff.require_groups("remove_overlaps")

    # parallel lists describing the kept groups, ordered by start
    starts: List[int] = []
    ends: List[int] = []
    scores: List[float] = []
    keepers: List[FeatureGroup] = []
    last_end = -1
    num_discarded = 0

    for group in grouping:
        score = group.comparison_score

        if group.start > last_end:
            # common case; cannot overlap anything kept so far
            starts.append(group.start)
            ends.append(group.end)
            scores.append(score)
            keepers.append(group)
            last_end = group.end
            continue

        # index of the last kept group starting at or before this one; -1 if this one belongs at the front
        list_idx = bisect_right(starts, group.start) - 1
        prev_end = ends[list_idx] if list_idx >= 0 else -1
        next_start = starts[list_idx + 1] if list_idx + 1 < len(starts) else None
        add_this_group = True
        to_discard = []

        if prev_end >= group.start or (next_start is not None and next_start <= group.end):
            min_idx = list_idx
            alt_score = 0
            while min_idx >= 0 and ends[min_idx] >= group.start:
                alt_score += scores[min_idx]
                min_idx -= 1
            min_idx += 1
            max_idx = list_idx + 1
            while max_idx < len(starts) and starts[max_idx] <= group.end:
                alt_score += scores[max_idx]
                max_idx += 1

            if score > alt_score:
                to_discard = keepers[min_idx:max_idx]
                del starts[min_idx:max_idx]
                del ends[min_idx:max_idx]
                del scores[min_idx:max_idx]
                del keepers[min_idx:max_idx]
                list_idx = min_idx - 1
            else:
                to_discard = [group]
                add_this_group = False

        if add_this_group:
            starts.insert(list_idx + 1, group.start)
            ends.insert(list_idx + 1, group.end)
            scores.insert(list_idx + 1, score)
            keepers.insert(list_idx + 1, group)
            if group.end > last_end:
                last_end = group.end

        num_discarded += len(to_discard)
        _write_discards(to_discard, discards)

    logger.info(f"Kept {len(keepers)} groups, discarded {num_discarded} overlapping groups")
    gff.features = [feature for group in keepers for feature in group.features]
    gff.groups = GroupingIndex(grouping.tag, keepers, by_type=grouping.by_type)
