"""
Structural derivations over grouped features, where each group represents a transcript.

These functions infer features that are implied by the ones present (UTRs, introns, start and stop codons, splice
sites) or adjust coordinates so that different annotation conventions agree (for instance, GTF2 requires CDS features
to include the start codon and exclude the stop codon).

All of them require a grouped :class:`~gffset.feature.feature_set.GFFSet`, and raise
:class:`~gffset.exc.UngroupedFeatureSetError` otherwise. New features are added to the set and to their group at the
same time; they are appended at the end, so call :meth:`~gffset.feature.feature_set.GFFSet.sort` afterwards if order
matters.
"""
import logging
from typing import Iterable, List, Optional

from inscripta.gffset.constants import GENE_ID_TAG, GFFFeatureTypes
from inscripta.gffset.feature.feature import GFFFeature
from inscripta.gffset.feature.feature_set import GFFSet
from inscripta.gffset.feature.groups import FeatureGroup, feature_sort_key
from inscripta.gffset.location.strand import Strand

logger = logging.getLogger(__name__)

CDS = GFFFeatureTypes.CDS.value
EXON = GFFFeatureTypes.EXON.value
START_CODON = GFFFeatureTypes.START_CODON.value
STOP_CODON = GFFFeatureTypes.STOP_CODON.value
UTR5 = GFFFeatureTypes.UTR5.value
UTR3 = GFFFeatureTypes.UTR3.value
INTRON = GFFFeatureTypes.INTRON.value
SPLICE5 = GFFFeatureTypes.SPLICE5.value
SPLICE3 = GFFFeatureTypes.SPLICE3.value


def _group_strand(group: FeatureGroup) -> Optional[Strand]:
    """The strand of a transcript is the strand of its first feature."""
    if not group.features:
        return None
    strand = group.features[0].strand
    if any(f.strand != strand for f in group.features):
        logger.warning(f"Group {group.name} has features on more than one strand; using {strand}")
    return strand


def _derived_feature(template: GFFFeature, feature_type: str, start: int, end: int) -> GFFFeature:
    new_feature = template.copy()
    new_feature.feature = feature_type
    new_feature.start = start
    new_feature.end = end
    return new_feature


def fix_start_stop(gff: GFFSet):
    """
    Adjust coordinates of CDS features such that start codons are included and stop codons are excluded, as required
    in GTF2. Assumes there is at most one start codon and at most one stop codon per group. A CDS is never shrunk to
    end before it starts.
    """
    grouping = gff.require_groups("fix_start_stop")

    for group in grouping:
        start_codon = stop_codon = None
        for feature in group:
            if feature.feature == START_CODON:
                start_codon = feature
            elif feature.feature == STOP_CODON:
                stop_codon = feature
        if start_codon is None and stop_codon is None:
            continue

        for cds in group.features_of_type(CDS):
            if start_codon is not None:
                if cds.strand == Strand.PLUS and cds.start == start_codon.end + 1:
                    cds.start = start_codon.start
                elif cds.strand == Strand.MINUS and cds.end == start_codon.start - 1:
                    cds.end = start_codon.end
            if stop_codon is not None:
                if cds.strand == Strand.PLUS and cds.end == stop_codon.end and stop_codon.start - 1 >= cds.start:
                    cds.end = stop_codon.start - 1
                elif cds.strand == Strand.MINUS and cds.start == stop_codon.start and stop_codon.end + 1 <= cds.end:
                    cds.start = stop_codon.end + 1
        group.update_span()


def absorb_helpers(gff: GFFSet, primary_types: Iterable[str], helper_types: Iterable[str]):
    """
    Extend features of "primary" types (e.g., CDS) over directly adjacent features of "helper" types (e.g.,
    start_codon). Features must be grouped and sorted. No features are created or discarded; only coordinates and
    frames of primary features change.

    Each primary feature is extended leftwards through consecutive group members that are helpers ending right before
    it, then rightwards through helpers starting right after it. The frame is shifted back by the length of a helper
    absorbed at the 5' end (left on the plus strand, right on the minus strand) so that the reading frame is kept.
    """
    grouping = gff.require_groups("absorb_helpers")
    primary_types = set(primary_types)
    helper_types = set(helper_types)

    for group in grouping:
        members = group.features
        for j, feature in enumerate(members):
            if feature.feature not in primary_types:
                continue
            # extend to left
            for k in range(j - 1, -1, -1):
                prev = members[k]
                if prev.feature not in helper_types or prev.end != feature.start - 1:
                    break
                feature.start = prev.start
                if feature.strand == Strand.PLUS:
                    feature.frame = feature.frame.unshift(prev.length)
            # extend to right
            for k in range(j + 1, len(members)):
                nxt = members[k]
                if nxt.feature not in helper_types or nxt.start != feature.end + 1:
                    break
                feature.end = nxt.end
                if feature.strand == Strand.MINUS:
                    feature.frame = feature.frame.unshift(nxt.length)


def add_gene_id(gff: GFFSet):
    """Add a ``gene_id`` tag holding the group name in front of the attributes of every feature. Required in output by
    some programs."""
    grouping = gff.require_groups("add_gene_id")
    for group in grouping:
        for feature in group:
            feature.attribute = f'{GENE_ID_TAG} "{group.name}" ; {feature.attribute}'


def filter_by_group(gff: GFFSet, names: Iterable[str], exclude: bool = False):
    """
    Remove all groups whose names are not in ``names`` (or, with ``exclude``, whose names are in ``names``). The set is
    regrouped with the same tag afterwards.
    """
    grouping = gff.require_groups("filter_by_group")
    names = set(names)
    keepers = []
    for group in grouping:
        if (group.name in names) != exclude:
            keepers.extend(group.features)
    logger.info(f"Kept {len(keepers)} of {len(gff.features)} features after filtering by group")
    gff.features = keepers
    gff.regroup()


def _cds_extent(group: FeatureGroup):
    cds_features = group.features_of_type(CDS)
    if not cds_features:
        return None, None
    return min(f.start for f in cds_features), max(f.end for f in cds_features)


def create_utrs(gff: GFFSet):
    """
    Create 5'UTR and 3'UTR features for exons that extend beyond the CDS features of the same group. The UTR covers the
    part of the exon outside the CDS span. Groups without a CDS are skipped.
    """
    grouping = gff.require_groups("create_utrs")
    created = 0

    for group in grouping:
        cds_start, cds_end = _cds_extent(group)
        if cds_start is None:
            continue
        strand = _group_strand(group)
        upstream_type, downstream_type = (UTR3, UTR5) if strand == Strand.MINUS else (UTR5, UTR3)

        for exon in group.features_of_type(EXON):
            if exon.start < cds_start:
                utr = _derived_feature(exon, upstream_type, exon.start, min(exon.end, cds_start - 1))
                gff.add_to_group(group, utr)
                created += 1
            if exon.end > cds_end:
                utr = _derived_feature(exon, downstream_type, max(exon.start, cds_end + 1), exon.end)
                gff.add_to_group(group, utr)
                created += 1

    logger.info(f"Created {created} UTR features")


def create_introns(gff: GFFSet):
    """Create intron features between consecutive exons of the same group. Exons that touch or overlap have no intron
    between them."""
    grouping = gff.require_groups("create_introns")
    created = 0

    for group in grouping:
        exons = sorted(group.features_of_type(EXON), key=feature_sort_key)
        for exon1, exon2 in zip(exons, exons[1:]):
            if exon2.start <= exon1.end + 1:
                logger.debug(f"No gap between {exon1} and {exon2}; not creating an intron")
                continue
            gff.add_to_group(group, _derived_feature(exon1, INTRON, exon1.end + 1, exon2.start - 1))
            created += 1

    logger.info(f"Created {created} intron features")


def _is_utr(feature: GFFFeature) -> bool:
    return feature.feature == UTR5 or feature.feature == UTR3


def create_signals(gff: GFFSet):
    """
    Create features for start and stop codons and for 5' and 3' splice sites.

    Codons are 3 bp features at the ends of the CDS span of each group. Stop codons are carved out of the CDS, which is
    shortened by 3 bp on that side; the frame of the stop codon follows from the frame of the shortened CDS. CDS
    features shorter than 3 bp get no codons.

    Splice sites are 2 bp features flanking every CDS or UTR boundary that is not an end of the CDS or of the
    transcript. Splice sites in UTRs are only created if the UTRs are annotated (see :func:`create_utrs`).
    """
    grouping = gff.require_groups("create_signals")
    created = 0

    for group in grouping:
        strand = _group_strand(group)
        cds_start, cds_end = _cds_extent(group)
        transcribed = group.features_of_type(CDS, UTR5, UTR3)
        if not transcribed:
            continue
        if cds_start is None:
            # UTRs only; no UTR boundary can then be a CDS boundary
            cds_start, cds_end = float("inf"), -1
        trans_start = min(f.start for f in transcribed)
        trans_end = max(f.end for f in transcribed)
        new_features: List[GFFFeature] = []

        for feature in transcribed:
            is_cds = feature.feature == CDS

            if is_cds and feature.length >= 3:
                if feature.start == cds_start:
                    codon = _derived_feature(feature, START_CODON, feature.start, feature.start + 2)
                    if strand == Strand.MINUS:
                        codon.feature = STOP_CODON
                        feature.start += 3
                        codon.frame = feature.frame.shift(feature.length)
                    new_features.append(codon)
                if feature.end == cds_end:
                    codon = _derived_feature(feature, STOP_CODON, feature.end - 2, feature.end)
                    if strand == Strand.MINUS:
                        codon.feature = START_CODON
                    else:
                        feature.end -= 3
                        codon.frame = feature.frame.shift(feature.length)
                    new_features.append(codon)

            if (is_cds and feature.start != cds_start and feature.start != cds_start + 3) or (
                _is_utr(feature) and feature.start != trans_start and feature.start != cds_end + 1
            ):
                splice_type = SPLICE5 if strand == Strand.MINUS else SPLICE3
                new_features.append(_derived_feature(feature, splice_type, feature.start - 2, feature.start - 1))

            if (is_cds and feature.end != cds_end and feature.end != cds_end - 3) or (
                _is_utr(feature) and feature.end != cds_start - 1 and feature.end != trans_end
            ):
                splice_type = SPLICE3 if strand == Strand.MINUS else SPLICE5
                new_features.append(_derived_feature(feature, splice_type, feature.end + 1, feature.end + 2))

        for new_feature in new_features:
            gff.add_to_group(group, new_feature)
        created += len(new_features)

    logger.info(f"Created {created} signal features")
