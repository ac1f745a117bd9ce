"""
Read GFF (version 1, 2 or GTF) files into a :class:`~gffset.feature.feature_set.GFFSet`.

Only the first five columns of feature lines are required (``seqname``, ``source``, ``feature``, ``start`` and
``end``); the following columns (``score``, ``strand``, ``frame`` and ``attribute``) are optional. Missing score,
strand and frame default to null (``.``) and a missing attribute to the empty string. Columns must be separated by tabs.

Comments and blank lines are ignored. ``##`` meta-data lines before the first feature are parsed into the
:class:`~gffset.feature.feature_set.GFFMetadata` of the set; unrecognized meta-data is ignored.

The BED and genePred formats are recognized from the first record, and reported by raising
:class:`~gffset.io.gff.exc.BEDFormatDetected` or :class:`~gffset.io.gff.exc.GenePredFormatDetected`.
"""
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, TextIO, Union

from inscripta.gffset.constants import GFF_MIN_COLUMNS, NULL_COLUMN, GFFMetadataTags
from inscripta.gffset.exc import InvalidFrameException, InvalidStrandException
from inscripta.gffset.feature.feature import GFFFeature
from inscripta.gffset.feature.feature_set import GFFMetadata, GFFSet
from inscripta.gffset.feature.frame import Frame
from inscripta.gffset.io.gff.exc import BEDFormatDetected, GenePredFormatDetected, GFFParserError
from inscripta.gffset.location.strand import Strand

logger = logging.getLogger(__name__)

METADATA_REGEX = re.compile(r"^\s*##\s*(\S+)\s+(\S+)(\s+(\S+))?")


@dataclass
class GFFParseArgs:
    """Arguments that adjust how GFF files are read."""

    # minimum number of columns of a feature line
    min_columns: int = GFF_MIN_COLUMNS
    # check whether the first record looks like BED or genePred
    detect_alternate_formats: bool = True


def _is_int(value: str) -> bool:
    try:
        int(value)
    except ValueError:
        return False
    return True


def _detect_alternate_format(fields: List[str], lineno: int):
    """If there are 3-8 or 12 columns, and the 2nd and 3rd columns are integers, the file is BED. If there are at
    least 10 columns and columns 4-7 are integers, the file is genePred."""
    num_fields = len(fields)
    if (3 <= num_fields <= 8 or num_fields == 12) and _is_int(fields[1]) and _is_int(fields[2]):
        raise BEDFormatDetected(f"Line {lineno} looks like BED format")
    if num_fields >= 10 and all(_is_int(x) for x in fields[3:7]):
        raise GenePredFormatDetected(f"Line {lineno} looks like genePred format")


def parse_metadata_line(line: str, metadata: GFFMetadata) -> bool:
    """
    Parse a ``##`` meta-data line into ``metadata``.

    Returns:
        ``True`` if the line was recognized.
    """
    match = METADATA_REGEX.match(line)
    if match is None:
        return False
    tag, value1, _, value2 = match.groups()
    try:
        tag = GFFMetadataTags.from_tag(tag)
    except ValueError:
        return False
    if tag == GFFMetadataTags.VERSION:
        metadata.gff_version = value1
    elif tag == GFFMetadataTags.SOURCE_VERSION:
        if value2 is None:
            return False
        metadata.source = value1
        metadata.source_version = value2
    elif tag == GFFMetadataTags.DATE:
        metadata.date = value1
    return True


def parse_feature_line(fields: List[str], lineno: int, args: Optional[GFFParseArgs] = None) -> GFFFeature:
    """
    Build a feature from the tab-separated columns of one line.

    Raises:
        GFFParserError: if the line does not have enough columns, or has an invalid coordinate, score, strand or
            frame.
    """
    if args is None:
        args = GFFParseArgs()
    if len(fields) < args.min_columns:
        raise GFFParserError(f"Error at line {lineno}: minimum of {args.min_columns} columns are required")

    try:
        start = int(fields[3])
    except ValueError:
        raise GFFParserError(f"Error at line {lineno}: non-numeric 'start' value ('{fields[3]}')")
    try:
        end = int(fields[4])
    except ValueError:
        raise GFFParserError(f"Error at line {lineno}: non-numeric 'end' value ('{fields[4]}')")
    if start > end:
        raise GFFParserError(f"Error at line {lineno}: 'start' ({start}) is after 'end' ({end})")

    score = None
    if len(fields) > 5 and fields[5] != NULL_COLUMN:
        try:
            score = float(fields[5])
        except ValueError:
            raise GFFParserError(f"Error at line {lineno}: non-numeric and non-null 'score' value ('{fields[5]}')")

    strand = Strand.UNSTRANDED
    if len(fields) > 6:
        try:
            strand = Strand.from_symbol(fields[6])
        except InvalidStrandException:
            raise GFFParserError(f"Error at line {lineno}: illegal 'strand' ('{fields[6]}')")

    frame = Frame.NONE
    if len(fields) > 7:
        try:
            frame = Frame.from_gff(fields[7])
        except InvalidFrameException:
            raise GFFParserError(f"Error at line {lineno}: illegal 'frame' ('{fields[7]}')")

    attribute = fields[8] if len(fields) > 8 else ""

    return GFFFeature(
        fields[0],
        fields[1],
        fields[2],
        start,
        end,
        score=score,
        strand=strand,
        frame=frame,
        attribute=attribute,
    )


def parse_gff_lines(lines: Iterable[str], args: Optional[GFFParseArgs] = None) -> GFFSet:
    """Parse GFF from an iterable of lines. See :func:`parse_gff`."""
    if args is None:
        args = GFFParseArgs()
    gff = GFFSet()
    done_with_header = False

    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue

        if line.startswith("##") and not done_with_header:
            if not parse_metadata_line(line, gff.metadata):
                logger.debug(f"Unrecognized meta-data at line {lineno}: '{line}'")
            continue
        elif line.startswith("#"):
            continue

        done_with_header = True
        fields = line.split("\t")
        if args.detect_alternate_formats and not gff.features:
            _detect_alternate_format(fields, lineno)
        gff.features.append(parse_feature_line(fields, lineno, args))

    logger.info(f"Read {len(gff.features)} features")
    return gff


def parse_gff(gff_handle_or_path: Union[TextIO, str, Path], args: Optional[GFFParseArgs] = None) -> GFFSet:
    """
    Read a set of features from a GFF file.

    Args:
        gff_handle_or_path: Open file handle or path to read from.
        args: Adjusts parsing; see :class:`GFFParseArgs`.

    Returns:
        A new, ungrouped :class:`~gffset.feature.feature_set.GFFSet` with features in file order.

    Raises:
        GFFParserError: on the first malformed feature line.
        BEDFormatDetected: if the first record looks like BED.
        GenePredFormatDetected: if the first record looks like genePred.
    """
    if isinstance(gff_handle_or_path, (str, Path)):
        with open(gff_handle_or_path) as handle:
            return parse_gff_lines(handle, args)
    return parse_gff_lines(gff_handle_or_path, args)
