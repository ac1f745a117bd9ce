"""
Functions for writing GFF.
"""
from pathlib import Path
from typing import TextIO, Union

from inscripta.gffset.feature.feature_set import GFFSet
from inscripta.gffset.io.gff.exc import GFFExportException


def write_gff(gff: GFFSet, gff_handle_or_path: Union[TextIO, str, Path]):
    """
    Write a :class:`~gffset.feature.feature_set.GFFSet` as GFF.

    One ``##`` meta-data line is written for each meta-data field that is set, then one line per feature in set order.
    Null scores and frames are written as ``.``, scores with three decimals, and frames in the external convention.

    Args:
        gff: Set to write.
        gff_handle_or_path: Open file handle or path to write to.
    """
    if isinstance(gff_handle_or_path, (str, Path)):
        with open(gff_handle_or_path, "w") as handle:
            _write_gff(gff, handle)
    else:
        _write_gff(gff, gff_handle_or_path)


def _write_gff(gff: GFFSet, gff_handle: TextIO):
    if gff.metadata.source_version and not gff.metadata.source:
        raise GFFExportException("Cannot write a source version without a source")
    for line in gff.to_gff():
        print(line, file=gff_handle)
