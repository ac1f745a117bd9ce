"""
Batch passes over a :class:`~gffset.feature.feature_set.GFFSet`: overlap removal, structural derivations and merging.
"""

from inscripta.gffset.ops.overlaps import remove_overlaps  # noqa F401
from inscripta.gffset.ops.derive import (  # noqa F401
    fix_start_stop,
    absorb_helpers,
    add_gene_id,
    filter_by_group,
    create_utrs,
    create_introns,
    create_signals,
)
from inscripta.gffset.ops.merge import flatten, flatten_within_groups  # noqa F401
