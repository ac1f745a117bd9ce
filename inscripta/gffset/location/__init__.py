"""
Strand handling for features. Features in this package are plain 1-based closed intervals, so the only piece of
location logic that needs its own type is the strand.
"""

from inscripta.gffset.location.strand import Strand  # noqa F401
