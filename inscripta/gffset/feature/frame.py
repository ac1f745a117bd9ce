from enum import Enum
from typing import Optional

from inscripta.gffset.constants import NULL_COLUMN
from inscripta.gffset.exc import InvalidFrameException


class Frame(Enum):
    """
    Reading frame of a feature, in the *internal* convention.

    GFF column 8 stores the number of bases that must be removed from the beginning of a feature to reach the first
    base of the next codon. Internally the frame is kept as the number of bases of an unfinished codon that precede
    the feature, which is ``(3 - external) % 3``. The mapping is its own inverse, so the same formula converts back
    on output.

    This makes frame arithmetic additive: extending a feature upstream by ``n`` bases subtracts ``n`` from the
    internal frame, and shortening it adds ``n``.
    """

    NONE = -1
    ZERO = 0
    ONE = 1
    TWO = 2

    @staticmethod
    def from_external(value: Optional[int]) -> "Frame":
        """Build from an external (on-disk) frame. ``None`` is the undefined frame."""
        if value is None:
            return Frame.NONE
        if value not in (0, 1, 2):
            raise InvalidFrameException(f"Frame must be one of 0, 1, 2 or undefined; got {value}")
        return Frame((3 - value) % 3)

    @staticmethod
    def from_gff(value: str) -> "Frame":
        """Parse the frame column of a GFF row."""
        if value == NULL_COLUMN:
            return Frame.NONE
        try:
            external = int(value)
        except ValueError:
            raise InvalidFrameException(f"illegal 'frame' ('{value}')")
        return Frame.from_external(external)

    @property
    def is_null(self) -> bool:
        return self is Frame.NONE

    def to_external(self) -> Optional[int]:
        if self is Frame.NONE:
            return None
        return (3 - self.value) % 3

    def to_gff(self) -> str:
        """In GFF format, an undefined frame is represented with a period"""
        if self is Frame.NONE:
            return NULL_COLUMN
        return str(self.to_external())

    def shift(self, shift: int) -> "Frame":
        """Add ``shift`` bases in mod-3 space. The undefined frame is unchanged."""
        if self is Frame.NONE:
            return self
        return Frame((self.value + shift) % 3)

    def unshift(self, shift: int) -> "Frame":
        """Subtract ``shift`` bases in mod-3 space, computed as ``(frame + 2 * shift) % 3`` to stay non-negative."""
        return self.shift(2 * shift)
