from enum import Enum
from inscripta.gffset.exc import InvalidStrandException


class Strand(Enum):
    """Strand of a GFF feature, as written in column 7."""

    PLUS = 1
    MINUS = -1
    UNSTRANDED = 0

    def __str__(self):
        return self.to_symbol()

    @staticmethod
    def from_symbol(value: str) -> "Strand":
        """Converts string representation of a strand to a Strand. A period is the unstranded symbol."""
        if value == "+":
            return Strand.PLUS
        if value == "-":
            return Strand.MINUS
        if value == ".":
            return Strand.UNSTRANDED
        raise InvalidStrandException(f"{value} is not a valid GFF strand symbol")

    def to_symbol(self) -> str:
        if self == Strand.PLUS:
            return "+"
        if self == Strand.MINUS:
            return "-"
        return "."

    def to_biopython(self):
        """Biopython represents an unknown strand with ``None``"""
        if self == Strand.UNSTRANDED:
            return None
        return self.value

    def reverse(self) -> "Strand":
        """Strand of the reverse complement. Unstranded stays unstranded."""
        if self == Strand.PLUS:
            return Strand.MINUS
        if self == Strand.MINUS:
            return Strand.PLUS
        return Strand.UNSTRANDED
