import pytest

from inscripta.gffset.exc import InvalidStrandException, ValidationException
from inscripta.gffset.location.strand import Strand


class TestStrand:
    @pytest.mark.parametrize(
        "strand,string",
        [
            (Strand.PLUS, "+"),
            (Strand.MINUS, "-"),
            (Strand.UNSTRANDED, "."),
        ],
    )
    def test_str(self, strand, string):
        assert str(strand) == string
        assert Strand.from_symbol(string) == strand

    @pytest.mark.parametrize("symbol", ["x", "", "++", "0"])
    def test_from_symbol_invalid(self, symbol):
        with pytest.raises(InvalidStrandException):
            Strand.from_symbol(symbol)

    def test_invalid_strand_is_validation_error(self):
        with pytest.raises(ValidationException):
            Strand.from_symbol("?")

    def test_to_biopython(self):
        assert Strand.PLUS.to_biopython() == 1
        assert Strand.MINUS.to_biopython() == -1
        assert Strand.UNSTRANDED.to_biopython() is None

    def test_strands_are_not_ordered(self):
        """Features are ordered by position only; strands have no ordering of their own."""
        with pytest.raises(TypeError):
            sorted([Strand.MINUS, Strand.PLUS])

    def test_reverse(self):
        assert Strand.PLUS.reverse() == Strand.MINUS
        assert Strand.MINUS.reverse() == Strand.PLUS
        assert Strand.UNSTRANDED.reverse() == Strand.UNSTRANDED
