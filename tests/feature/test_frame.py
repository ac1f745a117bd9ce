import pytest

from inscripta.gffset.exc import InvalidFrameException
from inscripta.gffset.feature.frame import Frame


class TestFrame:
    @pytest.mark.parametrize(
        "external,internal",
        [
            (0, Frame.ZERO),
            (1, Frame.TWO),
            (2, Frame.ONE),
            (None, Frame.NONE),
        ],
    )
    def test_external_conversion(self, external, internal):
        assert Frame.from_external(external) == internal
        assert internal.to_external() == external

    @pytest.mark.parametrize(
        "value,expected", [("0", Frame.ZERO), ("1", Frame.TWO), ("2", Frame.ONE), (".", Frame.NONE)]
    )
    def test_from_gff(self, value, expected):
        assert Frame.from_gff(value) == expected
        assert expected.to_gff() == value

    @pytest.mark.parametrize("value", ["3", "-1", "x", ""])
    def test_from_gff_invalid(self, value):
        with pytest.raises(InvalidFrameException):
            Frame.from_gff(value)

    def test_from_external_invalid(self):
        with pytest.raises(InvalidFrameException):
            Frame.from_external(3)

    def test_shift(self):
        assert Frame.ZERO.shift(1) == Frame.ONE
        assert Frame.TWO.shift(2) == Frame.ONE
        assert Frame.ONE.shift(3) == Frame.ONE
        assert Frame.NONE.shift(1) == Frame.NONE

    @pytest.mark.parametrize("frame", [Frame.ZERO, Frame.ONE, Frame.TWO])
    @pytest.mark.parametrize("n", [0, 1, 2, 3, 7])
    def test_unshift_reverses_shift(self, frame, n):
        assert frame.shift(n).unshift(n) == frame

    def test_unshift_undefined(self):
        assert Frame.NONE.unshift(2) == Frame.NONE

    def test_is_null(self):
        assert Frame.NONE.is_null
        assert not Frame.ZERO.is_null
