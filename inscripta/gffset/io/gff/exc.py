from inscripta.gffset.io.exc import InvalidInputError, GFFSetIOException


class GFFParserError(InvalidInputError):
    """
    Raised when a GFF line cannot be parsed: too few columns, non-numeric coordinates or score, or an illegal strand
    or frame.
    """

    pass


class UnsupportedFormatError(InvalidInputError):
    """
    Raised when the input looks like one of the sibling tab-delimited annotation formats rather than GFF. These
    formats are not parsed here; the caller can hand the input to a dedicated parser.
    """

    format_name = None


class BEDFormatDetected(UnsupportedFormatError):
    """
    Raised when the first record has 3-8 or 12 columns and integer second and third columns.
    """

    format_name = "BED"


class GenePredFormatDetected(UnsupportedFormatError):
    """
    Raised when the first record has at least 10 columns and integer columns 4 through 7.
    """

    format_name = "genePred"


class GFFExportException(GFFSetIOException):
    """
    Raised for any generic error when exporting a GFF.
    """

    pass
