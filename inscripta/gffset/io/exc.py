"""
I/O exceptions.
"""
from inscripta.gffset.exc import GFFSetException


class GFFSetIOException(GFFSetException):
    pass


class InvalidInputError(GFFSetIOException):
    pass
