class GFFSetException(Exception):
    """
    Base exception class for GFFSet.
    """

    pass


class ValidationException(GFFSetException):
    """
    Raised when object constructors are given invalid inputs, such as a null sequence name or a frame outside of 0-2.
    """

    pass


class InvalidStrandException(ValidationException):
    """
    Raised when a strand symbol is not one of ``+``, ``-`` or ``.``.
    """

    pass


class InvalidFrameException(ValidationException):
    """
    Raised when a frame is not one of 0, 1, 2 or undefined.
    """

    pass


class InvalidPositionException(GFFSetException):
    """
    Raised when a coordinate is outside of a valid range for the operation being performed, or when a range query has
    its start after its end.
    """

    pass


class GroupingException(GFFSetException):
    """
    Generic exception involving the grouping of features.
    """

    pass


class UngroupedFeatureSetError(GroupingException):
    """
    Raised when an operation that requires grouped features is performed on a :class:`~gffset.feature.GFFSet` that
    has not been grouped.
    """

    pass


class GroupMembershipError(GroupingException):
    """
    Raised when a feature is expected to belong to a group of the current grouping, but cannot be found in any group.
    """

    pass
