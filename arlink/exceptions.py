"""
Exception hierarchy for ARlink
"""


class ArlinkError(Exception):
    """Base class for all ARlink errors"""


class ValidationError(ArlinkError, ValueError):
    """Raised for malformed intervals, tables or parameters"""


class DivisionByZeroError(ArlinkError, ZeroDivisionError):
    """Raised when a proportion is requested over an empty universe"""


class EmptyResultWarning(UserWarning):
    """Emitted when an association step finds no overlaps at all"""
