"""
Exception types raised by physkit.
"""


class PhyskitError(Exception):
    """Base class for all physkit errors."""


class InvalidLengthError(PhyskitError, ValueError):
    """
    Raised when a sample sequence cannot be transformed because its length
    is not a positive power of two.

    The check happens before the sequence is touched, so the caller's data
    is unchanged when this is raised.
    """

    def __init__(self, length: int):
        self.length = length
        super().__init__(
            f"Sequence length must be a positive power of two, got {length}"
        )


class SingularMatrixError(PhyskitError, ArithmeticError):
    """Raised when elimination hits a (numerically) zero pivot."""

    def __init__(self, message: str = "Matrix is singular", pivot: float = None):
        self.pivot = pivot
        super().__init__(message)
