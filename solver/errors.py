"""Errors raised by the linear-system solver."""


class InvalidDimensions(ValueError):
    """The coefficient matrix and the constant vector do not fit together.

    Raised when the matrix row count differs from the vector length, or
    when the matrix rows do not all have the same number of columns.
    """
