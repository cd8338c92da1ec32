"""Custom warnings and errors used across :mod:`sklnice`.

Every error derives from :class:`ValueError` so callers following the
scikit-learn convention of catching ``ValueError`` keep working.
"""

__all__ = [
    "ConfigurationError",
    "DegenerateInputError",
    "SizeMismatchError",
    "EmptyOperandError",
    "SingularMatrixError",
]


class ConfigurationError(ValueError):
    """Raised when an estimator is configured in a way that cannot be fitted.

    Examples are requesting more clusters than there are samples, or
    passing manual initial centers of the wrong shape. Raised before any
    computation starts.
    """


class DegenerateInputError(ValueError):
    """Raised when an operand cannot be processed by a numeric routine."""


class SizeMismatchError(DegenerateInputError):
    """Raised when operand shapes are incompatible.

    Examples
    --------
    >>> import numpy as np
    >>> from sklnice import operations
    >>> from sklnice.exceptions import SizeMismatchError
    >>> try:
    ...     operations.add(np.ones((2, 2)), np.ones((3, 2)))
    ... except SizeMismatchError as exc:
    ...     print(repr(exc))
    SizeMismatchError('Matrices are not the same size: (2, 2) != (3, 2).')
    """


class EmptyOperandError(DegenerateInputError):
    """Raised when a matrix or vector operand has no elements."""


class SingularMatrixError(DegenerateInputError):
    """Raised when inverting a matrix whose determinant is zero."""
