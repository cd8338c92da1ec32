"""Dense matrix and vector primitives with fail-fast operand checks.

Thin wrappers around :mod:`numpy` that reject empty operands and shape
mismatches with the typed errors from :mod:`sklnice.exceptions` instead
of broadcasting or silently producing a result.
"""

from __future__ import annotations

from numbers import Number

import numpy as np

from .exceptions import EmptyOperandError, SingularMatrixError, SizeMismatchError

__all__ = [
    "transpose",
    "multiply",
    "add",
    "subtract",
    "logical_or",
    "logical_and",
    "logical_not",
    "inverse",
    "determinant",
    "rank",
    "norm",
    "normalize",
    "frobenius_norm",
    "trace",
    "dot_product",
    "outer_product",
]


###############################################################################
# Operand checks


def _check_not_empty(a, kind="Matrix"):
    if a.size == 0:
        raise EmptyOperandError(f"{kind} is empty: shape {a.shape}.")


def _check_same_shape(a, b, kind="Matrices"):
    if a.shape != b.shape:
        raise SizeMismatchError(
            f"{kind} are not the same size: {a.shape} != {b.shape}."
        )


def _check_square(a):
    _check_not_empty(a)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise SizeMismatchError(f"Matrix is not square: shape {a.shape}.")


def _check_axis(axis):
    if axis not in (0, 1):
        raise ValueError(f"Axis must be zero or one, got {axis!r}.")


def _kind(a):
    return ("Vector", "Vectors") if a.ndim == 1 else ("Matrix", "Matrices")


def _binary_operands(a, b):
    a = np.asarray(a)
    b = np.asarray(b)
    single, plural = _kind(a)
    _check_same_shape(a, b, plural)
    _check_not_empty(a, single)
    return a, b


###############################################################################
# Arithmetic


def transpose(a):
    """Return the transpose of a matrix (a vector is returned unchanged)."""
    return np.asarray(a).T


def multiply(a, b):
    """Matrix-scalar or matrix-matrix product.

    Parameters
    ----------
    a : array-like of shape (m, n)
        Left operand.
    b : scalar or array-like of shape (n, p)
        Right operand.

    Returns
    -------
    product : ndarray
        ``b * a`` for a scalar, ``a @ b`` otherwise.

    Raises
    ------
    SizeMismatchError
        If the inner dimensions of two matrices disagree.
    """
    a = np.asarray(a)
    if isinstance(b, Number):
        return b * a
    b = np.asarray(b)
    if a.shape[-1] != b.shape[0]:
        raise SizeMismatchError(
            f"Inner dimensions do not agree: {a.shape} @ {b.shape}."
        )
    return a @ b


def add(a, b):
    """Element-wise sum of a matrix with a scalar or a same-shaped matrix."""
    if isinstance(b, Number):
        a = np.asarray(a)
        _check_not_empty(a)
        return a + b
    a, b = _binary_operands(a, b)
    return a + b


def subtract(a, b):
    """Element-wise difference of a matrix and a scalar or same-shaped matrix."""
    if isinstance(b, Number):
        a = np.asarray(a)
        _check_not_empty(a)
        return a - b
    a, b = _binary_operands(a, b)
    return a - b


###############################################################################
# Logical operations


def logical_or(a, b):
    """Element-wise logical OR of two same-shaped boolean operands."""
    a, b = _binary_operands(a, b)
    return np.logical_or(a, b)


def logical_and(a, b):
    """Element-wise logical AND of two same-shaped boolean operands.

    Examples
    --------
    >>> import numpy as np
    >>> from sklnice.operations import logical_and
    >>> logical_and(np.array([True, True]), np.array([True, False]))
    array([ True, False])
    """
    a, b = _binary_operands(a, b)
    return np.logical_and(a, b)


def logical_not(a):
    """Element-wise logical NOT of a boolean operand."""
    a = np.asarray(a)
    _check_not_empty(a, _kind(a)[0])
    return np.logical_not(a)


###############################################################################
# Linear algebra


def determinant(a):
    """Determinant of a non-empty square matrix."""
    a = np.asarray(a, dtype=float)
    _check_square(a)
    return float(np.linalg.det(a))


def inverse(a):
    """Inverse of a non-empty, square, non-singular matrix.

    Raises
    ------
    EmptyOperandError
        If ``a`` has no elements.
    SizeMismatchError
        If ``a`` is not square.
    SingularMatrixError
        If the determinant of ``a`` is zero.
    """
    a = np.asarray(a, dtype=float)
    _check_square(a)
    if np.linalg.det(a) == 0:
        raise SingularMatrixError(
            "Matrix does not have an inverse (determinant is zero)."
        )
    return np.linalg.inv(a)


def rank(a):
    """Rank of a matrix computed from its singular values."""
    return int(np.linalg.matrix_rank(np.asarray(a, dtype=float)))


def trace(a):
    """Sum of the diagonal coefficients."""
    return np.trace(np.asarray(a))


def frobenius_norm(a):
    """Frobenius norm of a non-empty matrix."""
    a = np.asarray(a, dtype=float)
    _check_not_empty(a)
    return float(np.linalg.norm(a))


def norm(a, p=2, axis=0):
    """Column-wise (``axis=0``) or row-wise (``axis=1``) p-norms.

    Parameters
    ----------
    a : array-like of shape (m, n)
        Input matrix.
    p : int, default=2
        Order of the norm.
    axis : {0, 1}, default=0
        ``0`` returns one norm per column (length ``n``), ``1`` one norm
        per row (length ``m``).

    Returns
    -------
    norms : ndarray
    """
    _check_axis(axis)
    a = np.asarray(a, dtype=float)
    return np.linalg.norm(a, ord=p, axis=axis)


def normalize(a, p=2, axis=0):
    """Scale columns (``axis=0``) or rows (``axis=1``) to unit p-norm."""
    _check_axis(axis)
    a = np.asarray(a, dtype=float)
    norms = norm(a, p=p, axis=axis)
    if axis == 0:
        return a / norms[np.newaxis, :]
    return a / norms[:, np.newaxis]


def dot_product(a, b):
    """Dot product of two non-empty vectors of equal length."""
    a, b = _binary_operands(np.ravel(a), np.ravel(b))
    return a.dot(b)


def outer_product(a, b):
    """Outer product of two non-empty vectors."""
    a = np.ravel(a)
    b = np.ravel(b)
    _check_not_empty(a, "Vector")
    _check_not_empty(b, "Vector")
    return np.outer(a, b)
