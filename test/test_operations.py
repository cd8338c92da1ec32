import numpy as np
import pytest

from sklnice import operations
from sklnice.exceptions import (
    DegenerateInputError,
    EmptyOperandError,
    SingularMatrixError,
    SizeMismatchError,
)


def test_mismatched_logical_and():
    a = np.ones((2, 2), dtype=bool)
    b = np.ones((3, 2), dtype=bool)
    with pytest.raises(SizeMismatchError):
        operations.logical_and(a, b)


def test_mismatched_add():
    with pytest.raises(SizeMismatchError, match="not the same size"):
        operations.add(np.ones((2, 2)), np.ones((2, 3)))


def test_errors_are_value_errors():
    assert issubclass(SizeMismatchError, DegenerateInputError)
    assert issubclass(DegenerateInputError, ValueError)


def test_add_and_subtract():
    a = np.array([[1.0, 2.0], [3.0, 4.0]])
    np.testing.assert_array_equal(operations.add(a, a), 2 * a)
    np.testing.assert_array_equal(operations.add(a, 1.0), a + 1)
    np.testing.assert_array_equal(operations.subtract(a, a), np.zeros((2, 2)))
    np.testing.assert_array_equal(operations.subtract(a, 1), a - 1)
    with pytest.raises(EmptyOperandError):
        operations.add(np.empty((0, 2)), 1.0)
    with pytest.raises(EmptyOperandError):
        operations.subtract(np.empty((0, 2)), np.empty((0, 2)))


def test_multiply():
    a = np.array([[1.0, 2.0], [3.0, 4.0]])
    np.testing.assert_array_equal(operations.multiply(a, 2.0), 2 * a)
    np.testing.assert_array_equal(operations.multiply(a, np.eye(2)), a)
    with pytest.raises(SizeMismatchError):
        operations.multiply(a, np.ones((3, 1)))


def test_transpose():
    a = np.arange(6).reshape(2, 3)
    assert operations.transpose(a).shape == (3, 2)


def test_logical_operations():
    a = np.array([[True, False], [True, True]])
    b = np.array([[False, False], [True, False]])
    np.testing.assert_array_equal(operations.logical_or(a, b), a | b)
    np.testing.assert_array_equal(operations.logical_and(a, b), a & b)
    np.testing.assert_array_equal(operations.logical_not(a), ~a)
    with pytest.raises(SizeMismatchError, match="Vectors"):
        operations.logical_or(np.array([True]), np.array([True, False]))
    with pytest.raises(EmptyOperandError):
        operations.logical_not(np.array([], dtype=bool))


def test_inverse_and_determinant():
    a = np.array([[2.0, 0.0], [0.0, 4.0]])
    np.testing.assert_allclose(operations.inverse(a), [[0.5, 0.0], [0.0, 0.25]])
    assert operations.determinant(a) == pytest.approx(8.0)
    with pytest.raises(SingularMatrixError):
        operations.inverse(np.array([[1.0, 2.0], [2.0, 4.0]]))
    with pytest.raises(SizeMismatchError):
        operations.inverse(np.ones((2, 3)))
    with pytest.raises(EmptyOperandError):
        operations.inverse(np.empty((0, 0)))
    with pytest.raises(SizeMismatchError):
        operations.determinant(np.ones((3, 2)))


def test_rank_and_trace():
    assert operations.rank(np.array([[1.0, 2.0], [2.0, 4.0]])) == 1
    assert operations.rank(np.eye(3)) == 3
    assert operations.trace(np.array([[1.0, 5.0], [7.0, 2.0]])) == 3.0


def test_norms():
    a = np.array([[3.0, 0.0], [4.0, 1.0]])
    np.testing.assert_allclose(operations.norm(a), [5.0, 1.0])
    np.testing.assert_allclose(operations.norm(a, axis=1), [3.0, np.sqrt(17.0)])
    np.testing.assert_allclose(operations.norm(a, p=1), [7.0, 1.0])
    with pytest.raises(ValueError, match="Axis"):
        operations.norm(a, axis=2)
    assert operations.frobenius_norm(np.array([[3.0, 4.0]])) == pytest.approx(5.0)
    with pytest.raises(EmptyOperandError):
        operations.frobenius_norm(np.empty((0, 3)))


def test_normalize():
    a = np.array([[3.0, 1.0], [4.0, 1.0]])
    np.testing.assert_allclose(operations.norm(operations.normalize(a)), [1.0, 1.0])
    np.testing.assert_allclose(
        operations.norm(operations.normalize(a, axis=1), axis=1), [1.0, 1.0]
    )


def test_vector_products():
    a = np.array([1.0, 2.0, 3.0])
    b = np.array([4.0, 5.0, 6.0])
    assert operations.dot_product(a, b) == 32.0
    assert operations.outer_product(a, b[:2]).shape == (3, 2)
    with pytest.raises(SizeMismatchError):
        operations.dot_product(a, b[:2])
    with pytest.raises(EmptyOperandError):
        operations.dot_product(np.array([]), np.array([]))
    with pytest.raises(EmptyOperandError):
        operations.outer_product(a, np.array([]))
