"""
Тесты для Matrix — конструирование, доступ, арифметика, transpose

Проверяемые инварианты:
1. Форма: >= 1 строки, >= 1 столбца, прямоугольность → иначе InvalidShape
2. Immutability: операции не изменяют receiver
3. DimensionMismatch при несовпадении форм
4. transpose пишет в новое хранилище (нет перезаписи до чтения)
"""

import math
import random

import pytest
from pydantic import ValidationError

from src.core.domain import Matrix, Vector
from src.core.errors import DimensionMismatch, InvalidShape
from src.core.math.scalar_functions import sigmoid


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def a() -> Matrix:
    return Matrix.from_rows([[1, 2, 3], [4, 5, 6]])


@pytest.fixture
def b() -> Matrix:
    return Matrix.from_rows([[6, 5, 4], [3, 2, 1]])


# =============================================================================
# ТЕСТЫ: Конструирование
# =============================================================================


class TestConstruction:
    """Конструкторы и проверка формы."""

    def test_from_rows_coerces_to_float(self):
        m = Matrix.from_rows([[1, 2], [3, 4]])
        assert m.data == ((1.0, 2.0), (3.0, 4.0))
        assert all(isinstance(x, float) for x in m.to_array())

    def test_dimensions(self, a):
        assert a.row_count == 2
        assert a.column_count == 3
        assert a.dimensions() == (2, 3)
        assert a.number_of_elements() == 6
        assert not a.is_square()

    def test_single_element_matrix_allowed(self):
        m = Matrix.from_rows([[7]])
        assert m.dimensions() == (1, 1)

    def test_empty_matrix_rejected(self):
        with pytest.raises(InvalidShape, match="at least one row"):
            Matrix.from_rows([])

    def test_empty_row_rejected(self):
        with pytest.raises(InvalidShape, match="at least one column"):
            Matrix.from_rows([[]])

    def test_ragged_rows_rejected(self):
        with pytest.raises(InvalidShape, match="Row 1 has 1 elements, expected 2"):
            Matrix.from_rows([[1, 2], [3]])

    def test_non_numeric_rejected(self):
        with pytest.raises(ValidationError):
            Matrix(data=(("x", 1.0),))

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, bad):
        with pytest.raises(ValidationError):
            Matrix.from_rows([[1.0, bad], [0.0, 1.0]])

    def test_overflow_to_inf_rejected(self):
        with pytest.raises(ValidationError):
            Matrix.from_rows([[1e308]]).scalar_multiply(10.0)

    def test_from_values_row_major(self):
        m = Matrix.from_values(2, 3, [1, 2, 3, 4, 5, 6])
        assert m.data == ((1.0, 2.0, 3.0), (4.0, 5.0, 6.0))

    def test_from_values_wrong_count(self):
        with pytest.raises(InvalidShape, match="Expected 6 values"):
            Matrix.from_values(2, 3, [1, 2, 3])

    def test_from_values_invalid_dimension(self):
        with pytest.raises(ValueError, match="rows must be >= 1"):
            Matrix.from_values(0, 3, [])

    def test_from_array_is_column(self):
        m = Matrix.from_array([1, 2, 3])
        assert m.dimensions() == (3, 1)
        assert m.to_array() == [1.0, 2.0, 3.0]

    def test_zeros_ones_filled(self):
        assert Matrix.zeros(2, 3).to_array() == [0.0] * 6
        assert Matrix.ones(3, 2).to_array() == [1.0] * 6
        assert Matrix.filled(2, 2, 7.5).to_array() == [7.5] * 4

    def test_identity(self):
        assert Matrix.identity(3).data == (
            (1.0, 0.0, 0.0),
            (0.0, 1.0, 0.0),
            (0.0, 0.0, 1.0),
        )

    def test_random_reproducible_with_seed(self):
        m1 = Matrix.random(3, 4, seed=42)
        m2 = Matrix.random(3, 4, seed=42)
        assert m1 == m2
        assert m1.dimensions() == (3, 4)

    def test_random_bounds(self):
        m = Matrix.random(5, 5, rng=random.Random(1), low=-2.0, high=2.0)
        assert all(-2.0 <= x <= 2.0 for x in m.to_array())

    def test_random_inverted_bounds_rejected(self):
        with pytest.raises(ValueError, match="exceeds"):
            Matrix.random(2, 2, low=1.0, high=0.0)

    def test_from_vectors_as_columns(self):
        v1 = Vector.from_values([1, 2])
        v2 = Vector.from_values([3, 4])
        m = Matrix.from_vectors([v1, v2])
        assert m.data == ((1.0, 3.0), (2.0, 4.0))

    def test_from_vectors_as_rows(self):
        v1 = Vector.from_values([1, 2])
        v2 = Vector.from_values([3, 4])
        m = Matrix.from_vectors([v1, v2], as_columns=False)
        assert m.data == ((1.0, 2.0), (3.0, 4.0))

    def test_from_vectors_size_mismatch(self):
        with pytest.raises(DimensionMismatch):
            Matrix.from_vectors([Vector.from_values([1, 2]), Vector.from_values([1])])

    def test_from_vectors_empty(self):
        with pytest.raises(InvalidShape):
            Matrix.from_vectors([])


# =============================================================================
# ТЕСТЫ: Доступ и immutability
# =============================================================================


class TestAccessors:
    """Доступ к элементам и неизменяемость."""

    def test_at(self, a):
        assert a.at(0, 0) == 1.0
        assert a.at(1, 2) == 6.0

    def test_at_out_of_range(self, a):
        with pytest.raises(IndexError):
            a.at(2, 0)
        with pytest.raises(IndexError):
            a.at(0, -1)

    def test_row_and_column(self, a):
        assert a.row(1).components == (4.0, 5.0, 6.0)
        assert a.column(2).components == (3.0, 6.0)

    @pytest.mark.parametrize("index", [-1, 2])
    def test_row_out_of_range(self, a, index):
        """Отрицательные индексы не отсчитываются с конца"""
        with pytest.raises(IndexError, match="row index"):
            a.row(index)

    @pytest.mark.parametrize("index", [-1, 3])
    def test_column_out_of_range(self, a, index):
        with pytest.raises(IndexError, match="column index"):
            a.column(index)

    def test_to_rows_is_a_copy(self, a):
        rows = a.to_rows()
        rows[0][0] = 100.0
        assert a.at(0, 0) == 1.0

    def test_frozen(self, a):
        with pytest.raises(ValidationError):
            a.data = ((0.0,),)

    def test_hashable_value_semantics(self):
        m1 = Matrix.from_rows([[1, 2], [3, 4]])
        m2 = Matrix.from_rows([[1.0, 2.0], [3.0, 4.0]])
        assert m1 == m2
        assert hash(m1) == hash(m2)


# =============================================================================
# ТЕСТЫ: Поэлементная арифметика
# =============================================================================


class TestElementwise:
    """add / subtract / multiply / divide / scalar ops."""

    def test_add(self, a, b):
        assert a.add(b).to_array() == [7.0] * 6

    def test_subtract(self, a, b):
        assert a.subtract(b).to_array() == [-5.0, -3.0, -1.0, 1.0, 3.0, 5.0]

    def test_multiply_is_hadamard(self, a, b):
        assert a.multiply(b).to_array() == [6.0, 10.0, 12.0, 12.0, 10.0, 6.0]

    def test_divide(self, a, b):
        result = a.divide(b)
        assert result.at(0, 0) == pytest.approx(1 / 6)
        assert result.at(1, 2) == 6.0

    def test_divide_by_zero_entry(self, a):
        with pytest.raises(ZeroDivisionError, match=r"\[0\]\[1\]"):
            a.divide(Matrix.from_rows([[1, 0, 1], [1, 1, 1]]))

    @pytest.mark.parametrize("operation", ["add", "subtract", "multiply", "divide", "dot"])
    def test_shape_mismatch(self, a, operation):
        other = Matrix.ones(3, 2)
        with pytest.raises(DimensionMismatch):
            getattr(a, operation)(other)

    def test_receiver_not_mutated(self, a, b):
        before = a.to_array()
        a.add(b)
        a.scalar_multiply(10.0)
        a.transpose()
        assert a.to_array() == before

    def test_scalar_multiply_and_add(self, a):
        assert a.scalar_multiply(2.0).to_array() == [2.0, 4.0, 6.0, 8.0, 10.0, 12.0]
        assert a.scalar_add(1.0).to_array() == [2.0, 3.0, 4.0, 5.0, 6.0, 7.0]

    def test_map(self):
        m = Matrix.zeros(2, 2).map(sigmoid)
        assert m.to_array() == [0.5] * 4

    def test_round_to_decimals(self):
        m = Matrix.from_rows([[0.125, 1.0 / 3.0]]).round_to_decimals(2)
        assert m.to_array() == [0.13, 0.33]

    def test_frobenius_dot(self, a, b):
        assert a.dot(b) == 56.0

    def test_all_close(self, a):
        assert a.all_close(a.scalar_add(1e-13))
        assert not a.all_close(a.scalar_add(1e-3))
        assert not a.all_close(a.transpose())


class TestOperators:
    """Операторы +, -, *, /, @."""

    def test_matrix_operators(self, a, b):
        assert a + b == a.add(b)
        assert a - b == a.subtract(b)
        assert a * b == a.multiply(b)
        assert a / b == a.divide(b)
        assert -a == a.scalar_multiply(-1.0)

    def test_scalar_operators(self, a):
        assert a * 2 == a.scalar_multiply(2.0)
        assert 2 * a == a.scalar_multiply(2.0)
        assert a + 1 == a.scalar_add(1.0)
        assert 1 + a == a.scalar_add(1.0)
        assert a - 1 == a.scalar_add(-1.0)
        assert a / 2 == a.scalar_multiply(0.5)

    def test_matmul_operator(self, a):
        assert a @ a.transpose() == a.matmul(a.transpose())

    def test_matmul_vector(self, a):
        v = Vector.from_values([1, 0, -1])
        assert (a @ v).components == (-2.0, -2.0)

    def test_unsupported_operand(self, a):
        with pytest.raises(TypeError):
            a + "x"


# =============================================================================
# ТЕСТЫ: transpose / matmul / trace
# =============================================================================


class TestStructural:
    """transpose, matmul, apply, trace."""

    def test_transpose_shape_and_values(self, a):
        t = a.transpose()
        assert t.dimensions() == (3, 2)
        for i in range(a.row_count):
            for j in range(a.column_count):
                assert t.at(j, i) == a.at(i, j)

    def test_transpose_square_not_overwritten(self):
        """Наивный in-place transpose перезаписывает элементы до чтения"""
        m = Matrix.from_rows([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
        assert m.transpose().data == ((1.0, 4.0, 7.0), (2.0, 5.0, 8.0), (3.0, 6.0, 9.0))

    def test_transpose_involution(self, a):
        assert a.transpose().transpose() == a

    def test_matmul(self):
        x = Matrix.from_rows([[1, 2], [3, 4]])
        y = Matrix.from_rows([[5, 6], [7, 8]])
        assert x.matmul(y).data == ((19.0, 22.0), (43.0, 50.0))

    def test_matmul_rectangular(self, a):
        assert a.matmul(a.transpose()).data == ((14.0, 32.0), (32.0, 77.0))

    def test_matmul_identity(self, a):
        assert Matrix.identity(2).matmul(a) == a
        assert a.matmul(Matrix.identity(3)) == a

    def test_matmul_inner_dimension_mismatch(self, a):
        with pytest.raises(DimensionMismatch, match="inner dimensions"):
            a.matmul(a)

    def test_apply(self, a):
        assert a.apply(Vector.from_values([1, 1, 1])).components == (6.0, 15.0)

    def test_trace(self):
        assert Matrix.from_rows([[1, 2], [3, 4]]).trace() == 5.0

    def test_trace_requires_square(self, a):
        with pytest.raises(InvalidShape, match="square"):
            a.trace()
