"""
Matrix — Плотная матрица вещественных чисел

Immutable Pydantic модель: поэлементная арифметика, transpose, матричное
произведение и детерминант/adjoint/inverse через разложение по минорам.

Детерминант (cofactor expansion по первой строке):
    det(A) = Σ_k (-1)^k · a[0][k] · det(minor(0, k))
    n = 1: det = a00
    n = 2: det = a00·a11 − a01·a10

Adjoint — классический adjugate, т.е. ТРАНСПОНИРОВАННАЯ матрица кофакторов:
    C[i][j] = (-1)^(i+j) · det(minor(i, j))
    adj(A) = Cᵀ
    inverse(A) = adj(A) / det(A)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. row_count >= 1, column_count >= 1, все строки одной длины → иначе InvalidShape
2. Ни одна операция не изменяет receiver: результат пишется в новое хранилище
3. minor(i, j) — структурная копия (n-1)×(n-1), исходная матрица не трогается
4. inverse при |det| < EPS_SINGULAR → SingularMatrix (деления на ноль нет)
5. determinant вырожденной матрицы определён и равен 0
6. Все элементы конечны: NaN/Inf → pydantic ValidationError
"""

import math
import random
from typing import Callable, Iterable, Sequence

from pydantic import BaseModel, computed_field, model_validator

from src.core.domain.vector import Vector
from src.core.errors import DimensionMismatch, InvalidShape, SingularMatrix
from src.core.math.numerical_safeguards import (
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    EPS_SINGULAR,
    all_close,
    validate_positive_int,
)
from src.core.math.scalar_functions import round_to_decimals

Rows = tuple[tuple[float, ...], ...]


# =============================================================================
# COFACTOR EXPANSION (на "сырых" строках, без валидации модели)
# =============================================================================


def _minor_rows(rows: Rows, row_index: int, column_index: int) -> Rows:
    """Копия rows без строки row_index и столбца column_index."""
    return tuple(
        tuple(value for j, value in enumerate(row) if j != column_index)
        for i, row in enumerate(rows)
        if i != row_index
    )


def _determinant(rows: Rows) -> float:
    n = len(rows)

    if n == 1:
        return rows[0][0]

    if n == 2:
        return rows[0][0] * rows[1][1] - rows[0][1] * rows[1][0]

    det = 0.0
    for k, a0k in enumerate(rows[0]):
        if a0k == 0.0:
            # Нулевой элемент не вносит вклада, минор не раскрываем
            continue
        sign = 1.0 if k % 2 == 0 else -1.0
        det += sign * a0k * _determinant(_minor_rows(rows, 0, k))
    return det


def _cofactor(rows: Rows, row_index: int, column_index: int) -> float:
    if len(rows) == 1:
        # det пустого минора равен 1
        return 1.0
    sign = 1.0 if (row_index + column_index) % 2 == 0 else -1.0
    return sign * _determinant(_minor_rows(rows, row_index, column_index))


# =============================================================================
# MATRIX MODEL
# =============================================================================


class Matrix(BaseModel):
    """
    Плотная 2-D матрица double-precision значений.

    Immutable модель (frozen=True). row_count/column_count вычисляются из data
    и сериализуются вместе с ней.
    """

    data: tuple[tuple[float, ...], ...]

    # Immutable; NaN/Inf отвергаются pydantic (ValidationError)
    model_config = {"frozen": True, "allow_inf_nan": False}

    @model_validator(mode="after")
    def validate_rectangular(self) -> "Matrix":
        """
        Проверка формы: хотя бы одна строка, хотя бы один столбец,
        все строки одинаковой длины.
        """
        if len(self.data) == 0:
            raise InvalidShape("Matrix must have at least one row")

        width = len(self.data[0])
        if width == 0:
            raise InvalidShape("Matrix must have at least one column")

        for i, row in enumerate(self.data):
            if len(row) != width:
                raise InvalidShape(
                    f"Row {i} has {len(row)} elements, expected {width}"
                )
        return self

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[float]]) -> "Matrix":
        """
        Создание матрицы из вложенной последовательности строк.

        Examples:
            >>> Matrix.from_rows([[4, 7], [2, 6]]).determinant()
            10.0
        """
        return cls(data=tuple(tuple(row) for row in rows))

    @classmethod
    def from_values(cls, rows: int, columns: int, values: Sequence[float]) -> "Matrix":
        """
        Создание матрицы rows×columns из плоского списка (row-major).

        Raises:
            InvalidShape: Если len(values) != rows * columns
        """
        validate_positive_int(rows, "rows")
        validate_positive_int(columns, "columns")
        if len(values) != rows * columns:
            raise InvalidShape(
                f"Expected {rows * columns} values for {rows}x{columns} matrix, "
                f"got {len(values)}"
            )
        return cls(
            data=tuple(
                tuple(values[i * columns : (i + 1) * columns]) for i in range(rows)
            )
        )

    @classmethod
    def from_array(cls, values: Sequence[float]) -> "Matrix":
        """Столбцовая матрица n×1 из плоского списка."""
        return cls(data=tuple((value,) for value in values))

    @classmethod
    def from_vectors(cls, vectors: Sequence[Vector], as_columns: bool = True) -> "Matrix":
        """
        Сборка матрицы из векторов.

        Args:
            vectors: Векторы одинаковой длины
            as_columns: True → векторы становятся столбцами, иначе строками

        Raises:
            DimensionMismatch: Если длины векторов различаются
            InvalidShape: Если список пуст
        """
        if not vectors:
            raise InvalidShape("Cannot build a matrix from an empty vector list")

        size = vectors[0].size
        for vec in vectors:
            if vec.size != size:
                raise DimensionMismatch(
                    f"Vector sizes differ: {size} vs {vec.size}"
                )

        rows = cls(data=tuple(vec.components for vec in vectors))
        return rows.transpose() if as_columns else rows

    @classmethod
    def filled(cls, rows: int, columns: int, value: float) -> "Matrix":
        """Матрица rows×columns, все элементы равны value."""
        validate_positive_int(rows, "rows")
        validate_positive_int(columns, "columns")
        return cls(data=tuple((float(value),) * columns for _ in range(rows)))

    @classmethod
    def zeros(cls, rows: int, columns: int) -> "Matrix":
        return cls.filled(rows, columns, 0.0)

    @classmethod
    def ones(cls, rows: int, columns: int) -> "Matrix":
        return cls.filled(rows, columns, 1.0)

    @classmethod
    def identity(cls, n: int) -> "Matrix":
        """Единичная матрица n×n."""
        validate_positive_int(n, "n")
        return cls(
            data=tuple(
                tuple(1.0 if i == j else 0.0 for j in range(n)) for i in range(n)
            )
        )

    @classmethod
    def random(
        cls,
        rows: int,
        columns: int,
        rng: random.Random | None = None,
        seed: int | None = None,
        low: float = 0.0,
        high: float = 1.0,
    ) -> "Matrix":
        """
        Матрица с равномерно распределёнными элементами в [low, high).

        Args:
            rng: Генератор (приоритетнее seed)
            seed: Seed для воспроизводимости, если rng не передан
        """
        validate_positive_int(rows, "rows")
        validate_positive_int(columns, "columns")
        if low > high:
            raise ValueError(f"low {low} exceeds high {high}")
        gen = rng if rng is not None else random.Random(seed)
        return cls(
            data=tuple(
                tuple(gen.uniform(low, high) for _ in range(columns))
                for _ in range(rows)
            )
        )

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @computed_field  # type: ignore[prop-decorator]
    @property
    def row_count(self) -> int:
        return len(self.data)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def column_count(self) -> int:
        return len(self.data[0])

    def dimensions(self) -> tuple[int, int]:
        """(row_count, column_count)"""
        return (self.row_count, self.column_count)

    def number_of_elements(self) -> int:
        return self.row_count * self.column_count

    def is_square(self) -> bool:
        return self.row_count == self.column_count

    def at(self, row_index: int, column_index: int) -> float:
        """
        Элемент [row_index][column_index].

        Raises:
            IndexError: Если индекс вне диапазона (отрицательные не допускаются)
        """
        if not 0 <= row_index < self.row_count:
            raise IndexError(f"row index {row_index} out of range")
        if not 0 <= column_index < self.column_count:
            raise IndexError(f"column index {column_index} out of range")
        return self.data[row_index][column_index]

    def row(self, index: int) -> Vector:
        if not 0 <= index < self.row_count:
            raise IndexError(f"row index {index} out of range")
        return Vector(components=self.data[index])

    def column(self, index: int) -> Vector:
        if not 0 <= index < self.column_count:
            raise IndexError(f"column index {index} out of range")
        return Vector(components=tuple(row[index] for row in self.data))

    def to_array(self) -> list[float]:
        """Плоский список элементов (row-major)."""
        return [value for row in self.data for value in row]

    def to_rows(self) -> list[list[float]]:
        """Изменяемая копия в виде list[list[float]]."""
        return [list(row) for row in self.data]

    def to_payload(self) -> dict:
        """JSON-совместимое представление (контракт matrix.json)."""
        return self.model_dump(mode="json")

    # -------------------------------------------------------------------------
    # Elementwise arithmetic
    # -------------------------------------------------------------------------

    def _require_same_shape(self, other: "Matrix", operation: str) -> None:
        if self.dimensions() != other.dimensions():
            raise DimensionMismatch(
                f"Cannot {operation} {self.row_count}x{self.column_count} and "
                f"{other.row_count}x{other.column_count} matrices"
            )

    def _combine(
        self, other: "Matrix", func: Callable[[float, float], float]
    ) -> "Matrix":
        return Matrix(
            data=tuple(
                tuple(func(a, b) for a, b in zip(row_a, row_b))
                for row_a, row_b in zip(self.data, other.data)
            )
        )

    def add(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "add")
        return self._combine(other, lambda a, b: a + b)

    def subtract(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "subtract")
        return self._combine(other, lambda a, b: a - b)

    def multiply(self, other: "Matrix") -> "Matrix":
        """Поэлементное (Hadamard) произведение. Для матричного — matmul."""
        self._require_same_shape(other, "multiply")
        return self._combine(other, lambda a, b: a * b)

    def divide(self, other: "Matrix") -> "Matrix":
        """
        Поэлементное деление.

        Raises:
            DimensionMismatch: Если формы различны
            ZeroDivisionError: Если в other есть нулевой элемент
        """
        self._require_same_shape(other, "divide")
        for i, row in enumerate(other.data):
            for j, value in enumerate(row):
                if value == 0.0:
                    raise ZeroDivisionError(
                        f"Elementwise division by zero at [{i}][{j}]"
                    )
        return self._combine(other, lambda a, b: a / b)

    def scalar_multiply(self, scalar: float) -> "Matrix":
        return self.map(lambda x: x * scalar)

    def scalar_add(self, scalar: float) -> "Matrix":
        return self.map(lambda x: x + scalar)

    def map(self, func: Callable[[float], float]) -> "Matrix":
        """Применение func к каждому элементу (например, sigmoid)."""
        return Matrix(
            data=tuple(tuple(float(func(x)) for x in row) for row in self.data)
        )

    def round_to_decimals(self, decimals: int) -> "Matrix":
        return self.map(lambda x: round_to_decimals(x, decimals))

    def dot(self, other: "Matrix") -> float:
        """
        Frobenius inner product Σ a_ij · b_ij.

        Raises:
            DimensionMismatch: Если формы различны
        """
        self._require_same_shape(other, "dot")
        return math.fsum(
            a * b
            for row_a, row_b in zip(self.data, other.data)
            for a, b in zip(row_a, row_b)
        )

    def all_close(
        self,
        other: "Matrix",
        rel_tol: float = EPS_FLOAT_COMPARE_REL,
        abs_tol: float = EPS_FLOAT_COMPARE_ABS,
    ) -> bool:
        """Поэлементное сравнение с толерантностью (False при разной форме)."""
        if self.dimensions() != other.dimensions():
            return False
        return all_close(
            self.to_array(), other.to_array(), rel_tol=rel_tol, abs_tol=abs_tol
        )

    # -------------------------------------------------------------------------
    # Structural operations
    # -------------------------------------------------------------------------

    def transpose(self) -> "Matrix":
        """Новая матрица column_count×row_count: result[j][i] = self[i][j]."""
        return Matrix(
            data=tuple(
                tuple(self.data[i][j] for i in range(self.row_count))
                for j in range(self.column_count)
            )
        )

    def matmul(self, other: "Matrix") -> "Matrix":
        """
        Матричное произведение A·B.

        Raises:
            DimensionMismatch: Если A.column_count != B.row_count
        """
        if self.column_count != other.row_count:
            raise DimensionMismatch(
                f"Cannot multiply {self.row_count}x{self.column_count} by "
                f"{other.row_count}x{other.column_count}: inner dimensions differ"
            )
        columns = other.transpose().data
        return Matrix(
            data=tuple(
                tuple(math.fsum(a * b for a, b in zip(row, col)) for col in columns)
                for row in self.data
            )
        )

    def apply(self, vector: Vector) -> Vector:
        """M·v (см. Vector.apply_matrix)."""
        return vector.apply_matrix(self)

    def trace(self) -> float:
        self._require_square("trace")
        return math.fsum(self.data[i][i] for i in range(self.row_count))

    # -------------------------------------------------------------------------
    # Determinant / Minor / Adjoint / Inverse
    # -------------------------------------------------------------------------

    def _require_square(self, operation: str) -> None:
        if not self.is_square():
            raise InvalidShape(
                f"{operation} requires a square matrix, "
                f"got {self.row_count}x{self.column_count}"
            )

    def minor(self, row_index: int, column_index: int) -> "Matrix":
        """
        Минор: (n-1)×(n-1) копия без строки row_index и столбца column_index.

        Raises:
            InvalidShape: Если матрица не квадратная, n < 2 или индексы вне диапазона
        """
        self._require_square("minor")
        n = self.row_count
        if n < 2:
            raise InvalidShape("minor requires at least a 2x2 matrix")
        if not (0 <= row_index < n and 0 <= column_index < n):
            raise InvalidShape(
                f"minor indices ({row_index}, {column_index}) out of range for {n}x{n}"
            )
        return Matrix(data=_minor_rows(self.data, row_index, column_index))

    def determinant(self) -> float:
        """
        Детерминант через cofactor expansion по первой строке.

        Raises:
            InvalidShape: Если матрица не квадратная
        """
        self._require_square("determinant")
        return _determinant(self.data)

    def cofactor(self, row_index: int, column_index: int) -> float:
        """C[i][j] = (-1)^(i+j) · det(minor(i, j))."""
        self._require_square("cofactor")
        n = self.row_count
        if not (0 <= row_index < n and 0 <= column_index < n):
            raise InvalidShape(
                f"cofactor indices ({row_index}, {column_index}) out of range for {n}x{n}"
            )
        return _cofactor(self.data, row_index, column_index)

    def cofactor_matrix(self) -> "Matrix":
        self._require_square("cofactor_matrix")
        n = self.row_count
        return Matrix(
            data=tuple(
                tuple(_cofactor(self.data, i, j) for j in range(n)) for i in range(n)
            )
        )

    def adjoint(self) -> "Matrix":
        """Классический adjugate: транспонированная матрица кофакторов."""
        return self.cofactor_matrix().transpose()

    def inverse(self) -> "Matrix":
        """
        Обратная матрица adj(A) / det(A).

        Raises:
            InvalidShape: Если матрица не квадратная
            SingularMatrix: Если |det| < EPS_SINGULAR

        Examples:
            >>> Matrix.from_rows([[4, 7], [2, 6]]).inverse().round_to_decimals(10).data
            ((0.6, -0.7), (-0.2, 0.4))
        """
        det = self.determinant()
        if abs(det) < EPS_SINGULAR:
            raise SingularMatrix(
                f"Matrix is singular (det={det:.6g}), inverse does not exist"
            )
        return self.adjoint().scalar_multiply(1.0 / det)

    def inverse_2x2(self) -> "Matrix":
        """
        Обратная 2×2 в замкнутой форме: [[d, -b], [-c, a]] / (ad - bc).

        Raises:
            InvalidShape: Если матрица не 2×2
            SingularMatrix: Если |det| < EPS_SINGULAR
        """
        if self.dimensions() != (2, 2):
            raise InvalidShape(
                f"inverse_2x2 requires a 2x2 matrix, "
                f"got {self.row_count}x{self.column_count}"
            )
        (a, b), (c, d) = self.data
        det = a * d - b * c
        if abs(det) < EPS_SINGULAR:
            raise SingularMatrix(
                f"Matrix is singular (det={det:.6g}), inverse does not exist"
            )
        return Matrix(data=((d / det, -b / det), (-c / det, a / det)))

    def transform_in_basis(self, basis: "Matrix") -> "Matrix":
        """
        Преобразование в новом базисе: basis⁻¹ · self · basis.

        Raises:
            SingularMatrix: Если basis вырожден
            InvalidShape / DimensionMismatch: При несовместимых формах
        """
        return basis.inverse().matmul(self).matmul(basis)

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def __add__(self, other: "Matrix | float") -> "Matrix":
        if isinstance(other, Matrix):
            return self.add(other)
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return self.scalar_add(other)
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other: "Matrix | float") -> "Matrix":
        if isinstance(other, Matrix):
            return self.subtract(other)
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return self.scalar_add(-other)
        return NotImplemented

    def __neg__(self) -> "Matrix":
        return self.scalar_multiply(-1.0)

    def __mul__(self, other: "Matrix | float") -> "Matrix":
        if isinstance(other, Matrix):
            return self.multiply(other)
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return self.scalar_multiply(other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other: "Matrix | float") -> "Matrix":
        if isinstance(other, Matrix):
            return self.divide(other)
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return self.scalar_multiply(1.0 / other)
        return NotImplemented

    def __matmul__(self, other: "Matrix | Vector") -> "Matrix | Vector":
        if isinstance(other, Matrix):
            return self.matmul(other)
        if isinstance(other, Vector):
            return other.apply_matrix(self)
        return NotImplemented
