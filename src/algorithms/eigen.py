"""Eigen 2×2 — собственные значения и векторы вещественной матрицы 2×2.

Собственные значения — корни характеристического многочлена:
    λ² − trace(A)·λ + det(A) = 0

Собственный вектор для λ — ненулевое решение (A − λI)x = 0. Для
B = A − λI = [[p, q], [r, s]] (вырожденной по построению) решение
ортогонально любой ненулевой строке:
    строка (p, q) ≠ 0 → x = (q, −p)
    иначе строка (r, s) ≠ 0 → x = (s, −r)
    B = 0 (A = λI) → любой вектор собственный, возвращается стандартный базис

Векторы нормируются; знак выбирается так, чтобы первый ненулевой элемент
был положительным.
"""

from typing import NamedTuple

from src.core.domain.matrix import Matrix
from src.core.domain.vector import Vector
from src.core.errors import InvalidShape
from src.core.math.numerical_safeguards import EPS_CALC
from src.core.math.scalar_functions import quadratic


class EigenDecomposition2x2(NamedTuple):
    """Собственные значения (по возрастанию) и соответствующие единичные векторы."""

    eigenvalues: tuple[float, float]
    eigenvectors: tuple[Vector, Vector]


def _require_2x2(matrix: Matrix) -> None:
    if matrix.dimensions() != (2, 2):
        raise InvalidShape(
            f"Expected a 2x2 matrix, got {matrix.row_count}x{matrix.column_count}"
        )


def eigenvalues_2x2(matrix: Matrix) -> tuple[float, float]:
    """Вещественные собственные значения матрицы 2×2 по возрастанию.

    Raises:
        InvalidShape: Если матрица не 2×2
        ComplexResult: Если дискриминант отрицательный (комплексная пара)

    Examples:
        >>> eigenvalues_2x2(Matrix.from_rows([[2, 0], [0, 3]]))
        (2.0, 3.0)
    """
    _require_2x2(matrix)
    larger, smaller = quadratic(1.0, -matrix.trace(), matrix.determinant())
    return (smaller, larger)


def _canonical_sign(vector: Vector) -> Vector:
    for value in vector.components:
        if abs(value) > EPS_CALC:
            return vector if value > 0 else vector.multiply_by_scalar(-1.0)
    return vector


def _null_vector(matrix: Matrix, eigenvalue: float) -> Vector | None:
    (a, b), (c, d) = matrix.data
    p, q = a - eigenvalue, b
    r, s = c, d - eigenvalue

    # Порог относительно масштаба самой матрицы: без нижней границы 1.0
    scale = max(abs(a), abs(b), abs(c), abs(d))
    tol = EPS_CALC * scale

    # Берём строку с большей нормой: меньше потерь при округлении
    if max(abs(p), abs(q)) >= max(abs(r), abs(s)):
        candidate = (q, -p)
    else:
        candidate = (s, -r)

    if max(abs(candidate[0]), abs(candidate[1])) <= tol:
        return None

    return _canonical_sign(Vector.from_values(candidate).normalized())


def eigen_2x2(matrix: Matrix) -> EigenDecomposition2x2:
    """Собственные значения и единичные собственные векторы матрицы 2×2.

    Для дефектной матрицы (кратное λ, но A ≠ λI, например [[1, 1], [0, 1]])
    оба вектора совпадают: собственное подпространство одномерно.

    Raises:
        InvalidShape: Если матрица не 2×2
        ComplexResult: Если собственные значения комплексные

    Examples:
        >>> result = eigen_2x2(Matrix.from_rows([[2, 0], [0, 3]]))
        >>> result.eigenvalues
        (2.0, 3.0)
        >>> [v.components for v in result.eigenvectors]
        [(1.0, 0.0), (0.0, 1.0)]
    """
    eigenvalues = eigenvalues_2x2(matrix)

    vectors: list[Vector] = []
    for index, eigenvalue in enumerate(eigenvalues):
        vec = _null_vector(matrix, eigenvalue)
        if vec is None:
            # A = λI: собственным является всё пространство
            vec = Vector.basis(2, index)
        vectors.append(vec)

    return EigenDecomposition2x2(
        eigenvalues=eigenvalues,
        eigenvectors=(vectors[0], vectors[1]),
    )
