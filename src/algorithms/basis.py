"""Basis change — представление векторов и линейных отображений в новом базисе."""

from typing import Sequence

from src.core.domain.matrix import Matrix
from src.core.domain.vector import Vector
from src.core.math.numerical_safeguards import EPS_ORTHOGONAL


def transform_in_basis(matrix: Matrix, basis: Matrix) -> Matrix:
    """Матрица линейного отображения в базисе, заданном столбцами basis.

    A' = B⁻¹ · A · B

    Raises:
        InvalidShape: Если basis не квадратная
        SingularMatrix: Если столбцы basis линейно зависимы
        DimensionMismatch: Если размерности matrix и basis несовместимы
    """
    return matrix.transform_in_basis(basis)


def change_basis(
    vector: Vector,
    basis_vectors: Sequence[Vector],
    tol: float = EPS_ORTHOGONAL,
) -> Vector:
    """Координаты vector в попарно ортогональном базисе basis_vectors.

    Raises:
        NonOrthogonalBasis: Если базисные векторы не перпендикулярны
        DimensionMismatch: Если размеры векторов различаются
    """
    return vector.change_basis(basis_vectors, tol=tol)


def change_basis_general(vector: Vector, basis: Matrix) -> Vector:
    """Координаты vector в произвольном (не обязательно ортогональном) базисе.

    Базис задан столбцами квадратной матрицы B; координаты c = B⁻¹ · v.

    Raises:
        SingularMatrix: Если столбцы basis линейно зависимы
        DimensionMismatch: Если размер vector != порядок basis
    """
    return vector.apply_matrix(basis.inverse())
