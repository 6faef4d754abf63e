"""Gram-Schmidt — ортогонализация набора линейно независимых векторов.

Modified Gram-Schmidt: из каждого v_i вычитается проекция на каждый уже
построенный вектор u_0..u_{i-1} последовательно (а не разом от исходного v_i),
что устойчивее к накоплению ошибки округления.

Порядок обработки: индексы 0, 1, ..., n-1; выход той же длины n,
u_0 = v_0 (нормализованный при normalize=True).

Порог линейной зависимости чисто относительный: ‖остаток‖ < tol·‖v_i‖.
Масштаб входа не влияет на результат, малые независимые векторы допустимы.
"""

import logging
from typing import Sequence

from src.core.domain.matrix import Matrix
from src.core.domain.vector import Vector
from src.core.errors import DimensionMismatch, LinearlyDependent
from src.core.math.numerical_safeguards import EPS_ORTHOGONAL, validate_positive

logger = logging.getLogger(__name__)


def gram_schmidt(
    vectors: Sequence[Vector],
    normalize: bool = True,
    tol: float = EPS_ORTHOGONAL,
) -> list[Vector]:
    """Ортогональный (ортонормированный) базис линейной оболочки vectors.

    Args:
        vectors: Линейно независимые векторы одинаковой длины
        normalize: True → ортонормированный базис, False → только ортогональный
        tol: Относительный порог: ‖остаток‖ < tol·‖v_i‖ → зависимость

    Returns:
        Список той же длины, что и vectors; пустой вход → пустой список

    Raises:
        DimensionMismatch: Если длины векторов различаются
        LinearlyDependent: Если очередной вектор нулевой или лежит в оболочке
            предыдущих
    """
    validate_positive(tol, "tol")

    if not vectors:
        return []

    size = vectors[0].size
    for i, vec in enumerate(vectors):
        if vec.size != size:
            raise DimensionMismatch(
                f"Vector {i} has size {vec.size}, expected {size}"
            )

    basis: list[Vector] = []

    for i, vec in enumerate(vectors):
        residual = vec
        for u in basis:
            residual = residual.subtract(residual.vector_projection(u))

        residual_norm = residual.length()
        if residual_norm == 0.0 or residual_norm < tol * vec.length():
            raise LinearlyDependent(
                f"Vector {i} is linearly dependent on the preceding vectors "
                f"(residual norm {residual_norm:.3e})"
            )

        basis.append(residual.normalized() if normalize else residual)
        logger.debug("gram_schmidt: vector %d residual norm %.6g", i, residual_norm)

    return basis


def orthonormal_basis_matrix(vectors: Sequence[Vector]) -> Matrix:
    """Ортонормированный базис, уложенный в столбцы матрицы (Q из QR).

    Raises:
        InvalidShape: Если vectors пуст
        DimensionMismatch / LinearlyDependent: см. gram_schmidt
    """
    return Matrix.from_vectors(gram_schmidt(vectors, normalize=True), as_columns=True)
