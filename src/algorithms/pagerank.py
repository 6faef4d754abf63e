"""PageRank — стационарное распределение случайного блуждания по ссылкам.

Link matrix L — row-stochastic: L[i][j] = вероятность перехода со страницы i
на страницу j, каждая строка суммируется в 1.

Power iteration:
    r_0 = (1/n, ..., 1/n)
    r_{k+1}[j] = d · Σ_i r_k[i] · L[i][j] + (1 − d) / n

Остановка по реальному критерию сходимости: ‖r_{k+1} − r_k‖₁ < tolerance,
либо по исчерпанию max_iterations (converged=False + warning в лог).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все ранги неотрицательны
2. Сумма рангов равна 1 (результат перенормируется от дрейфа округления)
"""

import logging
import math
from dataclasses import dataclass
from typing import NamedTuple

from src.core.domain.matrix import Matrix
from src.core.domain.vector import Vector
from src.core.errors import DimensionMismatch
from src.core.math.numerical_safeguards import (
    EPS_STOCHASTIC,
    is_valid_float,
    validate_in_range,
    validate_positive,
    validate_positive_int,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG / RESULT
# =============================================================================


@dataclass(frozen=True)
class PageRankConfig:
    """Конфигурация power iteration.

    damping = 1.0 — чистая цепь Маркова (стационарное распределение L);
    классический PageRank использует 0.85.
    """

    damping: float = 1.0
    tolerance: float = 1e-10
    max_iterations: int = 1000

    def __post_init__(self) -> None:
        validate_in_range(self.damping, "damping", 0.0, 1.0)
        validate_positive(self.tolerance, "tolerance")
        validate_positive_int(self.max_iterations, "max_iterations")


class PageRankResult(NamedTuple):
    """Результат PageRank."""

    ranks: Vector  # Вероятности попадания на каждую страницу
    iterations: int  # Выполненные итерации
    converged: bool  # Достигнут ли критерий tolerance
    delta: float  # L1-изменение на последней итерации


# =============================================================================
# VALIDATION
# =============================================================================


def validate_link_matrix(link_matrix: Matrix, pages: int) -> None:
    """Проверка, что link_matrix — row-stochastic матрица pages×pages.

    Raises:
        ValueError: pages < 1, NaN/Inf или отрицательные элементы,
            сумма строки != 1
        DimensionMismatch: Если форма не pages×pages
    """
    validate_positive_int(pages, "pages")

    if link_matrix.dimensions() != (pages, pages):
        raise DimensionMismatch(
            f"Link matrix must be {pages}x{pages}, "
            f"got {link_matrix.row_count}x{link_matrix.column_count}"
        )

    for i, row in enumerate(link_matrix.data):
        if not all(is_valid_float(value) for value in row):
            raise ValueError(f"Link matrix row {i} contains NaN/Inf probabilities")
        if any(value < 0 for value in row):
            raise ValueError(f"Link matrix row {i} contains negative probabilities")
        row_sum = math.fsum(row)
        if not abs(row_sum - 1.0) <= EPS_STOCHASTIC:
            raise ValueError(
                f"Link matrix row {i} sums to {row_sum:.12g}, expected 1 "
                f"(matrix must be row-stochastic)"
            )


# =============================================================================
# POWER ITERATION
# =============================================================================


def pagerank(
    link_matrix: Matrix,
    pages: int,
    config: PageRankConfig | None = None,
) -> PageRankResult:
    """Стационарное распределение вероятностей по страницам.

    Args:
        link_matrix: Row-stochastic матрица переходов pages×pages
        pages: Количество страниц
        config: Параметры итерации (default: PageRankConfig())

    Returns:
        PageRankResult; ranks неотрицательны и суммируются в 1

    Raises:
        DimensionMismatch: Если link_matrix не pages×pages
        ValueError: Если link_matrix не row-stochastic
    """
    config = config or PageRankConfig()
    validate_link_matrix(link_matrix, pages)

    # Столбцы L: r_{k+1}[j] = Σ_i r_k[i] · L[i][j] = r_k · column_j
    columns = link_matrix.transpose().data
    teleport = (1.0 - config.damping) / pages

    ranks = [1.0 / pages] * pages
    delta = math.inf
    iterations = 0

    while iterations < config.max_iterations:
        updated = [
            config.damping * math.fsum(r * l for r, l in zip(ranks, column)) + teleport
            for column in columns
        ]
        delta = math.fsum(abs(new - old) for new, old in zip(updated, ranks))
        ranks = updated
        iterations += 1

        if delta < config.tolerance:
            break

    converged = delta < config.tolerance
    if converged:
        logger.debug("pagerank converged after %d iterations (delta=%.3e)", iterations, delta)
    else:
        logger.warning(
            "pagerank did not converge in %d iterations (delta=%.3e)",
            config.max_iterations,
            delta,
        )

    total = math.fsum(ranks)
    ranks = [max(r, 0.0) / total for r in ranks]

    return PageRankResult(
        ranks=Vector(components=tuple(ranks)),
        iterations=iterations,
        converged=converged,
        delta=delta,
    )
