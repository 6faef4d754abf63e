"""Algorithms — производные алгоритмы линейной алгебры поверх Matrix/Vector.

- Gram-Schmidt ортогонализация
- Собственные значения/векторы 2×2
- Einstein summation (двухоперандная свёртка)
- PageRank (power iteration)
- Смена базиса
"""

from .basis import change_basis, change_basis_general, transform_in_basis
from .eigen import EigenDecomposition2x2, eigen_2x2, eigenvalues_2x2
from .einsum import DEFAULT_SUBSCRIPTS, einsum, matmul
from .gram_schmidt import gram_schmidt, orthonormal_basis_matrix
from .pagerank import PageRankConfig, PageRankResult, pagerank, validate_link_matrix

__all__ = [
    # Basis
    "change_basis",
    "change_basis_general",
    "transform_in_basis",
    # Eigen
    "EigenDecomposition2x2",
    "eigen_2x2",
    "eigenvalues_2x2",
    # Einsum
    "DEFAULT_SUBSCRIPTS",
    "einsum",
    "matmul",
    # Gram-Schmidt
    "gram_schmidt",
    "orthonormal_basis_matrix",
    # PageRank
    "PageRankConfig",
    "PageRankResult",
    "pagerank",
    "validate_link_matrix",
]
