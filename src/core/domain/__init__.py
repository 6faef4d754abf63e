"""
Domain value objects.

Contains the immutable dense Matrix and Vector models.
"""

from src.core.domain.matrix import Matrix
from src.core.domain.vector import Vector, inner_product

__all__ = [
    "Matrix",
    "Vector",
    "inner_product",
]
