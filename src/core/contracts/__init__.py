"""
Contract Validation Module

Валидация JSON представлений Matrix/Vector против JSON Schema контрактов.
"""

from .validators import (
    ContractValidator,
    MatrixValidator,
    SchemaLoader,
    VectorValidator,
    matrix_from_payload,
    validate_matrix_payload,
    validate_vector_payload,
    vector_from_payload,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "MatrixValidator",
    "VectorValidator",
    # Functions
    "validate_matrix_payload",
    "validate_vector_payload",
    "matrix_from_payload",
    "vector_from_payload",
]
