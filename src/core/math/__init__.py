"""
Core math modules

Численные примитивы: epsilon-параметры, толерантные сравнения, валидация
параметров и скалярные функции для поэлементного применения.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Epsilon constants
    EPS_CALC,
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    EPS_ORTHOGONAL,
    EPS_SINGULAR,
    EPS_STOCHASTIC,
    # Comparisons
    all_close,
    clamp,
    is_close,
    is_valid_float,
    is_zero,
    # Validation
    validate_in_range,
    validate_non_negative,
    validate_positive,
    validate_positive_int,
)

# Scalar Functions
from src.core.math.scalar_functions import (
    quadratic,
    round_to_decimals,
    sigmoid,
    sigmoid_prime,
)

__all__ = [
    # Numerical Safeguards — Epsilon constants
    "EPS_CALC",
    "EPS_FLOAT_COMPARE_ABS",
    "EPS_FLOAT_COMPARE_REL",
    "EPS_ORTHOGONAL",
    "EPS_SINGULAR",
    "EPS_STOCHASTIC",
    # Numerical Safeguards — Comparisons
    "all_close",
    "clamp",
    "is_close",
    "is_valid_float",
    "is_zero",
    # Numerical Safeguards — Validation
    "validate_in_range",
    "validate_non_negative",
    "validate_positive",
    "validate_positive_int",
    # Scalar Functions
    "quadratic",
    "round_to_decimals",
    "sigmoid",
    "sigmoid_prime",
]
