"""
Numerical Safeguards — Tolerances & Validation for Linear Algebra

Модуль задаёт epsilon-параметры и примитивы сравнения, на которые опираются
все операции над Matrix/Vector:
- Epsilon-параметры для детерминанта, ортогональности и стохастичности
- Сравнения float с учётом машинной точности (скаляры и последовательности)
- Clamp для удержания аргумента acos в области определения
- Валидация параметров с понятными сообщениями об ошибке

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. |det| < EPS_SINGULAR трактуется как вырожденная матрица
2. Сравнения float всегда идут через is_close / all_close, не через ==
3. Невалидные параметры (NaN/Inf, отрицательные допуски) → ValueError
"""

import math
from typing import Final, Sequence

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Epsilon для общих вычислений (дискриминант, нормы)
EPS_CALC: Final[float] = 1e-12

# Порог вырожденности: |det| < EPS_SINGULAR → SingularMatrix при обращении
EPS_SINGULAR: Final[float] = 1e-12

# Допуск для проверок ортогональности и линейной зависимости
EPS_ORTHOGONAL: Final[float] = 1e-9

# Допуск на сумму строки row-stochastic матрицы (PageRank)
EPS_STOCHASTIC: Final[float] = 1e-9

# Относительная и абсолютная толерантность для is_close
EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12


# =============================================================================
# СРАВНЕНИЯ FLOAT
# =============================================================================


def is_valid_float(value: float) -> bool:
    """Проверка, что значение конечное (не NaN, не Inf)."""
    return math.isfinite(value)


def is_close(
    a: float,
    b: float,
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_FLOAT_COMPARE_ABS,
) -> bool:
    """
    Сравнение float с учётом машинной точности.

    Алгоритм:
        abs(a - b) <= max(rel_tol * max(abs(a), abs(b)), abs_tol)

    Examples:
        >>> is_close(0.1 + 0.2, 0.3)
        True
        >>> is_close(1.0, 1.1)
        False
    """
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)


def is_zero(value: float, tol: float = EPS_FLOAT_COMPARE_ABS) -> bool:
    """True если abs(value) <= tol."""
    return abs(value) <= tol


def all_close(
    xs: Sequence[float],
    ys: Sequence[float],
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_FLOAT_COMPARE_ABS,
) -> bool:
    """
    Поэлементное сравнение двух последовательностей.

    Последовательности разной длины никогда не считаются близкими.

    Examples:
        >>> all_close([1.0, 2.0], [1.0, 2.0 + 1e-13])
        True
        >>> all_close([1.0], [1.0, 2.0])
        False
    """
    if len(xs) != len(ys):
        return False
    return all(is_close(x, y, rel_tol=rel_tol, abs_tol=abs_tol) for x, y in zip(xs, ys))


def clamp(value: float, min_value: float, max_value: float) -> float:
    """
    Ограничение значения диапазоном [min_value, max_value].

    Используется, например, чтобы cos(θ), накопивший ошибку округления
    (1.0000000000000002), не вывел acos из области определения.

    Examples:
        >>> clamp(1.0000000000000002, -1.0, 1.0)
        1.0
        >>> clamp(0.5, -1.0, 1.0)
        0.5
    """
    if min_value > max_value:
        raise ValueError(f"min_value {min_value} exceeds max_value {max_value}")
    return max(min_value, min(value, max_value))


# =============================================================================
# ВАЛИДАЦИЯ ПАРАМЕТРОВ
# =============================================================================


def validate_positive(value: float, name: str) -> None:
    """
    Валидация, что значение строго положительное.

    Raises:
        ValueError: Если value <= 0 или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")


def validate_non_negative(value: float, name: str) -> None:
    """
    Валидация, что значение неотрицательное.

    Raises:
        ValueError: Если value < 0 или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def validate_in_range(
    value: float,
    name: str,
    min_value: float | None = None,
    max_value: float | None = None,
) -> None:
    """
    Валидация, что значение лежит в [min_value, max_value].

    Raises:
        ValueError: Если value вне диапазона или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if min_value is not None and value < min_value:
        raise ValueError(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise ValueError(f"{name} must be <= {max_value}, got {value}")


def validate_positive_int(value: int, name: str) -> None:
    """
    Валидация размерностей и счётчиков итераций.

    bool отвергается явно: True/False не являются размерностью.

    Raises:
        ValueError: Если value не int или value < 1
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")

    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")
