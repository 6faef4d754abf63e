"""
Scalar Functions — скалярные функции для поэлементного применения

- sigmoid / sigmoid_prime: логистическая функция и её производная
- round_to_decimals: округление half away from zero
- quadratic: вещественные корни квадратного уравнения

Функции предназначены для Matrix.map / Vector.map и для eigen_2x2.
"""

import math

from src.core.errors import ComplexResult
from src.core.math.numerical_safeguards import EPS_CALC, is_zero


def sigmoid(x: float) -> float:
    """
    Логистическая функция 1 / (1 + exp(-x)).

    Ветвление по знаку x исключает переполнение exp для больших |x|.

    Examples:
        >>> sigmoid(0.0)
        0.5
        >>> sigmoid(-1000.0)
        0.0
    """
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


def sigmoid_prime(x: float) -> float:
    """Производная sigmoid: s(x) * (1 - s(x))."""
    s = sigmoid(x)
    return s * (1.0 - s)


def round_to_decimals(value: float, decimals: int) -> float:
    """
    Округление до decimals знаков после запятой (round half away from zero).

    В отличие от builtin round() не использует banker's rounding.

    Examples:
        >>> round_to_decimals(2.5, 0)
        3.0
        >>> round_to_decimals(0.125, 2)
        0.13
        >>> round_to_decimals(-0.125, 2)
        -0.13
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    scale = 10.0**decimals
    scaled = value * scale

    if scaled >= 0:
        steps = math.floor(scaled + 0.5)
    else:
        steps = math.ceil(scaled - 0.5)

    return steps / scale


def quadratic(a: float, b: float, c: float) -> tuple[float, float]:
    """
    Вещественные корни уравнения a·x² + b·x + c = 0.

    x = (-b ± sqrt(b² - 4ac)) / (2a)

    Отрицательный дискриминант в пределах ошибки округления (относительно
    масштаба b² и 4ac) трактуется как ноль: кратный корень.

    Args:
        a: Коэффициент при x² (не ноль)
        b: Коэффициент при x
        c: Свободный член

    Returns:
        (x1, x2) где x1 >= x2

    Raises:
        ValueError: Если a == 0 (уравнение не квадратное)
        ComplexResult: Если дискриминант отрицательный

    Examples:
        >>> quadratic(1.0, -5.0, 6.0)
        (3.0, 2.0)
        >>> quadratic(1.0, -2.0, 1.0)
        (1.0, 1.0)
    """
    if is_zero(a, tol=0.0):
        raise ValueError("a must be non-zero for a quadratic equation")

    disc = b * b - 4.0 * a * c

    if disc < 0:
        scale = max(b * b, abs(4.0 * a * c))
        if abs(disc) <= EPS_CALC * scale:
            disc = 0.0
        else:
            raise ComplexResult(
                f"Discriminant is negative ({disc:.6g}): roots are complex"
            )

    sqrt_disc = math.sqrt(disc)
    x1 = (-b + sqrt_disc) / (2.0 * a)
    x2 = (-b - sqrt_disc) / (2.0 * a)

    if x1 < x2:
        x1, x2 = x2, x1

    return (x1, x2)
