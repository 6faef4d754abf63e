"""
Linear Algebra Errors

Иерархия исключений библиотеки. Все ошибки восстановимы: вызывающий код сам
решает, фатальна ли для него вырожденная матрица или несовпадение размерностей.

Исключения НЕ наследуют ValueError: InvalidShape, поднятый в валидаторе
pydantic модели, доходит до вызывающего кода без обёртки в ValidationError.
"""


class LinalgError(Exception):
    """Базовое исключение для всех ошибок линейной алгебры."""

    pass


class DimensionMismatch(LinalgError):
    """
    Размерности операндов несовместимы.

    Примеры: сложение 2×3 и 3×2, dot product векторов разной длины,
    свёртка einsum по индексу разного размера.
    """

    pass


class SingularMatrix(LinalgError):
    """
    Обращение вырожденной матрицы: |det| < EPS_SINGULAR.

    Детерминант вырожденной матрицы определён (равен 0), ошибкой является
    только попытка обращения.
    """

    pass


class InvalidShape(LinalgError):
    """
    Недопустимая форма данных.

    - пустые или "рваные" (ragged) строки при создании матрицы
    - неквадратная матрица для determinant/minor/adjoint/inverse
    - индексы minor вне диапазона
    - матрица не 2×2 для inverse_2x2 / eigen_2x2
    """

    pass


class ComplexResult(LinalgError):
    """Отрицательный дискриминант: вещественных корней (собственных значений) нет."""

    pass


class LinearlyDependent(LinalgError):
    """Векторы для Gram-Schmidt линейно зависимы."""

    pass


class NonOrthogonalBasis(LinalgError):
    """Базисные векторы не перпендикулярны друг другу."""

    pass
