"""
Vector — Плотный вектор вещественных чисел

Immutable Pydantic модель: каждая операция возвращает новый экземпляр,
исходный вектор никогда не изменяется.

Операции:
- dot product, длина (евклидова норма), нормализация
- угол между векторами (acos), скалярная и векторная проекции
- поэлементные add/subtract и их "many"-варианты (свёртка по списку)
- применение матрицы (M·v), смена ортогонального базиса

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. size >= 1 (пустой вектор → InvalidShape)
2. Бинарные операции требуют равной длины → DimensionMismatch
3. Угол и проекции не определены для нулевого вектора → ValueError
4. Все элементы конечны: NaN/Inf → pydantic ValidationError
"""

import math
import random
from typing import TYPE_CHECKING, Callable, Iterable, Sequence

from pydantic import BaseModel, computed_field, model_validator

from src.core.errors import DimensionMismatch, InvalidShape, NonOrthogonalBasis
from src.core.math.numerical_safeguards import (
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    EPS_ORTHOGONAL,
    all_close,
    clamp,
    is_valid_float,
    validate_positive_int,
)

if TYPE_CHECKING:
    from src.core.domain.matrix import Matrix


# =============================================================================
# VECTOR MODEL
# =============================================================================


class Vector(BaseModel):
    """
    Плотный вектор double-precision значений.

    Immutable модель (frozen=True): все операции создают новый экземпляр.
    """

    components: tuple[float, ...]

    # Immutable; NaN/Inf отвергаются pydantic (ValidationError)
    model_config = {"frozen": True, "allow_inf_nan": False}

    @model_validator(mode="after")
    def validate_not_empty(self) -> "Vector":
        """Вектор должен содержать хотя бы один элемент."""
        if len(self.components) == 0:
            raise InvalidShape("Vector must contain at least one component")
        return self

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_values(cls, values: Iterable[float]) -> "Vector":
        """Создание вектора из последовательности значений."""
        return cls(components=tuple(values))

    @classmethod
    def zeros(cls, size: int) -> "Vector":
        validate_positive_int(size, "size")
        return cls(components=(0.0,) * size)

    @classmethod
    def ones(cls, size: int) -> "Vector":
        validate_positive_int(size, "size")
        return cls(components=(1.0,) * size)

    @classmethod
    def basis(cls, size: int, index: int) -> "Vector":
        """
        Единичный вектор e_index размерности size.

        Raises:
            IndexError: Если index вне [0, size)
        """
        validate_positive_int(size, "size")
        if not 0 <= index < size:
            raise IndexError(f"basis index {index} out of range for size {size}")
        return cls(components=tuple(1.0 if i == index else 0.0 for i in range(size)))

    @classmethod
    def random(
        cls,
        size: int,
        rng: random.Random | None = None,
        seed: int | None = None,
        low: float = 0.0,
        high: float = 1.0,
    ) -> "Vector":
        """
        Вектор с равномерно распределёнными элементами в [low, high).

        Args:
            size: Размерность
            rng: Генератор (приоритетнее seed)
            seed: Seed для воспроизводимости, если rng не передан
        """
        validate_positive_int(size, "size")
        if low > high:
            raise ValueError(f"low {low} exceeds high {high}")
        gen = rng if rng is not None else random.Random(seed)
        return cls(components=tuple(gen.uniform(low, high) for _ in range(size)))

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @computed_field  # type: ignore[prop-decorator]
    @property
    def size(self) -> int:
        """Количество элементов."""
        return len(self.components)

    def number_of_elements(self) -> int:
        return self.size

    def at(self, index: int) -> float:
        """
        Элемент [index].

        Raises:
            IndexError: Если индекс вне диапазона (отрицательные не допускаются)
        """
        if not 0 <= index < self.size:
            raise IndexError(f"index {index} out of range for size {self.size}")
        return self.components[index]

    def to_array(self) -> list[float]:
        """Копия элементов в виде list."""
        return list(self.components)

    def to_payload(self) -> dict:
        """JSON-совместимое представление (контракт vector.json)."""
        return self.model_dump(mode="json")

    def __len__(self) -> int:
        return self.size

    def __getitem__(self, index: int) -> float:
        return self.at(index)

    def _require_same_size(self, other: "Vector") -> None:
        if other.size != self.size:
            raise DimensionMismatch(
                f"Vector sizes differ: {self.size} vs {other.size}"
            )

    # -------------------------------------------------------------------------
    # Vector algebra
    # -------------------------------------------------------------------------

    def dot(self, other: "Vector") -> float:
        """
        Скалярное произведение Σ v_i · w_i.

        Raises:
            DimensionMismatch: Если длины векторов различны
        """
        self._require_same_size(other)
        return math.fsum(a * b for a, b in zip(self.components, other.components))

    def length(self) -> float:
        """
        Евклидова норма sqrt(Σ v_i²).

        math.hypot масштабирует элементы внутри: нет переполнения для
        больших и потери точности для очень малых значений.

        Examples:
            >>> Vector.from_values([3.0, 4.0]).length()
            5.0
        """
        return math.hypot(*self.components)

    def normalized(self) -> "Vector":
        """
        Единичный вектор того же направления.

        Отвергается только точно нулевой вектор: малые по модулю векторы
        нормализуются корректно.

        Raises:
            ValueError: Для нулевого вектора или бесконечной нормы
        """
        norm = self.length()
        if norm == 0.0:
            raise ValueError("Cannot normalize a zero-length vector")
        if not is_valid_float(norm):
            raise ValueError(f"Cannot normalize a vector with non-finite norm {norm}")
        return Vector(components=tuple(x / norm for x in self.components))

    def angle_between(self, other: "Vector") -> float:
        """
        Угол между векторами в радианах: acos(v·w / (‖v‖·‖w‖)).

        Косинус считается на нормализованных векторах, аргумент acos
        ограничивается [-1, 1], чтобы ошибка округления для коллинеарных
        векторов не приводила к math domain error.

        Raises:
            DimensionMismatch: Если длины векторов различны
            ValueError: Если один из векторов нулевой
        """
        self._require_same_size(other)
        if self.length() == 0.0 or other.length() == 0.0:
            raise ValueError("Angle is undefined for a zero-length vector")
        cos_theta = clamp(self.normalized().dot(other.normalized()), -1.0, 1.0)
        return math.acos(cos_theta)

    def scalar_projection(self, onto: "Vector") -> float:
        """
        Скалярная проекция на вектор onto: (v·onto) / ‖onto‖ = ‖v‖·cos(θ).

        Raises:
            ValueError: Если onto нулевой
        """
        return self.dot(self._unit_direction(onto))

    def vector_projection(self, onto: "Vector") -> "Vector":
        """
        Векторная проекция на onto: onto · (v·onto) / (onto·onto).

        Raises:
            ValueError: Если onto нулевой
        """
        unit = self._unit_direction(onto)
        return unit.multiply_by_scalar(self.dot(unit))

    def _unit_direction(self, onto: "Vector") -> "Vector":
        self._require_same_size(onto)
        if onto.length() == 0.0:
            raise ValueError("Cannot project onto a zero-length vector")
        return onto.normalized()

    # -------------------------------------------------------------------------
    # Elementwise arithmetic
    # -------------------------------------------------------------------------

    def add(self, other: "Vector") -> "Vector":
        self._require_same_size(other)
        return Vector(
            components=tuple(a + b for a, b in zip(self.components, other.components))
        )

    def subtract(self, other: "Vector") -> "Vector":
        self._require_same_size(other)
        return Vector(
            components=tuple(a - b for a, b in zip(self.components, other.components))
        )

    def add_many(self, vectors: Sequence["Vector"]) -> "Vector":
        """
        Сумма receiver + Σ vectors.

        Все операнды должны иметь размер receiver; пустой список → копия.
        """
        result = self
        for vec in vectors:
            result = result.add(vec)
        return result

    def subtract_many(self, vectors: Sequence["Vector"]) -> "Vector":
        """Разность receiver - Σ vectors."""
        result = self
        for vec in vectors:
            result = result.subtract(vec)
        return result

    def multiply_by_scalar(self, scalar: float) -> "Vector":
        return Vector(components=tuple(x * scalar for x in self.components))

    def add_scalar(self, scalar: float) -> "Vector":
        return Vector(components=tuple(x + scalar for x in self.components))

    def map(self, func: Callable[[float], float]) -> "Vector":
        """Применение func к каждому элементу."""
        return Vector(components=tuple(float(func(x)) for x in self.components))

    def all_close(
        self,
        other: "Vector",
        rel_tol: float = EPS_FLOAT_COMPARE_REL,
        abs_tol: float = EPS_FLOAT_COMPARE_ABS,
    ) -> bool:
        """Поэлементное сравнение с толерантностью (False при разной длине)."""
        return all_close(
            self.components, other.components, rel_tol=rel_tol, abs_tol=abs_tol
        )

    # -------------------------------------------------------------------------
    # Matrix interplay
    # -------------------------------------------------------------------------

    def apply_matrix(self, matrix: "Matrix") -> "Vector":
        """
        Линейное преобразование M·v.

        Raises:
            DimensionMismatch: Если matrix.column_count != size
        """
        if matrix.column_count != self.size:
            raise DimensionMismatch(
                f"Cannot apply {matrix.row_count}x{matrix.column_count} matrix "
                f"to vector of size {self.size}"
            )
        return Vector(
            components=tuple(
                math.fsum(a * x for a, x in zip(row, self.components))
                for row in matrix.data
            )
        )

    def change_basis(
        self,
        basis_vectors: Sequence["Vector"],
        tol: float = EPS_ORTHOGONAL,
    ) -> "Vector":
        """
        Координаты вектора в ортогональном базисе.

        Для попарно ортогональных b_i: c_i = (v·b_i) / ‖b_i‖².

        Args:
            basis_vectors: Попарно перпендикулярные базисные векторы
            tol: Допуск на |cos(θ)| между базисными векторами

        Raises:
            DimensionMismatch: Если размер базисного вектора != size
            NonOrthogonalBasis: Если какая-то пара не перпендикулярна
            ValueError: Если базис пуст или содержит нулевой вектор
        """
        if not basis_vectors:
            raise ValueError("basis_vectors must not be empty")

        for b in basis_vectors:
            self._require_same_size(b)
            if b.length() == 0.0:
                raise ValueError("Basis vectors must be non-zero")

        units = [b.normalized() for b in basis_vectors]
        for i in range(len(units)):
            for j in range(i + 1, len(units)):
                cos_theta = units[i].dot(units[j])
                if abs(cos_theta) > tol:
                    raise NonOrthogonalBasis(
                        f"Basis vectors {i} and {j} are not perpendicular "
                        f"(cos={cos_theta:.6g})"
                    )

        return Vector(
            components=tuple(
                self.dot(unit) / b.length() for unit, b in zip(units, basis_vectors)
            )
        )

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def __add__(self, other: "Vector") -> "Vector":
        if isinstance(other, Vector):
            return self.add(other)
        return NotImplemented

    def __sub__(self, other: "Vector") -> "Vector":
        if isinstance(other, Vector):
            return self.subtract(other)
        return NotImplemented

    def __neg__(self) -> "Vector":
        return self.multiply_by_scalar(-1.0)

    def __mul__(self, scalar: float) -> "Vector":
        if isinstance(scalar, (int, float)) and not isinstance(scalar, bool):
            return self.multiply_by_scalar(scalar)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vector":
        if isinstance(scalar, (int, float)) and not isinstance(scalar, bool):
            return self.multiply_by_scalar(1.0 / scalar)
        return NotImplemented


# =============================================================================
# MODULE FUNCTIONS
# =============================================================================


def inner_product(matrix: "Matrix", vector1: Vector, vector2: Vector) -> float:
    """
    Скалярное произведение, индуцированное матрицей: v2 · (M·v1).

    Для M = I совпадает с обычным dot product.

    Raises:
        DimensionMismatch: Если размерности M, v1, v2 несовместимы
    """
    return vector2.dot(vector1.apply_matrix(matrix))
