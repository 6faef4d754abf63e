"""
JSON Schema Contract Validators

Модуль для валидации JSON представлений Matrix/Vector согласно формальным
JSON Schema контрактам (Draft 2020-12). Использует библиотеку jsonschema.

Схемы (package data, src/core/contracts/schema/):
- matrix.json: {"data": [[number]], "row_count", "column_count"}
- vector.json: {"components": [number], "size"}

JSON Schema не умеет выразить "все строки одной длины" и согласованность
row_count/column_count с data: эти проверки выполняются при построении модели
в matrix_from_payload / vector_from_payload.
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator

from src.core.domain.matrix import Matrix
from src.core.domain.vector import Vector
from src.core.errors import InvalidShape


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы лежат рядом с модулем в schema/ и устанавливаются как package data.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'matrix')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            jsonschema.ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        """Итератор по всем ошибкам валидации."""
        return self.validator.iter_errors(data)


class MatrixValidator(ContractValidator):
    """Валидатор для matrix контракта."""

    def __init__(self):
        super().__init__("matrix")


class VectorValidator(ContractValidator):
    """Валидатор для vector контракта."""

    def __init__(self):
        super().__init__("vector")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_matrix_payload(data: Dict[str, Any]) -> None:
    """
    Валидация JSON представления матрицы.

    Raises:
        jsonschema.ValidationError: Если данные не соответствуют схеме
    """
    MatrixValidator().validate(data)


def validate_vector_payload(data: Dict[str, Any]) -> None:
    """
    Валидация JSON представления вектора.

    Raises:
        jsonschema.ValidationError: Если данные не соответствуют схеме
    """
    VectorValidator().validate(data)


def matrix_from_payload(data: Dict[str, Any]) -> Matrix:
    """
    Построение Matrix из JSON payload.

    Порядок проверок:
    1. JSON Schema (типы, непустые строки)
    2. Прямоугольность (модель Matrix)
    3. Согласованность объявленных row_count/column_count с data

    Raises:
        jsonschema.ValidationError: Нарушение схемы
        InvalidShape: Рваные строки или несогласованные размерности
    """
    validate_matrix_payload(data)
    matrix = Matrix.model_validate({"data": data["data"]})

    declared = (
        data.get("row_count", matrix.row_count),
        data.get("column_count", matrix.column_count),
    )
    if declared != matrix.dimensions():
        raise InvalidShape(
            f"Declared shape {declared[0]}x{declared[1]} does not match data "
            f"{matrix.row_count}x{matrix.column_count}"
        )
    return matrix


def vector_from_payload(data: Dict[str, Any]) -> Vector:
    """
    Построение Vector из JSON payload.

    Raises:
        jsonschema.ValidationError: Нарушение схемы
        InvalidShape: Объявленный size не совпадает с числом элементов
    """
    validate_vector_payload(data)
    vector = Vector.model_validate({"components": data["components"]})

    declared = data.get("size", vector.size)
    if declared != vector.size:
        raise InvalidShape(
            f"Declared size {declared} does not match {vector.size} components"
        )
    return vector
