"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов Matrix/Vector:
- Валидность самих схем и кэширование загрузчика
- Валидация правильных данных (в т.ч. из to_payload())
- Детекция нарушений required полей, типов и additionalProperties
- Проверки, которые схема не выражает: рваные строки, объявленные размеры
"""

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    MatrixValidator,
    SchemaLoader,
    VectorValidator,
    matrix_from_payload,
    validate_matrix_payload,
    validate_vector_payload,
    vector_from_payload,
)
from src.core.domain import Matrix, Vector
from src.core.errors import InvalidShape


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_matrix():
    """Валидный matrix payload."""
    return {
        "data": [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]],
        "row_count": 2,
        "column_count": 3,
    }


@pytest.fixture
def valid_vector():
    """Валидный vector payload."""
    return {"components": [3.0, 4.0], "size": 2}


# =============================================================================
# TESTS - SCHEMA LOADING
# =============================================================================


def test_schema_loader_loads_all_schemas():
    """Проверка загрузки всех схем."""
    loader = SchemaLoader()

    matrix_schema = loader.load_schema("matrix")
    vector_schema = loader.load_schema("vector")

    assert matrix_schema["required"] == ["data"]
    assert vector_schema["required"] == ["components"]


def test_schema_loader_caches_schemas():
    """Проверка кэширования схем."""
    loader = SchemaLoader()

    schema1 = loader.load_schema("matrix")
    schema2 = loader.load_schema("matrix")

    # Должен вернуть тот же объект (кэш)
    assert schema1 is schema2


def test_schema_loader_raises_on_missing_schema():
    """Проверка ошибки при отсутствующей схеме."""
    loader = SchemaLoader()

    with pytest.raises(FileNotFoundError):
        loader.load_schema("non_existent_schema")


def test_schema_loader_rejects_missing_directory(tmp_path):
    with pytest.raises(RuntimeError, match="Schema directory not found"):
        SchemaLoader(tmp_path / "missing")


def test_schema_loader_rejects_invalid_schema(tmp_path):
    """Meta-validation: схема с некорректным type отклоняется."""
    (tmp_path / "broken.json").write_text('{"type": 42}', encoding="utf-8")
    loader = SchemaLoader(tmp_path)

    with pytest.raises(ValueError, match="Invalid JSON Schema"):
        loader.load_schema("broken")


# =============================================================================
# TESTS - MATRIX VALIDATION
# =============================================================================


def test_matrix_validator_accepts_valid_data(valid_matrix):
    """Валидация правильного matrix payload."""
    validator = MatrixValidator()
    validator.validate(valid_matrix)  # Не должно выбросить исключение
    assert validator.is_valid(valid_matrix)


def test_matrix_validate_function(valid_matrix):
    validate_matrix_payload(valid_matrix)


def test_matrix_declared_shape_is_optional():
    validate_matrix_payload({"data": [[1.0]]})


def test_matrix_rejects_missing_data(valid_matrix):
    data = valid_matrix.copy()
    del data["data"]

    with pytest.raises(ValidationError) as exc_info:
        validate_matrix_payload(data)
    assert "'data' is a required property" in str(exc_info.value)


def test_matrix_rejects_non_numeric_entry(valid_matrix):
    data = valid_matrix.copy()
    data["data"] = [[1.0, "two"], [3.0, 4.0]]

    with pytest.raises(ValidationError) as exc_info:
        validate_matrix_payload(data)
    assert "is not of type 'number'" in str(exc_info.value)


def test_matrix_rejects_empty_data():
    """Пустая матрица и пустая строка нарушают minItems."""
    with pytest.raises(ValidationError):
        validate_matrix_payload({"data": []})
    with pytest.raises(ValidationError):
        validate_matrix_payload({"data": [[]]})


def test_matrix_rejects_additional_properties(valid_matrix):
    data = valid_matrix.copy()
    data["dtype"] = "float64"

    with pytest.raises(ValidationError):
        validate_matrix_payload(data)


def test_matrix_rejects_zero_declared_rows(valid_matrix):
    data = valid_matrix.copy()
    data["row_count"] = 0

    assert not MatrixValidator().is_valid(data)


def test_matrix_iter_errors_reports_every_violation():
    errors = list(MatrixValidator().iter_errors({"data": [["a"]], "extra": 1}))
    assert len(errors) == 2


# =============================================================================
# TESTS - VECTOR VALIDATION
# =============================================================================


def test_vector_validator_accepts_valid_data(valid_vector):
    validator = VectorValidator()
    validator.validate(valid_vector)
    assert validator.is_valid(valid_vector)


def test_vector_validate_function(valid_vector):
    validate_vector_payload(valid_vector)


def test_vector_rejects_missing_components():
    with pytest.raises(ValidationError) as exc_info:
        validate_vector_payload({"size": 2})
    assert "'components' is a required property" in str(exc_info.value)


def test_vector_rejects_empty_components():
    with pytest.raises(ValidationError):
        validate_vector_payload({"components": []})


def test_vector_rejects_wrong_type(valid_vector):
    data = valid_vector.copy()
    data["size"] = "two"

    with pytest.raises(ValidationError) as exc_info:
        validate_vector_payload(data)
    assert "is not of type 'integer'" in str(exc_info.value)


# =============================================================================
# TESTS - INTEGRATION WITH PYDANTIC MODELS
# =============================================================================


def test_matrix_payload_matches_schema():
    """to_payload() соответствует контракту matrix.json."""
    matrix = Matrix.from_rows([[1, 2], [3, 4], [5, 6]])
    payload = matrix.to_payload()

    assert payload == {
        "data": [[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]],
        "row_count": 3,
        "column_count": 2,
    }
    validate_matrix_payload(payload)


def test_matrix_from_payload(valid_matrix):
    matrix = matrix_from_payload(valid_matrix)
    assert matrix.dimensions() == (2, 3)
    assert matrix.at(1, 2) == 6.0


def test_matrix_payload_round_trip():
    matrix = Matrix.random(3, 4, seed=11)
    assert matrix_from_payload(matrix.to_payload()) == matrix


def test_matrix_from_payload_rejects_ragged_rows():
    """Схема не проверяет равенство длин строк; это делает модель."""
    with pytest.raises(InvalidShape, match="Row 1 has 1 elements"):
        matrix_from_payload({"data": [[1.0, 2.0], [3.0]]})


def test_matrix_from_payload_rejects_declared_shape_mismatch(valid_matrix):
    data = valid_matrix.copy()
    data["column_count"] = 4

    with pytest.raises(InvalidShape, match="Declared shape 2x4"):
        matrix_from_payload(data)


def test_matrix_from_payload_checks_schema_first():
    with pytest.raises(ValidationError):
        matrix_from_payload({"rows": [[1.0]]})


def test_vector_payload_matches_schema():
    payload = Vector.from_values([1, 2, 3]).to_payload()
    assert payload == {"components": [1.0, 2.0, 3.0], "size": 3}
    validate_vector_payload(payload)


def test_vector_from_payload(valid_vector):
    vector = vector_from_payload(valid_vector)
    assert vector.length() == 5.0


def test_vector_from_payload_rejects_declared_size_mismatch():
    with pytest.raises(InvalidShape, match="Declared size 3"):
        vector_from_payload({"components": [1.0, 2.0], "size": 3})
