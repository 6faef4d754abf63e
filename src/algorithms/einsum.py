"""Einsum — свёртка двух матриц по именованным индексам (Einstein summation).

Индекс, встречающийся в обоих операндах и отсутствующий в выходе,
суммируется. Поддерживаются двухоперандные выражения над 2-D матрицами:

    "ij,jk->ik"   матричное произведение (по умолчанию)
    "ij,kj->ik"   A·Bᵀ
    "ji,jk->ik"   Aᵀ·B
    "ij,jk->ki"   (A·B)ᵀ
    "ij,ij->"     Frobenius inner product (скаляр)
    "ij,ij->ij"   Hadamard
    "ij,jk->i"    суммы строк A·B (вектор)
    "ij,jk"       неявный выход: индексы, встречающиеся один раз, по алфавиту

Тип результата определяется числом выходных индексов:
2 → Matrix, 1 → Vector, 0 → float.
"""

import itertools
import logging
import math
from typing import Final, cast

from src.core.domain.matrix import Matrix
from src.core.domain.vector import Vector
from src.core.errors import DimensionMismatch

logger = logging.getLogger(__name__)

DEFAULT_SUBSCRIPTS: Final[str] = "ij,jk->ik"


def _parse_subscripts(subscripts: str) -> tuple[str, str, str]:
    """Разбор "ab,cd->ef" в (вход A, вход B, выход).

    Raises:
        ValueError: Для некорректного выражения
    """
    spec = subscripts.replace(" ", "")

    if "->" in spec:
        inputs, output = spec.split("->", 1)
        explicit = True
    else:
        inputs, output = spec, ""
        explicit = False

    operands = inputs.split(",")
    if len(operands) != 2:
        raise ValueError(f"Expected exactly two operands in '{subscripts}'")

    left, right = operands
    for label, term in (("first", left), ("second", right)):
        if len(term) != 2 or not term.isalpha():
            raise ValueError(
                f"{label} operand subscripts must be two letters, got '{term}'"
            )

    if not explicit:
        counts = {index: (left + right).count(index) for index in set(left + right)}
        output = "".join(sorted(index for index, count in counts.items() if count == 1))

    if not output.isalpha() and output != "":
        raise ValueError(f"Output subscripts must be letters, got '{output}'")
    if len(set(output)) != len(output):
        raise ValueError(f"Output subscripts repeat an index: '{output}'")
    if len(output) > 2:
        raise ValueError(f"At most two output indices are supported, got '{output}'")
    for index in output:
        if index not in left and index not in right:
            raise ValueError(f"Output index '{index}' does not appear in the inputs")

    return left, right, output


def _bind_sizes(left: str, right: str, a: Matrix, b: Matrix) -> dict[str, int]:
    sizes: dict[str, int] = {}
    for term, matrix, name in ((left, a, "a"), (right, b, "b")):
        for index, size in zip(term, matrix.dimensions()):
            bound = sizes.setdefault(index, size)
            if bound != size:
                raise DimensionMismatch(
                    f"Index '{index}' has size {bound} but operand {name} "
                    f"provides {size}"
                )
    return sizes


def einsum(
    a: Matrix,
    b: Matrix,
    subscripts: str = DEFAULT_SUBSCRIPTS,
) -> Matrix | Vector | float:
    """Свёртка двух матриц по нотации Эйнштейна.

    Args:
        a: Первый операнд
        b: Второй операнд
        subscripts: Выражение вида "ij,kj->ik" (default: матричное произведение)

    Returns:
        Matrix (2 выходных индекса), Vector (1) или float (0)

    Raises:
        DimensionMismatch: Если размеры одного индекса в операндах различны
        ValueError: Для некорректного выражения

    Examples:
        >>> a = Matrix.from_rows([[1, 2], [3, 4]])
        >>> einsum(a, Matrix.identity(2)) == a
        True
        >>> einsum(a, a, "ij,ij->")
        30.0
    """
    left, right, output = _parse_subscripts(subscripts)
    sizes = _bind_sizes(left, right, a, b)

    summed = [index for index in sorted(sizes) if index not in output]
    logger.debug(
        "einsum %s: output=%r summed=%r sizes=%r", subscripts, output, summed, sizes
    )

    def contract(assignment: dict[str, int]) -> float:
        terms = []
        for combo in itertools.product(*(range(sizes[i]) for i in summed)):
            assignment.update(zip(summed, combo))
            terms.append(
                a.data[assignment[left[0]]][assignment[left[1]]]
                * b.data[assignment[right[0]]][assignment[right[1]]]
            )
        return math.fsum(terms)

    if len(output) == 0:
        return contract({})

    if len(output) == 1:
        (out_index,) = output
        return Vector(
            components=tuple(
                contract({out_index: i}) for i in range(sizes[out_index])
            )
        )

    row_index, column_index = output
    return Matrix(
        data=tuple(
            tuple(
                contract({row_index: i, column_index: j})
                for j in range(sizes[column_index])
            )
            for i in range(sizes[row_index])
        )
    )


def matmul(a: Matrix, b: Matrix) -> Matrix:
    """Стандартное матричное произведение через einsum("ij,jk->ik").

    Raises:
        DimensionMismatch: Если a.column_count != b.row_count
    """
    return cast(Matrix, einsum(a, b))
