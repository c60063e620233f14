from __future__ import annotations

from typing import Iterable

import numpy as np
from numpy.typing import NDArray

# [term, tag, category, host, distance]
SCORE_DIMENSIONS = 5


class FixedVector:
    """Small dense vector used for per-pair score tuples and the weight vector."""

    __slots__ = ("_data",)

    def __init__(self, values: Iterable[float]):
        data = np.asarray(list(values), dtype=np.float64)
        if data.ndim != 1:
            raise ValueError("FixedVector must be one-dimensional")
        self._data: NDArray[np.float64] = data

    @classmethod
    def ones(cls, size: int = SCORE_DIMENSIONS) -> FixedVector:
        return cls(np.ones((size,), dtype=np.float64))

    @property
    def size(self) -> int:
        return int(self._data.shape[0])

    def to_list(self) -> list[float]:
        return [float(x) for x in self._data]

    def __getitem__(self, idx: int) -> float:
        return float(self._data[idx])

    def __len__(self) -> int:
        return self.size

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FixedVector):
            return NotImplemented
        return bool(np.array_equal(self._data, other._data))

    def __repr__(self) -> str:
        return f"FixedVector({self.to_list()})"

    def _check(self, other: FixedVector) -> None:
        if self.size != other.size:
            raise ValueError(
                f"Vector dimension mismatch: {self.size} != {other.size}"
            )

    def length(self) -> float:
        return float(np.linalg.norm(self._data))

    def dot_product(self, other: FixedVector) -> float:
        self._check(other)
        return float(np.dot(self._data, other._data))

    def add(self, other: FixedVector) -> FixedVector:
        self._check(other)
        return FixedVector(self._data + other._data)

    def multiply(self, scalar: float) -> FixedVector:
        return FixedVector(self._data * scalar)

    def normalised(self) -> FixedVector:
        n = self.length()
        return FixedVector(self._data) if n == 0 else FixedVector(self._data / n)
