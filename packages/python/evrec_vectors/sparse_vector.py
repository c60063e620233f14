from __future__ import annotations

import math
from bisect import bisect_left
from typing import Any, Generic, Iterator, Protocol, Sequence, TypeVar


class Comparable(Protocol):
    def __lt__(self, other: Any, /) -> bool: ...


K = TypeVar("K", bound=Comparable)


class SparseVector(Generic[K]):
    """
    Sparse vector stored as parallel key/value tuples sorted by key.

    Keys must be unique; binary operations assume both operands hold sorted,
    duplicate-free keys and walk them in a single forward merge pass.
    Zero-valued entries are kept as-is.
    """

    __slots__ = ("_keys", "_values")

    def __init__(self, keys: Sequence[K] = (), values: Sequence[float] = ()):
        if len(keys) != len(values):
            raise ValueError("Key and value lengths must be equal!")
        pairs = sorted(zip(keys, values), key=lambda kv: kv[0])
        self._keys: tuple[K, ...] = tuple(k for k, _ in pairs)
        self._values: tuple[float, ...] = tuple(float(v) for _, v in pairs)

    @classmethod
    def _from_sorted(cls, keys: Sequence[K], values: Sequence[float]) -> SparseVector[K]:
        vec = cls.__new__(cls)
        vec._keys = tuple(keys)
        vec._values = tuple(values)
        return vec

    @classmethod
    def from_mapping(cls, mapping: dict[K, float]) -> SparseVector[K]:
        return cls(list(mapping.keys()), list(mapping.values()))

    # ---- read access ----
    def keys(self) -> tuple[K, ...]:
        return self._keys

    def values(self) -> tuple[float, ...]:
        return self._values

    def items(self) -> Iterator[tuple[K, float]]:
        return zip(self._keys, self._values)

    def to_dict(self) -> dict[K, float]:
        return dict(self.items())

    def get(self, key: K, default: float = 0.0) -> float:
        idx = bisect_left(self._keys, key)
        if idx < len(self._keys) and self._keys[idx] == key:
            return self._values[idx]
        return default

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[tuple[K, float]]:
        return self.items()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparseVector):
            return NotImplemented
        return self._keys == other._keys and self._values == other._values

    def __repr__(self) -> str:
        body = ", ".join(f"{k!r}: {v:.4g}" for k, v in self.items())
        return f"SparseVector({{{body}}})"

    # ---- norms ----
    def sq_length(self) -> float:
        return sum(v * v for v in self._values)

    def length(self) -> float:
        return math.sqrt(self.sq_length())

    def normalised(self) -> SparseVector[K]:
        length = self.length()
        if length == 0:
            # zero vector maps to itself
            return SparseVector._from_sorted(self._keys, self._values)
        inv = 1.0 / length
        return SparseVector._from_sorted(self._keys, [v * inv for v in self._values])

    # ---- algebra ----
    def multiply(self, scalar: float) -> SparseVector[K]:
        return SparseVector._from_sorted(self._keys, [v * scalar for v in self._values])

    def add(self, other: SparseVector[K]) -> SparseVector[K]:
        """Union of keys, summing values present in both."""
        k1, v1, k2, v2 = self._keys, self._values, other._keys, other._values
        i = j = 0
        keys: list[K] = []
        values: list[float] = []
        while i < len(k1) and j < len(k2):
            if k1[i] < k2[j]:
                keys.append(k1[i])
                values.append(v1[i])
                i += 1
            elif k2[j] < k1[i]:
                keys.append(k2[j])
                values.append(v2[j])
                j += 1
            else:
                keys.append(k1[i])
                values.append(v1[i] + v2[j])
                i += 1
                j += 1

        # tails
        keys.extend(k1[i:])
        values.extend(v1[i:])
        keys.extend(k2[j:])
        values.extend(v2[j:])
        return SparseVector._from_sorted(keys, values)

    def cartesian_product(self, other: SparseVector[K]) -> SparseVector[K]:
        """
        Elementwise (Hadamard) product over the shared keys.

        Keys missing from either operand drop out of the result.
        """
        k1, v1, k2, v2 = self._keys, self._values, other._keys, other._values
        i = j = 0
        keys: list[K] = []
        values: list[float] = []
        while i < len(k1) and j < len(k2):
            if k1[i] < k2[j]:
                i += 1
            elif k2[j] < k1[i]:
                j += 1
            else:
                keys.append(k1[i])
                values.append(v1[i] * v2[j])
                i += 1
                j += 1
        return SparseVector._from_sorted(keys, values)

    def dot(self, other: SparseVector[K]) -> float:
        k1, v1, k2, v2 = self._keys, self._values, other._keys, other._values
        i = j = 0
        result = 0.0
        while i < len(k1) and j < len(k2):
            if k1[i] < k2[j]:
                i += 1
            elif k2[j] < k1[i]:
                j += 1
            else:
                result += v1[i] * v2[j]
                i += 1
                j += 1
        return result


def empty() -> SparseVector[str]:
    return SparseVector([], [])
