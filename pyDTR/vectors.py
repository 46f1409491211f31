from __future__ import annotations

from typing import Sequence, Union

import numpy as np


class SparseVector:
    """Fixed-size vector storing only its non-zero entries.

    Unset indices read as 0.0.
    """

    __slots__ = ("size", "indices", "values")

    def __init__(self, size: int, indices: Sequence[int], values: Sequence[float]):
        idx = np.asarray(indices, dtype=np.int64).reshape(-1)
        vals = np.asarray(values, dtype=float).reshape(-1)
        if int(size) < 0:
            raise ValueError(f"size must be >= 0, got {size}")
        if idx.shape[0] != vals.shape[0]:
            raise ValueError(f"Shape mismatch: {idx.shape[0]} indices, {vals.shape[0]} values")
        if idx.size:
            if idx[0] < 0 or idx[-1] >= size:
                raise ValueError(f"indices must lie in [0, {size})")
            if np.any(np.diff(idx) <= 0):
                raise ValueError("indices must be strictly increasing")
        self.size = int(size)
        self.indices = idx
        self.values = vals

    def __len__(self) -> int:
        return self.size

    def __getitem__(self, index: int) -> float:
        if not 0 <= index < self.size:
            raise IndexError(f"index {index} out of range for SparseVector of size {self.size}")
        pos = int(np.searchsorted(self.indices, index))
        if pos < self.indices.size and self.indices[pos] == index:
            return float(self.values[pos])
        return 0.0

    def to_dense(self) -> np.ndarray:
        dense = np.zeros(self.size, dtype=float)
        dense[self.indices] = self.values
        return dense

    def __repr__(self) -> str:
        return f"SparseVector({self.size}, {self.indices.tolist()}, {self.values.tolist()})"


FeatureVector = Union[SparseVector, np.ndarray, Sequence[float]]


def feature_value(features: FeatureVector, index: int) -> float:
    """Bound-checked lookup of one feature; negative indices are never wrapped."""
    n = len(features)
    if not 0 <= index < n:
        raise IndexError(
            f"Feature index {index} is out of bounds for a feature vector of length {n}"
        )
    if hasattr(features, "iloc"):
        return float(features.iloc[index])
    return float(features[index])
