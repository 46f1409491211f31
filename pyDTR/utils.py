from __future__ import annotations

from typing import List, Sequence, Union

import numpy as np

from .vectors import SparseVector

Rows = Union[np.ndarray, List[SparseVector], List[Sequence[float]]]


def ensure_feature_rows(X) -> Rows:
    """Turn a batch of examples into something iterable row by row.

    Accepts a 2-D array-like, a pandas DataFrame, or a sequence mixing dense
    rows and ``SparseVector`` instances.
    """
    if hasattr(X, "to_numpy"):
        X_arr = X.to_numpy(dtype=float, copy=False)
    elif isinstance(X, (list, tuple)) and any(isinstance(row, SparseVector) for row in X):
        return list(X)
    else:
        X_arr = np.asarray(X, dtype=float)
    if X_arr.ndim == 1:
        X_arr = X_arr.reshape(-1, 1)
    if X_arr.ndim != 2:
        raise ValueError(f"X must be 2D, got an array with {X_arr.ndim} dimensions.")
    return np.ascontiguousarray(X_arr, dtype=float)
