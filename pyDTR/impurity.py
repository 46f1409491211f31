from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class VarianceCalculator:
    """Sufficient statistics of the (weighted) labels reaching a node.

    Parameters
    ----------
    count : float
        Weighted number of instances.
    sum_y : float
        Weighted sum of labels.
    sum_y2 : float
        Weighted sum of squared labels.
    """

    count: float
    sum_y: float
    sum_y2: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.count) and self.count >= 0):
            raise ValueError(f"count must be finite and >= 0, got {self.count}")
        if not (math.isfinite(self.sum_y) and math.isfinite(self.sum_y2)):
            raise ValueError("sum_y and sum_y2 must be finite.")

    @classmethod
    def from_labels(cls, labels, weights=None) -> "VarianceCalculator":
        y = np.asarray(labels, dtype=float).reshape(-1)
        if weights is None:
            w = np.ones_like(y)
        else:
            w = np.asarray(weights, dtype=float).reshape(-1)
            if w.shape[0] != y.shape[0]:
                raise ValueError(f"Shape mismatch: {y.shape[0]} labels, {w.shape[0]} weights")
        return cls(
            count=float(np.sum(w)),
            sum_y=float(np.sum(w * y)),
            sum_y2=float(np.sum(w * y * y)),
        )

    def calculate(self) -> float:
        """Variance = E[y^2] - E[y]^2 (0 for an empty node)."""
        if self.count == 0:
            return 0.0
        mean = self.sum_y / self.count
        # Cancellation can leave a tiny negative value.
        return max(0.0, float(self.sum_y2 / self.count - mean * mean))

    def predict(self) -> float:
        if self.count == 0:
            return 0.0
        return float(self.sum_y / self.count)


@dataclass(frozen=True)
class ImpurityStats:
    """Impurity, split gain and label statistics recorded for a node at training time."""

    impurity: float
    calculator: VarianceCalculator
    gain: float = 0.0

    def __post_init__(self) -> None:
        if not (math.isfinite(self.impurity) and self.impurity >= 0):
            raise ValueError(f"impurity must be finite and >= 0, got {self.impurity}")
        if not (math.isfinite(self.gain) and self.gain >= 0):
            raise ValueError(f"gain must be finite and >= 0, got {self.gain}")

    @classmethod
    def from_labels(cls, labels, weights=None, gain: float = 0.0) -> "ImpurityStats":
        calculator = VarianceCalculator.from_labels(labels, weights)
        return cls(impurity=calculator.calculate(), calculator=calculator, gain=gain)

    @classmethod
    def from_moments(
        cls, count: float, sum_y: float, sum_y2: float, gain: float = 0.0,
        impurity: Optional[float] = None,
    ) -> "ImpurityStats":
        calculator = VarianceCalculator(count=count, sum_y=sum_y, sum_y2=sum_y2)
        if impurity is None:
            impurity = calculator.calculate()
        return cls(impurity=impurity, calculator=calculator, gain=gain)

    @property
    def weighted_count(self) -> float:
        return self.calculator.count

    def calculate(self) -> float:
        return self.calculator.calculate()
