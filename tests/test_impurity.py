import numpy as np
import pytest

from pyDTR.impurity import ImpurityStats, VarianceCalculator


def test_variance_from_labels_matches_numpy():
    y = np.array([1.0, 2.0, 4.0, 7.0])
    calc = VarianceCalculator.from_labels(y)
    assert calc.count == 4
    assert calc.predict() == pytest.approx(np.mean(y))
    assert calc.calculate() == pytest.approx(np.var(y))


def test_weighted_labels():
    calc = VarianceCalculator.from_labels([0.0, 10.0], weights=[3.0, 1.0])
    assert calc.count == 4.0
    assert calc.predict() == pytest.approx(2.5)
    # E[y^2] - E[y]^2 = 25 - 6.25
    assert calc.calculate() == pytest.approx(18.75)


def test_empty_calculator_is_zero():
    calc = VarianceCalculator(count=0.0, sum_y=0.0, sum_y2=0.0)
    assert calc.calculate() == 0.0
    assert calc.predict() == 0.0


def test_constant_labels_never_negative():
    calc = VarianceCalculator.from_labels([0.1] * 7)
    assert calc.calculate() >= 0.0


def test_weights_shape_mismatch():
    with pytest.raises(ValueError):
        VarianceCalculator.from_labels([1.0, 2.0], weights=[1.0])


def test_impurity_stats_delegates_to_calculator():
    stats = ImpurityStats.from_labels([1.0, 3.0], gain=0.5)
    assert stats.weighted_count == 2.0
    assert stats.impurity == pytest.approx(1.0)
    assert stats.calculate() == pytest.approx(1.0)
    assert stats.gain == 0.5


@pytest.mark.parametrize("impurity, gain", [(-1.0, 0.0), (0.0, -0.1), (float("nan"), 0.0), (0.0, float("inf"))])
def test_impurity_stats_rejects_invalid_values(impurity, gain):
    calc = VarianceCalculator(count=1.0, sum_y=0.0, sum_y2=0.0)
    with pytest.raises(ValueError):
        ImpurityStats(impurity=impurity, calculator=calc, gain=gain)


def test_negative_count_rejected():
    with pytest.raises(ValueError):
        VarianceCalculator(count=-1.0, sum_y=0.0, sum_y2=0.0)
