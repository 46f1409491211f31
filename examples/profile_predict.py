import time

import numpy as np

from pyDTR import ContinuousSplit, DecisionTreeRegressionModel, ImpurityStats, InternalNode, LeafNode

rng = np.random.default_rng(0)
n_features = 10


def build(y, depth):
    stats = ImpurityStats.from_labels(y)
    if depth == 0 or y.size < 2:
        return LeafNode(prediction=float(np.mean(y)), impurity_stats=stats)
    cut = y.size // 2
    left, right = np.sort(y)[:cut], np.sort(y)[cut:]
    gain = stats.impurity - (left.size * np.var(left) + right.size * np.var(right)) / y.size
    stats = ImpurityStats(impurity=stats.impurity, calculator=stats.calculator, gain=max(gain, 0.0))
    split = ContinuousSplit(int(rng.integers(n_features)), float(rng.normal()))
    return InternalNode(float(np.mean(y)), stats, split, build(left, depth - 1), build(right, depth - 1))


model = DecisionTreeRegressionModel(build(rng.normal(size=4096), depth=10), num_features=n_features)
X = rng.normal(size=(50000, n_features))

t0 = time.perf_counter()
model.predict_batch(X)
print(f"{model!r}: {X.shape[0]} predictions in {time.perf_counter() - t0:.3f}s")
print(np.round(model.feature_importances, 3))
