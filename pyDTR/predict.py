from __future__ import annotations

from dataclasses import dataclass

from .impurity import ImpurityStats
from .tree import InternalNode, LeafNode, Node
from .vectors import FeatureVector, feature_value


@dataclass(frozen=True)
class PredictionResult:
    """Prediction and impurity statistics of the leaf an example lands in."""

    value: float
    impurity_stats: ImpurityStats

    @property
    def variance(self) -> float:
        # The leaf's own impurity statistic is the variance estimate.
        return self.impurity_stats.calculate()


def predict_leaf(node: Node, features: FeatureVector) -> LeafNode:
    """Follow the split conditions from ``node`` down to a leaf."""
    while isinstance(node, InternalNode):
        node = node.child_for(feature_value(features, node.split_feature_index))
    if not isinstance(node, LeafNode):
        raise TypeError(f"Expected a tree node, got {type(node).__name__}")
    return node


def predict(node: Node, features: FeatureVector) -> PredictionResult:
    leaf = predict_leaf(node, features)
    return PredictionResult(value=leaf.prediction, impurity_stats=leaf.impurity_stats)


def predict_variance(node: Node, features: FeatureVector) -> float:
    return predict(node, features).variance
