"""pyDTR: trained decision-tree regression models.

Single-example prediction (point estimate and leaf variance) and
mean-decrease-in-impurity feature importances over an already-built tree.
"""

from .impurity import ImpurityStats, VarianceCalculator
from .model import DecisionTreeRegressionModel
from .tree import CategoricalSplit, ContinuousSplit, InternalNode, LeafNode
from .vectors import SparseVector

__all__ = [
    "CategoricalSplit",
    "ContinuousSplit",
    "DecisionTreeRegressionModel",
    "ImpurityStats",
    "InternalNode",
    "LeafNode",
    "SparseVector",
    "VarianceCalculator",
]
