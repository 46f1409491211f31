"""Mean-decrease-in-impurity feature importances for a single tree.

importance(feature j) = sum over nodes splitting on j of ``gain * weighted_count``,
normalized so that the importances of the tree sum to 1.
"""
from __future__ import annotations

import logging

import numpy as np

from .tree import Node, check_root, iter_internal_nodes

logger = logging.getLogger(__name__)


def check_num_features(num_features) -> int:
    if isinstance(num_features, bool) or int(num_features) != num_features or num_features <= 0:
        raise ValueError(f"num_features must be a positive int, got {num_features!r}")
    return int(num_features)


def accumulate_gains(root: Node, num_features: int) -> np.ndarray:
    """Per-feature sum of instance-weighted split gains (not normalized)."""
    check_root(root)
    num_features = check_num_features(num_features)
    totals = np.zeros(num_features, dtype=float)
    for node in iter_internal_nodes(root):
        feature = node.split_feature_index
        if feature >= num_features:
            raise ValueError(
                f"Node splits on feature {feature} but num_features is {num_features}."
            )
        totals[feature] += node.gain * node.impurity_stats.weighted_count
    return totals


def normalize_importances(totals: np.ndarray) -> np.ndarray:
    totals = np.asarray(totals, dtype=float)
    total = float(np.sum(totals))
    if total > 0:
        return totals / total
    return np.zeros_like(totals)


def compute_feature_importances(root: Node, num_features: int) -> np.ndarray:
    totals = accumulate_gains(root, num_features)
    importances = normalize_importances(totals)
    if not np.any(importances):
        logger.warning("Tree has no split with positive gain; all feature importances are 0.")
    else:
        logger.debug("Feature importance totals: %s", totals.tolist())
    return importances
