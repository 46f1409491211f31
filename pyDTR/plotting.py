from __future__ import annotations

from typing import List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from .tree import InternalNode, LeafNode, Node


def _layout_tree(node: Node, y=0, positions=None, leaf_positions=None):
    if positions is None:
        positions = {}
    if leaf_positions is None:
        leaf_positions = []

    if isinstance(node, LeafNode):
        xpos = len(leaf_positions)
        positions[id(node)] = (xpos, -y)
        leaf_positions.append(xpos)
        return positions, leaf_positions

    positions, leaf_positions = _layout_tree(node.left_child, y + 1, positions, leaf_positions)
    positions, leaf_positions = _layout_tree(node.right_child, y + 1, positions, leaf_positions)

    lx, _ = positions[id(node.left_child)]
    rx, _ = positions[id(node.right_child)]
    positions[id(node)] = ((lx + rx) / 2, -y)
    return positions, leaf_positions


def _node_label(node: Node, feature_names: Optional[Sequence[str]]) -> str:
    if isinstance(node, LeafNode):
        return (
            f"leaf\npred={node.prediction:.3f}\n"
            f"n={node.impurity_stats.weighted_count:g}"
        )
    index = node.split_feature_index
    name = feature_names[index] if feature_names and index < len(feature_names) else f"x{index}"
    return (
        f"{node.split.describe(name, left=True)}\n"
        f"gain={node.gain:.3f}, n={node.impurity_stats.weighted_count:g}"
    )


def plot_tree(
    root: Node,
    ax: Optional[plt.Axes] = None,
    feature_names: Optional[Sequence[str]] = None,
) -> plt.Axes:
    """Visualize the tree structure using a minimalist layout."""
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 5))
    positions, _ = _layout_tree(root)

    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        x, y = positions[id(node)]
        if isinstance(node, InternalNode):
            for child in (node.left_child, node.right_child):
                cx, cy = positions[id(child)]
                ax.plot([x, cx], [y, cy], color="0.6")
                stack.append(child)
        ax.scatter([x], [y], s=200, color="#2a9d8f" if node.is_leaf else "#264653")
        ax.text(x, y, _node_label(node, feature_names), ha="center", va="center",
                color="white", fontsize=8)

    ax.set_axis_off()
    ax.set_title("Decision tree", fontsize=12)
    return ax


def plot_feature_importances(
    importances,
    ax: Optional[plt.Axes] = None,
    feature_names: Optional[Sequence[str]] = None,
) -> plt.Axes:
    """Horizontal bar chart of an importance vector, largest first."""
    values = np.asarray(importances, dtype=float).reshape(-1)
    if feature_names is None:
        feature_names = [f"x{i}" for i in range(values.size)]
    if len(feature_names) != values.size:
        raise ValueError(
            f"Got {len(feature_names)} feature names for {values.size} importances."
        )
    if ax is None:
        _, ax = plt.subplots(figsize=(6, max(2, 0.3 * values.size)))

    order = np.argsort(values, kind="mergesort")
    ax.barh([feature_names[i] for i in order], values[order], color="#1d3557")
    ax.set_xlabel("importance")
    ax.set_title("Feature importances")
    return ax
