from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .impurity import ImpurityStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContinuousSplit:
    """Go left when ``x[feature_index] <= threshold``."""

    feature_index: int
    threshold: float

    def __post_init__(self) -> None:
        _check_feature_index(self.feature_index)
        if math.isnan(self.threshold):
            raise ValueError("threshold must not be NaN")
        object.__setattr__(self, "feature_index", int(self.feature_index))
        object.__setattr__(self, "threshold", float(self.threshold))

    def should_go_left(self, value: float) -> bool:
        return value <= self.threshold

    def describe(self, name: str, left: bool) -> str:
        op = "<=" if left else ">"
        return f"{name} {op} {self.threshold}"


@dataclass(frozen=True, init=False)
class CategoricalSplit:
    """Go left when the observed category is one of ``left_categories``.

    Categories are the integer codes ``0 .. num_categories - 1``.
    """

    feature_index: int
    left_categories: FrozenSet[int]
    num_categories: int

    def __init__(self, feature_index: int, left_categories: Iterable[float], num_categories: int):
        _check_feature_index(feature_index)
        if isinstance(num_categories, bool) or int(num_categories) != num_categories or num_categories <= 0:
            raise ValueError(f"num_categories must be a positive int, got {num_categories!r}")
        cats = set()
        for c in left_categories:
            if not math.isfinite(c) or float(c) != int(c) or not 0 <= int(c) < num_categories:
                raise ValueError(
                    f"Category {c} is not an integer code in [0, {num_categories})"
                )
            cats.add(int(c))
        object.__setattr__(self, "feature_index", int(feature_index))
        object.__setattr__(self, "left_categories", frozenset(cats))
        object.__setattr__(self, "num_categories", int(num_categories))

    @property
    def right_categories(self) -> FrozenSet[int]:
        return frozenset(range(self.num_categories)) - self.left_categories

    def should_go_left(self, value: float) -> bool:
        return value in self.left_categories

    def describe(self, name: str, left: bool) -> str:
        cats = ",".join(str(c) for c in sorted(self.left_categories))
        op = "in" if left else "not in"
        return f"{name} {op} {{{cats}}}"


Split = Union[ContinuousSplit, CategoricalSplit]


def _check_feature_index(index) -> None:
    if isinstance(index, bool) or int(index) != index or index < 0:
        raise ValueError(f"feature_index must be a non-negative int, got {index!r}")


@dataclass(frozen=True, eq=False)
class LeafNode:
    """Terminal node: fixed prediction, no split."""

    prediction: float
    impurity_stats: ImpurityStats

    @property
    def is_leaf(self) -> bool:
        return True

    @property
    def impurity(self) -> float:
        return self.impurity_stats.impurity

    @property
    def depth(self) -> int:
        return 0

    @property
    def num_descendants(self) -> int:
        return 0


@dataclass(frozen=True, eq=False)
class InternalNode:
    """Split node; ``prediction`` is the fallback value of the node itself."""

    prediction: float
    impurity_stats: ImpurityStats
    split: Split
    left_child: "Node"
    right_child: "Node"

    def __post_init__(self) -> None:
        if not isinstance(self.split, (ContinuousSplit, CategoricalSplit)):
            raise TypeError(f"split must be a ContinuousSplit or CategoricalSplit, got {type(self.split).__name__}")
        for side, child in (("left", self.left_child), ("right", self.right_child)):
            if not isinstance(child, (LeafNode, InternalNode)):
                raise TypeError(f"{side}_child must be a tree node, got {type(child).__name__}")

    @property
    def is_leaf(self) -> bool:
        return False

    @property
    def impurity(self) -> float:
        return self.impurity_stats.impurity

    @property
    def gain(self) -> float:
        return self.impurity_stats.gain

    @property
    def split_feature_index(self) -> int:
        return self.split.feature_index

    def child_for(self, value: float) -> "Node":
        return self.left_child if self.split.should_go_left(value) else self.right_child

    @property
    def depth(self) -> int:
        """Depth of the subtree rooted here (a leaf has depth 0)."""
        deepest = 0
        stack: List[Tuple[Node, int]] = [(self, 0)]
        while stack:
            node, d = stack.pop()
            if isinstance(node, InternalNode):
                stack.append((node.left_child, d + 1))
                stack.append((node.right_child, d + 1))
            elif d > deepest:
                deepest = d
        return deepest

    @property
    def num_descendants(self) -> int:
        return sum(1 for _ in iter_nodes(self)) - 1


Node = Union[LeafNode, InternalNode]


def is_node(obj) -> bool:
    return isinstance(obj, (LeafNode, InternalNode))


def iter_nodes(root: Node) -> Iterator[Node]:
    """Pre-order walk over the subtree rooted at ``root``."""
    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, InternalNode):
            stack.append(node.right_child)
            stack.append(node.left_child)


def iter_internal_nodes(root: Node) -> Iterator[InternalNode]:
    for node in iter_nodes(root):
        if isinstance(node, InternalNode):
            yield node


def check_root(root) -> None:
    """Fail fast on a missing root or an object that is not a tree node."""
    if root is None:
        raise ValueError("Decision tree given a null root node, but it requires a non-null root node.")
    if not is_node(root):
        raise TypeError(f"Root must be a LeafNode or InternalNode, got {type(root).__name__}")


def validate_tree(root: Node, num_features: Optional[int] = None) -> int:
    """Check that ``root`` is a well-formed tree and return its node count.

    Raises ``ValueError`` when the root is missing, ``TypeError`` when it is
    not a tree node, and ``ValueError`` when a node is reachable
    through more than one parent, or when a split feature index does not lie
    in ``[0, num_features)``.
    """
    check_root(root)

    seen = set()
    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        if id(node) in seen:
            raise ValueError("Tree node reachable through more than one parent; the tree must not share nodes.")
        seen.add(id(node))
        if isinstance(node, InternalNode):
            feature = node.split_feature_index
            if num_features is not None and feature >= num_features:
                raise ValueError(
                    f"Split on feature {feature} but the model has only {num_features} features."
                )
            stack.append(node.left_child)
            stack.append(node.right_child)

    logger.debug("Validated tree with %d nodes", len(seen))
    return len(seen)


def _feature_label(index: int, feature_names: Optional[Sequence[str]]) -> str:
    if feature_names is not None and index < len(feature_names):
        return str(feature_names[index])
    return f"feature {index}"


def tree_to_string(
    root: Node, indent: int = 1, feature_names: Optional[Sequence[str]] = None
) -> str:
    """Render the subtree as nested If/Else/Predict lines."""
    lines: List[str] = []
    # Frames are either nodes to expand or ready-made lines.
    stack: List[Tuple[int, Union[Node, str]]] = [(indent, root)]
    while stack:
        level, item = stack.pop()
        prefix = " " * level
        if isinstance(item, str):
            lines.append(prefix + item)
        elif isinstance(item, LeafNode):
            lines.append(f"{prefix}Predict: {item.prediction}")
        else:
            name = _feature_label(item.split_feature_index, feature_names)
            lines.append(f"{prefix}If ({item.split.describe(name, left=True)})")
            stack.append((level + 1, item.right_child))
            stack.append((level, f"Else ({item.split.describe(name, left=False)})"))
            stack.append((level + 1, item.left_child))
    return "\n".join(lines) + "\n"
