import numpy as np
import pytest

from pyDTR.predict import predict, predict_leaf, predict_variance
from pyDTR.tree import ContinuousSplit, iter_nodes
from pyDTR.vectors import SparseVector

from trees import leaf, split_node


def test_single_leaf_predicts_constant():
    tree = leaf(3.5, count=4.0, variance=0.75)
    for features in ([0.0], [100.0, -2.0], np.array([1e9])):
        result = predict(tree, features)
        assert result.value == 3.5
        assert result.variance == pytest.approx(0.75)


def test_stump_routes_on_threshold(stump):
    assert predict(stump, [0.3]).value == 1.0
    assert predict(stump, [0.7]).value == 2.0
    assert predict(stump, [0.5]).value == 1.0


def test_variance_comes_from_the_same_leaf(stump):
    left = predict(stump, [0.3])
    right = predict(stump, [0.7])
    assert left.impurity_stats is stump.left_child.impurity_stats
    assert right.impurity_stats is stump.right_child.impurity_stats
    assert left.variance == pytest.approx(0.25)
    assert right.variance == pytest.approx(0.5)
    assert predict_variance(stump, [0.7]) == pytest.approx(0.5)


def test_categorical_routing(categorical_tree):
    assert predict(categorical_tree, [0.0, 1.0]).value == -1.0
    assert predict(categorical_tree, [0.0, 3.0]).value == -1.0
    # Category 2 is not in the left set {1, 3}.
    assert predict(categorical_tree, [0.0, 2.0]).value == 1.0
    assert predict(categorical_tree, [0.0, 0.0]).value == 1.0


def test_three_level_tree(three_level_tree):
    assert predict(three_level_tree, [-1.0, 0.5]).value == 10.0
    assert predict(three_level_tree, [-1.0, 1.5]).value == 20.0
    assert predict(three_level_tree, [2.0, 99.0]).value == 30.0
    assert predict(three_level_tree, [6.0, -99.0]).value == 40.0


def test_result_is_a_reachable_leaf(three_level_tree):
    leaves = {id(n) for n in iter_nodes(three_level_tree) if n.is_leaf}
    rng = np.random.default_rng(0)
    for row in rng.normal(scale=5.0, size=(50, 2)):
        reached = predict_leaf(three_level_tree, row)
        assert id(reached) in leaves
        assert predict(three_level_tree, row) == predict(three_level_tree, row)


def test_sparse_vector_defaults_to_zero(three_level_tree):
    # feature 0 unset -> 0.0 <= 0.0 goes left; feature 1 = 2.0 goes right.
    assert predict(three_level_tree, SparseVector(2, [1], [2.0])).value == 20.0
    assert predict(three_level_tree, SparseVector(2, [], [])).value == 10.0


def test_short_vector_fails_fast(three_level_tree):
    with pytest.raises(IndexError):
        predict(three_level_tree, [-1.0])


def test_non_node_input_rejected():
    with pytest.raises(TypeError):
        predict_leaf("not a tree", [0.0])


def test_deep_tree_does_not_recurse():
    node = leaf(0.0)
    for depth in range(5000):
        node = split_node(ContinuousSplit(0, float(depth)), leaf(float(depth + 1)), node, gain=1.0, count=1.0)
    # Walks right past every threshold down to the innermost leaf.
    assert predict(node, [1e9]).value == 0.0
