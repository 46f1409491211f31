import pytest

from pyDTR.tree import CategoricalSplit, ContinuousSplit

from trees import leaf, split_node


@pytest.fixture
def stump():
    """Root splits on feature 0 at 0.5 (gain 4, weight 10) into leaves 1.0 / 2.0."""
    return split_node(
        ContinuousSplit(feature_index=0, threshold=0.5),
        leaf(1.0, count=6.0, variance=0.25),
        leaf(2.0, count=4.0, variance=0.5),
        gain=4.0,
        count=10.0,
        prediction=1.4,
    )


@pytest.fixture
def three_level_tree():
    #            f0 <= 0.0 (gain 2, n 100)
    #          /                          \
    #   f1 <= 1.0 (gain 1, n 60)     f0 <= 5.0 (gain 0.5, n 40)
    #     /      \                     /       \
    #   10.0    20.0                 30.0      40.0
    return split_node(
        ContinuousSplit(0, 0.0),
        split_node(
            ContinuousSplit(1, 1.0),
            leaf(10.0, count=30.0, variance=1.0),
            leaf(20.0, count=30.0, variance=2.0),
            gain=1.0,
            count=60.0,
        ),
        split_node(
            ContinuousSplit(0, 5.0),
            leaf(30.0, count=20.0, variance=3.0),
            leaf(40.0, count=20.0, variance=4.0),
            gain=0.5,
            count=40.0,
        ),
        gain=2.0,
        count=100.0,
    )


@pytest.fixture
def categorical_tree():
    return split_node(
        CategoricalSplit(feature_index=1, left_categories={1, 3}, num_categories=4),
        leaf(-1.0, count=5.0),
        leaf(1.0, count=5.0),
        gain=0.8,
        count=10.0,
    )
