from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Dict, Optional, Sequence

import numpy as np
import pandas as pd

from .importance import check_num_features, compute_feature_importances
from .predict import PredictionResult, predict, predict_leaf
from .tree import Node, tree_to_string, validate_tree
from .utils import ensure_feature_rows
from .vectors import FeatureVector

logger = logging.getLogger(__name__)


def random_uid(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class DecisionTreeRegressionModel:
    """A trained regression tree: per-example predictions and feature importances.

    Parameters
    ----------
    root_node : LeafNode | InternalNode
        Root of the trained tree, with every other node attached.
    num_features : int
        Number of feature slots the tree was trained against. Every split
        feature index must lie in ``[0, num_features)``.
    uid : str, optional
        Model identifier; a random ``dtr_...`` id when omitted.
    features_col : str, default="features"
        Input column holding one feature vector per row (``transform``).
    prediction_col : str, default="prediction"
        Output column for predictions. An empty string disables it.
    variance_col : str, optional
        Output column for variance estimates. Disabled unless set.
    """

    def __init__(
        self,
        root_node: Node,
        num_features: int,
        uid: Optional[str] = None,
        features_col: str = "features",
        prediction_col: str = "prediction",
        variance_col: Optional[str] = None,
    ) -> None:
        self.num_features = check_num_features(num_features)
        self._num_nodes = validate_tree(root_node, self.num_features)
        self.root_node = root_node
        self.uid = uid if uid is not None else random_uid("dtr")

        self.features_col = features_col
        self.prediction_col = prediction_col
        self.variance_col = variance_col

        self._importances: Optional[np.ndarray] = None
        self._importances_lock = threading.Lock()

    # -----------------------------
    # Column configuration
    # -----------------------------
    def set_features_col(self, value: str) -> "DecisionTreeRegressionModel":
        self.features_col = value
        return self

    def set_prediction_col(self, value: str) -> "DecisionTreeRegressionModel":
        self.prediction_col = value
        return self

    def set_variance_col(self, value: Optional[str]) -> "DecisionTreeRegressionModel":
        self.variance_col = value
        return self

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        return {
            "features_col": self.features_col,
            "prediction_col": self.prediction_col,
            "variance_col": self.variance_col,
        }

    def set_params(self, **params) -> "DecisionTreeRegressionModel":
        valid = self.get_params()
        for key, value in params.items():
            if key not in valid:
                raise ValueError(f"Unknown parameter {key}")
            setattr(self, key, value)
        return self

    # -----------------------------
    # Predict
    # -----------------------------
    def predict(self, features: FeatureVector) -> float:
        return float(predict_leaf(self.root_node, features).prediction)

    def predict_variance(self, features: FeatureVector) -> float:
        return predict(self.root_node, features).variance

    def predict_with_variance(self, features: FeatureVector) -> PredictionResult:
        return predict(self.root_node, features)

    def predict_batch(self, X) -> np.ndarray:
        rows = ensure_feature_rows(X)
        preds = np.empty(len(rows), dtype=float)
        for i, row in enumerate(rows):
            preds[i] = self.predict(row)
        return preds

    def predict_variance_batch(self, X) -> np.ndarray:
        rows = ensure_feature_rows(X)
        variances = np.empty(len(rows), dtype=float)
        for i, row in enumerate(rows):
            variances[i] = self.predict_variance(row)
        return variances

    # -----------------------------
    # Feature importances
    # -----------------------------
    @property
    def feature_importances(self) -> np.ndarray:
        """Estimate of the importance of each feature.

        importance(feature j) is the sum, over the nodes splitting on j, of
        the split gain scaled by the weighted number of training instances
        reaching the node; the importances are normalized to sum to 1.

        Importances from a single tree have high variance when predictors are
        correlated; averaging over an ensemble gives steadier estimates.
        """
        if self._importances is None:
            with self._importances_lock:
                if self._importances is None:
                    importances = compute_feature_importances(self.root_node, self.num_features)
                    importances.setflags(write=False)
                    self._importances = importances
        return self._importances

    # -----------------------------
    # DataFrame transform
    # -----------------------------
    def transform(self, dataset: pd.DataFrame) -> pd.DataFrame:
        """Append prediction and variance columns for every row of ``dataset``.

        Only the enabled columns are written: ``prediction_col`` when it is
        non-empty and ``variance_col`` when it is set and non-empty.
        """
        if self.features_col not in dataset.columns:
            raise ValueError(f"Column {self.features_col!r} does not exist in the dataset.")

        outputs = []
        if self.prediction_col:
            outputs.append((self.prediction_col, self.predict))
        if self.variance_col:
            outputs.append((self.variance_col, self.predict_variance))

        for name, _ in outputs:
            if name in dataset.columns:
                raise ValueError(f"Output column {name!r} already exists.")

        output = dataset.copy()
        features = dataset[self.features_col]
        for name, func in outputs:
            output[name] = np.array([func(row) for row in features], dtype=float)

        logger.info(
            "%s: transformed %d rows, added columns %s",
            self.uid, len(output), [name for name, _ in outputs],
        )
        return output

    # -----------------------------
    # Structure / utilities
    # -----------------------------
    @property
    def depth(self) -> int:
        return self.root_node.depth

    @property
    def num_nodes(self) -> int:
        return self._num_nodes

    def __repr__(self) -> str:
        return (
            f"DecisionTreeRegressionModel (uid={self.uid}) of depth {self.depth} "
            f"with {self.num_nodes} nodes"
        )

    def to_debug_string(self, feature_names: Optional[Sequence[str]] = None) -> str:
        return f"{self!r}\n" + tree_to_string(self.root_node, indent=1, feature_names=feature_names)

    def print_tree(self, feature_names: Optional[Sequence[str]] = None):
        print(self.to_debug_string(feature_names))
