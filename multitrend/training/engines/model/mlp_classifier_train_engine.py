# multitrend/training/engines/model/mlp_classifier_train_engine.py
from __future__ import annotations

import numpy as np
from sklearn.neural_network import MLPClassifier

from multitrend.training.engines.model_train_engine import TrendClassifierEngine

_CLASSES = np.array([0, 1])


class MLPTrendClassifierEngine(TrendClassifierEngine):
    """
    Multilabel MLPClassifier over the flattened lookback window.

    A single output column is fitted as plain binary classification
    (sklearn treats an (n, 1) target as binary, not multilabel).
    """

    def _build_model(self, output_count: int):
        params = {
            "hidden_layer_sizes": (64, 32),
            "learning_rate_init": 0.001,
            "random_state": self.cfg.random_state,
        }
        params.update(self.cfg.model_params)
        if isinstance(params.get("hidden_layer_sizes"), list):
            params["hidden_layer_sizes"] = tuple(params["hidden_layer_sizes"])
        return MLPClassifier(**params)

    def _target(self, Y):
        return Y.ravel() if Y.shape[1] == 1 else Y

    def _partial_fit(self, X, Y, *, first: bool) -> None:
        if first:
            # multilabel: classes are the output column indices
            classes = _CLASSES if Y.shape[1] == 1 else np.arange(Y.shape[1])
            self.model.partial_fit(X, self._target(Y), classes=classes)
            return
        self.model.partial_fit(X, self._target(Y))

    def _predict_proba(self, X):
        proba = self.model.predict_proba(X)
        if self.output_count == 1:
            return proba[:, list(self.model.classes_).index(1)][:, None]
        return proba
