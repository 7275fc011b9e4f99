# multitrend/training/engines/model/sgd_classifier_train_engine.py
from __future__ import annotations

import numpy as np
from sklearn.linear_model import SGDClassifier
from sklearn.multioutput import MultiOutputClassifier

from multitrend.training.engines.model_train_engine import TrendClassifierEngine

_CLASSES = np.array([0, 1])


class SGDTrendClassifierEngine(TrendClassifierEngine):
    """
    One logistic SGDClassifier per (entity, horizon day) output.
    """

    def _build_model(self, output_count: int):
        params = {"loss": "log_loss", "random_state": self.cfg.random_state}
        params.update(self.cfg.model_params)
        return MultiOutputClassifier(SGDClassifier(**params))

    def _partial_fit(self, X, Y, *, first: bool) -> None:
        if first:
            self.model.partial_fit(X, Y, classes=[_CLASSES] * Y.shape[1])
            return

        # Incremental update
        self.model.partial_fit(X, Y)

    def _predict_proba(self, X):
        per_output = self.model.predict_proba(X)
        return np.column_stack(
            [
                proba[:, list(est.classes_).index(1)]
                for proba, est in zip(per_output, self.model.estimators_)
            ]
        )
