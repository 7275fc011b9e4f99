from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import joblib
import numpy as np
from sklearn.metrics import log_loss

from multitrend import logs
from multitrend.config.training_config import TrainingConfig
from multitrend.training.engines.train_result import TrainingSummary
from multitrend.utils.errors import ShapeMismatch

EpochCallback = Callable[[int, Dict[str, float]], None]


class TrendClassifierEngine(ABC):
    """
    Abstract trainable sequence classifier (FINAL)

    Contract:
    - fit(...) runs `epoch_count` epochs of mini-batch updates in sample order
    - on_epoch_end(epoch, logs) fires once per completed epoch with
      loss / accuracy (+ val_loss / val_accuracy when validation data is given)
    - stop() is cooperative: the flag is checked before every mini-batch,
      fit() then returns with stopped=True
    - predict(inputs) → probabilities, shape (n, output_count)

    Subclasses only decide the estimator (_build_model / _partial_fit /
    _predict_proba).
    """

    def __init__(self, cfg: TrainingConfig | None = None):
        self.cfg = cfg or TrainingConfig()
        self.model: Any = None
        self.output_count: Optional[int] = None
        self._stop = threading.Event()
        self._training = False

    # ------------------------------------------------------------------
    # Estimator hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def _build_model(self, output_count: int) -> Any:
        raise NotImplementedError

    @abstractmethod
    def _partial_fit(self, X: np.ndarray, Y: np.ndarray, *, first: bool) -> None:
        raise NotImplementedError

    @abstractmethod
    def _predict_proba(self, X: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def is_training(self) -> bool:
        return self._training

    def stop(self) -> None:
        self._stop.set()

    def spawn(self) -> "TrendClassifierEngine":
        """Untrained engine of the same kind and config, sharing the stop flag."""
        clone = type(self)(self.cfg)
        clone._stop = self._stop
        return clone

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def fit(
        self,
        train_inputs,
        train_labels,
        validation_inputs=None,
        validation_labels=None,
        epoch_count: Optional[int] = None,
        batch_size: Optional[int] = None,
        on_epoch_end: Optional[EpochCallback] = None,
    ) -> TrainingSummary:
        epochs = int(epoch_count or self.cfg.epochs)
        batch = int(batch_size or self.cfg.batch_size)
        if epochs <= 0 or batch <= 0:
            raise ValueError("epoch_count and batch_size must be positive")

        X, Y = self._prepare(train_inputs, train_labels)
        has_val = validation_inputs is not None and validation_labels is not None
        if has_val:
            Xv, Yv = self._prepare(validation_inputs, validation_labels)
            if Yv.shape[1] != Y.shape[1]:
                raise ShapeMismatch(
                    "validation label width differs from training",
                    train=Y.shape[1],
                    validation=Yv.shape[1],
                )

        self.output_count = Y.shape[1]
        self.model = self._build_model(self.output_count)

        history: Dict[str, List[float]] = {"loss": [], "accuracy": []}
        if has_val:
            history.update({"val_loss": [], "val_accuracy": []})

        n = X.shape[0]
        completed = 0
        stopped = False
        first = True

        self._stop.clear()
        self._training = True
        logs.info(
            f"[{self.__class__.__name__}] fit start samples={n} outputs={self.output_count} "
            f"epochs={epochs} batch_size={batch}"
        )
        try:
            for epoch in range(epochs):
                for start in range(0, n, batch):
                    if self._stop.is_set():
                        stopped = True
                        break
                    self._partial_fit(X[start:start + batch], Y[start:start + batch], first=first)
                    first = False

                if stopped:
                    logs.warning(f"[{self.__class__.__name__}] stopped at epoch {epoch + 1}/{epochs}")
                    break

                epoch_logs = self._score(X, Y)
                if has_val:
                    val = self._score(Xv, Yv)
                    epoch_logs["val_loss"] = val["loss"]
                    epoch_logs["val_accuracy"] = val["accuracy"]

                for key, value in epoch_logs.items():
                    history[key].append(value)
                completed += 1

                if on_epoch_end is not None:
                    on_epoch_end(epoch, dict(epoch_logs))
        finally:
            self._training = False

        return TrainingSummary(
            epochs_requested=epochs,
            epochs_completed=completed,
            stopped=stopped,
            history=history,
        )

    def predict(self, inputs) -> np.ndarray:
        if self.model is None:
            raise RuntimeError("Model not trained")
        X = self._flatten(inputs)
        return np.asarray(self._predict_proba(X), dtype=np.float64)

    def evaluate(self, inputs, labels) -> Dict[str, float]:
        if self.model is None:
            raise RuntimeError("Model not trained")
        X, Y = self._prepare(inputs, labels)
        return self._score(X, Y)

    def save(self, path: str | Path) -> Path:
        if self.model is None:
            raise RuntimeError("No model to save")
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        joblib.dump({"model": self.model, "output_count": self.output_count}, path)
        return path

    def load(self, path: str | Path) -> "TrendClassifierEngine":
        payload = joblib.load(Path(path))
        self.model = payload["model"]
        self.output_count = payload["output_count"]
        return self

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    @staticmethod
    def _flatten(inputs) -> np.ndarray:
        X = np.asarray(inputs, dtype=np.float64)
        if X.ndim == 3:
            X = X.reshape(X.shape[0], -1)
        if X.ndim != 2:
            raise ShapeMismatch("inputs must be (n, lookback, features) or (n, features)", shape=X.shape)
        return X

    def _prepare(self, inputs, labels):
        X = self._flatten(inputs)
        Y = np.asarray(labels).astype(np.int64)
        if Y.ndim != 2 or Y.shape[0] != X.shape[0]:
            raise ShapeMismatch("labels must be (n, outputs) aligned with inputs", inputs=X.shape, labels=Y.shape)
        if X.shape[0] == 0:
            raise ValueError("cannot fit / score on zero samples")
        return X, Y

    def _score(self, X: np.ndarray, Y: np.ndarray) -> Dict[str, float]:
        P = np.asarray(self._predict_proba(X), dtype=np.float64)
        return {
            "loss": float(log_loss(Y.ravel(), P.ravel(), labels=[0, 1])),
            "accuracy": float(np.mean((P > 0.5).astype(np.int64) == Y)),
        }
