#!filepath: multitrend/engines/evaluate_engine.py
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from multitrend import logs
from multitrend.core.types import EvaluationReport, PredictionRecord
from multitrend.engines.base import require_positive
from multitrend.utils.errors import EmptyInput, ShapeMismatch


class EvaluationAggregateEngine:
    """
    EvaluationAggregateEngine (FINAL / FROZEN)

    Responsibility:
    - decompose a flat [samples, entities * horizon] prediction matrix
      back into per-entity accuracy and per-sample correctness timelines

    Contract:
    - column of (entity e, day d) = e * horizon_length + d
    - predicted class = 1 iff probability > threshold (a tie classifies as 0)
    - accuracy(e) = correct / total over every sample and day of e's block
    - zero samples → EmptyInput, any shape disagreement → ShapeMismatch
    """

    def __init__(self, threshold: float = 0.5) -> None:
        self.threshold = float(threshold)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def execute(
        self,
        *,
        predictions,
        labels,
        entities: Sequence[str],
        horizon_length: int,
        anchor_dates: Optional[Sequence[str]] = None,
    ) -> EvaluationReport:
        require_positive(horizon_length, name="horizon_length", who=self.__class__.__name__)

        probs, actual = self._validate(predictions, labels, entities, horizon_length)
        sample_count = probs.shape[0]

        if anchor_dates is not None and len(anchor_dates) != sample_count:
            raise ShapeMismatch(
                "anchor_dates length differs from sample count",
                anchor_dates=len(anchor_dates),
                sample_count=sample_count,
            )

        predicted = (probs > self.threshold).astype(np.int8)
        correct = predicted == actual

        accuracies: Dict[str, float] = {}
        records: Dict[str, Tuple[Tuple[PredictionRecord, ...], ...]] = {}

        for e, entity in enumerate(entities):
            block = slice(e * horizon_length, (e + 1) * horizon_length)
            accuracies[entity] = float(correct[:, block].mean())

            rows: List[Tuple[PredictionRecord, ...]] = []
            for s in range(sample_count):
                rows.append(
                    tuple(
                        PredictionRecord(
                            entity=entity,
                            sample_index=s,
                            day=d + 1,
                            probability=float(probs[s, e * horizon_length + d]),
                            predicted=int(predicted[s, e * horizon_length + d]),
                            actual=int(actual[s, e * horizon_length + d]),
                            correct=bool(correct[s, e * horizon_length + d]),
                        )
                        for d in range(horizon_length)
                    )
                )
            records[entity] = tuple(rows)

        overall = float(correct.mean())
        logs.info(
            f"[{self.__class__.__name__}] samples={sample_count} entities={len(entities)} "
            f"overall_accuracy={overall:.4f}"
        )

        return EvaluationReport(
            entities=tuple(entities),
            horizon_length=int(horizon_length),
            sample_count=sample_count,
            accuracies=accuracies,
            records=records,
            overall_accuracy=overall,
            anchor_dates=tuple(anchor_dates) if anchor_dates is not None else None,
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _validate(self, predictions, labels, entities, horizon_length):
        probs = np.asarray(predictions, dtype=np.float64)
        actual = np.asarray(labels)

        if probs.size == 0 or actual.size == 0:
            raise EmptyInput("evaluation needs at least one sample", sample_count=0)

        if probs.ndim != 2 or actual.ndim != 2:
            raise ShapeMismatch(
                "predictions and labels must be 2-D",
                predictions=probs.shape,
                labels=actual.shape,
            )

        if probs.shape != actual.shape:
            raise ShapeMismatch(
                "predictions and labels disagree",
                predictions=probs.shape,
                labels=actual.shape,
            )

        expected = len(entities) * horizon_length
        if probs.shape[1] != expected:
            raise ShapeMismatch(
                "column count != entity_count * horizon_length",
                columns=probs.shape[1],
                entity_count=len(entities),
                horizon_length=horizon_length,
            )

        if not np.isfinite(probs).all():
            raise ValueError(f"[{self.__class__.__name__}] predictions contain NaN / inf")

        if not np.isin(actual, (0, 1)).all():
            raise ValueError(f"[{self.__class__.__name__}] labels must be binary 0 / 1")

        return probs, actual.astype(np.int8)
