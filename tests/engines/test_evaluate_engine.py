from __future__ import annotations

import numpy as np
import pytest

from multitrend.engines.evaluate_engine import EvaluationAggregateEngine
from multitrend.utils.errors import EmptyInput, ShapeMismatch


def test_single_entity_single_sample():
    report = EvaluationAggregateEngine().execute(
        predictions=[[0.9, 0.4]],
        labels=[[1, 1]],
        entities=["A"],
        horizon_length=2,
    )

    assert report.accuracy("A") == pytest.approx(0.5)
    day1, day2 = report.timeline("A")[0]
    assert (day1.day, day1.predicted, day1.actual, day1.correct) == (1, 1, 1, True)
    assert (day2.day, day2.predicted, day2.actual, day2.correct) == (2, 0, 1, False)
    assert day1.probability == pytest.approx(0.9)


def test_threshold_tie_is_down():
    report = EvaluationAggregateEngine().execute(
        predictions=[[0.5]],
        labels=[[0]],
        entities=["A"],
        horizon_length=1,
    )

    rec = report.timeline("A")[0][0]
    assert rec.predicted == 0
    assert rec.correct


def test_entity_blocks_are_contiguous():
    # entity A → cols 0, 1 ; entity B → cols 2, 3
    predictions = np.array([[0.9, 0.9, 0.1, 0.1], [0.9, 0.9, 0.1, 0.9]])
    labels = np.array([[1, 1, 1, 1], [1, 1, 0, 0]])

    report = EvaluationAggregateEngine().execute(
        predictions=predictions,
        labels=labels,
        entities=["A", "B"],
        horizon_length=2,
    )

    assert report.accuracy("A") == pytest.approx(1.0)
    assert report.accuracy("B") == pytest.approx(0.25)
    assert report.overall_accuracy == pytest.approx(5 / 8)
    assert report.ranking() == [("A", 1.0), ("B", 0.25)]
    assert len(report.timeline("B")) == 2
    assert len(report.timeline("B", limit=1)) == 1


def test_ranking_ties_keep_canonical_order():
    report = EvaluationAggregateEngine().execute(
        predictions=[[0.9, 0.9, 0.9]],
        labels=[[1, 0, 1]],
        entities=["A", "B", "C"],
        horizon_length=1,
    )

    assert [e for e, _ in report.ranking()] == ["A", "C", "B"]


def test_to_frame_carries_anchor_dates():
    report = EvaluationAggregateEngine().execute(
        predictions=[[0.9], [0.2]],
        labels=[[1], [1]],
        entities=["A"],
        horizon_length=1,
        anchor_dates=["2024-01-05", "2024-01-06"],
    )

    df = report.to_frame()

    assert list(df.columns) == [
        "entity", "sample_index", "anchor_date", "day",
        "probability", "predicted", "actual", "correct",
    ]
    assert df["anchor_date"].tolist() == ["2024-01-05", "2024-01-06"]
    assert df["correct"].tolist() == [True, False]


def test_inputs_are_not_mutated():
    predictions = np.array([[0.7, 0.2]])
    labels = np.array([[1, 0]])
    p_before, l_before = predictions.copy(), labels.copy()

    EvaluationAggregateEngine().execute(
        predictions=predictions, labels=labels, entities=["A"], horizon_length=2
    )

    np.testing.assert_array_equal(predictions, p_before)
    np.testing.assert_array_equal(labels, l_before)


# -----------------------------------------------------------------------------
# errors
# -----------------------------------------------------------------------------
def test_zero_samples_is_empty_input():
    with pytest.raises(EmptyInput):
        EvaluationAggregateEngine().execute(
            predictions=np.empty((0, 2)),
            labels=np.empty((0, 2)),
            entities=["A"],
            horizon_length=2,
        )


def test_empty_flat_lists_are_empty_input():
    with pytest.raises(EmptyInput):
        EvaluationAggregateEngine().execute(
            predictions=[],
            labels=[],
            entities=["A"],
            horizon_length=1,
        )


def test_shape_disagreement():
    with pytest.raises(ShapeMismatch):
        EvaluationAggregateEngine().execute(
            predictions=[[0.1, 0.2]],
            labels=[[1, 0], [0, 1]],
            entities=["A"],
            horizon_length=2,
        )


def test_column_count_must_match_entities_times_horizon():
    with pytest.raises(ShapeMismatch):
        EvaluationAggregateEngine().execute(
            predictions=[[0.1, 0.2, 0.3]],
            labels=[[1, 0, 1]],
            entities=["A", "B"],
            horizon_length=2,
        )


def test_anchor_dates_length_must_match():
    with pytest.raises(ShapeMismatch):
        EvaluationAggregateEngine().execute(
            predictions=[[0.1]],
            labels=[[1]],
            entities=["A"],
            horizon_length=1,
            anchor_dates=["2024-01-01", "2024-01-02"],
        )


def test_non_binary_labels_rejected():
    with pytest.raises(ValueError):
        EvaluationAggregateEngine().execute(
            predictions=[[0.1]],
            labels=[[2]],
            entities=["A"],
            horizon_length=1,
        )
