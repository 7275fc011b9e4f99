from __future__ import annotations

import numpy as np
import pytest

from multitrend.engines.pivot_engine import PivotBuildEngine
from multitrend.engines.split_engine import ChronologicalSplitEngine
from multitrend.engines.window_label_engine import WindowLabelEngine
from multitrend.utils.errors import InsufficientData


def _samples(make_observations, n_dates, lookback=2, horizon=1):
    pivot = PivotBuildEngine().execute(
        make_observations({"AAA": list(np.arange(1.0, n_dates + 1.0))})
    )
    return WindowLabelEngine(lookback_length=lookback, horizon_length=horizon).execute(pivot)


@pytest.mark.parametrize("n, expected", [(10, 8), (7, 5), (2, 1)])
def test_split_index_is_floor(n, expected):
    assert ChronologicalSplitEngine(0.8).split_index(n) == expected


def test_split_keeps_chronological_order(make_observations):
    samples = _samples(make_observations, 13)   # 10 samples

    split = ChronologicalSplitEngine(0.8).execute(samples)

    assert split.split_index == 8
    assert len(split.train) == 8
    assert len(split.test) == 2
    assert split.train.anchor_dates[-1] < split.test.anchor_dates[0]
    np.testing.assert_array_equal(
        np.concatenate([split.train.anchors, split.test.anchors]), samples.anchors
    )


def test_split_parts_survive_source_dispose(make_observations):
    samples = _samples(make_observations, 13)
    expected = samples.inputs[-1].copy()

    split = ChronologicalSplitEngine(0.8).execute(samples)
    samples.dispose()

    np.testing.assert_array_equal(split.test.inputs[-1], expected)


def test_single_sample_is_insufficient(make_observations):
    samples = _samples(make_observations, 4)    # 1 sample

    with pytest.raises(InsufficientData):
        ChronologicalSplitEngine(0.8).execute(samples)


def test_empty_train_is_insufficient(make_observations):
    samples = _samples(make_observations, 5)    # 2 samples, floor(0.4 * 2) = 0

    with pytest.raises(InsufficientData):
        ChronologicalSplitEngine(0.4).execute(samples)


def test_high_ratio_still_leaves_one_test_sample(make_observations):
    samples = _samples(make_observations, 7)    # 4 samples, floor(0.99 * 4) = 3 → ok
    assert len(ChronologicalSplitEngine(0.99).execute(samples).test) == 1

    many = _samples(make_observations, 103)     # 100 samples, floor(0.999 * 100) = 99
    assert len(ChronologicalSplitEngine(0.999).execute(many).test) == 1


@pytest.mark.parametrize("ratio", [0.0, 1.0, -0.1, 1.5])
def test_ratio_bounds(ratio):
    with pytest.raises(ValueError):
        ChronologicalSplitEngine(ratio)
