from __future__ import annotations

import numpy as np

from multitrend.core.types import Observation
from multitrend.engines.gap_fill_engine import ForwardFillEngine
from multitrend.engines.pivot_engine import PivotBuildEngine


def test_forward_fill_uses_nearest_preceding_value(make_observations):
    obs = make_observations({"AAA": [1.0, None, None, 4.0, None]})
    pivot = PivotBuildEngine().execute(obs + make_observations({"BBB": [1.0] * 5}))

    filled = ForwardFillEngine().execute(pivot)

    assert list(filled.series("AAA", "close")) == [1.0, 1.0, 1.0, 4.0, 4.0]
    assert list(filled.series("AAA", "open")) == [0.5, 0.5, 0.5, 3.5, 3.5]


def test_forward_fill_keeps_leading_holes():
    obs = [
        Observation("2024-01-01", "AAA", 1.0, 1.0),
        Observation("2024-01-02", "AAA", 2.0, 2.0),
        Observation("2024-01-02", "BBB", 5.0, 5.0),
        Observation("2024-01-03", "AAA", 3.0, 3.0),
    ]

    filled = ForwardFillEngine().execute(PivotBuildEngine().execute(obs))

    bbb = filled.series("BBB", "close")
    assert np.isnan(bbb[0])
    assert list(bbb[1:]) == [5.0, 5.0]
    assert filled.hole_count() == 2


def test_forward_fill_does_not_touch_input(make_observations):
    pivot = PivotBuildEngine().execute(
        make_observations({"AAA": [1.0, None, 3.0], "BBB": [1.0, 2.0, 3.0]})
    )
    before = pivot.values.copy()

    filled = ForwardFillEngine().execute(pivot)

    np.testing.assert_array_equal(pivot.values, before)
    assert filled is not pivot
    assert filled.hole_count() == 0


def test_forward_fill_without_holes_is_identity(make_observations):
    pivot = PivotBuildEngine().execute(make_observations({"AAA": [1.0, 2.0, 3.0]}))

    filled = ForwardFillEngine().execute(pivot)

    np.testing.assert_array_equal(filled.values, pivot.values)
    assert filled.dates == pivot.dates
