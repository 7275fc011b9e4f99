#!filepath: multitrend/engines/normalize_engine.py
from __future__ import annotations

import warnings
from typing import Tuple

import numpy as np

from multitrend import logs
from multitrend.core.types import PivotedSeries, ScaleParams


def normalize(value: float, lo: float, hi: float) -> float:
    if hi == lo:
        return 0.0
    return (value - lo) / (hi - lo)


class MinMaxNormalizeEngine:
    """
    MinMaxNormalizeEngine (FINAL / FROZEN)

    fit:
      - per entity / field min & max over ALL non-hole values of the
        (post-fill) series, i.e. the full history
      - returns ScaleParams as a value; nothing is cached on the engine

    transform:
      - (v - min) / (max - min), 0 when max == min
      - holes stay holes

    NOTE: fitting over the full history lets test-period extremes leak into
    the scale.
    """

    def fit(self, series: PivotedSeries) -> ScaleParams:
        with warnings.catch_warnings():
            # all-hole rows produce NaN scale; they never survive windowing
            warnings.simplefilter("ignore", category=RuntimeWarning)
            mins = np.nanmin(series.values, axis=-1)
            maxs = np.nanmax(series.values, axis=-1)

        constant = int(np.sum(mins == maxs))
        if constant:
            logs.info(f"[MinMaxNormalizeEngine] {constant} constant series → normalised to 0")

        return ScaleParams(entities=series.entities, mins=mins, maxs=maxs)

    def transform(self, series: PivotedSeries, scale: ScaleParams) -> PivotedSeries:
        if scale.entities != series.entities:
            raise ValueError(
                "[MinMaxNormalizeEngine] scale entities do not match series entities"
            )
        return series.with_values(scale.transform(series.values))

    def execute(self, series: PivotedSeries) -> Tuple[PivotedSeries, ScaleParams]:
        scale = self.fit(series)
        return self.transform(series, scale), scale
