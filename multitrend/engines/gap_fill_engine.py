#!filepath: multitrend/engines/gap_fill_engine.py
from __future__ import annotations

import numpy as np

from multitrend import logs
from multitrend.core.types import PivotedSeries


class ForwardFillEngine:
    """
    ForwardFillEngine (FINAL / FROZEN)

    Semantics:
      - per entity / field, independently
      - hole at t ← nearest non-hole value at t' < t
      - leading holes stay holes (no back-fill, no interpolation)

    Remaining holes are NOT an error: the window builder skips every
    anchor whose window touches one.
    """

    def execute(self, series: PivotedSeries) -> PivotedSeries:
        values = series.values
        holes = np.isnan(values)

        if not holes.any():
            return series.with_values(values.copy())

        # index of the last non-hole position seen so far, per (e, f)
        positions = np.arange(values.shape[-1])
        last_seen = np.where(holes, 0, positions)
        np.maximum.accumulate(last_seen, axis=-1, out=last_seen)

        filled = np.take_along_axis(values, last_seen, axis=-1).copy()

        remaining = int(np.isnan(filled).sum())
        logs.debug(
            f"[ForwardFillEngine] holes before={int(holes.sum())} after={remaining}"
        )

        return series.with_values(filled)
