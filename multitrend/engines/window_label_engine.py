#!filepath: multitrend/engines/window_label_engine.py
from __future__ import annotations

from typing import Optional

import numpy as np

from multitrend import logs
from multitrend.core.types import CLOSE, FIELDS, PivotedSeries, SampleSet, ScaleParams
from multitrend.engines.base import require_positive
from multitrend.utils.errors import InsufficientData


class WindowLabelEngine:
    """
    WindowLabelEngine (FINAL / FROZEN)

    ==========================================================
    Anchor semantics
    ==========================================================

    anchor i is a candidate iff

        i - lookback_length >= 0
        i + horizon_length  <= len(dates) - 1

    so the first `lookback_length` and the last `horizon_length` axis
    positions are never anchors.

    ==========================================================
    Sample layout
    ==========================================================

    inputs[n]  = positions [i - lookback_length, i), oldest first
                 step vector = [e0_open, e0_close, e1_open, e1_close, ...]
                 normalised values

    labels[n]  = for entity e (canonical order), day d in 1..horizon_length:
                     1 if close[i + d] > close[i] else 0
                 column = e * horizon_length + (d - 1)

    ==========================================================
    Hole policy
    ==========================================================

    An anchor is skipped (silently) if ANY of
      - an input value in the lookback window
      - the baseline close at i
      - a future close in (i, i + horizon_length]
    is a hole. Zero surviving anchors → InsufficientData.
    """

    def __init__(self, lookback_length: int = 12, horizon_length: int = 3) -> None:
        require_positive(lookback_length, name="lookback_length", who=self.__class__.__name__)
        require_positive(horizon_length, name="horizon_length", who=self.__class__.__name__)

        self.lookback_length = int(lookback_length)
        self.horizon_length = int(horizon_length)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def execute(self, series: PivotedSeries, scale: Optional[ScaleParams] = None) -> SampleSet:
        """
        series: gap-filled raw series when `scale` is given (normalised here,
                labels compared on raw closes); already-normalised series
                when `scale` is None.
        """
        L, H = self.lookback_length, self.horizon_length
        T = series.date_count
        E = series.entity_count

        if T <= L + H:
            raise InsufficientData(
                "date axis too short for one window",
                date_count=T,
                lookback_length=L,
                horizon_length=H,
            )

        if scale is not None:
            if scale.entities != series.entities:
                raise ValueError(
                    f"[{self.__class__.__name__}] scale entities do not match series entities"
                )
            normed = scale.transform(series.values)
        else:
            normed = series.values

        closes = series.values[:, CLOSE, :]                 # (E, T)

        anchors = self._valid_anchors(normed, closes)
        skipped = (T - L - H) - len(anchors)

        if not anchors:
            raise InsufficientData(
                "no valid anchor: every window touches a hole",
                date_count=T,
                candidates=T - L - H,
                lookback_length=L,
                horizon_length=H,
            )

        idx = np.asarray(anchors, dtype=np.int64)

        # ------------------------------
        # inputs: (N, L, E * 2)
        # ------------------------------
        steps = normed.transpose(2, 0, 1).reshape(T, E * len(FIELDS))
        window = np.arange(-L, 0)
        inputs = steps[idx[:, None] + window[None, :]].astype(np.float64)

        # ------------------------------
        # labels: (N, E * H), entity-major
        # ------------------------------
        base = closes[:, idx]                                # (E, N)
        ahead = idx[:, None] + np.arange(1, H + 1)[None, :]  # (N, H)
        future = closes[:, ahead]                            # (E, N, H)
        labels = (future > base[:, :, None]).astype(np.int8)
        labels = labels.transpose(1, 0, 2).reshape(len(idx), E * H)

        logs.info(
            f"[{self.__class__.__name__}] samples={len(idx)} skipped={skipped} "
            f"lookback={L} horizon={H} entities={E}"
        )

        return SampleSet(
            inputs=inputs,
            labels=labels,
            anchors=idx,
            anchor_dates=tuple(series.dates[i] for i in anchors),
            entities=series.entities,
            lookback_length=L,
            horizon_length=H,
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _valid_anchors(self, normed: np.ndarray, closes: np.ndarray) -> list[int]:
        L, H = self.lookback_length, self.horizon_length
        T = normed.shape[-1]

        step_ok = ~np.isnan(normed).any(axis=(0, 1))   # every entity / field present at t
        close_ok = ~np.isnan(closes).any(axis=0)       # every entity close present at t

        anchors: list[int] = []
        for i in range(L, T - H):
            if not step_ok[i - L:i].all():
                continue
            if not close_ok[i:i + H + 1].all():
                continue
            anchors.append(i)
        return anchors
