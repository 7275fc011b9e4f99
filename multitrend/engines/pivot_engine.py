#!filepath: multitrend/engines/pivot_engine.py
from __future__ import annotations

from typing import Iterable, Union

import numpy as np
import pandas as pd

from multitrend import logs
from multitrend.core.types import FIELDS, Observation, PivotedSeries, observations_to_frame
from multitrend.engines.base import require_columns
from multitrend.utils.errors import InsufficientData, MalformedRow

ObservationSource = Union[Iterable[Observation], pd.DataFrame]


class PivotBuildEngine:
    """
    PivotBuildEngine (FINAL / FROZEN)

    Long-form rows → dense (entity, field, date) array.

    Input contract:
      - Iterable[Observation] or a DataFrame with columns
        date / entity / open / close
      - row order is irrelevant EXCEPT for duplicates:
        same (date, entity) → last row in traversal order wins
      - every row carries non-empty date / entity and finite open / close,
        otherwise MalformedRow(row=<position>, field=...)

    Output contract:
      - dates    : unique, ascending
      - entities : unique, ascending
      - values[e, f, t] = observation value, NaN where no row exists
      - input is never mutated
    """

    REQUIRED = ("date", "entity", "open", "close")

    def execute(self, observations: ObservationSource) -> PivotedSeries:
        df = self._to_frame(observations)

        if df.empty:
            raise InsufficientData("no observations to pivot", rows=0)

        self._validate(df)

        # last write wins in traversal order
        df = df.drop_duplicates(subset=["date", "entity"], keep="last")

        dates = tuple(sorted(df["date"].unique().tolist()))
        entities = tuple(sorted(df["entity"].unique().tolist()))

        date_pos = pd.Index(dates).get_indexer(df["date"])
        entity_pos = pd.Index(entities).get_indexer(df["entity"])

        values = np.full((len(entities), len(FIELDS), len(dates)), np.nan, dtype=np.float64)
        for f, name in enumerate(FIELDS):
            values[entity_pos, f, date_pos] = df[name].to_numpy(dtype=np.float64)

        logs.info(f"[PivotBuildEngine] Loaded {len(entities)} entities × {len(dates)} dates")

        return PivotedSeries(dates=dates, entities=entities, values=values)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _to_frame(self, observations: ObservationSource) -> pd.DataFrame:
        if isinstance(observations, pd.DataFrame):
            require_columns(observations, self.REQUIRED, who=self.__class__.__name__)
            df = observations.loc[:, list(self.REQUIRED)].copy()
            if pd.api.types.is_datetime64_any_dtype(df["date"]):
                df["date"] = df["date"].dt.strftime("%Y-%m-%d")
            return df.reset_index(drop=True)

        return observations_to_frame(list(observations))

    def _validate(self, df: pd.DataFrame) -> None:
        """
        Fail fast on the first offending row (position in traversal order).
        """
        who = self.__class__.__name__

        for key in ("date", "entity"):
            col = df[key]
            bad = col.isna() | (col.astype(str).str.strip() == "")
            if bad.any():
                row = int(np.flatnonzero(bad.to_numpy())[0])
                raise MalformedRow(f"[{who}] missing {key}", row=row, field=key)
            df[key] = col.astype(str)

        for key in ("open", "close"):
            raw = df[key]
            numeric = pd.to_numeric(raw, errors="coerce")
            bad = numeric.isna() | ~np.isfinite(numeric.to_numpy(dtype=np.float64, na_value=np.nan))
            if bad.any():
                row = int(np.flatnonzero(bad.to_numpy())[0])
                raise MalformedRow(
                    f"[{who}] {key} is missing or not a finite number",
                    row=row,
                    field=key,
                    value=raw.iloc[row],
                    date=df["date"].iloc[row],
                    entity=df["entity"].iloc[row],
                )
            df[key] = numeric.astype(np.float64)
