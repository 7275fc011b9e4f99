#!filepath: multitrend/data/csv_loader.py
from __future__ import annotations

from pathlib import Path
from typing import List

import numpy as np
import pandas as pd

from multitrend import logs
from multitrend.config.data_config import DataConfig
from multitrend.core.types import Observation
from multitrend.utils.errors import MalformedRow, ReadError


class CsvObservationLoader:
    """
    CsvObservationLoader

    Reads a long-form CSV (Date, Symbol, Open, Close[, High, Low, Volume ...])
    into Observations. Extra columns are ignored.

    Errors:
      - missing / unreadable / empty file, missing header column → ReadError
      - data row with empty or non-numeric Open / Close          → MalformedRow
        (row = 1-based data row number, header excluded)
    """

    def __init__(self, cfg: DataConfig | None = None):
        self.cfg = cfg or DataConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @logs.catch()
    def load(self, path: str | Path) -> List[Observation]:
        return self.load_frame(self.read_frame(path))

    def read_frame(self, path: str | Path) -> pd.DataFrame:
        path = Path(path)
        if not path.is_file():
            raise ReadError(f"Failed to read file: {path} does not exist")

        try:
            df = pd.read_csv(
                path,
                dtype=str,
                keep_default_na=False,
                skipinitialspace=True,
                encoding=self.cfg.encoding,
            )
        except pd.errors.EmptyDataError as e:
            raise ReadError(f"Failed to read file: {path} is empty") from e
        except (OSError, UnicodeDecodeError, pd.errors.ParserError) as e:
            raise ReadError(f"Failed to read file: {path}: {e}") from e

        df.columns = [str(c).strip() for c in df.columns]
        logs.info(f"[CsvObservationLoader] read {len(df)} rows from {path}")
        return df

    def load_frame(self, df: pd.DataFrame) -> List[Observation]:
        cols = self.cfg.columns
        wanted = [cols.date, cols.entity, cols.open, cols.close]

        missing = [c for c in wanted if c not in df.columns]
        if missing:
            raise ReadError(f"Missing required column(s): {missing}")

        if df.empty:
            raise ReadError("CSV has a header but no data rows")

        observations: List[Observation] = []
        for row, (date, entity, open_, close) in enumerate(
            df[wanted].itertuples(index=False, name=None), start=1
        ):
            date = _text(date)
            entity = _text(entity)
            if not date:
                raise MalformedRow("missing date", row=row, field=cols.date)
            if not entity:
                raise MalformedRow("missing entity", row=row, field=cols.entity, date=date)

            observations.append(
                Observation(
                    date=date,
                    entity=entity,
                    open=_number(open_, row=row, field=cols.open, date=date, entity=entity),
                    close=_number(close, row=row, field=cols.close, date=date, entity=entity),
                )
            )

        return observations


def _text(value) -> str:
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return ""
    return str(value).strip()


def _number(value, **context) -> float:
    text = _text(value)
    try:
        number = float(text)
    except ValueError:
        raise MalformedRow("not a number", value=text, **context) from None
    if not np.isfinite(number):
        raise MalformedRow("not a finite number", value=text, **context)
    return number
