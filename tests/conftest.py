# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Sequence

import numpy as np
import pandas as pd
import pytest
from loguru import logger

from multitrend.config.app_config import AppConfig
from multitrend.core.types import Observation


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


def iso_dates(n: int, start: str = "2024-01-01") -> List[str]:
    return pd.date_range(start, periods=n, freq="D").strftime("%Y-%m-%d").tolist()


@pytest.fixture
def make_observations() -> Callable[..., List[Observation]]:
    """
    closes: {entity: [close per date]}; open = close - 0.5
    None in a close list = no row for that (date, entity)
    """

    def _make(closes: Dict[str, Sequence[float | None]], start: str = "2024-01-01") -> List[Observation]:
        n = max(len(v) for v in closes.values())
        dates = iso_dates(n, start)
        out: List[Observation] = []
        for entity, values in closes.items():
            for date, close in zip(dates, values):
                if close is None:
                    continue
                out.append(Observation(date=date, entity=entity, open=close - 0.5, close=close))
        return out

    return _make


@pytest.fixture
def price_frame() -> pd.DataFrame:
    """
    Deterministic long-form table: 3 symbols × 60 days, CSV header names.
    """
    rng = np.random.default_rng(7)
    dates = iso_dates(60)
    rows = []
    for symbol, base in (("MSFT", 300.0), ("AAPL", 180.0), ("GOOG", 140.0)):
        close = base + np.cumsum(rng.normal(0, 1.5, size=len(dates)))
        for d, c in zip(dates, close):
            rows.append(
                {
                    "Date": d,
                    "Symbol": symbol,
                    "Open": round(float(c) - 0.3, 4),
                    "Close": round(float(c), 4),
                    "High": round(float(c) + 1.0, 4),
                    "Low": round(float(c) - 1.0, 4),
                    "Volume": 1000,
                }
            )
    return pd.DataFrame(rows)


@pytest.fixture
def price_csv(tmp_path: Path, price_frame: pd.DataFrame) -> Path:
    path = tmp_path / "prices.csv"
    price_frame.to_csv(path, index=False)
    return path


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    cfg = AppConfig()
    cfg.log.dir = str(tmp_path / "logs")
    cfg.artifact.root_dir = str(tmp_path / "artifacts")
    cfg.training.epochs = 3
    cfg.training.batch_size = 8
    return cfg
