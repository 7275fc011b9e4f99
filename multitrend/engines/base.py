#!filepath: multitrend/engines/base.py
from __future__ import annotations

from typing import Sequence

import pandas as pd


def require_columns(df: pd.DataFrame, cols: Sequence[str], *, who: str) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"[{who}] missing required columns: {missing}")


def require_positive(value: int, *, name: str, who: str) -> None:
    if int(value) <= 0:
        raise ValueError(f"[{who}] {name} must be positive, got {value}")
