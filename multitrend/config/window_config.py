# multitrend/config/window_config.py
from __future__ import annotations

from pydantic import BaseModel, Field


class WindowConfig(BaseModel):
    """
    WindowConfig

    - lookback_length: past axis positions fed as input
    - horizon_length : future axis positions labelled per sample
    - train_ratio    : chronological train share
    """

    lookback_length: int = Field(default=12, gt=0)
    horizon_length: int = Field(default=3, gt=0)
    train_ratio: float = Field(default=0.8, gt=0.0, lt=1.0)
