#!filepath: multitrend/engines/split_engine.py
from __future__ import annotations

import math

from multitrend import logs
from multitrend.core.types import ChronologicalSplit, SampleSet
from multitrend.utils.errors import InsufficientData


class ChronologicalSplitEngine:
    """
    ChronologicalSplitEngine (FINAL / FROZEN)

    split = floor(train_ratio * N)
    train = samples[0:split], test = samples[split:N]

    - never shuffles
    - train / test own their buffers (copies), the source set can be disposed
    - degenerate splits (N < 2, empty train, empty test) → InsufficientData
    """

    def __init__(self, train_ratio: float = 0.8) -> None:
        if not 0.0 < train_ratio < 1.0:
            raise ValueError(f"[{self.__class__.__name__}] train_ratio must be in (0, 1), got {train_ratio}")
        self.train_ratio = float(train_ratio)

    def split_index(self, n: int) -> int:
        return int(math.floor(self.train_ratio * n))

    def execute(self, samples: SampleSet) -> ChronologicalSplit:
        n = len(samples)
        if n < 2:
            raise InsufficientData("need at least 2 samples to split", sample_count=n)

        split = self.split_index(n)
        if split == 0 or split == n:
            raise InsufficientData(
                "degenerate chronological split",
                sample_count=n,
                split_index=split,
                train_ratio=self.train_ratio,
            )

        train = samples.slice(0, split)
        test = samples.slice(split, n)

        logs.info(
            f"[{self.__class__.__name__}] total={n} train={len(train)} test={len(test)} "
            f"train_end={train.anchor_dates[-1]} test_start={test.anchor_dates[0]}"
        )

        return ChronologicalSplit(train=train, test=test, split_index=split)
