#!filepath: multitrend/pipeline/context.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import numpy as np
import pandas as pd

from multitrend.core.types import (
    ChronologicalSplit,
    DatasetSummary,
    EvaluationReport,
    Observation,
    PivotedSeries,
    SampleSet,
    ScaleParams,
)
from multitrend.pipeline.model_artifact import ModelArtifact


@dataclass
class TrendContext:
    """
    TrendContext = the single runtime carrier of one pipeline run

    Rules:
    - the pipeline builds it, steps fill the slots in order
    - no business logic here
    - pivot / filled / normalized / scale belong to ONE loaded dataset and
      are dropped together (reset_dataset)
    """

    # -------------------------
    # identity / bindings
    # -------------------------
    run_id: str
    cfg: Any
    inst: Any

    # -------------------------
    # input
    # -------------------------
    source: Union[str, Path, pd.DataFrame, None] = None
    observations: Optional[Union[List[Observation], pd.DataFrame]] = None

    # -------------------------
    # dataset layer
    # -------------------------
    pivot: Optional[PivotedSeries] = None
    filled: Optional[PivotedSeries] = None
    normalized: Optional[PivotedSeries] = None
    scale: Optional[ScaleParams] = None

    # -------------------------
    # sample layer
    # -------------------------
    samples: Optional[SampleSet] = None
    split: Optional[ChronologicalSplit] = None
    summary: Optional[DatasetSummary] = None

    # -------------------------
    # model layer
    # -------------------------
    engine: Any = None
    training_summary: Any = None
    on_epoch_end: Optional[Callable[[int, Dict[str, float]], None]] = None
    predictions: Optional[np.ndarray] = None
    test_metrics: Dict[str, float] = field(default_factory=dict)

    # -------------------------
    # result layer
    # -------------------------
    evaluation: Optional[EvaluationReport] = None
    model_artifact: Optional[ModelArtifact] = None

    def reset_dataset(self) -> None:
        """Drop every structure derived from the loaded dataset."""
        self.dispose()
        self.observations = None
        self.pivot = None
        self.filled = None
        self.normalized = None
        self.scale = None
        self.summary = None

    def dispose(self) -> None:
        """Release the large numeric buffers (samples, split, predictions)."""
        if self.samples is not None:
            self.samples.dispose()
        if self.split is not None:
            self.split.dispose()
        self.samples = None
        self.split = None
        self.predictions = None
