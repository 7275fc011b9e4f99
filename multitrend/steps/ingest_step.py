# multitrend/steps/ingest_step.py
from __future__ import annotations

import pandas as pd

from multitrend.data.csv_loader import CsvObservationLoader
from multitrend.pipeline.context import TrendContext
from multitrend.pipeline.step import PipelineStep


class IngestStep(PipelineStep):
    """
    ctx.source (CSV path or long-form DataFrame) → ctx.observations

    Skipped when observations were injected directly.
    """

    def __init__(self, loader: CsvObservationLoader, inst=None):
        super().__init__(inst)
        self.loader = loader

    def run(self, ctx: TrendContext) -> TrendContext:
        if ctx.observations is not None:
            return ctx

        self.require(ctx, "source")

        with self.timed():
            with self.inst.timer("ingest"):
                if isinstance(ctx.source, pd.DataFrame):
                    ctx.observations = self.loader.load_frame(ctx.source)
                else:
                    ctx.observations = self.loader.load(ctx.source)

        self.inst.metrics.record("observations", len(ctx.observations))
        return ctx
